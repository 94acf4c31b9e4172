#!/usr/bin/env python3
"""
Run the catalog display API with uvicorn.

Host/port default to the loaded config (PORT / HOST env vars or
config/catalog_config.yml); flags override them. --config is handed to the
app through CATALOG_CONFIG so every setting in that file applies.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

import uvicorn

from catalog_display.utils.config_loader import CONFIG_PATH_ENV, load_app_config


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the catalog display API")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/catalog_config.yml)")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    setup_logging(args.verbose)
    cfg = load_app_config(args.config)
    if args.config is not None:
        # the app module loads its own config on import (and again in reload workers)
        os.environ[CONFIG_PATH_ENV] = str(args.config.resolve())
    host = args.host or cfg.server.host
    port = args.port or cfg.server.port

    logging.getLogger(__name__).info("SERVER RUNNING ON http://localhost:%d", port)
    uvicorn.run(
        "catalog_display.api.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level="debug" if args.verbose else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
