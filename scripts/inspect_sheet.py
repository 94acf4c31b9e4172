#!/usr/bin/env python3
"""
Check the product spreadsheet from the command line.

Prints the same payload as GET /products/debug and, with --products, the
normalized product list. Exits non-zero when the sheet can't be read.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from catalog_display.api.dependencies import build_product_source
from catalog_display.error_handler import ErrorHandler
from catalog_display.utils.config_loader import load_app_config


async def run(config_path: Path | None, show_products: bool) -> int:
    cfg = load_app_config(config_path)
    source = build_product_source(cfg)
    try:
        diagnostics = await source.inspect()
        print(json.dumps(diagnostics.to_dict(), indent=2, ensure_ascii=False))
        if show_products:
            products = await source.fetch_records()
            print(json.dumps([p.to_dict() for p in products], indent=2, ensure_ascii=False))
    except Exception as e:
        print(json.dumps(ErrorHandler().to_payload(e, {"operation": "inspect_sheet"}), indent=2, default=str))
        return 1
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Inspect the configured product sheet")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--products", action="store_true", help="Also print normalized products")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    return asyncio.run(run(args.config, args.products))


if __name__ == "__main__":
    sys.exit(main())
