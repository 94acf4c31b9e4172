"""
Configuration loader for the catalog backend
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "catalog_config.yml"
# Names the YAML file when no path is passed (set by scripts/run_server.py --config)
CONFIG_PATH_ENV = "CATALOG_CONFIG"


class ServerConfig(BaseModel):
    """HTTP server and static file settings"""

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    public_dir: str = "public"
    images_subdir: str = "images"


class SheetsConfig(BaseModel):
    """Google Sheets product source"""

    sheet_id: Optional[str] = None
    sheet_range: str = "Products!A2:D"
    service_account_b64: Optional[str] = None
    timeout_seconds: float = Field(default=20.0, gt=0)
    # Development source: JSON file holding a list of rows
    local_sheet_path: Optional[str] = None


class CacheConfig(BaseModel):
    products_ttl_ms: int = Field(default=60000, ge=0)


class ImageProxyConfig(BaseModel):
    url_template: str = "https://drive.google.com/uc?export=view&id={id}"
    timeout_seconds: float = Field(default=20.0, gt=0)
    max_age_seconds: int = Field(default=86400, ge=0)


class WatchConfig(BaseModel):
    enabled: bool = True
    debounce_ms: int = Field(default=250, ge=0)


class AppConfig(BaseModel):
    """Complete backend configuration"""

    server: ServerConfig = Field(default_factory=ServerConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    image_proxy: ImageProxyConfig = Field(default_factory=ImageProxyConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)

    @property
    def public_path(self) -> Path:
        return resolve_path(self.server.public_dir)

    @property
    def images_path(self) -> Path:
        return self.public_path / self.server.images_subdir


# env var -> (section, field)
ENV_OVERRIDES = {
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "PUBLIC_DIR": ("server", "public_dir"),
    "SHEET_ID": ("sheets", "sheet_id"),
    "SHEET_RANGE": ("sheets", "sheet_range"),
    "GOOGLE_SA_KEY_BASE64": ("sheets", "service_account_b64"),
    "SHEETS_TIMEOUT_SECONDS": ("sheets", "timeout_seconds"),
    "LOCAL_SHEET_PATH": ("sheets", "local_sheet_path"),
    "PRODUCTS_CACHE_TTL_MS": ("cache", "products_ttl_ms"),
    "IMAGE_PROXY_URL_TEMPLATE": ("image_proxy", "url_template"),
    "IMAGE_PROXY_TIMEOUT_SECONDS": ("image_proxy", "timeout_seconds"),
    "WATCH_ENABLED": ("watch", "enabled"),
    "WATCH_DEBOUNCE_MS": ("watch", "debounce_ms"),
}


def resolve_path(value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else PROJECT_ROOT / path


def _read_yaml(config_path: Optional[Path]) -> Dict[str, Any]:
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return {}
    elif not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def load_app_config(config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Load and validate backend configuration.

    Defaults are overlaid by the YAML file (CATALOG_CONFIG, or
    config/catalog_config.yml when neither is given), which is in turn overlaid by environment variables.

    Args:
        config_path: Explicit YAML path. Must exist when given, as must a
            path named by CATALOG_CONFIG.
        environ: Environment mapping; defaults to os.environ after load_dotenv().

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValidationError: If the merged config doesn't match the schema
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    if config_path is None and environ.get(CONFIG_PATH_ENV):
        config_path = resolve_path(environ[CONFIG_PATH_ENV])
    data = _read_yaml(config_path)
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        data[section] = dict(data.get(section) or {}, **{key: value})

    try:
        config = AppConfig(**data)
    except ValidationError as e:
        logger.error("Config validation failed: %s", e)
        raise
    logger.info(
        "Loaded config: sheet_id_set=%s range=%s ttl_ms=%s public_dir=%s",
        bool(config.sheets.sheet_id),
        config.sheets.sheet_range,
        config.cache.products_ttl_ms,
        config.public_path,
    )
    return config
