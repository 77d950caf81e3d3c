import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".flashdeck"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

STORE_BACKENDS = ("sqlite", "memory")
LOG_FORMATS = ("text", "json")

def load_config() -> Dict[str, Any]:
    """Load config from ~/.flashdeck/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., FLASHDECK_STORE env var)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        if PROJECT_CONFIG_EXAMPLE.exists():
            shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
        else:
            CONFIG_PATH.write_text("", encoding="utf-8")
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    store_cfg = config.get("store", {})
    backend = os.getenv("FLASHDECK_STORE", store_cfg.get("backend", "sqlite")).lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(f"Unknown store backend {backend!r}, expected one of {STORE_BACKENDS}")
    db_path = os.getenv("FLASHDECK_DB_PATH", store_cfg.get("db_path", ""))
    config["store"] = {
        "backend": backend,
        "db_path": Path(db_path).expanduser() if db_path else CONFIG_DIR / "flashdeck.db",
    }

    server_cfg = config.get("server", {})
    port = os.getenv("FLASHDECK_PORT", server_cfg.get("port", 8000))
    try:
        port = int(port)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid port {port!r}") from None
    config["server"] = {
        "host": os.getenv("FLASHDECK_HOST", server_cfg.get("host", "127.0.0.1")),
        "port": port,
        "cors_origin": os.getenv("FLASHDECK_CORS_ORIGIN", server_cfg.get("cors_origin", "http://localhost:5173")),
    }

    logging_cfg = config.get("logging", {})
    log_format = os.getenv("FLASHDECK_LOG_FORMAT", logging_cfg.get("format", "text")).lower()
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}, expected one of {LOG_FORMATS}")
    config["logging"] = {
        "level": os.getenv("FLASHDECK_LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
        "format": log_format,
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('store', 'backend')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
