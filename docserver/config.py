"""
Config loader - Read and validate the docserver configuration file

The file is YAML (`.yaml`/`.yml`) or TOML (`.toml`). Its location comes from
the caller, then the DOCSERVER_CONFIG environment variable (a `.env` file is
honoured), then `config.yaml` in the working directory.
"""

import logging
import os
import tomllib
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from docserver.errors import ConfigError
from docserver.models.config import DocServerConfig


# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DOCSERVER_CONFIG"
DEFAULT_CONFIG_FILE = "config.yaml"


def get_config_path(path: str | Path | None = None) -> Path:
    """Resolve which config file to read"""
    if path is not None:
        return Path(path)
    return Path(os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))


def _read_document(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    try:
        if path.suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def parse_config(data: dict, source: str = "<config>") -> DocServerConfig:
    """Validate a raw config mapping"""
    try:
        return DocServerConfig.model_validate(data)
    except ValidationError as e:
        errors = "\n  - ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(
            f"Invalid configuration in {source} ({e.error_count()} error(s)):\n  - {errors}"
        ) from e


def load_config(path: str | Path | None = None) -> DocServerConfig:
    """
    Load the configuration file.

    Args:
        path: Explicit config file, overriding DOCSERVER_CONFIG

    Returns:
        Validated DocServerConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    config_path = get_config_path(path)
    logger.info(f"Loading configuration from {config_path}")

    config = parse_config(_read_document(config_path), source=str(config_path))

    # Relative roots are taken relative to the config file
    if not config.libs_path.is_absolute():
        libs_path = (config_path.parent / config.libs_path).resolve()
        config = config.model_copy(update={"libs_path": libs_path})

    return config
