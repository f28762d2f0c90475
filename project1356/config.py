import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field

ENV_PREFIX = "PROJECT1356_"
CONFIG_ENV = f"{ENV_PREFIX}CONFIG"

MaskingPolicy = Literal["placeholder", "partial"]


class Settings(BaseModel):
    storage_path: Optional[str] = None
    masking_policy: MaskingPolicy = "placeholder"
    poll_interval_seconds: float = Field(default=60.0, gt=0)
    export_version: str = "1.0.0"
    log_level: str = "INFO"


def _read_yaml(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    parsed = yaml.safe_load(content)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config file {path} did not produce an object")
    return parsed


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for field in Settings.model_fields:
        value = environ.get(f"{ENV_PREFIX}{field.upper()}")
        if value is not None and value != "":
            overrides[field] = value
    return overrides


def load_settings(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    env = dict(os.environ) if environ is None else environ
    config_path = path or (Path(env[CONFIG_ENV]) if env.get(CONFIG_ENV) else None)
    values: Dict[str, Any] = _read_yaml(config_path) if config_path else {}
    values.update(_env_overrides(env))
    return Settings(**values)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
