"""minichain.core.config

Three config surfaces only:
1) `config/default.yaml`, overlaid by `config/user.yaml` when present
2) Environment variables (`MINICHAIN_*`, nested with `__`), which outrank the files
3) Derived values (`db_path`)

Everything else is a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from minichain.core.exceptions import ConfigError


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return raw


class StoreConfig(BaseModel):
    filename: str = "blockchain.db"

    @field_validator("filename")
    @classmethod
    def filename_cannot_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("store.filename must not be empty")
        return v


class ChainConfig(BaseModel):
    clock: Literal["local", "utc"] = "local"


class LoggingConfig(BaseModel):
    level: str = "INFO"


class Config(BaseSettings):
    """Root configuration. Single source of truth."""

    data_dir: Path = Path("data")

    store: StoreConfig = Field(default_factory=StoreConfig)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_prefix": "MINICHAIN_", "env_nested_delimiter": "__"}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; environment outranks them.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.store.filename

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        raw = _read_yaml(path)

        # user.yaml sits next to default.yaml and only carries overrides.
        if path.name == "default.yaml":
            user = path.parent / "user.yaml"
            if user.exists():
                raw = _deep_merge(raw, _read_yaml(user))

        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {path}: {e}") from e

    @classmethod
    def load(cls, repo_root: Path | None = None) -> Config:
        root = repo_root or Path.cwd()
        default_path = root / "config" / "default.yaml"
        if default_path.exists():
            return cls.from_yaml(default_path)
        user_path = root / "config" / "user.yaml"
        if user_path.exists():
            return cls.from_yaml(user_path)
        return cls()
