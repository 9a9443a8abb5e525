from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from shipyard.core.credentials import DEFAULT_TOKEN_ENV
from shipyard.core.errors import ConfigError
from shipyard.core.models import PublishableUnit


DEFAULT_UNITS = (
    PublishableUnit(name="manifest", location="manifest/Cargo.toml"),
    PublishableUnit(name="convert", location="convert/Cargo.toml", dependencies=("manifest",)),
    PublishableUnit(
        name="runtime",
        location="runtime/Cargo.toml",
        dependencies=("manifest", "convert"),
        verify=False,
    ),
)


@dataclass
class ReleaseConfig:
    units: list[PublishableUnit] = field(default_factory=lambda: list(DEFAULT_UNITS))
    token_env: str = DEFAULT_TOKEN_ENV
    propagation_delay_s: float = 10.0
    publish_timeout_s: float = 600.0
    max_attempts: int = 3
    retry_base_delay_s: float = 2.0
    retry_max_delay_s: float = 30.0
    cargo: str = "cargo"
    publish_args: list[str] = field(default_factory=list)
    workdir: str | None = None

    @staticmethod
    def from_file(path: str) -> "ReleaseConfig":
        """Load a release config from YAML or JSON.

        Relative unit locations are resolved later by the publisher against
        ``workdir``, which defaults to the directory holding the config file.
        """
        ext = Path(path).suffix.lower()
        try:
            with open(path, "r", encoding="utf-8") as handle:
                if ext in {".yaml", ".yml"}:
                    data = yaml.safe_load(handle)
                elif ext == ".json":
                    data = json.load(handle)
                else:
                    raise ConfigError(f"Unsupported config file extension: {ext}")
        except OSError as exc:
            raise ConfigError(f"Cannot read config {path}: {exc}") from exc
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Malformed config {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Config must be a mapping")
        data.setdefault("workdir", str(Path(path).resolve().parent))
        return ReleaseConfig.from_dict(data)

    @staticmethod
    def from_dict(data: dict) -> "ReleaseConfig":
        raw_units = data.get("units")
        if not isinstance(raw_units, list) or not raw_units:
            raise ConfigError("Config must contain a non-empty 'units' list")
        for item in raw_units:
            if not isinstance(item, dict):
                raise ConfigError(f"Unit entries must be mappings, got {item!r}")
        try:
            units = [PublishableUnit.from_dict(item) for item in raw_units]
            return ReleaseConfig(
                units=units,
                token_env=str(data.get("token_env", DEFAULT_TOKEN_ENV)),
                propagation_delay_s=float(data.get("propagation_delay_s", 10.0)),
                publish_timeout_s=float(data.get("publish_timeout_s", 600.0)),
                max_attempts=int(data.get("max_attempts", 3)),
                retry_base_delay_s=float(data.get("retry_base_delay_s", 2.0)),
                retry_max_delay_s=float(data.get("retry_max_delay_s", 30.0)),
                cargo=str(data.get("cargo", "cargo")),
                publish_args=[str(arg) for arg in data.get("publish_args", []) or []],
                workdir=data.get("workdir"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid config value: {exc}") from exc

    def validate(self) -> None:
        if self.propagation_delay_s < 0:
            raise ConfigError("propagation_delay_s must be >= 0")
        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be >= 1")
        if not self.token_env:
            raise ConfigError("token_env must not be empty")
