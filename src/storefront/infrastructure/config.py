"""Runtime settings, read from the environment.

STOREFRONT_DATA_DIR   where the JSON files live (default: <repo>/data)
STOREFRONT_ENV        development | staging | production | test
STOREFRONT_LOG_LEVEL  overrides the level derived from the environment
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    environment: str = "development"
    log_level: str = "DEBUG"

    @property
    def is_production(self) -> bool:
        return self.environment in ("production", "staging")

    @staticmethod
    def from_env() -> Settings:
        environment = os.getenv("STOREFRONT_ENV", "development").lower()
        data_dir = os.getenv("STOREFRONT_DATA_DIR")
        return Settings(
            data_dir=Path(data_dir) if data_dir else _DEFAULT_DATA_DIR,
            environment=environment,
            log_level=os.getenv(
                "STOREFRONT_LOG_LEVEL", _LEVEL_BY_ENV.get(environment, "INFO")
            ).upper(),
        )
