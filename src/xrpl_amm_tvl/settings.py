"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any
import tomllib

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import DEFAULT_NODE_URL, REFERENCE_THRESHOLD, VALIDATED_LEDGER
from .logger import LOG_LEVELS

load_dotenv()

CONFIG_ENV_VAR = "XRPL_AMM_TVL_CONFIG"


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


class TvlSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with XRPL_AMM_TVL_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- node ---
    node_url: str = DEFAULT_NODE_URL
    ledger_index: int | None = Field(
        default=None,
        gt=0,
        description="Historical ledger to value. Latest validated ledger when unset.",
    )
    binary: bool = True

    # --- valuation ---
    reference_threshold: Decimal = Field(
        default=REFERENCE_THRESHOLD,
        gt=0,
        description="Minimum TVL (XRP) of a pool used to derive implied prices.",
    )

    # --- requests and retries ---
    request_timeout: float = 30.0
    max_retries: int = Field(default=5, ge=1)
    global_timeout_seconds: float | None = None

    # --- output ---
    output_format: OutputFormat = OutputFormat.TABLE
    top_pools: int = Field(default=10, ge=0)
    measure: bool = False

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="XRPL_AMM_TVL_",
        env_file=".env",
        extra="ignore",  # ignore unknown keys in env/config file
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{v}'. Expected one of: {', '.join(LOG_LEVELS)}"
            )
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get(CONFIG_ENV_VAR)
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    # Try default locations
                    local_config = Path("xrpl-amm-tvl.toml")
                    user_config = (
                        Path.home() / ".config" / "xrpl-amm-tvl" / "config.toml"
                    )
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [xrpl_amm_tvl]
                body = data.get("xrpl_amm_tvl", data)
                if not isinstance(body, dict):
                    return {}
                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
        )

    def as_dict(self) -> dict[str, Any]:
        """Return the config as a JSON-friendly dict."""
        return self.model_dump(mode="json")

    @property
    def ledger_index_param(self) -> int | str:
        """Ledger selector for rippled requests."""
        if self.ledger_index is None:
            return VALIDATED_LEDGER
        return self.ledger_index
