"""
TokenVote TOML Configuration Loader

Loads config.toml at startup with environment variable overrides
(dataclass + from_dict + from_file per section).

Environment variable mapping:
    [governance] owner            → TOKENVOTE_OWNER
    [governance] organiser        → TOKENVOTE_ORGANISER
    [governance] quorum           → TOKENVOTE_QUORUM
    [governance] min_start_offset → TOKENVOTE_MIN_START_OFFSET
    [governance] min_stop_offset  → TOKENVOTE_MIN_STOP_OFFSET
    [proposals]  max_field_length → TOKENVOTE_MAX_FIELD_LENGTH
    [logging]    level            → TOKENVOTE_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import (
    DEFAULT_MIN_START_OFFSET,
    DEFAULT_MIN_STOP_OFFSET,
    FIELD_MAX_LENGTH,
    FIELD_MIN_LENGTH,
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str) -> Optional[int]:
    v = os.environ.get(name)
    if v is None or not v.strip():
        return None
    try:
        return int(v)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {v!r}") from None


@dataclass
class GovernanceSectionConfig:
    """[governance] section."""
    owner: str = ""
    organiser: str = ""
    quorum: int = 0
    min_start_offset: int = DEFAULT_MIN_START_OFFSET
    min_stop_offset: int = DEFAULT_MIN_STOP_OFFSET

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GovernanceSectionConfig":
        return cls(
            owner=data.get("owner", ""),
            organiser=data.get("organiser", ""),
            quorum=data.get("quorum", 0),
            min_start_offset=data.get("min_start_offset", DEFAULT_MIN_START_OFFSET),
            min_stop_offset=data.get("min_stop_offset", DEFAULT_MIN_STOP_OFFSET),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("TOKENVOTE_OWNER"):
            self.owner = v
        if v := os.environ.get("TOKENVOTE_ORGANISER"):
            self.organiser = v
        if (v := _env_int("TOKENVOTE_QUORUM")) is not None:
            self.quorum = v
        if (v := _env_int("TOKENVOTE_MIN_START_OFFSET")) is not None:
            self.min_start_offset = v
        if (v := _env_int("TOKENVOTE_MIN_STOP_OFFSET")) is not None:
            self.min_stop_offset = v


@dataclass
class ProposalsSectionConfig:
    """[proposals] section."""
    max_field_length: int = FIELD_MAX_LENGTH

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProposalsSectionConfig":
        return cls(max_field_length=data.get("max_field_length", FIELD_MAX_LENGTH))

    def apply_env(self) -> None:
        if (v := _env_int("TOKENVOTE_MAX_FIELD_LENGTH")) is not None:
            self.max_field_length = v


@dataclass
class LoggingSectionConfig:
    """[logging] section."""
    level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingSectionConfig":
        return cls(level=str(data.get("level", "INFO")).upper())

    def apply_env(self) -> None:
        if v := os.environ.get("TOKENVOTE_LOG_LEVEL"):
            self.level = v.upper()


@dataclass
class TokenVoteConfig:
    """Top-level configuration aggregating every section of config.toml."""
    governance: GovernanceSectionConfig = field(default_factory=GovernanceSectionConfig)
    proposals: ProposalsSectionConfig = field(default_factory=ProposalsSectionConfig)
    logging: LoggingSectionConfig = field(default_factory=LoggingSectionConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenVoteConfig":
        return cls(
            governance=GovernanceSectionConfig.from_dict(data.get("governance", {})),
            proposals=ProposalsSectionConfig.from_dict(data.get("proposals", {})),
            logging=LoggingSectionConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "TokenVoteConfig":
        """
        Load configuration from a TOML file.

        A missing file yields defaults (environment overrides still apply).
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.governance.apply_env()
        self.proposals.apply_env()
        self.logging.apply_env()

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Returns:
            True if all valid

        Raises:
            ConfigurationError: on invalid config
        """
        gov = self.governance
        if not gov.owner:
            raise ConfigurationError("governance.owner is required")
        if not gov.organiser:
            raise ConfigurationError("governance.organiser is required")
        for name, value in (
            ("quorum", gov.quorum),
            ("min_start_offset", gov.min_start_offset),
            ("min_stop_offset", gov.min_stop_offset),
            ("max_field_length", self.proposals.max_field_length),
        ):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if gov.quorum < 0:
            raise ConfigurationError("quorum must be >= 0")
        if gov.min_start_offset < 0 or gov.min_stop_offset < 0:
            raise ConfigurationError("date range offsets must be >= 0")
        if self.proposals.max_field_length < FIELD_MIN_LENGTH:
            raise ConfigurationError(f"max_field_length must be >= {FIELD_MIN_LENGTH}")
        if self.logging.level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.logging.level}")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "governance": {
                "owner": self.governance.owner,
                "organiser": self.governance.organiser,
                "quorum": self.governance.quorum,
                "min_start_offset": self.governance.min_start_offset,
                "min_stop_offset": self.governance.min_stop_offset,
            },
            "proposals": {
                "max_field_length": self.proposals.max_field_length,
            },
            "logging": {
                "level": self.logging.level,
            },
        }


def load_config(path: Optional[str] = None) -> TokenVoteConfig:
    """
    Load configuration.

    Resolution order:
        1. Explicit *path* argument
        2. TOKENVOTE_CONFIG env var
        3. ./config.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("TOKENVOTE_CONFIG", "config.toml")

    return TokenVoteConfig.from_file(path)
