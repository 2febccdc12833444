"""
TokenVote Configuration

Loads config.toml at startup. Environment variables override TOML values.
"""

from .loader import (
    GovernanceSectionConfig,
    LoggingSectionConfig,
    ProposalsSectionConfig,
    TokenVoteConfig,
    load_config,
)

__all__ = [
    "GovernanceSectionConfig",
    "LoggingSectionConfig",
    "ProposalsSectionConfig",
    "TokenVoteConfig",
    "load_config",
]
