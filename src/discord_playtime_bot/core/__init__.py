"""
Core components for the Discord Playtime Bot.

This package contains the command catalog and the access gate that every
command passes through.
"""

from .types import (
    COMMAND_CATALOG,
    AuthClass,
    Capability,
    CommandOption,
    CommandSpec,
    DenialReason,
    OptionType,
    get_command,
)
from .access_gate import AccessGate, Decision, SubscriptionSnapshot

__all__ = [
    "COMMAND_CATALOG",
    "AuthClass",
    "Capability",
    "CommandOption",
    "CommandSpec",
    "DenialReason",
    "OptionType",
    "get_command",
    "AccessGate",
    "Decision",
    "SubscriptionSnapshot",
]
