"""
Common types and constants for the Discord Playtime Bot.

This module centralizes the command catalog, the authorization classes and
the denial reasons so that the access gate, the dispatcher and the Discord
client all read from the same declarations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Optional, Tuple


class OptionType(Enum):
    """Typed slash command option kinds."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"

    def accepts(self, value: object) -> bool:
        """Check whether ``value`` has this option's Python type."""
        if self is OptionType.STRING:
            return isinstance(value, str)
        if self is OptionType.INTEGER:
            # bool is an int subclass but never a valid integer option
            return isinstance(value, int) and not isinstance(value, bool)
        return isinstance(value, bool)


class AuthClass(Enum):
    """How a command is authorized once the subscription is active."""

    SUBSCRIPTION_ACTIVE = "subscription_active"
    OWNER_ONLY = "owner_only"
    PERMISSION_GATED = "permission_gated"


class Capability(Enum):
    """Per-user capability flags stored on a permission record."""

    ADD_TIME = "can_add_time"
    REMOVE_TIME = "can_remove_time"


class DenialReason(Enum):
    """Reasons a command invocation is refused."""

    SUBSCRIPTION_NOT_FOUND = "subscription_not_found"
    SUBSCRIPTION_EXPIRED = "subscription_expired"
    PERMISSION_DENIED = "permission_denied"
    INVALID_PARAMETERS = "invalid_parameters"
    STORAGE_ERROR = "storage_error"
    NOT_IMPLEMENTED = "not_implemented"
    COMMAND_NOT_FOUND = "command_not_found"
    GUILD_ONLY = "guild_only"


# User-facing messages
MSG_SUBSCRIPTION_NOT_FOUND: Final[str] = "Subscription not found for this server."
MSG_SUBSCRIPTION_EXPIRED: Final[str] = (
    "Your subscription has expired. Please contact the bot owner to extend the subscription."
)
MSG_OWNER_ONLY: Final[str] = "Permission denied. Only the bot owner can use this command."
MSG_UNAUTHORIZED: Final[str] = "You do not have permission to use this command."
MSG_STORAGE_ERROR: Final[str] = "An error occurred while accessing the database."
MSG_COMMAND_NOT_FOUND: Final[str] = "Command not found."
MSG_NOT_IMPLEMENTED: Final[str] = "This command is not available yet."
MSG_GUILD_ONLY: Final[str] = "This command can only be used in a server."

DENIAL_MESSAGES: Dict[DenialReason, str] = {
    DenialReason.SUBSCRIPTION_NOT_FOUND: MSG_SUBSCRIPTION_NOT_FOUND,
    DenialReason.SUBSCRIPTION_EXPIRED: MSG_SUBSCRIPTION_EXPIRED,
    DenialReason.PERMISSION_DENIED: MSG_UNAUTHORIZED,
    DenialReason.INVALID_PARAMETERS: "Invalid parameters.",
    DenialReason.STORAGE_ERROR: MSG_STORAGE_ERROR,
    DenialReason.NOT_IMPLEMENTED: MSG_NOT_IMPLEMENTED,
    DenialReason.COMMAND_NOT_FOUND: MSG_COMMAND_NOT_FOUND,
    DenialReason.GUILD_ONLY: MSG_GUILD_ONLY,
}


@dataclass(frozen=True)
class CommandOption:
    """A typed slash command option."""

    name: str
    type: OptionType
    description: str
    required: bool = True


@dataclass(frozen=True)
class CommandSpec:
    """Declarative definition of a slash command."""

    name: str
    description: str
    auth: AuthClass
    options: Tuple[CommandOption, ...] = ()
    capability: Optional[Capability] = None
    implemented: bool = True

    @property
    def usage(self) -> str:
        """Usage string such as ``/addtime [steam_hex] [play_time]``."""
        parts = [f"/{self.name}"]
        for option in self.options:
            parts.append(f"[{option.name}]" if option.required else f"({option.name})")
        return " ".join(parts)

    def validate_options(self, options: Dict[str, object]) -> Optional[str]:
        """
        Check option values against this command's declaration.

        Returns:
            None when the options are valid, otherwise a short description
            of the first problem found.
        """
        known = {option.name for option in self.options}
        for name in options:
            if name not in known:
                return f"unknown option '{name}'"

        for option in self.options:
            value = options.get(option.name)
            if value is None:
                if option.required:
                    return f"missing option '{option.name}'"
                continue
            if not option.type.accepts(value):
                return f"option '{option.name}' expects {option.type.value}"
        return None


# Command names
CMD_ADD_TIME: Final[str] = "addtime"
CMD_LIST_TIMES: Final[str] = "listtimes"
CMD_EXTEND_TIME: Final[str] = "extendtime"
CMD_GRANT_ACCESS: Final[str] = "grantaccess"
CMD_REVOKE_ACCESS: Final[str] = "revokeaccess"
CMD_CHECK_SUBSCRIPTION: Final[str] = "checksubscription"
CMD_RESET_PLAY_TIME: Final[str] = "resetplaytime"
CMD_RESET_ALL_PLAY_TIMES: Final[str] = "resetallplaytimes"
CMD_REMOVE_PLAY_TIME: Final[str] = "removeplaytime"

_STEAM_HEX = CommandOption("steam_hex", OptionType.STRING, "Steam hex ID")
_USER = CommandOption("user", OptionType.STRING, "User ID")

COMMAND_CATALOG: Tuple[CommandSpec, ...] = (
    CommandSpec(
        name=CMD_ADD_TIME,
        description="Add play time for a Steam hex",
        auth=AuthClass.PERMISSION_GATED,
        capability=Capability.ADD_TIME,
        options=(
            _STEAM_HEX,
            CommandOption("play_time", OptionType.INTEGER, "Play time in minutes"),
        ),
        implemented=False,
    ),
    CommandSpec(
        name=CMD_LIST_TIMES,
        description="List play times",
        auth=AuthClass.SUBSCRIPTION_ACTIVE,
        options=(CommandOption("page", OptionType.INTEGER, "Page number", required=False),),
        implemented=False,
    ),
    CommandSpec(
        name=CMD_EXTEND_TIME,
        description="Extend subscription time (Owner only)",
        auth=AuthClass.OWNER_ONLY,
        options=(CommandOption("days", OptionType.INTEGER, "Number of days to extend"),),
    ),
    CommandSpec(
        name=CMD_GRANT_ACCESS,
        description="Grant access to add/remove time",
        auth=AuthClass.OWNER_ONLY,
        options=(
            _USER,
            CommandOption("addtime", OptionType.BOOLEAN, "Allow adding time"),
            CommandOption("removetime", OptionType.BOOLEAN, "Allow removing time"),
        ),
    ),
    CommandSpec(
        name=CMD_REVOKE_ACCESS,
        description="Revoke access to add/remove time",
        auth=AuthClass.OWNER_ONLY,
        options=(_USER,),
    ),
    CommandSpec(
        name=CMD_CHECK_SUBSCRIPTION,
        description="Check remaining subscription days",
        auth=AuthClass.SUBSCRIPTION_ACTIVE,
    ),
    CommandSpec(
        name=CMD_RESET_PLAY_TIME,
        description="Reset a person's playtime",
        auth=AuthClass.PERMISSION_GATED,
        capability=Capability.REMOVE_TIME,
        options=(_USER,),
        implemented=False,
    ),
    CommandSpec(
        name=CMD_RESET_ALL_PLAY_TIMES,
        description="Reset all playtimes",
        auth=AuthClass.OWNER_ONLY,
        implemented=False,
    ),
    CommandSpec(
        name=CMD_REMOVE_PLAY_TIME,
        description="Remove playtime from the list",
        auth=AuthClass.PERMISSION_GATED,
        capability=Capability.REMOVE_TIME,
        options=(_STEAM_HEX,),
        implemented=False,
    ),
)

COMMANDS_BY_NAME: Dict[str, CommandSpec] = {spec.name: spec for spec in COMMAND_CATALOG}


def get_command(name: str) -> Optional[CommandSpec]:
    """Look up a command declaration by name."""
    return COMMANDS_BY_NAME.get(name)
