"""preloader CLI commands."""

# Import command modules (registers them via @register_command decorator)
from . import build, preload, check, info
from .base import (
    CommandContext,
    Command,
    BaseCommand,
    register_command,
    get_registered_commands,
)

__all__ = [
    "CommandContext",
    "Command",
    "BaseCommand",
    "register_command",
    "get_registered_commands",
    # Command modules
    "build",
    "preload",
    "check",
    "info",
]
