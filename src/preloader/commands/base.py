"""Base command protocol and utilities for preloader CLI commands."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

import yaml

from ..config.models import CONFIG_FILENAME, PreloaderConfig, load_config

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Context passed to command execution.

    Contains parsed arguments and any additional context needed by commands.
    """
    command: str
    args: list[str] = field(default_factory=list)
    verbose: int = 0
    config_path: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Command(Protocol):
    """Protocol for CLI commands.

    Commands must implement the execute method which receives a CommandContext
    and returns an exit code (0 for success, non-zero for failure).
    """

    @property
    def name(self) -> str:
        ...

    @property
    def description(self) -> str:
        ...

    @property
    def help_text(self) -> str:
        ...

    def execute(self, ctx: CommandContext) -> int:
        ...


class BaseCommand(ABC):
    """Abstract base class for CLI commands."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The command name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Short description of the command."""
        pass

    @property
    def help_text(self) -> str:
        """Detailed help text. Override for custom help."""
        return self.description

    @abstractmethod
    def execute(self, ctx: CommandContext) -> int:
        """Execute the command. Must be implemented by subclasses."""
        pass

    @staticmethod
    def get_config_path(ctx: CommandContext) -> Path:
        return Path(ctx.config_path) if ctx.config_path else Path.cwd() / CONFIG_FILENAME

    def load_config(self, ctx: CommandContext) -> Optional[PreloaderConfig]:
        """Load the project configuration, logging why when it cannot be loaded."""
        config_path = self.get_config_path(ctx)

        if not config_path.exists():
            logger.error(f"Configuration file not found: {config_path}")
            return None

        try:
            return load_config(config_path)
        except (ValueError, RuntimeError, yaml.YAMLError) as e:
            # pydantic.ValidationError is a ValueError
            logger.error(f"Invalid configuration {config_path}: {e}")
            return None


# Command registry to track available commands
_command_registry: dict[str, type] = {}


def register_command(name: str):
    """Decorator to register a command class in the registry.

    Usage:
        @register_command("build")
        class BuildCommand(BaseCommand):
            ...
    """

    def decorator(cls):
        _command_registry[name] = cls
        return cls

    return decorator


def get_registered_commands() -> dict[str, type]:
    """Get all registered command classes."""
    return _command_registry.copy()
