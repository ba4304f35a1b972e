"""Check command - verifies the runtime can preload."""

import logging

from .base import BaseCommand, CommandContext, register_command
from ..config.models import LoaderConfig
from ..errors import EnvironmentCheckError
from ..loader.preloader import check_environment
from ..runtime import create_runtime

logger = logging.getLogger(__name__)


@register_command("check")
class CheckCommand(BaseCommand):

    @property
    def name(self) -> str:
        return "check"

    @property
    def description(self) -> str:
        return "Check that the runtime's cache supports preloading"

    @property
    def help_text(self) -> str:
        return """Check that the runtime's cache supports preloading.

For the php runtime: opcache is enabled, opcache_compile_file exists and,
for the CLI SAPI, opcache.enable_cli is set.

Usage:
    preloader check [options]

Options:
    -c, --config-path PATH   Configuration file (default: ./preload.yaml)
    --runtime NAME           php or python (default: `loader.runtime`)
"""

    def execute(self, ctx: CommandContext) -> int:
        """Execute the check command."""
        args = ctx.args.copy()
        runtime_name = None

        while args:
            arg = args.pop(0)
            if arg == "--runtime" and args:
                runtime_name = args.pop(0)
            else:
                logger.error(f"Unknown argument: {arg}")
                print(self.help_text)
                return 1

        if self.get_config_path(ctx).exists():
            config = self.load_config(ctx)
            if config is None:
                return 1
            loader = config.loader
        else:
            logger.info("No configuration file, using loader defaults")
            loader = LoaderConfig()

        if runtime_name is not None:
            if runtime_name not in ("php", "python"):
                logger.error(f"Unknown runtime: {runtime_name}")
                return 1
            loader = loader.model_copy(update={"runtime": runtime_name})

        try:
            check_environment(create_runtime(loader))
        except EnvironmentCheckError as e:
            print(e)
            return 1

        print("Environment OK")
        return 0
