"""Preload command - replays the manifest through a runtime."""

import logging
from pathlib import Path

from .base import BaseCommand, CommandContext, register_command
from ..project import run_preload
from ..runtime import PhpScriptRuntime, create_runtime

logger = logging.getLogger(__name__)

RUNTIMES = ("php", "python")


@register_command("preload")
class PreloadCommand(BaseCommand):
    """Preload command that loads every class and file listed in the manifest."""

    @property
    def name(self) -> str:
        return "preload"

    @property
    def description(self) -> str:
        return "Replay the manifest (writes the opcache preload script for PHP)"

    @property
    def help_text(self) -> str:
        return """Replay the preload manifest.

Resolves every manifest class through the current class map, then loads the
classes and files and compiles the compile targets. A class missing from the
class map means the manifest is stale: nothing is loaded and the command fails.

With the php runtime the result is a preload script for `opcache.preload`.
With the python runtime the files are imported and byte-compiled in-process.

Usage:
    preloader preload [options]

Options:
    -c, --config-path PATH   Configuration file (default: ./preload.yaml)
    -o, --output PATH        Preload script path (php runtime only)
    --runtime NAME           php or python (default: `loader.runtime`)
    --include-only           Do not compile the compile targets
    --skip-check             Skip the environment check
"""

    def execute(self, ctx: CommandContext) -> int:
        """Execute the preload command."""
        args = ctx.args.copy()
        output_path = None
        runtime_name = None
        include_only = None
        check_environment = None

        while args:
            arg = args.pop(0)
            if arg in ("-o", "--output") and args:
                output_path = Path(args.pop(0))
            elif arg == "--runtime" and args:
                runtime_name = args.pop(0)
            elif arg == "--include-only":
                include_only = True
            elif arg == "--skip-check":
                check_environment = False
            else:
                logger.error(f"Unknown argument: {arg}")
                print(self.help_text)
                return 1

        if runtime_name is not None and runtime_name not in RUNTIMES:
            logger.error(f"Unknown runtime: {runtime_name} (expected one of {', '.join(RUNTIMES)})")
            return 1

        config = self.load_config(ctx)
        if config is None:
            return 1

        if runtime_name is not None:
            config.loader.runtime = runtime_name

        runtime = create_runtime(config.loader)

        _, result = run_preload(
            config,
            runtime=runtime,
            include_only=include_only,
            check_environment=check_environment,
        )

        if isinstance(runtime, PhpScriptRuntime):
            script = runtime.write(config.resolve(output_path or config.loader.script))
            print(f"Generated: {script}")

        print(
            f"Preloaded {result.classes} class(es), {result.files} file(s), "
            f"{result.compiles} compile(s) in {result.elapsed:.4f}s"
        )
        return 0
