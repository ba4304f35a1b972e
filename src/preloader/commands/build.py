"""Build command - scans sources and writes the preload manifest."""

import logging
from pathlib import Path

from .base import BaseCommand, CommandContext, register_command
from ..project import create_builder

logger = logging.getLogger(__name__)


@register_command("build")
class BuildCommand(BaseCommand):
    """Build command that writes the manifest described by preload.yaml."""

    @property
    def name(self) -> str:
        return "build"

    @property
    def description(self) -> str:
        return "Scan sources and write the preload manifest"

    @property
    def help_text(self) -> str:
        return """Scan sources and write the preload manifest.

Applies the exclusions, preload patterns and source scans configured in
preload.yaml, keeps only classes known to the class map, and writes the
manifest. Every run rebuilds the whole manifest.

Usage:
    preloader build [options]

Options:
    -c, --config-path PATH   Configuration file (default: ./preload.yaml)
    -o, --output PATH        Manifest path (default: `manifest` from config)
    --dry-run                Print the manifest instead of writing it

Examples:
    preloader build
    preloader build -o build/preload.json
    preloader build --dry-run
"""

    def execute(self, ctx: CommandContext) -> int:
        """Execute the build command."""
        args = ctx.args.copy()
        output_path = None
        dry_run = False

        while args:
            arg = args.pop(0)
            if arg in ("-o", "--output") and args:
                output_path = Path(args.pop(0))
            elif arg == "--dry-run":
                dry_run = True
            else:
                logger.error(f"Unknown argument: {arg}")
                print(self.help_text)
                return 1

        config = self.load_config(ctx)
        if config is None:
            return 1

        print(f"Scanning {config.root}...")
        builder = create_builder(config)
        manifest = builder.to_manifest()

        print(
            f"\nFound {len(manifest.classes)} class(es), "
            f"{len(manifest.files)} file(s), "
            f"{len(manifest.compile)} compile target(s)"
        )

        if dry_run:
            print("\n--- Preview of manifest ---\n")
            print(manifest.to_json())
            print("--- End preview (--dry-run, no file written) ---")
            return 0

        path = builder.write_manifest(config.resolve(output_path or config.manifest))
        print(f"\nGenerated: {path}")
        return 0
