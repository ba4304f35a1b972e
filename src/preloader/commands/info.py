"""Info command - shows what a preload manifest contains."""

import logging
from pathlib import Path

from .base import BaseCommand, CommandContext, register_command
from ..loader.manifest import load_manifest
from ..project import get_class_map

logger = logging.getLogger(__name__)


@register_command("info")
class InfoCommand(BaseCommand):
    """Info command that summarizes a manifest and checks it against the class map.

    Classes missing from the current class map are listed; they would make
    ``preload`` fail.
    """

    @property
    def name(self) -> str:
        return "info"

    @property
    def description(self) -> str:
        return "Show manifest contents and stale classes"

    @property
    def help_text(self) -> str:
        return """Show information about a preload manifest.

Displays:
  - Number of classes, files and compile targets
  - Classes no longer present in the class map (stale manifest)

Usage:
    preloader info [manifest] [options]

Arguments:
    [manifest]               Manifest path (default: `manifest` from config)

Options:
    -c, --config-path PATH   Configuration file (default: ./preload.yaml)
    --list                   List every class, file and compile target
"""

    def execute(self, ctx: CommandContext) -> int:
        """Execute the info command."""
        args = ctx.args.copy()
        manifest_path = None
        show_list = False

        while args:
            arg = args.pop(0)
            if arg == "--list":
                show_list = True
            elif not arg.startswith("-"):
                manifest_path = Path(arg)
            else:
                logger.error(f"Unknown argument: {arg}")
                print(self.help_text)
                return 1

        config = self.load_config(ctx)
        if config is None:
            return 1

        manifest_path = config.resolve(manifest_path or config.manifest)
        if not manifest_path.exists():
            logger.error(f"Manifest not found: {manifest_path}")
            logger.info("Run 'preloader build' to create it")
            return 1

        manifest = load_manifest(manifest_path)
        class_map = get_class_map(config)
        stale = [name for name in manifest.classes if name not in class_map]

        print(f"\n{'=' * 60}")
        print(" Preload Manifest Information")
        print(f"{'=' * 60}")
        print(f"\nManifest: {manifest_path}")
        print(f"Class map: {config.resolve(config.class_map)} ({len(class_map)} classes)")
        print(f"\nClasses:         {len(manifest.classes)}")
        print(f"Files:           {len(manifest.files)}")
        print(f"Compile targets: {len(manifest.compile)}")

        if show_list:
            for title, items in (
                    ("Classes", manifest.classes),
                    ("Files", manifest.files),
                    ("Compile targets", manifest.compile),
            ):
                print(f"\n{title}:")
                for item in items:
                    print(f"  - {item}")

        if stale:
            print(f"\nStale classes ({len(stale)}):")
            for name in stale:
                print(f"  - {name}")
            return 1

        print("\nAll classes resolve against the class map.")
        return 0
