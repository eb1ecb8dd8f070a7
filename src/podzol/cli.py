# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
podzol command line.

    podzol init [DIR] [--name NAME] [--pack-version VERSION] [--game-version VERSION]
    podzol add {mod,resource-pack,shader} NAME... [--manifest-dir DIR]
    podzol export [--manifest-dir DIR] [--output FILE]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from podzol import __version__
from podzol.core.config import Config, load_config
from podzol.core.errors import PodzolError, sanitize_error_for_user
from podzol.core.logging import configure_logging
from podzol.models.enums import ProjectType
from podzol.services.builder import export_pack
from podzol.services.pack_add import add_components
from podzol.services.pack_init import init_pack
from podzol.services.progress import NullProgressReporter, RichProgressReporter
from podzol.services.registry_client import ModrinthClient

logger = logging.getLogger("podzol.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="podzol", description="podzol - a modpack manager")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (default: $PODZOL_CONFIG_PATH or ~/.config/podzol/podzol.yaml)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not show progress bars",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create a new pack manifest")
    init_parser.add_argument("directory", nargs="?", type=Path, default=Path("."))
    init_parser.add_argument("--name", help="Pack name (default: directory name)")
    init_parser.add_argument("--pack-version", dest="pack_version", default="0.1.0",
                             help="Initial pack version (default: 0.1.0)")
    init_parser.add_argument("--game-version", help="Minecraft version (default: latest release)")

    add_parser = subparsers.add_parser("add", help="Add projects to the manifest")
    add_parser.add_argument("project_type", choices=[t.value for t in ProjectType])
    add_parser.add_argument("names", nargs="+", metavar="NAME")
    add_parser.add_argument("--manifest-dir", type=Path, default=Path("."))

    export_parser = subparsers.add_parser("export", help="Build the .mrpack archive")
    export_parser.add_argument("--manifest-dir", type=Path, default=Path("."))
    export_parser.add_argument("-o", "--output", type=Path,
                               help="Archive path (default: <name>-<version>.mrpack)")

    return parser


async def run(args: argparse.Namespace, config: Config) -> None:
    """Dispatch a parsed command"""
    if args.command == "init":
        async with ModrinthClient(config) as client:
            await init_pack(
                client,
                args.directory,
                version=args.pack_version,
                game_version=args.game_version,
                name=args.name,
                manifest_name=config.manifest_name
            )

    elif args.command == "add":
        async with ModrinthClient(config) as client:
            added = await add_components(
                client,
                args.manifest_dir / config.manifest_name,
                args.names,
                ProjectType.parse(args.project_type)
            )
        table = ProjectType.parse(args.project_type).category.table
        for name, version in added:
            print(f"Added {name} {version} to {table}")

    elif args.command == "export":
        show_progress = config.show_progress and not args.quiet
        progress = RichProgressReporter() if show_progress else NullProgressReporter()
        report = await export_pack(args.manifest_dir, config, output=args.output, progress=progress)
        print(f"Wrote {report.archive} ({report.file_count} files, {report.override_count} overrides)")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit code"""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        configure_logging(config)
        asyncio.run(run(args, config))
    except PodzolError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {sanitize_error_for_user(e, include_type=False)}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
