# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Pack Builder - Modular Composition

Composes the resolver, override collector and archive assembler into the
manifest-to-archive pipeline:

- ResolutionEngine: registry lookups, concurrent, all-or-nothing
- OverrideCollector: glob expansion, runs in a worker thread alongside
- ArchiveAssembler: waits for both, then writes the archive
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from podzol.core.config import Config
from podzol.core.logging import get_service_logger, log_event
from podzol.models.manifest import Manifest
from podzol.services.archive import ArchiveAssembler, ArchiveReport, Sink
from podzol.services.manifest_store import load_manifest
from podzol.services.overrides import OverrideCollector
from podzol.services.progress import NullProgressReporter, ProgressReporter
from podzol.services.registry_client import ModrinthClient
from podzol.services.resolver import RegistryClient, ResolutionEngine

logger = get_service_logger("builder")


@dataclass
class BuildReport:
    """Outcome of a successful build"""
    archive: Optional[Path]
    file_count: int
    override_count: int
    archive_report: ArchiveReport


async def build_pack(
    manifest: Manifest,
    client: RegistryClient,
    sink: Sink,
    config: Optional[Config] = None,
    progress: Optional[ProgressReporter] = None,
    root: Optional[Path] = None
) -> BuildReport:
    """
    Build a .mrpack from a manifest into ``sink``.

    Args:
        manifest: Pack specification
        client: Registry client shared by all resolution tasks
        sink: Output path or writable binary file object
        config: Configuration (only max_concurrency is read here)
        progress: Progress reporter
        root: Directory override patterns are expanded in

    Returns:
        BuildReport with file and override counts

    Raises:
        PodzolError: Whatever failed first; nothing is cleaned up
    """
    config = config or Config()
    progress = progress or NullProgressReporter()

    context = manifest.build_context()
    definitions, rules = context.consume()

    engine = ResolutionEngine(client, progress=progress, max_concurrency=config.max_concurrency)
    collector = OverrideCollector(root)

    log_event(logger, "Building pack", level="INFO",
              pack=str(manifest), components=context.total_items)

    progress.start(context.total_items)
    try:
        resolution, overrides = await asyncio.gather(
            engine.resolve(definitions, context.environment),
            asyncio.to_thread(collector.collect, rules)
        )
    finally:
        progress.finish()

    files = resolution.files()
    assembler = ArchiveAssembler(context.pack, context.environment)
    archive_report = await assembler.write(files, overrides, sink)

    return BuildReport(
        archive=Path(sink) if isinstance(sink, (str, Path)) else None,
        file_count=len(files),
        override_count=archive_report.override_count,
        archive_report=archive_report
    )


async def export_pack(
    manifest_dir: Path,
    config: Config,
    output: Optional[Path] = None,
    client: Optional[RegistryClient] = None,
    progress: Optional[ProgressReporter] = None
) -> BuildReport:
    """
    Load ``<manifest_dir>/podzol.toml`` and write ``<name>-<version>.mrpack``.

    Args:
        manifest_dir: Directory holding the manifest; overrides resolve from here
        config: Configuration
        output: Archive path (defaults to the pack's archive name in manifest_dir)
        client: Registry client; one is created from config when omitted
        progress: Progress reporter

    Returns:
        BuildReport for the written archive
    """
    manifest_dir = Path(manifest_dir)
    manifest = load_manifest(manifest_dir / config.manifest_name)
    output = Path(output) if output else manifest_dir / manifest.archive_name()

    if client is not None:
        report = await build_pack(manifest, client, output, config, progress, root=manifest_dir)
    else:
        async with ModrinthClient(config) as owned_client:
            report = await build_pack(manifest, owned_client, output, config, progress, root=manifest_dir)

    logger.info(f"Exported {report.file_count} file(s) and {report.override_count} override(s) to {output}")
    return report
