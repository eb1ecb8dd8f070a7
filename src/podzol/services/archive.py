# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Archive Assembler

Builds the canonical index and writes the .mrpack archive:
1. modrinth.index.json, always the first entry
2. every override file at its archive path

Entries are deflate-compressed and carry a fixed timestamp so identical
inputs produce identical archives. Destination paths are not de-duplicated;
a repeated path is logged and written again, and most readers then see the
later entry.
"""

import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Union

import aiofiles

from podzol.core.errors import ArchiveError, OverrideError
from podzol.core.logging import get_service_logger, log_event
from podzol.models.manifest import Environment, Pack
from podzol.models.mrpack import INDEX_NAME, Index, IndexFile
from podzol.services.overrides import OverrideFile

logger = get_service_logger("archive")

# Earliest timestamp a ZIP entry can carry
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

Sink = Union[str, Path, BinaryIO]


@dataclass
class ArchiveReport:
    """What was written to the archive"""
    entries: List[str] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)
    shadowed: List[str] = field(default_factory=list)

    @property
    def override_count(self) -> int:
        return len(self.entries) - 1 if self.entries else 0


def build_index(pack: Pack, environment: Environment, files: List[IndexFile]) -> Index:
    """
    Build the canonical index.

    Args:
        pack: Pack metadata (name, version, description as summary)
        environment: Game version and loaders, turned into dependencies
        files: Resolved files, already in category order

    Returns:
        Index ready to serialize
    """
    return Index(
        version_id=pack.version,
        name=pack.name,
        summary=pack.description,
        files=list(files),
        dependencies=environment.dependencies()
    )


def _entry(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = 0o644 << 16
    return info


class ArchiveAssembler:
    """Single owner of the archive sink; writes strictly after resolution"""

    def __init__(self, pack: Pack, environment: Environment):
        self.pack = pack
        self.environment = environment

    def build_index(self, files: List[IndexFile]) -> Index:
        return build_index(self.pack, self.environment, files)

    async def write(
        self,
        files: List[IndexFile],
        overrides: List[OverrideFile],
        sink: Sink
    ) -> ArchiveReport:
        """
        Write index and overrides to the sink.

        Args:
            files: Resolved files in category order
            overrides: Collected override files
            sink: Output path or writable binary file object

        Returns:
            ArchiveReport listing entry names in write order

        Raises:
            ArchiveError: If the sink cannot be written
            OverrideError: If an override file cannot be read
        """
        index = self.build_index(files)
        data = index.to_json()
        report = ArchiveReport()
        report.shadowed = self._warn_shadowed_components(index, overrides)

        try:
            archive = zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise ArchiveError(f"Cannot open archive for writing: {e}")

        try:
            with archive:
                archive.writestr(_entry(INDEX_NAME), data)
                report.entries.append(INDEX_NAME)

                seen = {INDEX_NAME}
                for override in overrides:
                    content = await self._read_override(override)

                    if override.archive_path in seen:
                        report.duplicates.append(override.archive_path)
                        log_event(logger, "Duplicate archive path", level="WARNING",
                                  path=override.archive_path, source=str(override.source))
                    seen.add(override.archive_path)

                    archive.writestr(_entry(override.archive_path), content)
                    report.entries.append(override.archive_path)
        except OSError as e:
            raise ArchiveError(f"Failed to write archive: {e}")

        log_event(logger, "Archive written", level="INFO",
                  pack=str(index), overrides=report.override_count)
        return report

    @staticmethod
    async def _read_override(override: OverrideFile) -> bytes:
        try:
            async with aiofiles.open(override.source, "rb") as f:
                return await f.read()
        except OSError as e:
            raise OverrideError(f"Cannot read override file {override.source}: {e}")

    @staticmethod
    def _warn_shadowed_components(index: Index, overrides: List[OverrideFile]) -> List[str]:
        """Log overrides whose extracted path equals a resolved file's path"""
        component_paths = {f.path for f in index.files}
        shadowed = []
        for override in overrides:
            prefix = override.location.override_prefix + "/"
            target = override.archive_path[len(prefix):]
            if target in component_paths:
                shadowed.append(target)
                log_event(logger, "Override replaces resolved file", level="WARNING",
                          path=target, location=override.location.value)
        return shadowed
