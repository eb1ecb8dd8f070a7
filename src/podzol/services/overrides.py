# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Override Collector

Single responsibility: expand override glob patterns into archive entries.

A pattern's matches keep their path below the parent of the pattern's
literal base directory, so ``config/*.json`` under the common location
becomes ``overrides/config/<file>.json``.
"""

import glob
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath
from typing import Dict, List, Optional

from podzol.core.errors import OverrideError
from podzol.core.logging import get_service_logger, log_event
from podzol.models.enums import FileLocation

logger = get_service_logger("overrides")

_MAGIC_CHARS = set("*?[")


@dataclass(frozen=True)
class OverrideFile:
    """A local file and where it goes in the archive"""
    location: FileLocation
    source: Path
    archive_path: str


def _has_magic(part: str) -> bool:
    return any(c in _MAGIC_CHARS for c in part)


def validate_pattern(pattern: str) -> None:
    """
    Reject patterns glob would silently misread.

    Raises:
        OverrideError: On an empty pattern, an unclosed ``[`` or a ``**``
            that is not a whole path component
    """
    if not pattern:
        raise OverrideError("Override pattern cannot be empty", pattern=pattern)

    for part in PurePath(pattern).parts:
        if "**" in part and part != "**":
            raise OverrideError(
                f"Invalid pattern '{pattern}': '**' must be a whole path component",
                pattern=pattern
            )

        depth = 0
        for c in part:
            if c == "[":
                depth += 1
            elif c == "]" and depth:
                depth -= 1
        if depth:
            raise OverrideError(f"Invalid pattern '{pattern}': unclosed '['", pattern=pattern)


def pattern_anchor(pattern: str) -> PurePath:
    """Directory that match paths are made relative to"""
    parts = PurePath(pattern).parts
    base: List[str] = []
    for part in parts:
        if _has_magic(part):
            break
        base.append(part)

    if not base:
        return PurePath(".")
    return PurePath(*base).parent


class OverrideCollector:
    """
    Expands override rules against the filesystem.

    Runs synchronously; the builder moves it off the event loop.
    """

    def __init__(self, root: Optional[Path] = None):
        """
        Initialize override collector.

        Args:
            root: Directory relative patterns are expanded in (defaults to cwd)
        """
        self.root = Path(root) if root else Path.cwd()

    def collect(self, rules: Dict[FileLocation, List[str]]) -> List[OverrideFile]:
        """
        Expand every (location, pattern) pair.

        Returns:
            Override files, location by location, each pattern's matches sorted

        Raises:
            OverrideError: If a pattern is invalid or matches a directory
        """
        overrides: List[OverrideFile] = []

        for location in FileLocation:
            for pattern in rules.get(location, []):
                matched = self.expand(location, pattern)
                if not matched:
                    log_event(logger, "Override pattern matched no files", level="WARNING",
                              pattern=pattern, location=location.value)
                overrides.extend(matched)

        logger.info(f"Collected {len(overrides)} override file(s)")
        return overrides

    def expand(self, location: FileLocation, pattern: str) -> List[OverrideFile]:
        """Expand a single pattern for a location"""
        validate_pattern(pattern)

        recursive = "**" in PurePath(pattern).parts
        anchor = pattern_anchor(pattern)
        if anchor.is_absolute():
            anchor_dir = Path(anchor)
        else:
            anchor_dir = self.root / anchor

        try:
            matches = sorted(glob.glob(
                pattern, root_dir=self.root, recursive=recursive, include_hidden=True
            ))
        except OSError as e:
            raise OverrideError(f"Failed to expand '{pattern}': {e}", pattern=pattern)

        files = []
        for match in matches:
            source = Path(match) if Path(match).is_absolute() else self.root / match

            if source.is_dir():
                if recursive:
                    continue
                raise OverrideError(
                    f"Pattern '{pattern}' matched a directory: {match}",
                    pattern=pattern
                )

            relative = PurePath(source).relative_to(anchor_dir)
            archive_path = PurePosixPath(location.override_prefix, *relative.parts)
            files.append(OverrideFile(location=location, source=source, archive_path=str(archive_path)))

        return files
