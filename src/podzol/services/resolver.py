# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Component Resolver

Single responsibility: turn declared components into index files by asking
the registry, concurrently, for each component's exact version.

All-or-nothing: the first failing unit fails the whole resolution and the
results of every other unit are discarded.
"""

import asyncio
import contextlib
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Iterable

from podzol.core.errors import SelectionError
from podzol.core.logging import get_service_logger, log_event
from podzol.models.enums import Category, Loader, Side, derive_side
from podzol.models.manifest import Definition, Environment
from podzol.models.mrpack import Env, IndexFile
from podzol.models.registry import GameVersion, Project, Version
from podzol.services.progress import NullProgressReporter, ProgressReporter

logger = get_service_logger("resolver")

__all__ = [
    "RegistryClient",
    "Resolution",
    "ResolutionEngine",
    "derive_side",
    "select_first_candidate",
]


class RegistryClient(Protocol):
    """What the resolver needs from a registry client; must be safe to share between tasks"""

    async def list_platform_versions(self) -> List[GameVersion]: ...

    async def get_project(self, name: str) -> Project: ...

    async def list_candidate_versions(
        self, name: str, platform_version: str, loaders: Iterable[Loader]
    ) -> List[Version]: ...

    async def get_version(self, name: str, version_id: str) -> Version: ...


@dataclass
class Resolution:
    """Resolved index files, per category"""
    mods: List[IndexFile] = field(default_factory=list)
    resource_packs: List[IndexFile] = field(default_factory=list)
    shaders: List[IndexFile] = field(default_factory=list)

    def for_category(self, category: Category) -> List[IndexFile]:
        return {
            Category.MODS: self.mods,
            Category.RESOURCE_PACKS: self.resource_packs,
            Category.SHADERS: self.shaders,
        }[category]

    def files(self) -> List[IndexFile]:
        """Category-ordered concatenation: mods, then resource packs, then shaders"""
        return [*self.mods, *self.resource_packs, *self.shaders]


def select_first_candidate(name: str, versions: Sequence[Version]) -> Version:
    """
    Pick a version out of a candidate list.

    Takes the first entry as returned by the registry. The registry does
    not order candidates, so this is neither "latest" nor "best match".

    Raises:
        SelectionError: If there are no candidates
    """
    if not versions:
        raise SelectionError(f"No compatible versions found for {name}")
    if len(versions) > 1:
        logger.debug(f"{len(versions)} candidate versions for {name}, taking the first")
    return versions[0]


class ResolutionEngine:
    """
    Resolves every declared component against the registry.

    One unit of work per component, all scheduled at once. With
    ``max_concurrency`` set, at most that many units talk to the registry
    at the same time; failure semantics are the same either way.
    """

    def __init__(
        self,
        client: RegistryClient,
        progress: Optional[ProgressReporter] = None,
        max_concurrency: Optional[int] = None
    ):
        """
        Initialize resolution engine.

        Args:
            client: Shared registry client
            progress: Progress reporter (defaults to reporting nothing)
            max_concurrency: Optional cap on in-flight units
        """
        self.client = client
        self.progress = progress or NullProgressReporter()
        self.max_concurrency = max_concurrency

    async def resolve(
        self,
        definitions: Dict[Category, Dict[str, Definition]],
        environment: Environment
    ) -> Resolution:
        """
        Resolve all categories concurrently.

        Args:
            definitions: Component definitions keyed by category, then name
            environment: Target environment of the pack

        Returns:
            Resolution holding each category's files

        Raises:
            PodzolError: The error of the first unit that failed
        """
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        per_category = await asyncio.gather(*(
            self._resolve_category(category, definitions.get(category, {}), environment, semaphore)
            for category in Category
        ))

        resolution = Resolution()
        for category, files in zip(Category, per_category):
            resolution.for_category(category).extend(files)

        log_event(
            logger, "Resolved components", level="DEBUG",
            mods=len(resolution.mods),
            resource_packs=len(resolution.resource_packs),
            shaders=len(resolution.shaders)
        )
        return resolution

    async def _resolve_category(
        self,
        category: Category,
        definitions: Dict[str, Definition],
        environment: Environment,
        semaphore: Optional[asyncio.Semaphore]
    ) -> List[IndexFile]:
        results = await asyncio.gather(*(
            self._resolve_unit(category, name, definition, environment, semaphore)
            for name, definition in definitions.items()
        ))
        return [f for files in results for f in files]

    async def _resolve_unit(
        self,
        category: Category,
        name: str,
        definition: Definition,
        environment: Environment,
        semaphore: Optional[asyncio.Semaphore]
    ) -> List[IndexFile]:
        key = f"{category.value}/{name}"

        async with semaphore or contextlib.nullcontext():
            self.progress.item_started(key)
            logger.debug(f"Resolving {key}@{definition.version} for minecraft {environment.minecraft}")

            if definition.side is None:
                version, project = await asyncio.gather(
                    self.client.get_version(name, definition.version),
                    self.client.get_project(name)
                )
                side = project.get_side()
            else:
                version = await self.client.get_version(name, definition.version)
                side = definition.side

        files = self._index_files(category, version, side)
        self.progress.item_done(key)
        return files

    @staticmethod
    def _index_files(category: Category, version: Version, side: Side) -> List[IndexFile]:
        env = Env.from_side(side)
        return [
            IndexFile(
                path=f"{category.directory}/{registry_file.filename}",
                hashes=dict(registry_file.hashes),
                env=env,
                downloads=[registry_file.url],
                file_size=registry_file.size
            )
            for registry_file in version.primary_files()
        ]
