# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Adding components to a manifest.

For every name: look up the project's sides, list versions compatible with
the manifest's environment, take the first candidate and record it.
"""

from pathlib import Path
from typing import List, Tuple

from podzol.core.logging import get_service_logger
from podzol.models.enums import ProjectType
from podzol.models.manifest import Definition
from podzol.services.manifest_store import load_manifest, save_manifest
from podzol.services.resolver import RegistryClient, select_first_candidate

logger = get_service_logger("pack_add")


async def add_components(
    client: RegistryClient,
    manifest_path: Path,
    names: List[str],
    project_type: ProjectType
) -> List[Tuple[str, str]]:
    """
    Add projects to the manifest's table for ``project_type``.

    Names are processed in order; the manifest is saved once, after all of
    them resolved. An existing entry with the same name is replaced.

    Returns:
        (name, version_number) pairs that were added

    Raises:
        SelectionError: If a project has no compatible version
        RegistryError: If the registry lookup fails
    """
    manifest = load_manifest(manifest_path)
    category = project_type.category
    added = []

    for name in names:
        project = await client.get_project(name)
        versions = await client.list_candidate_versions(
            name,
            manifest.environment.minecraft,
            manifest.environment.loaders.keys()
        )

        version = select_first_candidate(name, versions)
        manifest = manifest.with_definition(
            category,
            name,
            Definition(version=version.version_number, side=project.get_side())
        )
        added.append((name, version.version_number))
        logger.info(f"Added {name} {version.version_number} to {category.table}")

    save_manifest(manifest, manifest_path)
    return added
