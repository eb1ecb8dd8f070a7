# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Pack initialisation: writes a fresh podzol.toml and .gitignore.
"""

from pathlib import Path
from typing import List, Optional

from podzol.core.errors import ManifestError, SelectionError
from podzol.core.logging import get_service_logger
from podzol.models.enums import VersionType
from podzol.models.manifest import Environment, Manifest, Pack
from podzol.models.registry import GameVersion
from podzol.services.manifest_store import save_manifest
from podzol.services.resolver import RegistryClient

logger = get_service_logger("pack_init")

GITIGNORE = """# The exported modpack
*.mrpack
"""


def name_from_path(path: Path) -> str:
    """Directory name, or ``pack`` when there is none (e.g. ``/``)"""
    return Path(path).resolve().name or "pack"


def latest_release(versions: List[GameVersion]) -> GameVersion:
    """
    Most recent release by date.

    Raises:
        SelectionError: If no release exists
    """
    releases = [v for v in versions if v.version_type is VersionType.RELEASE]
    if not releases:
        raise SelectionError("No valid Minecraft versions found")
    return max(releases, key=lambda v: v.date)


async def init_pack(
    client: RegistryClient,
    directory: Path,
    version: str = "0.1.0",
    game_version: Optional[str] = None,
    name: Optional[str] = None,
    manifest_name: str = "podzol.toml"
) -> Manifest:
    """
    Create a manifest in ``directory``.

    Args:
        client: Registry client, consulted only when game_version is omitted
        directory: Pack directory (created if missing)
        version: Initial pack version
        game_version: Minecraft version; defaults to the latest release
        name: Pack name; defaults to the directory name
        manifest_name: Manifest file name

    Returns:
        The manifest that was written
    """
    directory = Path(directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ManifestError(f"Cannot create pack directory {directory}: {e}", path=str(directory))

    if game_version is None:
        game_version = latest_release(await client.list_platform_versions()).version

    manifest = Manifest(
        pack=Pack(name=name or name_from_path(directory), version=version),
        environment=Environment(minecraft=game_version)
    )

    save_manifest(manifest, directory / manifest_name)
    gitignore = directory / ".gitignore"
    try:
        gitignore.write_text(GITIGNORE)
    except OSError as e:
        raise ManifestError(f"Cannot write {gitignore}: {e}", path=str(gitignore))

    logger.info(f"Initialized {manifest} for minecraft {game_version} in {directory}")
    return manifest
