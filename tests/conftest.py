# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Fixtures and Utilities

Provides an in-memory registry client, sample registry payloads and
manifest builders shared by the unit tests.
"""

import asyncio
import os
import sys
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from podzol.models.enums import Loader
from podzol.models.manifest import Definition, Environment, Manifest, Pack
from podzol.models.registry import GameVersion, Project, Version


# ============================================================================
# Fake Registry Client
# ============================================================================

class FakeRegistryClient:
    """
    In-memory stand-in for ModrinthClient.

    Tracks calls and the peak number of concurrently running lookups.
    """

    def __init__(
        self,
        versions: Optional[Dict[Tuple[str, str], Version]] = None,
        projects: Optional[Dict[str, Project]] = None,
        candidates: Optional[Dict[str, List[Version]]] = None,
        game_versions: Optional[List[GameVersion]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None
    ):
        self.versions = versions or {}
        self.projects = projects or {}
        self.candidates = candidates or {}
        self.game_versions = game_versions or []
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: List[tuple] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def _enter(self, name: str):
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(name, 0))
            if name in self.failures:
                raise self.failures[name]
        finally:
            self.in_flight -= 1

    async def list_platform_versions(self) -> List[GameVersion]:
        self.calls.append(("list_platform_versions",))
        return list(self.game_versions)

    async def get_project(self, name: str) -> Project:
        self.calls.append(("get_project", name))
        await self._enter(name)
        return self.projects[name]

    async def list_candidate_versions(self, name: str, platform_version: str, loaders: Iterable[Loader]) -> List[Version]:
        self.calls.append(("list_candidate_versions", name, platform_version, sorted(l.value for l in loaders)))
        await self._enter(name)
        return list(self.candidates.get(name, []))

    async def get_version(self, name: str, version_id: str) -> Version:
        self.calls.append(("get_version", name, version_id))
        await self._enter(name)
        return self.versions[(name, version_id)]


def make_version(version_number: str, *files: dict) -> Version:
    """Build a Version from file dicts (registry JSON shape)"""
    return Version.model_validate({"version_number": version_number, "files": list(files)})


def make_file(filename: str, primary: bool = True, size: int = 100, sha1: str = "0" * 40) -> dict:
    return {
        "hashes": {"sha1": sha1, "sha512": "f" * 128},
        "url": f"https://cdn.modrinth.com/data/x/{filename}",
        "filename": filename,
        "size": size,
        "primary": primary,
    }


def make_manifest(
    mods: Optional[Dict[str, Definition]] = None,
    resource_packs: Optional[Dict[str, Definition]] = None,
    shaders: Optional[Dict[str, Definition]] = None,
    files=None,
    loaders: Optional[Dict[Loader, str]] = None,
    description: Optional[str] = None
) -> Manifest:
    return Manifest(
        pack=Pack(name="test-pack", version="1.0.0", description=description),
        environment=Environment(minecraft="1.20.1", loaders=loaders if loaders is not None else {Loader.FABRIC: "0.15.0"}),
        files=files or {},
        mods=mods or {},
        resource_packs=resource_packs or {},
        shaders=shaders or {}
    )


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def sodium_version():
    """sodium mc1.20.1-0.5.8 with one primary jar and one source jar"""
    return make_version(
        "mc1.20.1-0.5.8",
        make_file("sodium.jar", primary=True, size=1234, sha1="abc123"),
        make_file("sodium-sources.jar", primary=False, size=999),
    )


@pytest.fixture
def fake_client(sodium_version):
    """Registry client knowing one mod, one resource pack and one shader"""
    return FakeRegistryClient(
        versions={
            ("sodium", "mc1.20.1-0.5.8"): sodium_version,
            ("faithful", "1.20-32x"): make_version("1.20-32x", make_file("faithful.zip")),
            ("complementary", "r5.2"): make_version("r5.2", make_file("complementary.zip")),
        },
        projects={
            "sodium": Project(client_side="required", server_side="unsupported"),
            "faithful": Project(client_side="required", server_side="unsupported"),
            "complementary": Project(client_side="optional", server_side="unsupported"),
        }
    )
