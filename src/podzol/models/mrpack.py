# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Modrinth Pack Index

Data structures for modrinth.index.json, the canonical index stored as the
first entry of every .mrpack archive.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from podzol.models.enums import Game, Requirement, Side

FORMAT_VERSION = 1
INDEX_NAME = "modrinth.index.json"


@dataclass(frozen=True)
class Env:
    """Client/server requirement pair attached to an index file"""
    client: Requirement
    server: Requirement

    @classmethod
    def from_side(cls, side: Side) -> 'Env':
        """Requirement pair implied by a side"""
        if side is Side.CLIENT:
            return cls(client=Requirement.REQUIRED, server=Requirement.UNSUPPORTED)
        if side is Side.SERVER:
            return cls(client=Requirement.UNSUPPORTED, server=Requirement.REQUIRED)
        return cls(client=Requirement.REQUIRED, server=Requirement.REQUIRED)

    def to_dict(self) -> Dict[str, str]:
        return {"client": self.client.value, "server": self.server.value}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'Env':
        return cls(
            client=Requirement.parse(data["client"]),
            server=Requirement.parse(data["server"])
        )


@dataclass
class IndexFile:
    """
    A downloadable file listed in the index.

    The path is archive-relative with forward slashes, e.g. ``mods/sodium.jar``.
    """
    path: str
    hashes: Dict[str, str]
    downloads: List[str]
    file_size: int
    env: Optional[Env] = None

    def __post_init__(self):
        """Validate file fields"""
        if not self.path:
            raise ValueError("Index file path cannot be empty")

        if not self.downloads:
            raise ValueError(f"Index file {self.path} must have at least one download URL")

        if self.file_size < 0:
            raise ValueError(f"Index file {self.path} has negative size: {self.file_size}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary in index key order"""
        result: Dict[str, Any] = {
            "path": self.path,
            "hashes": dict(self.hashes),
        }

        if self.env is not None:
            result["env"] = self.env.to_dict()

        result["downloads"] = list(self.downloads)
        result["fileSize"] = self.file_size
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IndexFile':
        env = data.get("env")
        return cls(
            path=data["path"],
            hashes=dict(data.get("hashes", {})),
            downloads=list(data["downloads"]),
            file_size=data["fileSize"],
            env=Env.from_dict(env) if env else None
        )


@dataclass
class Index:
    """
    Canonical index of a modpack.

    ``dependencies`` maps ``minecraft`` and loader keys (``fabric-loader``,
    ``forge``...) to versions.
    """
    version_id: str
    name: str
    files: List[IndexFile] = field(default_factory=list)
    dependencies: Dict[str, str] = field(default_factory=dict)
    summary: Optional[str] = None
    format_version: int = FORMAT_VERSION
    game: Game = Game.MINECRAFT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result: Dict[str, Any] = {
            "formatVersion": self.format_version,
            "game": self.game.value,
            "versionId": self.version_id,
            "name": self.name,
        }

        if self.summary is not None:
            result["summary"] = self.summary

        result["files"] = [f.to_dict() for f in self.files]
        result["dependencies"] = dict(self.dependencies)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Index':
        """Create Index from dictionary"""
        return cls(
            format_version=data["formatVersion"],
            game=Game.parse(data["game"]),
            version_id=data["versionId"],
            name=data["name"],
            summary=data.get("summary"),
            files=[IndexFile.from_dict(f) for f in data.get("files", [])],
            dependencies=dict(data.get("dependencies", {}))
        )

    def to_json(self) -> bytes:
        """Serialize to the compact UTF-8 encoding written into the archive"""
        return json.dumps(
            self.to_dict(),
            ensure_ascii=False,
            separators=(",", ":")
        ).encode("utf-8")

    def __str__(self) -> str:
        return f"{self.name}@{self.version_id} ({len(self.files)} files)"
