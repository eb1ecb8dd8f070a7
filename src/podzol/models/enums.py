# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Closed token enumerations shared by the manifest, registry and index models.

Every enum parses through ``parse()``, which rejects unknown tokens with a
ValidationError naming the accepted set, and formats back with ``str()``.
"""

from enum import Enum
from typing import Type, TypeVar

from podzol.core.errors import ValidationError

E = TypeVar("E", bound="TokenEnum")


class TokenEnum(str, Enum):
    """String enum with strict parsing and plain-token formatting"""

    @classmethod
    def parse(cls: Type[E], token: str) -> E:
        """
        Parse a manifest/registry token.

        Raises:
            ValidationError: If token is not one of the accepted values
        """
        if isinstance(token, cls):
            return token
        for member in cls:
            if member.value == token:
                return member

        singular, plural = cls._kind_names()
        accepted = [member.value for member in cls]
        raise ValidationError(
            f"Unknown {singular} '{token}'. Supported {plural} are: {', '.join(accepted)}",
            field=singular,
            accepted=accepted
        )

    @classmethod
    def _kind_names(cls):
        # (singular, plural) used in validation messages
        return KIND_NAMES.get(cls.__name__, ("value", "values"))

    def __str__(self) -> str:
        return self.value


class Loader(TokenEnum):
    """Mod loaders a pack can depend on"""
    FABRIC = "fabric"
    FORGE = "forge"
    QUILT = "quilt"
    NEOFORGE = "neoforge"

    def as_mrpack(self) -> str:
        """Dependency key used in modrinth.index.json"""
        return {
            Loader.FABRIC: "fabric-loader",
            Loader.FORGE: "forge",
            Loader.QUILT: "quilt-loader",
            Loader.NEOFORGE: "neoforge",
        }[self]


class Side(TokenEnum):
    """Where a component is needed"""
    CLIENT = "client"
    SERVER = "server"
    BOTH = "both"


class FileLocation(TokenEnum):
    """Target of an override rule"""
    CLIENT = "client"
    SERVER = "server"
    COMMON = "common"

    @property
    def override_prefix(self) -> str:
        """Archive directory the location's files are written under"""
        return {
            FileLocation.CLIENT: "client-overrides",
            FileLocation.SERVER: "server-overrides",
            FileLocation.COMMON: "overrides",
        }[self]


class Category(TokenEnum):
    """Component categories, in archive order"""
    MODS = "mods"
    RESOURCE_PACKS = "resource-packs"
    SHADERS = "shaders"

    @property
    def table(self) -> str:
        """Manifest table holding this category's definitions"""
        return self.value

    @property
    def directory(self) -> str:
        """Directory the category's files are placed in on the client"""
        return {
            Category.MODS: "mods",
            Category.RESOURCE_PACKS: "resourcepacks",
            Category.SHADERS: "shaderpacks",
        }[self]


class ProjectType(TokenEnum):
    """Component kind as named on the command line"""
    MOD = "mod"
    RESOURCE_PACK = "resource-pack"
    SHADER = "shader"

    @property
    def category(self) -> Category:
        return {
            ProjectType.MOD: Category.MODS,
            ProjectType.RESOURCE_PACK: Category.RESOURCE_PACKS,
            ProjectType.SHADER: Category.SHADERS,
        }[self]


class Requirement(TokenEnum):
    """Client/server requirement level"""
    REQUIRED = "required"
    OPTIONAL = "optional"
    UNSUPPORTED = "unsupported"

    @property
    def is_needed(self) -> bool:
        return self is not Requirement.UNSUPPORTED


class VersionType(TokenEnum):
    """Release channel of a game version"""
    RELEASE = "release"
    SNAPSHOT = "snapshot"
    ALPHA = "alpha"
    BETA = "beta"


class Game(TokenEnum):
    MINECRAFT = "minecraft"


KIND_NAMES = {
    "Loader": ("loader", "loaders"),
    "Side": ("side", "sides"),
    "FileLocation": ("location", "locations"),
    "Category": ("category", "categories"),
    "ProjectType": ("project type", "project types"),
    "Requirement": ("requirement", "requirements"),
    "VersionType": ("version type", "types"),
    "Game": ("game", "games"),
}


def derive_side(client: Requirement, server: Requirement) -> Side:
    """
    Derive the side a project belongs on from its requirement flags.

    Client-only when only the client needs it, server-only when only the
    server needs it, both otherwise (including when neither needs it).
    """
    if client.is_needed and not server.is_needed:
        return Side.CLIENT

    if server.is_needed and not client.is_needed:
        return Side.SERVER

    return Side.BOTH
