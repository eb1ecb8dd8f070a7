# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Pack Manifest Definitions

Defines the validated in-memory form of podzol.toml: pack metadata, the
target environment, component definitions per category and file override
rules. A Manifest is never mutated; a build works on a BuildContext derived
from it, and edits produce a new Manifest.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Any, Iterator, Tuple

from podzol.core.errors import ValidationError
from podzol.models.enums import Category, FileLocation, Loader, Side

TOP_LEVEL_TABLES = ["pack", "environment", "files"] + [c.table for c in Category]

# Spelling used by early manifests, still accepted on read
LEGACY_ENVIRONMENT_TABLE = "enviroment"


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"'{where}.{key}' must be a non-empty string", field=f"{where}.{key}")
    return value


def _require_table(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f"'{where}' must be a table", field=where)
    return value


@dataclass(frozen=True)
class Pack:
    """Pack metadata"""
    name: str
    version: str
    description: Optional[str] = None

    def __post_init__(self):
        """Validate pack fields"""
        if not self.name:
            raise ValidationError("Pack name cannot be empty", field="pack.name")

        if not self.version:
            raise ValidationError("Pack version cannot be empty", field="pack.version")

    def to_dict(self) -> Dict[str, str]:
        result = {"name": self.name, "version": self.version}
        if self.description is not None:
            result["description"] = self.description
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Pack':
        data = _require_table(data, "pack")
        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise ValidationError("'pack.description' must be a string", field="pack.description")

        return cls(
            name=_require_str(data, "name", "pack"),
            version=_require_str(data, "version", "pack"),
            description=description
        )


@dataclass(frozen=True)
class Environment:
    """
    Target game version plus loader requirements.

    In TOML the loaders sit flattened next to ``minecraft``::

        [environment]
        minecraft = "1.20.1"
        fabric = "0.15.0"
    """
    minecraft: str
    loaders: Dict[Loader, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.minecraft:
            raise ValidationError("Environment minecraft version cannot be empty", field="environment.minecraft")

    def dependencies(self) -> Dict[str, str]:
        """Index dependency map: minecraft first, then loaders in declaration order of Loader"""
        deps = {"minecraft": self.minecraft}
        for loader in Loader:
            if loader in self.loaders:
                deps[loader.as_mrpack()] = self.loaders[loader]
        return deps

    def to_dict(self) -> Dict[str, str]:
        result = {"minecraft": self.minecraft}
        for loader in Loader:
            if loader in self.loaders:
                result[loader.value] = self.loaders[loader]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Environment':
        data = _require_table(data, "environment")
        minecraft = _require_str(data, "minecraft", "environment")

        loaders: Dict[Loader, str] = {}
        for key, value in data.items():
            if key == "minecraft":
                continue
            loader = Loader.parse(key)
            if not isinstance(value, str) or not value:
                raise ValidationError(
                    f"Loader version for '{key}' must be a non-empty string",
                    field=f"environment.{key}"
                )
            loaders[loader] = value

        return cls(minecraft=minecraft, loaders=loaders)


@dataclass(frozen=True)
class Definition:
    """
    A declared component: registry version id plus optional side.

    When side is None it is derived from the project's requirement flags at
    build time.
    """
    version: str
    side: Optional[Side] = None

    def __post_init__(self):
        if not self.version:
            raise ValidationError("Definition version cannot be empty", field="version")

    def to_dict(self) -> Dict[str, str]:
        result = {"version": self.version}
        if self.side is not None:
            result["side"] = self.side.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any], where: str = "definition") -> 'Definition':
        data = _require_table(data, where)
        side = data.get("side")
        return cls(
            version=_require_str(data, "version", where),
            side=Side.parse(side) if side is not None else None
        )


@dataclass
class BuildContext:
    """
    Single-use view of a manifest handed to one build.

    Holds copies of the manifest's mappings; the build consumes it exactly once.
    """
    pack: Pack
    environment: Environment
    definitions: Dict[Category, Dict[str, Definition]]
    overrides: Dict[FileLocation, List[str]]
    consumed: bool = False

    @property
    def total_items(self) -> int:
        return sum(len(defs) for defs in self.definitions.values())

    def consume(self) -> Tuple[Dict[Category, Dict[str, Definition]], Dict[FileLocation, List[str]]]:
        """Hand out definitions and override rules; a second call is an error"""
        if self.consumed:
            raise RuntimeError("Build context has already been consumed")
        self.consumed = True
        return self.definitions, self.overrides


@dataclass(frozen=True)
class Manifest:
    """
    The pack specification.

    Component names are unique within each category; the same name may
    appear in more than one category.
    """
    pack: Pack
    environment: Environment
    files: Dict[FileLocation, List[str]] = field(default_factory=dict)
    mods: Dict[str, Definition] = field(default_factory=dict)
    resource_packs: Dict[str, Definition] = field(default_factory=dict)
    shaders: Dict[str, Definition] = field(default_factory=dict)

    def definitions(self, category: Category) -> Dict[str, Definition]:
        """Definitions declared for a category"""
        return {
            Category.MODS: self.mods,
            Category.RESOURCE_PACKS: self.resource_packs,
            Category.SHADERS: self.shaders,
        }[category]

    def components(self) -> Iterator[Tuple[Category, str, Definition]]:
        """All declared components, category by category"""
        for category in Category:
            for name, definition in self.definitions(category).items():
                yield category, name, definition

    def with_definition(self, category: Category, name: str, definition: Definition) -> 'Manifest':
        """Return a copy with ``name`` set (or replaced) in ``category``"""
        updated = dict(self.definitions(category))
        updated[name] = definition
        field_name = {
            Category.MODS: "mods",
            Category.RESOURCE_PACKS: "resource_packs",
            Category.SHADERS: "shaders",
        }[category]
        return replace(self, **{field_name: updated})

    def build_context(self) -> BuildContext:
        """Derive a fresh single-use BuildContext"""
        return BuildContext(
            pack=self.pack,
            environment=Environment(
                minecraft=self.environment.minecraft,
                loaders=dict(self.environment.loaders)
            ),
            definitions={category: dict(self.definitions(category)) for category in Category},
            overrides={location: list(patterns) for location, patterns in self.files.items()}
        )

    def archive_name(self) -> str:
        return f"{self.pack.name}-{self.pack.version}.mrpack"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the TOML document shape; empty tables are omitted"""
        result: Dict[str, Any] = {
            "pack": self.pack.to_dict(),
            "environment": self.environment.to_dict(),
        }

        if self.files:
            result["files"] = {
                location.value: list(self.files[location])
                for location in FileLocation
                if location in self.files
            }

        for category in Category:
            defs = self.definitions(category)
            if defs:
                result[category.table] = {name: d.to_dict() for name, d in defs.items()}

        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Manifest':
        """
        Create Manifest from a parsed TOML document.

        Raises:
            ValidationError: If a table is missing, unknown or malformed
        """
        data = _require_table(data, "manifest")

        if "environment" in data and LEGACY_ENVIRONMENT_TABLE in data:
            raise ValidationError(
                f"Manifest has both [environment] and [{LEGACY_ENVIRONMENT_TABLE}] tables; keep only [environment]",
                field="environment"
            )
        env_key = "environment" if "environment" in data else LEGACY_ENVIRONMENT_TABLE
        for key in data:
            if key not in TOP_LEVEL_TABLES and key != LEGACY_ENVIRONMENT_TABLE:
                raise ValidationError(
                    f"Unknown table '{key}'. Supported tables are: {', '.join(TOP_LEVEL_TABLES)}",
                    field=key,
                    accepted=TOP_LEVEL_TABLES
                )

        if "pack" not in data:
            raise ValidationError("Manifest is missing the [pack] table", field="pack")
        if env_key not in data:
            raise ValidationError("Manifest is missing the [environment] table", field="environment")

        files: Dict[FileLocation, List[str]] = {}
        for location, patterns in _require_table(data.get("files", {}), "files").items():
            if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
                raise ValidationError(
                    f"'files.{location}' must be a list of glob patterns",
                    field=f"files.{location}"
                )
            files[FileLocation.parse(location)] = list(patterns)

        definitions = {}
        for category in Category:
            table = _require_table(data.get(category.table, {}), category.table)
            definitions[category] = {
                name: Definition.from_dict(entry, where=f"{category.table}.{name}")
                for name, entry in table.items()
            }

        return cls(
            pack=Pack.from_dict(data["pack"]),
            environment=Environment.from_dict(data[env_key]),
            files=files,
            mods=definitions[Category.MODS],
            resource_packs=definitions[Category.RESOURCE_PACKS],
            shaders=definitions[Category.SHADERS]
        )

    def __str__(self) -> str:
        return f"{self.pack.name}@{self.pack.version}"
