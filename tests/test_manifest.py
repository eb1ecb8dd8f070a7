# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for the Manifest Model

Tests parsing of the podzol.toml document shape, validation of every
closed token, immutability and build contexts.
"""

import pytest

from podzol.core.errors import ValidationError
from podzol.models.enums import Category, FileLocation, Loader, Side
from podzol.models.manifest import Definition, Environment, Manifest, Pack


@pytest.fixture
def manifest_data():
    return {
        "pack": {"name": "cozy", "version": "1.2.0", "description": "A cozy pack"},
        "environment": {"minecraft": "1.20.1", "fabric": "0.15.0"},
        "files": {"common": ["config/*.json"], "client": ["options.txt"]},
        "mods": {
            "sodium": {"version": "mc1.20.1-0.5.8", "side": "client"},
            "lithium": {"version": "mc1.20.1-0.11.2"},
        },
        "resource-packs": {"faithful": {"version": "1.20-32x", "side": "client"}},
        "shaders": {},
    }


class TestPack:
    """Test suite for Pack"""

    def test_empty_name(self):
        """Test that empty name raises error"""
        with pytest.raises(ValidationError, match="name cannot be empty"):
            Pack(name="", version="1.0.0")

    def test_description_optional(self):
        pack = Pack.from_dict({"name": "p", "version": "1"})
        assert pack.description is None
        assert pack.to_dict() == {"name": "p", "version": "1"}

    def test_missing_version(self):
        with pytest.raises(ValidationError, match="pack.version"):
            Pack.from_dict({"name": "p"})


class TestEnvironment:
    """Test suite for Environment"""

    def test_flattened_loaders(self):
        env = Environment.from_dict({"minecraft": "1.20.1", "fabric": "0.15.0", "quilt": "0.20.0"})

        assert env.minecraft == "1.20.1"
        assert env.loaders == {Loader.FABRIC: "0.15.0", Loader.QUILT: "0.20.0"}

    def test_unknown_loader(self):
        with pytest.raises(ValidationError, match="Unknown loader 'liteloader'"):
            Environment.from_dict({"minecraft": "1.20.1", "liteloader": "1.0"})

    def test_missing_minecraft(self):
        with pytest.raises(ValidationError, match="environment.minecraft"):
            Environment.from_dict({"fabric": "0.15.0"})

    def test_dependencies_minecraft_first(self):
        env = Environment(minecraft="1.20.1", loaders={Loader.NEOFORGE: "20.4.1", Loader.FABRIC: "0.15.0"})

        deps = env.dependencies()

        assert list(deps) == ["minecraft", "fabric-loader", "neoforge"]
        assert deps == {"minecraft": "1.20.1", "fabric-loader": "0.15.0", "neoforge": "20.4.1"}


class TestDefinition:
    """Test suite for Definition"""

    def test_side_is_optional(self):
        definition = Definition.from_dict({"version": "abc"})
        assert definition.side is None
        assert definition.to_dict() == {"version": "abc"}

    def test_explicit_side(self):
        definition = Definition.from_dict({"version": "abc", "side": "server"})
        assert definition.side is Side.SERVER
        assert definition.to_dict() == {"version": "abc", "side": "server"}

    def test_invalid_side(self):
        with pytest.raises(ValidationError, match="Unknown side 'both-ish'"):
            Definition.from_dict({"version": "abc", "side": "both-ish"})

    def test_definition_must_be_table(self):
        with pytest.raises(ValidationError, match="must be a table"):
            Definition.from_dict("1.0.0", where="mods.sodium")


class TestManifest:
    """Test suite for Manifest"""

    def test_from_dict(self, manifest_data):
        manifest = Manifest.from_dict(manifest_data)

        assert manifest.pack.name == "cozy"
        assert manifest.environment.loaders == {Loader.FABRIC: "0.15.0"}
        assert manifest.files == {
            FileLocation.COMMON: ["config/*.json"],
            FileLocation.CLIENT: ["options.txt"],
        }
        assert manifest.mods["sodium"] == Definition("mc1.20.1-0.5.8", Side.CLIENT)
        assert manifest.mods["lithium"].side is None
        assert list(manifest.resource_packs) == ["faithful"]
        assert manifest.shaders == {}

    def test_to_dict_round_trip(self, manifest_data):
        manifest = Manifest.from_dict(manifest_data)

        assert Manifest.from_dict(manifest.to_dict()) == manifest

    def test_to_dict_omits_empty_tables(self):
        manifest = Manifest(pack=Pack("p", "1"), environment=Environment("1.20.1"))

        assert manifest.to_dict() == {
            "pack": {"name": "p", "version": "1"},
            "environment": {"minecraft": "1.20.1"},
        }

    def test_legacy_environment_spelling(self, manifest_data):
        manifest_data["enviroment"] = manifest_data.pop("environment")

        manifest = Manifest.from_dict(manifest_data)

        assert manifest.environment.minecraft == "1.20.1"

    def test_both_environment_spellings(self, manifest_data):
        """Should refuse to pick one of two environment tables"""
        manifest_data["enviroment"] = {"minecraft": "1.19.2"}

        with pytest.raises(ValidationError, match=r"both \[environment\] and \[enviroment\]"):
            Manifest.from_dict(manifest_data)

    def test_unknown_table(self, manifest_data):
        manifest_data["datapacks"] = {}

        with pytest.raises(ValidationError, match="Unknown table 'datapacks'"):
            Manifest.from_dict(manifest_data)

    def test_unknown_file_location(self, manifest_data):
        manifest_data["files"] = {"everywhere": ["*.txt"]}

        with pytest.raises(ValidationError, match="Supported locations are: client, server, common"):
            Manifest.from_dict(manifest_data)

    def test_file_patterns_must_be_strings(self, manifest_data):
        manifest_data["files"] = {"common": "config/*.json"}

        with pytest.raises(ValidationError, match="list of glob patterns"):
            Manifest.from_dict(manifest_data)

    def test_missing_pack(self, manifest_data):
        del manifest_data["pack"]

        with pytest.raises(ValidationError, match=r"\[pack\]"):
            Manifest.from_dict(manifest_data)

    def test_components_in_category_order(self, manifest_data):
        manifest_data["shaders"] = {"bsl": {"version": "8.2"}}
        manifest = Manifest.from_dict(manifest_data)

        categories = [category for category, _, _ in manifest.components()]

        assert categories == [Category.MODS, Category.MODS, Category.RESOURCE_PACKS, Category.SHADERS]

    def test_with_definition_returns_new_manifest(self, manifest_data):
        manifest = Manifest.from_dict(manifest_data)

        updated = manifest.with_definition(Category.SHADERS, "bsl", Definition("8.2", Side.CLIENT))

        assert "bsl" in updated.shaders
        assert "bsl" not in manifest.shaders
        assert updated.mods == manifest.mods

    def test_archive_name(self, manifest_data):
        assert Manifest.from_dict(manifest_data).archive_name() == "cozy-1.2.0.mrpack"


class TestBuildContext:
    """Test suite for BuildContext"""

    def test_context_copies_mappings(self, manifest_data):
        manifest = Manifest.from_dict(manifest_data)
        context = manifest.build_context()

        definitions, overrides = context.consume()
        definitions[Category.MODS].clear()
        overrides[FileLocation.COMMON].append("extra/*")

        assert len(manifest.mods) == 2
        assert manifest.files[FileLocation.COMMON] == ["config/*.json"]

    def test_total_items(self, manifest_data):
        assert Manifest.from_dict(manifest_data).build_context().total_items == 3

    def test_context_is_single_use(self, manifest_data):
        context = Manifest.from_dict(manifest_data).build_context()
        context.consume()

        with pytest.raises(RuntimeError, match="already been consumed"):
            context.consume()
