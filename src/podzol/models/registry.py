# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Registry Data Models

Response shapes of the Modrinth v2 API, limited to the fields the pack
builder reads. Unknown fields are ignored.
"""

from typing import List, Dict
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from podzol.core.errors import ValidationError
from podzol.models.enums import Requirement, Side, VersionType, derive_side


def _parse(enum_cls, value):
    # pydantic only wraps ValueError into its own validation error
    try:
        return enum_cls.parse(value)
    except ValidationError as e:
        raise ValueError(e.message)


class RegistryModel(BaseModel):
    """Base for registry responses"""
    model_config = ConfigDict(extra="ignore")


class GameVersion(RegistryModel):
    """Entry of /tag/game_version"""
    version: str
    version_type: VersionType
    date: datetime
    major: bool = False

    @field_validator("version_type", mode="before")
    @classmethod
    def _parse_version_type(cls, value):
        return _parse(VersionType, value)


class Project(RegistryModel):
    """Side requirements of a project"""
    client_side: Requirement
    server_side: Requirement

    @field_validator("client_side", "server_side", mode="before")
    @classmethod
    def _parse_requirement(cls, value):
        return _parse(Requirement, value)

    def get_side(self) -> Side:
        return derive_side(self.client_side, self.server_side)


class RegistryFile(RegistryModel):
    """A file attached to a project version"""
    hashes: Dict[str, str] = Field(default_factory=dict)
    url: str
    filename: str
    size: int = Field(ge=0)
    primary: bool = False


class Version(RegistryModel):
    """A project version and its files"""
    version_number: str
    files: List[RegistryFile] = Field(default_factory=list)

    def primary_files(self) -> List[RegistryFile]:
        """Files flagged primary; everything else is ignored by the builder"""
        return [f for f in self.files if f.primary]
