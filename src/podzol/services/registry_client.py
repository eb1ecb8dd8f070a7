# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Modrinth Registry Client - resolves project names and version ids to files.

Provides:
- Game version listing (for ``init``)
- Project side requirements
- Candidate versions filtered by game version and loaders (for ``add``)
- Exact version lookup (for builds)

One client wraps one httpx.AsyncClient and is shared by every concurrent
resolution task. Transport settings come from the Config passed in.
"""

import json
from typing import Any, Iterable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError

from podzol.core.config import Config
from podzol.core.errors import NotFoundError, RegistryError
from podzol.core.logging import get_service_logger
from podzol.models.enums import Loader
from podzol.models.registry import GameVersion, Project, Version

logger = get_service_logger("registry_client")

M = TypeVar("M", bound=BaseModel)


class ModrinthClient:
    """
    Async client for the Modrinth v2 API.

    Responsibilities:
    - Build requests against the configured registry URL
    - Map transport failures and bad responses to RegistryError
    - Validate response bodies into registry models
    """

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize Modrinth client.

        Args:
            config: Application configuration (URL, timeouts, TLS settings)
            transport: Optional httpx transport, used by tests
        """
        self.config = config
        self.base_url = config.registry_url.rstrip("/")
        self.timeout = httpx.Timeout(config.http_timeout, connect=config.http_connect_timeout)

        client_kwargs = {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "headers": {"User-Agent": config.user_agent},
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        else:
            client_kwargs["verify"] = config.tls_verify

        self._http = httpx.AsyncClient(**client_kwargs)

        logger.debug(f"ModrinthClient initialized for {self.base_url}")

    async def __aenter__(self) -> "ModrinthClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_platform_versions(self) -> List[GameVersion]:
        """List every known game version"""
        data = await self._get_json("/tag/game_version", resource="Game versions", identifier="*")
        return self._parse_list(GameVersion, data, "/tag/game_version")

    async def get_project(self, name: str) -> Project:
        """
        Get a project's client/server requirements.

        Raises:
            NotFoundError: If the project does not exist
            RegistryError: On any other transport or response failure
        """
        path = f"/project/{name}"
        data = await self._get_json(path, resource="Project", identifier=name)
        return self._parse(Project, data, path)

    async def list_candidate_versions(
        self,
        name: str,
        platform_version: str,
        loaders: Iterable[Loader]
    ) -> List[Version]:
        """
        List versions of a project compatible with a game version and loaders.

        ``minecraft`` is always included as a loader so that resource packs
        and shaders, which Modrinth files under that loader, also match.
        The registry gives no ordering guarantee for the result.
        """
        loader_set = set(loaders)
        loader_tokens = ["minecraft"] + [l.value for l in Loader if l in loader_set]
        path = f"/project/{name}/version"
        params = {
            "loaders": json.dumps(loader_tokens),
            "game_versions": json.dumps([platform_version]),
        }
        data = await self._get_json(path, resource="Project", identifier=name, params=params)
        return self._parse_list(Version, data, path)

    async def get_version(self, name: str, version_id: str) -> Version:
        """
        Get one specific version of a project.

        Raises:
            NotFoundError: If the project or version does not exist
            RegistryError: On any other transport or response failure
        """
        path = f"/project/{name}/version/{version_id}"
        data = await self._get_json(path, resource="Version", identifier=f"{name}@{version_id}")
        return self._parse(Version, data, path)

    # Private helper methods

    async def _get_json(
        self,
        path: str,
        resource: str,
        identifier: str,
        params: Optional[dict] = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Registry request failed for {url}: {e}")
            raise RegistryError(f"Registry request failed: {e}", url=url)

        if response.status_code == 404:
            raise NotFoundError(resource, identifier, url=url)

        if not response.is_success:
            logger.error(f"Registry returned HTTP {response.status_code} for {url}")
            raise RegistryError(
                f"Registry returned HTTP {response.status_code} for {path}",
                url=url,
                status_code=response.status_code,
                details={"body": response.text[:200]}
            )

        try:
            return response.json()
        except ValueError as e:
            raise RegistryError(f"Registry returned malformed JSON for {path}: {e}", url=url)

    def _parse(self, model: Type[M], data: Any, path: str) -> M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise RegistryError(
                f"Unexpected registry response for {path}: {e.error_count()} validation error(s)",
                url=f"{self.base_url}{path}",
                details={"errors": e.errors(include_url=False)}
            )

    def _parse_list(self, model: Type[M], data: Any, path: str) -> List[M]:
        try:
            return TypeAdapter(List[model]).validate_python(data)
        except PydanticValidationError as e:
            raise RegistryError(
                f"Unexpected registry response for {path}: {e.error_count()} validation error(s)",
                url=f"{self.base_url}{path}",
                details={"errors": e.errors(include_url=False)}
            )
