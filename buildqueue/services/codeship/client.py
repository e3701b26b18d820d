"""
Codeship API v2 client for build listing and lookup.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from buildqueue.core.exceptions import (
    AuthenticationError,
    CodeshipAPIError,
    OrganizationNotFoundError,
)
from buildqueue.core.logging import get_logger
from buildqueue.models.build import PAGE_SIZE, Build, BuildPage

logger = get_logger(__name__)


class CodeshipClient:
    """Client for Codeship API operations on a single organization."""

    BASE_URL = "https://api.codeship.com/v2"

    def __init__(
        self,
        username: str,
        password: str,
        organization: str,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._username = username
        self._password = password
        self._organization = organization
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._timeout = timeout
        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self._access_token: str | None = None
        self._expires_at: float = 0
        self._organization_id: str | None = None

    @property
    def organization_id(self) -> str | None:
        return self._organization_id

    def _token_expired(self) -> bool:
        return self._access_token is None or time.time() >= self._expires_at

    async def authenticate(self) -> str:
        """
        Exchange credentials for an access token and resolve the organization.

        Returns:
            UUID of the configured organization

        Raises:
            AuthenticationError: If Codeship rejects the credentials
            OrganizationNotFoundError: If the organization is not accessible
            CodeshipAPIError: If the request fails for any other reason
        """
        url = f"{self._base_url}/auth"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    url,
                    headers=self._headers,
                    auth=(self._username, self._password),
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Codeship auth error %s: %s", exc.response.status_code, exc.response.text)
            if exc.response.status_code in (401, 403):
                raise AuthenticationError("Codeship rejected the credentials") from exc
            raise CodeshipAPIError(f"Codeship auth error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise CodeshipAPIError(f"Codeship auth request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise CodeshipAPIError("Codeship auth returned invalid JSON") from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthenticationError("Codeship auth returned no access token")

        self._access_token = token
        self._expires_at = float(data.get("expires_at") or 0)

        wanted = self._organization.lower()
        for org in data.get("organizations") or []:
            if str(org.get("name", "")).lower() == wanted:
                self._organization_id = org.get("uuid")
                break
        else:
            raise OrganizationNotFoundError(
                f"Organization '{self._organization}' not found for these credentials"
            )

        logger.debug("Authenticated against organization %s", self._organization_id)
        return self._organization_id

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        if self._token_expired() or self._organization_id is None:
            await self.authenticate()

        url = f"{self._base_url}/organizations/{self._organization_id}{path}"
        headers = {**self._headers, "Authorization": f"Bearer {self._access_token}"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, headers=headers, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Codeship API error %s: %s", exc.response.status_code, exc.response.text)
            raise CodeshipAPIError(f"Codeship API error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Codeship API request failed: %s", exc)
            raise CodeshipAPIError(f"Codeship API request failed: {exc}") from exc

        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise CodeshipAPIError("Codeship API returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise CodeshipAPIError("Codeship API returned unexpected payload")

        return data

    @staticmethod
    def _page_from_link(link: dict[str, str] | None) -> int | None:
        if not link or not link.get("url"):
            return None
        raw = httpx.URL(link["url"]).params.get("page")
        try:
            return int(raw) if raw is not None else None
        except ValueError:
            return None

    async def list_builds(
        self,
        project_id: str,
        page: int = 1,
        per_page: int = PAGE_SIZE,
    ) -> BuildPage:
        """
        List one page of builds for a project, newest first.

        Args:
            project_id: Project UUID
            page: Page number, starting at 1
            per_page: Number of builds per page

        Returns:
            BuildPage with pagination read from the Link header

        Raises:
            CodeshipAPIError: If API call fails
        """
        response = await self._get(
            f"/projects/{project_id}/builds",
            params={"page": page, "per_page": per_page},
        )
        data = self._json(response)

        builds = [Build.from_api(item) for item in data.get("builds") or []]
        links = response.links
        next_link = links.get("next")

        return BuildPage(
            builds=builds,
            has_next=bool(next_link and next_link.get("url")),
            is_last_page="last" not in links,
            next_page=self._page_from_link(next_link),
        )

    async def get_build(self, project_id: str, build_id: str) -> Build:
        """
        Fetch the current state of a single build.

        Raises:
            CodeshipAPIError: If API call fails
        """
        response = await self._get(f"/projects/{project_id}/builds/{build_id}")
        data = self._json(response)

        build = data.get("build")
        if not isinstance(build, dict):
            raise CodeshipAPIError("Codeship API returned no build")

        return Build.from_api(build)
