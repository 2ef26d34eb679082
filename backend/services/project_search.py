"""Devfolio project search client with paginated fetching."""

import logging

import httpx
from pydantic import ValidationError

from models.schemas.project import Project
from services.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class ProjectSearchClient:
    """Pages through the hackathon's project submissions."""

    def __init__(
        self,
        search_url: str = "https://api.devfolio.co/api/search/projects",
        hackathon_slug: str = "onchain-summer-awards",
        cookie: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.search_url = search_url
        self.hackathon_slug = hackathon_slug
        headers = {
            "Accept": "application/json, text/plain, */*",
            "Content-Type": "application/json",
            "Origin": f"https://{hackathon_slug}.devfolio.co",
            "Referer": f"https://{hackathon_slug}.devfolio.co/",
        }
        if cookie:
            headers["Cookie"] = cookie
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _payload(self, offset: int, size: int) -> dict:
        return {
            "hackathon_slugs": [self.hackathon_slug],
            "q": "",
            "filter": "all",
            "prizes": [],
            "prize_tracks": [],
            "category": [],
            "hashtags": [],
            "tracks": [],
            "from": offset,
            "size": size,
        }

    def _parse_hits(self, hits: list) -> list[Project]:
        """Validate each hit on its own; a malformed record is skipped, not the page."""
        projects: list[Project] = []
        for hit in hits:
            source = hit["_source"]
            try:
                projects.append(Project.model_validate(source))
            except ValidationError as e:
                uuid = source.get("uuid") if isinstance(source, dict) else None
                logger.warning("Skipping malformed project %s: %s", uuid, e)
        return projects

    async def search_projects(self, offset: int = 0, size: int = 20) -> tuple[list[Project], int]:
        """Fetch one page. Returns (projects, total matching)."""
        try:
            response = await self._client.post(self.search_url, json=self._payload(offset, size))
            response.raise_for_status()
            data = response.json()
            hits = data["hits"]
            projects = self._parse_hits(hits["hits"])
            total = int(hits["total"]["value"])
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(f"API request failed: {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise UpstreamFetchError(f"API request failed: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamFetchError(f"Unexpected search API payload: {e}") from e
        return projects, total

    async def fetch_all_projects(self, page_size: int = 100, max_projects: int = 500) -> list[Project]:
        """Page until exhaustion or ``max_projects``.

        A failing page raises UpstreamFetchError carrying the pages already fetched.
        """
        projects: list[Project] = []
        offset = 0
        while True:
            try:
                page, total = await self.search_projects(offset, page_size)
            except UpstreamFetchError as e:
                raise UpstreamFetchError(str(e), partial=projects) from e

            projects.extend(page)
            offset += page_size

            if len(projects) >= max_projects:
                logger.warning("Reached maximum project limit (%d)", max_projects)
                projects = projects[:max_projects]
                break
            # skipped records shorten a page, so paging follows total
            if offset >= total or not page:
                break

        logger.info("Fetched %d projects", len(projects))
        return projects
