import base64
import logging
from urllib.parse import quote

import httpx

from scoring.errors import RateLimitError, RepoFetchError, RepoNotFoundError, looks_rate_limited
from scoring.schemas import RepositoryInfo, TreeEntry

logger = logging.getLogger(__name__)

USER_AGENT = "RepoRadar"


def secondary_branch(branch: str) -> str:
    """Conventional branch to retry the tree fetch against."""
    return "main" if branch == "master" else "master"


def is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    if response.status_code == 403:
        if response.headers.get("x-ratelimit-remaining") == "0":
            return True
        return looks_rate_limited(response.text)
    return False


class GitHubClient:
    """
    GitHub REST v3 client implementing the RepositorySource port.

    Use as an async context manager so the connection pool is closed after the
    scan. A token is optional; without one public repositories still work under
    the anonymous rate limit.
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers=self.headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get_repository(self, owner: str, name: str) -> RepositoryInfo:
        try:
            response = await self.client.get(f"/repos/{owner}/{name}")
        except httpx.HTTPError as e:
            raise RepoFetchError(f"Failed to fetch repository: {e}") from e

        if is_rate_limited(response):
            raise RateLimitError()
        if response.status_code == 404:
            raise RepoNotFoundError(
                f"Repository not found: {owner}/{name}. Make sure the repo exists and is public, "
                "or add a GITHUB_TOKEN for private repos."
            )
        if response.is_error:
            raise RepoFetchError(f"Failed to fetch repository: {response.reason_phrase}")

        try:
            data = response.json()
        except ValueError as e:
            raise RepoFetchError(f"Failed to fetch repository: unreadable response ({e})") from e
        if not isinstance(data, dict):
            raise RepoFetchError("Failed to fetch repository: unexpected response")
        return RepositoryInfo(
            name=data.get("name") or name,
            full_name=data.get("full_name") or f"{owner}/{name}",
            description=data.get("description"),
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
            url=data.get("html_url") or f"https://github.com/{owner}/{name}",
            default_branch=data.get("default_branch") or "main",
        )

    async def _fetch_tree(self, owner: str, name: str, branch: str) -> list[TreeEntry] | None:
        """One tree attempt. None means "try another branch"; rate limiting raises."""
        try:
            response = await self.client.get(
                f"/repos/{owner}/{name}/git/trees/{quote(branch, safe='')}",
                params={"recursive": "1"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Tree fetch for {owner}/{name}@{branch} failed: {e}", extra={"branch": branch})
            return None

        if is_rate_limited(response):
            raise RateLimitError()
        if response.is_error:
            logger.warning(
                f"Tree fetch for {owner}/{name}@{branch} returned {response.status_code}",
                extra={"branch": branch, "status_code": response.status_code},
            )
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Tree for {owner}/{name}@{branch} is not JSON: {e}", extra={"branch": branch})
            return None
        if not isinstance(data, dict):
            return None

        return [
            TreeEntry(path=item["path"], type=item.get("type", "blob"))
            for item in data.get("tree", [])
            if isinstance(item, dict) and "path" in item
        ]

    async def get_tree(self, owner: str, name: str, branch: str) -> tuple[str, list[TreeEntry]]:
        """Listing for `branch`, retried once against the secondary conventional branch."""
        for candidate in (branch, secondary_branch(branch)):
            entries = await self._fetch_tree(owner, name, candidate)
            if entries is not None:
                return candidate, entries
        raise RepoFetchError("Could not fetch repository tree")

    async def get_file_content(self, owner: str, name: str, path: str, ref: str | None = None) -> str:
        """Decoded file text; any failure degrades to an empty string."""
        params = {"ref": ref} if ref else None
        try:
            response = await self.client.get(
                f"/repos/{owner}/{name}/contents/{quote(path)}",
                params=params,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Content fetch failed for {path}: {e}", extra={"path": path})
            return ""

        if response.is_error:
            logger.warning(
                f"Content fetch for {path} returned {response.status_code}",
                extra={"path": path, "status_code": response.status_code},
            )
            return ""

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Content for {path} is not JSON: {e}", extra={"path": path})
            return ""
        encoded = data.get("content") if isinstance(data, dict) else None
        if not encoded:
            return ""
        try:
            return base64.b64decode(encoded).decode("utf-8", errors="replace")
        except ValueError as e:
            logger.warning(f"Could not decode {path}: {e}", extra={"path": path})
            return ""

    async def get_languages(self, owner: str, name: str) -> dict[str, int]:
        try:
            response = await self.client.get(f"/repos/{owner}/{name}/languages")
        except httpx.HTTPError as e:
            logger.warning(f"Languages fetch for {owner}/{name} failed: {e}")
            return {}

        if response.is_error:
            logger.warning(f"Languages fetch for {owner}/{name} returned {response.status_code}")
            return {}

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Languages for {owner}/{name} are not JSON: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {lang: count for lang, count in data.items() if isinstance(count, int)}
