"""
Capabilities the pipeline needs from the outside world.

The deterministic core never talks to the network itself; the orchestrator is
handed objects satisfying these protocols (GitHubClient and GeminiTextGenerator
in production, stubs in tests).
"""

from typing import Protocol

from .schemas import RepositoryInfo, TreeEntry


class RepositorySource(Protocol):
    async def get_repository(self, owner: str, name: str) -> RepositoryInfo:
        """Repository metadata. Raises RepoNotFoundError / RepoFetchError / RateLimitError."""
        ...

    async def get_tree(self, owner: str, name: str, branch: str) -> tuple[str, list[TreeEntry]]:
        """Flat recursive listing and the branch it came from. Raises on failure."""
        ...

    async def get_file_content(self, owner: str, name: str, path: str, ref: str | None = None) -> str:
        """Decoded text of one file, or "" when it cannot be fetched."""
        ...

    async def get_languages(self, owner: str, name: str) -> dict[str, int]:
        """Language -> byte count, or {} when unavailable."""
        ...


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        """Return the model's raw text reply for `prompt`."""
        ...
