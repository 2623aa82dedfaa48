import asyncio

import pytest

from scoring.schemas import RepoFile, RepositoryInfo, TreeEntry


class FakeRepositorySource:
    """In-memory RepositorySource. Later paths answer first to scramble completion order."""

    def __init__(
        self,
        files: dict[str, str],
        languages: dict[str, int] | None = None,
        repository: RepositoryInfo | None = None,
        fail_paths: tuple[str, ...] = (),
        error: Exception | None = None,
    ):
        self.files = files
        self.languages = languages or {}
        self.repository = repository or RepositoryInfo(
            name="demo",
            full_name="octo/demo",
            description="A demo repository",
            stars=3,
            forks=1,
            url="https://github.com/octo/demo",
            default_branch="main",
        )
        self.fail_paths = fail_paths
        self.error = error
        self.content_requests: list[tuple[str, str | None]] = []

    async def get_repository(self, owner, name):
        if self.error is not None:
            raise self.error
        return self.repository

    async def get_tree(self, owner, name, branch):
        entries = [TreeEntry(path=p, type="blob") for p in self.files]
        return branch, entries

    async def get_file_content(self, owner, name, path, ref=None):
        self.content_requests.append((path, ref))
        paths = list(self.files)
        await asyncio.sleep(0.001 * (len(paths) - paths.index(path)))
        if path in self.fail_paths:
            return ""
        return self.files.get(path, "")

    async def get_languages(self, owner, name):
        return self.languages


class StubGenerator:
    def __init__(self, reply: str = "", error: Exception | None = None, delay: float = 0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def make_source():
    return FakeRepositorySource


@pytest.fixture
def make_generator():
    return StubGenerator


@pytest.fixture
def make_files():
    """Build RepoFiles from (path, content) pairs."""
    def build(*pairs: tuple[str, str]) -> list[RepoFile]:
        return [RepoFile(path=path, content=content) for path, content in pairs]
    return build


def lines_of(text: str, count: int) -> str:
    return "\n".join([text] * count)


@pytest.fixture
def code_lines():
    return lines_of
