"""
Scan Orchestrator

parse identifier -> metadata -> tree -> select -> fetch contents -> languages
-> analyzers -> combine -> narrative -> AnalysisResult.

Fatal errors (bad identifier, missing repository, no tree on either branch,
upstream rate limiting on metadata/tree) propagate as ScanError subclasses.
Everything else degrades inside the step that hit it.
"""

import asyncio
import logging
import re
import time
from dataclasses import dataclass

from .analyzers import analyze_best_practices, analyze_code_quality, analyze_security
from .combiner import combine
from .errors import InvalidRepoUrlError
from .file_selector import select_files
from .languages import language_distribution
from .narrative import NarrativeContext, generate_narrative
from .ports import RepositorySource, TextGenerator
from .schemas import AnalysisResult, CategoryResult, RepoFile, RepositoryInfo, ScoreBreakdown

logger = logging.getLogger(__name__)

# Issues per category exposed in the final artifact
DISPLAYED_ISSUES = 5
DEFAULT_FETCH_CONCURRENCY = 5

GITHUB_URL_PATTERNS = (
    re.compile(r"github\.com/([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)"),
    re.compile(r"github\.com:([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)"),
)


@dataclass
class ScanResult:
    repository: RepositoryInfo
    analysis: AnalysisResult


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def parse_repo_url(url: str) -> tuple[str, str]:
    """Extract (owner, repo) from an https or ssh GitHub URL."""
    url = url.strip()
    for pattern in GITHUB_URL_PATTERNS:
        match = pattern.search(url)
        if match:
            owner, repo = match.group(1), match.group(2)
            if repo.endswith(".git"):
                repo = repo[:-4]
            if owner and repo:
                return owner, repo
    raise InvalidRepoUrlError("Invalid GitHub URL")


async def fetch_files(
    source: RepositorySource,
    owner: str,
    name: str,
    paths: list[str],
    ref: str | None = None,
    concurrency: int = DEFAULT_FETCH_CONCURRENCY,
) -> list[RepoFile]:
    """
    Fetch contents concurrently and return them in `paths` order.

    Files that come back empty (including failed fetches) are left out.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def fetch(path: str) -> tuple[str, str]:
        async with semaphore:
            return path, await source.get_file_content(owner, name, path, ref)

    contents = dict(await asyncio.gather(*(fetch(p) for p in paths)))
    return [RepoFile(path=p, content=contents[p]) for p in paths if contents.get(p)]


def truncate_issues(result: CategoryResult, limit: int = DISPLAYED_ISSUES) -> CategoryResult:
    return CategoryResult(score=result.score, issues=result.issues[:limit])


def analyze_files(files: list[RepoFile], repo: RepositoryInfo | None = None) -> ScoreBreakdown:
    """Run the three analyzers over an already-fetched file set."""
    return ScoreBreakdown(
        security=analyze_security(files),
        code_quality=analyze_code_quality(files),
        best_practices=analyze_best_practices(files, repo),
    )


# =============================================================================
# ORCHESTRATION
# =============================================================================

@dataclass
class ScannedRepository:
    """Algorithmic results, complete before the narrative step starts."""
    repository: RepositoryInfo
    branch: str
    selected_paths: list[str]
    files: list[RepoFile]
    languages: dict[str, int]
    breakdown: ScoreBreakdown
    overall_score: int


async def scan_repository(
    owner: str,
    name: str,
    source: RepositorySource,
    concurrency: int = DEFAULT_FETCH_CONCURRENCY,
) -> ScannedRepository:
    """Fetch, select, analyze and combine. Everything up to, but not including, the narrative."""
    repository = await source.get_repository(owner, name)
    branch, tree = await source.get_tree(owner, name, repository.default_branch)

    paths = select_files(tree)
    files = await fetch_files(source, owner, name, paths, ref=branch, concurrency=concurrency)
    languages = language_distribution(await source.get_languages(owner, name))

    breakdown = analyze_files(files, repository)
    return ScannedRepository(
        repository=repository,
        branch=branch,
        selected_paths=paths,
        files=files,
        languages=languages,
        breakdown=breakdown,
        overall_score=combine(breakdown),
    )


async def run_scan(
    url: str,
    source: RepositorySource,
    generator: TextGenerator | None = None,
    concurrency: int = DEFAULT_FETCH_CONCURRENCY,
    timeout: float | None = None,
) -> ScanResult:
    """
    Scan one repository end to end.

    `timeout` bounds the whole scan. Running out of it while fetching or
    analyzing raises asyncio.TimeoutError; the narrative only gets whatever time
    is left, and running out there yields the fallback narrative instead.
    """
    started = time.monotonic()
    owner, name = parse_repo_url(url)
    slug = f"{owner}/{name}"
    logger.info(f"Scanning {slug}", extra={"repo": slug})

    scanned = await asyncio.wait_for(scan_repository(owner, name, source, concurrency), timeout)

    remaining = None
    if timeout is not None:
        remaining = max(0.0, timeout - (time.monotonic() - started))

    narrative = await generate_narrative(generator, NarrativeContext(
        repo_name=scanned.repository.name,
        description=scanned.repository.description,
        languages=scanned.languages,
        file_paths=[f.path for f in scanned.files],
        breakdown=scanned.breakdown,
        overall_score=scanned.overall_score,
    ), timeout=remaining)

    breakdown = scanned.breakdown
    analysis = AnalysisResult(
        overall_score=scanned.overall_score,
        summary=narrative.summary,
        code_quality=truncate_issues(breakdown.code_quality),
        security=truncate_issues(breakdown.security),
        best_practices=truncate_issues(breakdown.best_practices),
        recommendations=narrative.recommendations,
        languages=scanned.languages,
    )

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(
        f"Scanned {slug}: {len(scanned.files)}/{len(scanned.selected_paths)} files, "
        f"overall {scanned.overall_score}",
        extra={"repo": slug, "branch": scanned.branch, "duration_ms": duration_ms},
    )
    return ScanResult(repository=scanned.repository, analysis=analysis)
