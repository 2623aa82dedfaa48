"""
Best Practices Analyzer for RepoRadar

Checks for the project furniture a maintained repository usually has: README,
.gitignore, dependency manifest, tsconfig for TypeScript, an env example when
env vars are read, tests, a license, error handling, and guarded async code.

Works on lowercased file names and the concatenated text of every selected file.
"""

import logging
import re

from ..schemas import CategoryResult, Issue, RepoFile, RepositoryInfo, Severity
from .common import MAX_SCORE, sort_issues

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

README_MINIMAL_CHARS = 500
README_SHORT_CHARS = 1000

DEPENDENCY_MANIFESTS = (
    "package.json", "requirements.txt", "pyproject.toml", "setup.py", "pipfile",
    "cargo.toml", "go.mod", "pom.xml", "build.gradle", "gemfile", "composer.json",
)

ENV_EXAMPLE_MARKERS = (".env.example", ".env.sample")
ENV_ACCESS_MARKERS = ("process.env", "os.environ", "getenv")

TEST_NAME_MARKERS = ("test", "spec", "__tests__")
TEST_CALL_PATTERN = re.compile(r"\b(?:describe|it|test)\(")

ERROR_HANDLING_MARKERS = ("try {", "try{", "catch", ".catch(", "except ")

ASYNC_DEF_PATTERN = re.compile(r"async\s+function|async\s*\(|async\s+def\b")
AWAIT_PATTERN = re.compile(r"await\s+")
TRY_PATTERN = re.compile(r"try\s*\{|\btry\s*:")
AWAIT_THRESHOLD = 3
GUARDED_ASYNC_RATIO = 0.3


# =============================================================================
# CHECKS
# =============================================================================

def _check_readme(files: list[RepoFile]) -> tuple[int, list[Issue]]:
    readme = next((f for f in files if "readme" in f.path.lower()), None)
    if readme is None:
        return 20, [Issue(severity=Severity.WARNING, message="No README.md file found")]
    if len(readme.content) < README_MINIMAL_CHARS:
        return 15, [Issue(
            severity=Severity.WARNING,
            message="README is too minimal (< 500 chars) - needs better documentation",
        )]
    if len(readme.content) < README_SHORT_CHARS:
        return 8, [Issue(severity=Severity.INFO, message="README could be more comprehensive")]
    return 0, []


def _check_async_guarding(all_content: str) -> tuple[int, list[Issue]]:
    """Flag async code where try blocks are scarce relative to async definitions."""
    async_defs = len(ASYNC_DEF_PATTERN.findall(all_content))
    awaits = len(AWAIT_PATTERN.findall(all_content))
    if async_defs == 0 and awaits <= AWAIT_THRESHOLD:
        return 0, []

    guards = len(TRY_PATTERN.findall(all_content))
    if guards < async_defs * GUARDED_ASYNC_RATIO:
        return 10, [Issue(severity=Severity.WARNING, message="Async code lacks proper error handling")]
    return 0, []


def analyze_best_practices(files: list[RepoFile], repo: RepositoryInfo | None = None) -> CategoryResult:
    """
    Run the best-practices checks.

    Args:
        files: Selected repository files
        repo: Repository metadata, used for log context

    Returns:
        CategoryResult floored at 0
    """
    score = MAX_SCORE
    issues: list[Issue] = []

    names = [f.path.lower() for f in files]
    all_content = "\n".join(f.content for f in files)

    def has_name(*markers: str) -> bool:
        return any(marker in name for name in names for marker in markers)

    deduction, readme_issues = _check_readme(files)
    score -= deduction
    issues.extend(readme_issues)

    if not has_name(".gitignore"):
        score -= 15
        issues.append(Issue(severity=Severity.WARNING, message="No .gitignore file found"))

    if not has_name(*DEPENDENCY_MANIFESTS):
        score -= 10
        issues.append(Issue(severity=Severity.INFO, message="No dependency/package management file found"))

    has_typescript = any(name.endswith((".ts", ".tsx")) for name in names)
    if has_typescript and not has_name("tsconfig"):
        score -= 12
        issues.append(Issue(severity=Severity.WARNING, message="TypeScript files without tsconfig.json"))

    uses_env = any(marker in all_content for marker in ENV_ACCESS_MARKERS)
    if uses_env and not has_name(*ENV_EXAMPLE_MARKERS):
        score -= 12
        issues.append(Issue(
            severity=Severity.WARNING,
            message="Uses environment variables but no .env.example file",
        ))

    has_tests = has_name(*TEST_NAME_MARKERS) or TEST_CALL_PATTERN.search(all_content) is not None
    if not has_tests:
        score -= 20
        issues.append(Issue(severity=Severity.WARNING, message="No test files detected - testing is critical"))

    if not has_name("license"):
        score -= 10
        issues.append(Issue(severity=Severity.INFO, message="No LICENSE file found"))

    if not any(marker in all_content for marker in ERROR_HANDLING_MARKERS):
        score -= 15
        issues.append(Issue(severity=Severity.WARNING, message="No error handling patterns detected"))

    deduction, async_issues = _check_async_guarding(all_content)
    score -= deduction
    issues.extend(async_issues)

    if repo is not None:
        logger.debug(f"Best practices for {repo.full_name}: {len(issues)} issues")

    return CategoryResult(score=max(0, score), issues=sort_issues(issues))
