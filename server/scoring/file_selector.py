"""
File Selector for RepoRadar

Picks the bounded, priority-ordered subset of a repository's files that the
analyzers look at. Pure function of the tree listing: the same listing always
yields the same path sequence, because issue records downstream reference files
in this order.
"""

from .schemas import TreeEntry


# =============================================================================
# CONFIGURATION
# =============================================================================

MAX_SELECTED_FILES = 20

# Source/config extensions worth reading (matched with str.endswith)
IMPORTANT_EXTENSIONS = (
    ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".go", ".rs", ".rb",
    ".php", ".c", ".cpp", ".h", ".cs", ".swift", ".kt", ".scala",
    ".vue", ".svelte", ".json", ".yaml", ".yml", ".toml", ".env.example",
    ".md", ".dockerfile", "Dockerfile", ".sql",
)

# Filenames that are always read, wherever they live
IMPORTANT_FILES = frozenset({
    # Manifests
    "package.json", "requirements.txt", "pyproject.toml", "setup.py", "Pipfile",
    "Cargo.toml", "go.mod", "pom.xml", "build.gradle", "Gemfile", "composer.json",
    # Docs and licensing
    "README.md", "readme.md", "README", "README.rst", "LICENSE", "LICENSE.md", "LICENSE.txt",
    # Environment
    ".env", ".env.example", ".env.sample",
    # Tooling config
    ".gitignore", "tsconfig.json", "next.config.js", "next.config.ts",
    "vite.config.ts", "webpack.config.js",
    # Containers and CI
    "Dockerfile", "docker-compose.yml", "Makefile", "Jenkinsfile",
    ".gitlab-ci.yml", ".travis.yml",
})

# Substrings that mark dependency caches, build output and other noise
NOISE_MARKERS = (
    "node_modules", "dist/", "build/", ".min.", "vendor/",
    "__pycache__", ".git/", "coverage/",
)

TEST_DIRS = frozenset({"test", "tests", "__tests__"})

IMPORTANT_FILE_PRIORITY = 100
DEFAULT_EXTENSION_PRIORITY = 50
MAX_DEPTH_BONUS = 10

# Checked in order; first matching suffix wins
EXTENSION_PRIORITIES = (
    ((".ts", ".tsx"), 80),
    ((".js", ".jsx"), 75),
    ((".py",), 70),
    ((".go", ".rs"), 65),
    ((".java", ".kt"), 60),
)


# =============================================================================
# HELPERS
# =============================================================================

def _file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _is_candidate(path: str) -> bool:
    return path.endswith(IMPORTANT_EXTENSIONS) or _file_name(path) in IMPORTANT_FILES


def _is_noise(path: str) -> bool:
    if any(marker in path for marker in NOISE_MARKERS):
        return True
    directories = path.split("/")[:-1]
    return any(part in TEST_DIRS for part in directories)


def file_priority(path: str) -> int:
    """
    Priority of a path (higher = analyzed first).

    Known config/doc filenames get a fixed top priority; everything else gets an
    extension-keyed base plus a bonus for sitting close to the repository root.
    """
    if _file_name(path) in IMPORTANT_FILES:
        return IMPORTANT_FILE_PRIORITY

    depth = len(path.split("/"))
    depth_bonus = max(0, MAX_DEPTH_BONUS - depth)

    for suffixes, base in EXTENSION_PRIORITIES:
        if path.endswith(suffixes):
            return base + depth_bonus
    return DEFAULT_EXTENSION_PRIORITY + depth_bonus


# =============================================================================
# SELECTION
# =============================================================================

def select_files(listing: list[TreeEntry], limit: int = MAX_SELECTED_FILES) -> list[str]:
    """
    Rank a raw tree listing and return the paths to analyze.

    Directories, unrecognized file types and noise directories are dropped; the
    rest is sorted by priority (descending) then path (ascending) and capped.
    """
    candidates = [
        entry.path
        for entry in listing
        if entry.type == "blob" and _is_candidate(entry.path) and not _is_noise(entry.path)
    ]
    # A path listed twice is still one file
    candidates = sorted(set(candidates), key=lambda p: (-file_priority(p), p))
    return candidates[:limit]
