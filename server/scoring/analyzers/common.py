"""
Shared pieces for the pattern analyzers: rule records, issue ordering, clamping.
"""

import re
from dataclasses import dataclass

from ..schemas import SEVERITY_ORDER, Issue, RepoFile, Severity


# Extensions that count as "code" for the security and quality floors
CODE_EXTENSIONS = (
    ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".go", ".rs", ".rb",
    ".php", ".c", ".cpp", ".cs", ".swift", ".kt", ".vue", ".svelte",
)

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass(frozen=True)
class PatternRule:
    """A declarative regex rule. `file_types` limits it to paths with those suffixes."""
    pattern: re.Pattern
    severity: Severity
    message: str
    file_types: tuple[str, ...] | None = None

    def applies_to(self, path: str) -> bool:
        return self.file_types is None or path.endswith(self.file_types)

    def count(self, content: str) -> int:
        return sum(1 for _ in self.pattern.finditer(content))


def is_code_file(path: str) -> bool:
    return path.endswith(CODE_EXTENSIONS)


def code_files(files: list[RepoFile]) -> list[RepoFile]:
    return [f for f in files if is_code_file(f.path)]


def sort_issues(issues: list[Issue]) -> list[Issue]:
    """Most severe first; equal severities ordered by message (case-sensitive)."""
    return sorted(issues, key=lambda i: (SEVERITY_ORDER[i.severity], i.message))


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))
