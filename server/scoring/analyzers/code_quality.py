"""
Code Quality Analyzer for RepoRadar

Pattern rules (debug output, TODO markers, `any` types, empty handlers, long
parameter lists, deep indentation, blank-line runs) plus structural checks:
oversized files, long lines, how much code there is, and whether file names
follow one convention.

Unlike the security table, quality deductions scale with the number of matches,
capped per rule.
"""

import re
from collections import Counter

from ..schemas import CategoryResult, Issue, RepoFile, Severity
from .common import MAX_SCORE, PatternRule, clamp_score, is_code_file, sort_issues


# =============================================================================
# CONFIGURATION
# =============================================================================

# Deduction per match, by severity
MATCH_WEIGHTS = {
    Severity.CRITICAL: 10,
    Severity.WARNING: 6,
    Severity.INFO: 3,
}
MAX_RULE_DEDUCTION = 20

# Config/doc files are not held to code-quality rules
SKIPPED_EXTENSIONS = (".md", ".json", ".yaml", ".yml", ".toml")

LARGE_FILE_LINES = 500
LARGE_FILE_DEDUCTION = 5

LONG_LINE_CHARS = 150
LONG_LINES_ALLOWED = 5
LONG_LINES_DEDUCTION = 8

NAMING_MIN_FILES = 3
NAMING_DOMINANT_RATIO = 0.6
NAMING_DEDUCTION = 8

# (upper bound exclusive, deduction, severity, message template)
LINE_COUNT_BANDS = (
    (50, 30, Severity.WARNING, "Only {lines} lines of code - insufficient implementation"),
    (150, 15, Severity.INFO, "Only {lines} lines of code - minimal implementation"),
    (300, 8, Severity.INFO, "{lines} lines of code - small codebase"),
)


# =============================================================================
# DETECTION RULES
# =============================================================================

QUALITY_RULES = (
    PatternRule(
        re.compile(r"console\.(?:log|debug|info)\("),
        Severity.INFO,
        "Console statement found (remove in production)",
    ),
    PatternRule(
        re.compile(r"TODO|FIXME|HACK|XXX"),
        Severity.INFO,
        "TODO/FIXME comment found",
    ),
    PatternRule(
        re.compile(r"\bany(?:\s|;|,|\))"),
        Severity.WARNING,
        "TypeScript 'any' type usage reduces type safety",
        file_types=(".ts", ".tsx"),
    ),
    PatternRule(
        re.compile(r"catch\s*\(\s*\w*\s*\)\s*\{\s*\}|except[^:\n]*:[ \t]*\n[ \t]*pass\b"),
        Severity.WARNING,
        "Empty catch block - errors silently ignored",
    ),
    PatternRule(
        re.compile(r"(?:function|def)\s+\w+\s*\([^)]{100,}\)"),
        Severity.WARNING,
        "Function with too many parameters",
    ),
    PatternRule(
        re.compile(r"^[ \t]{200,}", re.MULTILINE),
        Severity.INFO,
        "Excessive indentation detected",
    ),
    PatternRule(
        re.compile(r"\n{4,}"),
        Severity.INFO,
        "Multiple consecutive blank lines",
    ),
)


# =============================================================================
# ANALYZER CLASS
# =============================================================================

class CodeQualityAnalyzer:
    """
    Scores code quality from 100 down.

    Rule matches are tallied across every file before deducting, so the per-rule
    cap applies to the repository as a whole.
    """

    def __init__(self, rules: tuple[PatternRule, ...] = QUALITY_RULES):
        self.rules = rules

    def analyze(self, files: list[RepoFile]) -> CategoryResult:
        score = MAX_SCORE
        issues: list[Issue] = []

        rule_matches: Counter[str] = Counter()
        rule_first_file: dict[str, str] = {}
        large_files: list[str] = []
        code_file_count = 0
        total_lines = 0

        for file in files:
            if file.path.endswith(SKIPPED_EXTENSIONS):
                continue

            lines = file.content.split("\n")
            if is_code_file(file.path):
                code_file_count += 1
                total_lines += len(lines)

            if len(lines) > LARGE_FILE_LINES:
                large_files.append(file.path)
                score -= LARGE_FILE_DEDUCTION

            for rule in self.rules:
                if not rule.applies_to(file.path):
                    continue
                matches = rule.count(file.content)
                if matches:
                    rule_matches[rule.message] += matches
                    rule_first_file.setdefault(rule.message, file.path)

            long_lines = sum(1 for line in lines if len(line) > LONG_LINE_CHARS)
            if long_lines > LONG_LINES_ALLOWED:
                score -= LONG_LINES_DEDUCTION
                issues.append(Issue(
                    severity=Severity.INFO,
                    message=f"{long_lines} lines exceed {LONG_LINE_CHARS} characters",
                    file=file.path,
                ))

        if large_files:
            issues.append(Issue(
                severity=Severity.WARNING,
                message=f"Some files exceed {LARGE_FILE_LINES} lines - consider splitting",
                file=large_files[0],
            ))

        for rule in self.rules:
            matches = rule_matches.get(rule.message, 0)
            if not matches:
                continue
            score -= min(MATCH_WEIGHTS[rule.severity] * matches, MAX_RULE_DEDUCTION)
            plural = "s" if matches > 1 else ""
            issues.append(Issue(
                severity=rule.severity,
                message=f"{rule.message} ({matches} occurrence{plural})",
                file=rule_first_file[rule.message],
            ))

        score -= self._check_code_volume(code_file_count, total_lines, issues)
        score -= self._check_naming(files, issues)

        return CategoryResult(score=clamp_score(score), issues=sort_issues(issues))

    def _check_code_volume(self, code_file_count: int, total_lines: int, issues: list[Issue]) -> int:
        """File-count floor and total-line bands. Both can fire."""
        deduction = 0

        if code_file_count == 0:
            deduction += 50
            issues.append(Issue(
                severity=Severity.CRITICAL,
                message="No actual code files found - repository lacks implementation",
            ))
        elif code_file_count == 1:
            deduction += 25
            issues.append(Issue(
                severity=Severity.WARNING,
                message="Only 1 code file found - very minimal codebase",
            ))
        elif code_file_count <= 3:
            deduction += 15
            issues.append(Issue(
                severity=Severity.INFO,
                message="Very few code files - limited codebase",
            ))

        for upper, band_deduction, severity, template in LINE_COUNT_BANDS:
            if total_lines < upper:
                deduction += band_deduction
                issues.append(Issue(severity=severity, message=template.format(lines=total_lines)))
                break

        return deduction

    def _check_naming(self, files: list[RepoFile], issues: list[Issue]) -> int:
        styles = Counter(naming_style(f.path) for f in files)
        total = sum(styles.values())
        if total <= NAMING_MIN_FILES:
            return 0

        dominant = max(styles.values())
        if dominant / total < NAMING_DOMINANT_RATIO:
            issues.append(Issue(
                severity=Severity.INFO,
                message="Inconsistent file naming conventions",
            ))
            return NAMING_DEDUCTION
        return 0


def naming_style(path: str) -> str:
    """Classify a file's base name (extension stripped) by simple character checks."""
    name = re.sub(r"\.[^/.]+$", "", path.rsplit("/", 1)[-1])
    if "-" in name:
        return "kebab"
    if "_" in name:
        return "snake"
    if name[:1].isupper():
        return "pascal"
    return "camel"


def analyze_code_quality(files: list[RepoFile]) -> CategoryResult:
    """Convenience function to run code quality analysis."""
    analyzer = CodeQualityAnalyzer()
    return analyzer.analyze(files)
