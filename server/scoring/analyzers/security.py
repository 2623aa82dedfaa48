"""
Security Analyzer for RepoRadar

Scans the selected files with a fixed table of regex rules for hardcoded
credentials, dynamic execution, HTML injection, string-built SQL, plaintext HTTP
and disabled TLS verification.

Each rule counts once per scan: the first file that matches records the issue
and later matches of the same rule are ignored. A committed .env file is an
extra critical issue on top of the table.
"""

import re

from ..schemas import CategoryResult, Issue, RepoFile, Severity
from .common import MAX_SCORE, PatternRule, clamp_score, code_files, sort_issues


# =============================================================================
# CONFIGURATION
# =============================================================================

SEVERITY_DEDUCTIONS = {
    Severity.CRITICAL: 30,
    Severity.WARNING: 15,
    Severity.INFO: 8,
}

ENV_FILE_DEDUCTION = 25

# Score given when there is no code to judge
UNASSESSABLE_SCORE = 50

# Path fragments never scanned (docs, plain text, tests)
SKIP_PATH_MARKERS = (".md", ".txt", "test")


# =============================================================================
# DETECTION RULES
# =============================================================================

SECURITY_RULES = (
    # Hardcoded credentials
    PatternRule(
        re.compile(r'''api[_-]?key\s*[:=]\s*["'][^"']+["']''', re.IGNORECASE),
        Severity.CRITICAL,
        "Hardcoded API key detected",
    ),
    PatternRule(
        re.compile(r'''password\s*[:=]\s*["'][^"']+["']''', re.IGNORECASE),
        Severity.CRITICAL,
        "Hardcoded password detected",
    ),
    PatternRule(
        re.compile(r'''secret\s*[:=]\s*["'][^"']+["']''', re.IGNORECASE),
        Severity.CRITICAL,
        "Hardcoded secret detected",
    ),
    PatternRule(
        re.compile(r'''private[_-]?key\s*[:=]\s*["'][^"']+["']''', re.IGNORECASE),
        Severity.CRITICAL,
        "Hardcoded private key detected",
    ),
    PatternRule(
        re.compile(r"Bearer\s+[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+"),
        Severity.CRITICAL,
        "Hardcoded JWT token detected",
    ),
    # Dynamic execution and HTML injection
    PatternRule(
        re.compile(r"eval\s*\("),
        Severity.WARNING,
        "Use of eval() - potential code injection risk",
    ),
    PatternRule(
        re.compile(r"dangerouslySetInnerHTML"),
        Severity.WARNING,
        "dangerouslySetInnerHTML usage - XSS risk",
    ),
    PatternRule(
        re.compile(r"innerHTML\s*="),
        Severity.WARNING,
        "Direct innerHTML assignment - XSS risk",
    ),
    PatternRule(
        re.compile(r"exec\s*\("),
        Severity.WARNING,
        "Shell command execution detected",
    ),
    # String-built SQL
    PatternRule(
        re.compile(r"SELECT\s+.*\s+FROM\s+.*\s+WHERE.*\+", re.IGNORECASE),
        Severity.WARNING,
        "Potential SQL injection vulnerability",
    ),
    # Transport
    PatternRule(
        re.compile(r"http://(?!localhost|127\.0\.0\.1)"),
        Severity.INFO,
        "Non-HTTPS URL detected",
    ),
    PatternRule(
        re.compile(r"disabled?.*ssl|verify.*false", re.IGNORECASE),
        Severity.WARNING,
        "SSL verification may be disabled",
    ),
)


# =============================================================================
# ANALYZER
# =============================================================================

def _is_env_file(path: str) -> bool:
    return path == ".env" or path.endswith("/.env")


def analyze_security(files: list[RepoFile]) -> CategoryResult:
    """
    Run the security rule table over the selected files.

    Returns a fixed 50 with a single informational issue when the selection holds
    no code at all, so doc-only repositories are not rewarded with a clean score.
    """
    if not code_files(files):
        return CategoryResult(
            score=UNASSESSABLE_SCORE,
            issues=[Issue(
                severity=Severity.INFO,
                message="No code files to assess for security vulnerabilities",
            )],
        )

    score = MAX_SCORE
    issues: list[Issue] = []
    seen: set[str] = set()

    for file in files:
        if any(marker in file.path for marker in SKIP_PATH_MARKERS):
            continue

        for rule in SECURITY_RULES:
            if rule.message in seen:
                continue
            if rule.pattern.search(file.content):
                seen.add(rule.message)
                score -= SEVERITY_DEDUCTIONS[rule.severity]
                issues.append(Issue(severity=rule.severity, message=rule.message, file=file.path))

    env_file = next((f for f in files if _is_env_file(f.path)), None)
    if env_file is not None:
        score -= ENV_FILE_DEDUCTION
        issues.append(Issue(
            severity=Severity.CRITICAL,
            message=".env file should not be committed to repository",
            file=env_file.path,
        ))

    return CategoryResult(score=clamp_score(score), issues=sort_issues(issues))
