"""
RepoRadar Analyzers

Three independent pattern analyzers, each returning a CategoryResult:
- Security: hardcoded credentials, injection risks, insecure transport
- Code Quality: debug leftovers, structure, volume and naming consistency
- Best Practices: README, manifests, tests, license, error handling
"""

from .best_practices import analyze_best_practices
from .code_quality import CodeQualityAnalyzer, analyze_code_quality
from .security import analyze_security

__all__ = [
    "analyze_security",
    "analyze_code_quality",
    "CodeQualityAnalyzer",
    "analyze_best_practices",
]
