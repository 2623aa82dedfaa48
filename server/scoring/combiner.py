"""
Score Combiner

Fixed-weight blend of the three category scores into the overall score.
"""

from .schemas import ScoreBreakdown

# Percent weights; integer math keeps round-half-up exact
SECURITY_WEIGHT = 40
CODE_QUALITY_WEIGHT = 35
BEST_PRACTICES_WEIGHT = 25


def combine(breakdown: ScoreBreakdown) -> int:
    """
    Overall score = round(0.40 * security + 0.35 * quality + 0.25 * practices).

    Halves round up. Category scores are already clamped to [0, 100], so the
    result is too.
    """
    weighted = (
        SECURITY_WEIGHT * breakdown.security.score
        + CODE_QUALITY_WEIGHT * breakdown.code_quality.score
        + BEST_PRACTICES_WEIGHT * breakdown.best_practices.score
    )
    return (weighted + 50) // 100
