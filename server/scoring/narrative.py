"""
Narrative Generator

Asks a text-generation model for a short summary and three recommendations
based on the algorithmic results. The model only adds prose: scores and issue
lists are never touched here, and any failure (no model configured, call error
or timeout, rate limiting, malformed reply) yields the templated fallback instead.
"""

import asyncio
import json
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from .ports import TextGenerator
from .schemas import Narrative, ScoreBreakdown

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PROMPT_ISSUES = 10
RECOMMENDATION_COUNT = 3

FALLBACK_RECOMMENDATIONS = (
    "Review and address any security issues found",
    "Improve code organization and documentation",
    "Add comprehensive test coverage",
)

CODE_FENCE = re.compile(r"```(?:json)?\s*")
JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class NarrativeFormatError(ValueError):
    """The model replied, but not with the expected JSON object."""


@dataclass(frozen=True)
class NarrativeContext:
    """Everything the prompt is built from."""
    repo_name: str
    description: str | None
    languages: dict[str, int]
    file_paths: list[str]
    breakdown: ScoreBreakdown
    overall_score: int


# =============================================================================
# PROMPT
# =============================================================================

def collect_prompt_issues(breakdown: ScoreBreakdown) -> list[str]:
    """Security issues first, then quality, then practices; first 10 overall."""
    tagged = (
        [f"[Security] {i.message}" for i in breakdown.security.issues]
        + [f"[Quality] {i.message}" for i in breakdown.code_quality.issues]
        + [f"[Practices] {i.message}" for i in breakdown.best_practices.issues]
    )
    return tagged[:MAX_PROMPT_ISSUES]


def build_prompt(context: NarrativeContext) -> str:
    breakdown = context.breakdown
    languages = ", ".join(f"{lang}: {pct}%" for lang, pct in context.languages.items())
    issues = collect_prompt_issues(breakdown)
    issue_block = "\n".join(issues) if issues else "No major issues detected"

    return f"""Based on this GitHub repo analysis, write a brief summary and 3 specific recommendations.

Repo: {context.repo_name}
Description: {context.description or "No description"}
Languages: {languages}
Files analyzed: {", ".join(context.file_paths)}

Algorithmic Analysis Results:
- Security Score: {breakdown.security.score}/100
- Code Quality Score: {breakdown.code_quality.score}/100
- Best Practices Score: {breakdown.best_practices.score}/100
- Overall Score: {context.overall_score}/100

Issues Found:
{issue_block}

Return JSON only (no markdown):
{{"summary":"<2-3 sentence summary based on the scores and issues>","recommendations":["<specific actionable recommendation 1>","<specific actionable recommendation 2>","<specific actionable recommendation 3>"]}}"""


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def fallback_narrative(context: NarrativeContext) -> Narrative:
    return Narrative(
        summary=(
            f"Repository analyzed with {len(context.file_paths)} files. "
            f"Overall score: {context.overall_score}/100."
        ),
        recommendations=list(FALLBACK_RECOMMENDATIONS),
    )


def parse_narrative(text: str, context: NarrativeContext) -> Narrative:
    """
    Parse the model reply into a Narrative.

    Markdown code fences are stripped first. A blank summary takes the fallback
    summary; fewer than three usable recommendations are padded from the generic
    list. Anything that is not a JSON object raises NarrativeFormatError.
    """
    cleaned = CODE_FENCE.sub("", text).strip()
    # Tolerate chatter around the object
    match = JSON_OBJECT.search(cleaned)
    if match:
        cleaned = match.group(0)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise NarrativeFormatError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise NarrativeFormatError(f"Expected a JSON object, got {type(data).__name__}")

    fallback = fallback_narrative(context)

    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = fallback.summary

    raw_recommendations = data.get("recommendations")
    if not isinstance(raw_recommendations, list):
        raw_recommendations = []
    recommendations = [
        r.strip() for r in raw_recommendations if isinstance(r, str) and r.strip()
    ][:RECOMMENDATION_COUNT]
    for generic in fallback.recommendations:
        if len(recommendations) >= RECOMMENDATION_COUNT:
            break
        if generic not in recommendations:
            recommendations.append(generic)

    return Narrative(summary=summary.strip(), recommendations=recommendations)


# =============================================================================
# GENERATION
# =============================================================================

async def with_fallback(
    produce: Callable[[], Awaitable[T]],
    fallback: Callable[[], T],
    label: str,
    timeout: float | None = None,
) -> T:
    """
    Await `produce()` within `timeout` seconds (None = unbounded).

    On any failure, running out of time included, log it and return
    `fallback()` instead.
    """
    try:
        return await asyncio.wait_for(produce(), timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{label} timed out after {timeout}s, using fallback")
        return fallback()
    except Exception as e:
        logger.warning(f"{label} failed, using fallback: {e}")
        return fallback()


async def generate_narrative(
    generator: TextGenerator | None,
    context: NarrativeContext,
    timeout: float | None = None,
) -> Narrative:
    """
    Single attempt at a model-written narrative; never raises.

    With no generator configured the fallback is returned directly. A reply that
    does not arrive within `timeout` seconds counts as a failed attempt.
    """
    if generator is None:
        return fallback_narrative(context)

    async def produce() -> Narrative:
        reply = await generator.generate(build_prompt(context))
        return parse_narrative(reply, context)

    return await with_fallback(
        produce,
        lambda: fallback_narrative(context),
        "Narrative generation",
        timeout=timeout,
    )
