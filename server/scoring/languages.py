"""
Language distribution from the per-language byte counts reported by GitHub.
"""


def language_distribution(byte_counts: dict[str, int]) -> dict[str, int]:
    """
    Convert language -> bytes into language -> whole percentage of all bytes.

    Percentages round half up. Ordered by percentage descending, then language
    name, so the mapping serializes identically on every run.
    """
    counts = {lang: n for lang, n in byte_counts.items() if isinstance(n, int) and n > 0}
    total = sum(counts.values())
    if total == 0:
        return {}

    percentages = {lang: (n * 200 + total) // (2 * total) for lang, n in counts.items()}
    ordered = sorted(percentages.items(), key=lambda item: (-item[1], item[0]))
    return dict(ordered)
