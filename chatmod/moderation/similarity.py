"""String similarity used for near-duplicate detection.

Comparisons are case-sensitive on purpose: "hello" and "HELLO" are far
apart.
"""

from __future__ import annotations


def levenshtein_distance(a: str, b: str) -> int:
    """Return the minimum number of single-character edits turning *a* into *b*."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two-row dynamic programming; keep the shorter string on the inner loop
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(
                        previous[j - 1] + 1,  # substitution
                        current[j - 1] + 1,  # insertion
                        previous[j] + 1,  # deletion
                    )
                )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]: ``1 - distance / len(longer)``.

    Two empty strings are identical (1.0).
    """
    longer, shorter = (a, b) if len(a) >= len(b) else (b, a)
    if not longer:
        return 1.0
    return 1.0 - levenshtein_distance(longer, shorter) / len(longer)
