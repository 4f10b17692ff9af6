"""
Compact letter display (CLD).

Groups that share a letter are not significantly different. Letters are
built from maximal sets of mutually non-different groups found by greedy
clique growth over the "not rejected" graph.
"""

from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike

from pyposthoc.core.exceptions import ValidationError
from pyposthoc.posthoc._common import PostHocComparison


def generate_cld(
    stats: ArrayLike,
    comparisons: Sequence[PostHocComparison],
    alpha: float,
) -> tuple[dict[int, str], list[str]]:
    """
    Assign compact letters to groups.

    Algorithm:
        1. Start from a complete graph over the k groups and drop the edge
           of every rejected comparison.
        2. Visit groups by descending statistic; grow a clique from each
           seed, adding later-visited groups adjacent to every member.
        3. Keep maximal cliques: longest first, dropping any clique that
           is a subset of one already kept.
        4. Order cliques by their largest statistic, descending, and give
           them letters 'a', 'b', ... ('A', 'B', ... when alpha <= 0.01).
           Past 26 cliques the letter is the base character followed by
           the clique number ("a27").

    Args:
        stats: Per-group value used for ordering (means, mean ranks,
            proportions). Group i (1-based) is stats[i - 1].
        comparisons: Pairwise results; only `rejected` pairs matter
        alpha: Significance level of the comparisons, in (0, 1)

    Returns:
        (letters, warnings): letters maps every 1-based group index to its
        letter string (possibly empty).

    Raises:
        ValidationError: If alpha is outside (0, 1)
    """
    if not (0.0 < alpha < 1.0):
        raise ValidationError(f"Alpha must be between 0 and 1. Received: {alpha}")

    warnings_list: list[str] = []
    if alpha > 0.1:
        warnings_list.append(
            f"Alpha ({alpha}) is unusually large (> 0.10). "
            f"This increases the risk of Type I errors."
        )

    values = np.asarray(stats, dtype=np.float64)
    k = len(values)

    # adj[i, j] True means i and j are not significantly different
    adj = np.ones((k, k), dtype=bool)
    for c in comparisons:
        if c.rejected:
            adj[c.group1 - 1, c.group2 - 1] = False
            adj[c.group2 - 1, c.group1 - 1] = False

    order = np.argsort(-values, kind="stable")

    candidates: list[list[int]] = []
    for pos, root in enumerate(order):
        clique = [int(root)]
        for cand in order[pos + 1:]:
            if all(adj[member, cand] for member in clique):
                clique.append(int(cand))
        candidates.append(clique)

    candidates.sort(key=len, reverse=True)
    cliques: list[list[int]] = []
    for clique in candidates:
        members = set(clique)
        if not any(members <= set(kept) for kept in cliques):
            cliques.append(clique)

    cliques.sort(key=lambda c: max(values[c]), reverse=True)

    base = 'A' if alpha <= 0.01 else 'a'
    letters = {i: "" for i in range(1, k + 1)}
    for idx, clique in enumerate(cliques, start=1):
        letter = chr(ord(base) + idx - 1) if idx <= 26 else f"{base}{idx}"
        for member in clique:
            letters[member + 1] += letter

    return letters, warnings_list
