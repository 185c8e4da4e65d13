"""Weighted sampling over option -> weight mappings.

Both functions scan options in their stored (insertion) order, so a seeded
``random.Random`` reproduces the same draws across runs.  Options with
weight 0 are never drawn.
"""

from __future__ import annotations

import random
from typing import Mapping


def select_one(
    weights: Mapping[str, float],
    rng: random.Random | None = None,
) -> str | None:
    """Draw one option with probability proportional to its weight.

    Returns ``None`` when the total weight is <= 0; callers must treat that
    as "no answer available" rather than pick something themselves.
    """
    total = sum(weights.values())
    if total <= 0:
        return None

    draw = (rng or random).random() * total
    cumulative = 0.0
    last_positive = None
    for option, weight in weights.items():
        if weight <= 0:
            continue
        cumulative += weight
        last_positive = option
        if draw < cumulative:
            return option
    # Float round-off can leave draw == total
    return last_positive


def select_many(
    weights: Mapping[str, float],
    min_count: int,
    max_count: int,
    rng: random.Random | None = None,
) -> list[str]:
    """Draw between ``min_count`` and ``max_count`` distinct options.

    The target size is uniform over ``[min_count, max_count]``.  Each drawn
    option leaves the pool, so the result can be shorter than the target
    when the pool runs out of positive-weight options first.

    Returns:
        Distinct option values in draw order.

    Raises:
        ValueError: if the bounds are negative or ``min_count > max_count``.
    """
    if min_count < 0 or min_count > max_count:
        raise ValueError(f"invalid selection range [{min_count}, {max_count}]")

    rng = rng or random
    target = rng.randint(min_count, max_count)
    pool = dict(weights)
    selected: list[str] = []
    while len(selected) < target:
        choice = select_one(pool, rng)
        if choice is None:
            break
        selected.append(choice)
        del pool[choice]
    return selected
