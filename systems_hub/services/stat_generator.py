"""
Deterministic Statistic Generator.

Operational stats for synthesized resources have no telemetry behind them,
so they are derived from a stable seed string. The same seed always yields
the same value, across processes and across releases: the hash is a plain
polynomial rolling hash, not a PRNG.

Also hosts the metric-range helpers used to derive pre/post baselines for
default ROI records.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from systems_hub.models.roi import RoiMetricValue

HASH_MULTIPLIER = 31
HASH_MODULUS = 1000


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ties upward on the exact binary value (round(2.5) == 3, not 2)."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def seed_hash(seed: str) -> int:
    h = 0
    for char in seed or "":
        h = (h * HASH_MULTIPLIER + ord(char)) % HASH_MODULUS
    return h


def from_seed(seed: str, minimum: int, maximum: int) -> int:
    """Map ``seed`` to a reproducible integer in ``[minimum, maximum]``.

    An empty seed yields ``minimum``.
    """
    ratio = seed_hash(seed) / HASH_MODULUS
    return int(round_half_up(minimum + ratio * (maximum - minimum)))


def create_metric_range(post: float, ratio: float, minimum: float = 0,
                        maximum: float | None = None) -> RoiMetricValue:
    """Derive a ``{pre, post}`` pair where pre is a fraction of post.

    ``post`` is clamped to ``[minimum, maximum]``; ``pre = post * ratio`` is
    clamped to ``[minimum, post]``. Both are rounded half-up. A non-finite
    ``post`` yields ``{minimum, minimum}``.
    """
    if post is None or not math.isfinite(post):
        return RoiMetricValue(minimum, minimum)

    upper = math.inf if maximum is None else maximum
    bounded_post = min(max(post, minimum), upper)
    baseline = min(max(bounded_post * ratio, minimum), bounded_post)

    pre = round_half_up(baseline)
    post_value = round_half_up(bounded_post)
    if pre > post_value:
        return RoiMetricValue(post_value, post_value)
    return RoiMetricValue(pre, post_value)


def create_percentage_range(post: float, ratio: float) -> RoiMetricValue:
    return create_metric_range(post, ratio, 0, 100)
