"""
ROI formatting & derivation.

Pure functions turning metric values and deltas into the display strings
used by ROI cards and detail panels. One-decimal rounding is half-up on the
exact binary value, so 33.25 renders as 33.3.

Usage:
    from systems_hub.services.roi_formatting import format_delta, summarize_record

    format_delta(RoiMetricUnit.CURRENCY, 1500)     # "+$1.5K"
    summarize_record(record)                       # per-metric entries
"""

from __future__ import annotations

import math
from datetime import datetime

from systems_hub.models.roi import (
    ROI_METRIC_CONFIG,
    ROI_METRIC_KEYS,
    RoiMetricRecord,
    RoiMetricUnit,
    ZERO_METRIC,
)
from systems_hub.services.stat_generator import round_half_up

NO_CHANGE = "No change"
TONE_POSITIVE = "positive"
TONE_NEGATIVE = "negative"
TONE_NEUTRAL = "neutral"


def _one_decimal(value: float) -> str:
    return f"{round_half_up(value, 1):.1f}"


def _grouped(value: float) -> str:
    """Thousands-grouped number with up to three decimals, trailing zeros dropped."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{round_half_up(value, 3):,.3f}".rstrip("0").rstrip(".")


def _blank(value) -> bool:
    return not value or (isinstance(value, float) and math.isnan(value))


# ═════════════════════════════════════════════════════════════════════════════
# Value formatters
# ═════════════════════════════════════════════════════════════════════════════

def format_currency(value: float) -> str:
    if _blank(value):
        return "$0"
    if value >= 1_000_000:
        return f"${_one_decimal(value / 1_000_000)}M"
    if value >= 1_000:
        return f"${_one_decimal(value / 1_000)}K"
    return f"${_grouped(value)}"


def format_number(value: float) -> str:
    if _blank(value):
        return "0"
    if value >= 1_000:
        return f"{_one_decimal(value / 1_000)}K"
    return _grouped(value)


def format_hours(value: float) -> str:
    return f"{format_number(value)} hrs"


def format_percentage(value: float) -> str:
    if value is None or not math.isfinite(value):
        return "0%"
    bounded = max(0, min(100, value))
    if float(bounded).is_integer():
        return f"{int(bounded)}%"
    return f"{_one_decimal(bounded)}%"


def format_metric_value(unit: RoiMetricUnit | str, value: float) -> str:
    unit = RoiMetricUnit(unit)
    if unit is RoiMetricUnit.CURRENCY:
        return format_currency(value)
    if unit is RoiMetricUnit.HOURS:
        return format_hours(value)
    return format_percentage(value)


def format_delta(unit: RoiMetricUnit | str, delta: float) -> str:
    """Signed delta text; percentage deltas are shown as points."""
    if _blank(delta):
        return NO_CHANGE
    unit = RoiMetricUnit(unit)
    sign = "+" if delta > 0 else "-"
    magnitude = abs(delta)

    if unit is RoiMetricUnit.CURRENCY:
        return f"{sign}{format_currency(magnitude)}"
    if unit is RoiMetricUnit.HOURS:
        return f"{sign}{format_number(magnitude)} hrs"

    rounded = round_half_up(magnitude * 10) / 10
    text = f"{int(rounded)}" if float(rounded).is_integer() else f"{rounded:.1f}"
    return f"{sign}{text} pts"


def classify_tone(delta: float) -> str:
    if delta > 0:
        return TONE_POSITIVE
    if delta < 0:
        return TONE_NEGATIVE
    return TONE_NEUTRAL


def format_date(value: str | None) -> str | None:
    """ISO timestamp → "M/D/YYYY"; None when missing or unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


# ═════════════════════════════════════════════════════════════════════════════
# Record summaries
# ═════════════════════════════════════════════════════════════════════════════

def summarize_record(record: RoiMetricRecord | None) -> list[dict]:
    """One display entry per metric, in canonical order.

    A missing record summarises as all zeros.
    """
    entries = []
    for key in ROI_METRIC_KEYS:
        metric = record.metric(key) if record is not None else ZERO_METRIC
        config = ROI_METRIC_CONFIG[key]
        delta = metric.post - metric.pre
        entries.append({
            "key": key.value,
            "label": config.label,
            "unit": config.unit.value,
            "pre": metric.pre,
            "post": metric.post,
            "delta": delta,
            "tone": classify_tone(delta),
            "deltaText": format_delta(config.unit, delta),
            "baselineText": (
                f"Baseline {format_metric_value(config.unit, metric.pre)}"
                f" → Current {format_metric_value(config.unit, metric.post)}"
            ),
        })
    return entries


def format_roi_card(record: RoiMetricRecord | None) -> dict | None:
    """Compact per-metric delta strings for a resource card."""
    if record is None:
        return None
    card = {
        key.value: format_delta(ROI_METRIC_CONFIG[key].unit, record.metric(key).delta)
        for key in ROI_METRIC_KEYS
    }
    card["lastUpdated"] = format_date(record.last_updated)
    return card
