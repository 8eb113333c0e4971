"""
ROI metric models.

Every resource carries one RoiMetricRecord: a pre/post pair for each of the
five tracked impact metrics plus a last-updated timestamp. Records are
replaced wholesale on every manual or bulk update.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class RoiMetricKey(str, Enum):
    COST_SAVINGS = "costSavings"
    REVENUE_GENERATED = "revenueGenerated"
    HOURS_SAVED = "hoursSaved"
    ADOPTION_RATE = "adoptionRate"
    EFFICIENCY_GAIN = "efficiencyGain"


class RoiMetricUnit(str, Enum):
    CURRENCY = "currency"
    HOURS = "hours"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class RoiMetricConfig:
    label: str
    unit: RoiMetricUnit


# Canonical metric order: import headers, summaries and templates follow it.
ROI_METRIC_KEYS: tuple[RoiMetricKey, ...] = (
    RoiMetricKey.COST_SAVINGS,
    RoiMetricKey.REVENUE_GENERATED,
    RoiMetricKey.HOURS_SAVED,
    RoiMetricKey.ADOPTION_RATE,
    RoiMetricKey.EFFICIENCY_GAIN,
)

ROI_METRIC_CONFIG: dict[RoiMetricKey, RoiMetricConfig] = {
    RoiMetricKey.COST_SAVINGS: RoiMetricConfig("Cost savings", RoiMetricUnit.CURRENCY),
    RoiMetricKey.REVENUE_GENERATED: RoiMetricConfig("Revenue generated", RoiMetricUnit.CURRENCY),
    RoiMetricKey.HOURS_SAVED: RoiMetricConfig("Hours saved", RoiMetricUnit.HOURS),
    RoiMetricKey.ADOPTION_RATE: RoiMetricConfig("Adoption rate", RoiMetricUnit.PERCENTAGE),
    RoiMetricKey.EFFICIENCY_GAIN: RoiMetricConfig("Efficiency gain", RoiMetricUnit.PERCENTAGE),
}


@dataclass(frozen=True)
class RoiMetricValue:
    pre: float = 0
    post: float = 0

    @property
    def delta(self) -> float:
        return self.post - self.pre

    def to_dict(self) -> dict:
        return {"pre": self.pre, "post": self.post}


ZERO_METRIC = RoiMetricValue(0, 0)


@dataclass(frozen=True)
class RoiMetricRecord:
    """Pre/post values for all five metrics. Never partially updated."""

    cost_savings: RoiMetricValue
    revenue_generated: RoiMetricValue
    hours_saved: RoiMetricValue
    adoption_rate: RoiMetricValue
    efficiency_gain: RoiMetricValue
    last_updated: str = ""

    def metric(self, key: RoiMetricKey | str) -> RoiMetricValue:
        return getattr(self, _ATTR_BY_KEY[RoiMetricKey(key)])

    def with_timestamp(self, timestamp: str) -> RoiMetricRecord:
        return RoiMetricRecord(
            cost_savings=self.cost_savings,
            revenue_generated=self.revenue_generated,
            hours_saved=self.hours_saved,
            adoption_rate=self.adoption_rate,
            efficiency_gain=self.efficiency_gain,
            last_updated=timestamp,
        )

    def to_dict(self) -> dict:
        data = {key.value: self.metric(key).to_dict() for key in ROI_METRIC_KEYS}
        data["lastUpdated"] = self.last_updated
        return data

    @classmethod
    def from_metrics(cls, metrics: dict[RoiMetricKey, RoiMetricValue],
                     last_updated: str = "") -> RoiMetricRecord:
        """Build from a complete metric mapping; absent metrics default to zero."""
        values = {_ATTR_BY_KEY[key]: metrics.get(key, ZERO_METRIC) for key in ROI_METRIC_KEYS}
        return cls(last_updated=last_updated, **values)

    @classmethod
    def zero(cls, last_updated: str = "") -> RoiMetricRecord:
        return cls.from_metrics({}, last_updated)

    @classmethod
    def from_dict(cls, data: dict) -> RoiMetricRecord:
        """Parse a manual-form payload: ``{"costSavings": {"pre": .., "post": ..}, ...}``.

        A record update always supplies all five metrics; a missing metric or
        a missing/non-numeric/negative pre or post raises ValueError.
        Percentage metrics are clamped to 100 the way the manual form does.
        """
        if not isinstance(data, dict):
            raise ValueError("metrics must be an object")
        metrics: dict[RoiMetricKey, RoiMetricValue] = {}
        missing = []
        for key in ROI_METRIC_KEYS:
            raw = data.get(key.value)
            if not isinstance(raw, dict):
                missing.append(key.value)
                continue
            pair = []
            for side in ("pre", "post"):
                value = raw.get(side)
                if (isinstance(value, bool) or not isinstance(value, (int, float))
                        or not math.isfinite(value)):
                    raise ValueError(f"{key.value}.{side} must be a number")
                if value < 0:
                    raise ValueError(f"{key.value}.{side} must be non-negative")
                if ROI_METRIC_CONFIG[key].unit is RoiMetricUnit.PERCENTAGE:
                    value = min(value, 100)
                pair.append(value)
            metrics[key] = RoiMetricValue(pair[0], pair[1])
        if missing:
            raise ValueError(f"Missing metrics: {', '.join(missing)}")
        return cls.from_metrics(metrics, str(data.get("lastUpdated") or ""))


_ATTR_BY_KEY: dict[RoiMetricKey, str] = {
    RoiMetricKey.COST_SAVINGS: "cost_savings",
    RoiMetricKey.REVENUE_GENERATED: "revenue_generated",
    RoiMetricKey.HOURS_SAVED: "hours_saved",
    RoiMetricKey.ADOPTION_RATE: "adoption_rate",
    RoiMetricKey.EFFICIENCY_GAIN: "efficiency_gain",
}


@dataclass(frozen=True)
class ImportRow:
    """One parsed bulk-import row. Exists only for the duration of an import."""

    resource_key: str
    metrics: RoiMetricRecord
    line_number: int = 0


@dataclass(frozen=True)
class RoiUpdate:
    """A (key, record) pair handed to the registry's bulk update."""

    key: str
    record: RoiMetricRecord
