"""
Rollup Aggregator - group-by/sum-by over a batch of events.

Used for the AI cost summary (by source, model and type) and activity
frequency stats (by day and source).
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, TypeVar

from fitmetrics.models import CostEntry, Event
from fitmetrics.services.analytics.metrics.base import round_half_away

T = TypeVar("T")

KeyFunc = Callable[[T], Optional[str]]
Measure = Callable[[T], float]

UNKNOWN = "unknown"


@dataclass
class RollupBucket:
    """Count and measure totals for one group key."""
    event_count: int = 0
    totals: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"events": self.event_count, **self.totals}


def rollup(
    items: Iterable[T],
    key: KeyFunc,
    measures: Optional[Mapping[str, Measure]] = None,
    missing_key: Optional[str] = UNKNOWN,
    sort_by_count: bool = False,
    decimals: Optional[Mapping[str, int]] = None,
) -> Dict[str, RollupBucket]:
    """
    Group items by key and sum each measure per group in a single pass.

    Args:
        items: Batch to aggregate
        key: Returns the group key for an item, or None when absent
        measures: Named numeric extractors summed per group
        missing_key: Bucket for items without a key; None drops them
        sort_by_count: Order groups by descending event count (stable)
        decimals: Per-measure rounding applied to the final sums

    Returns:
        Mapping of group key to RollupBucket, in insertion or count order
    """
    measures = measures or {}
    buckets: Dict[str, RollupBucket] = {}

    for item in items:
        group = key(item)
        if group is None:
            if missing_key is None:
                continue
            group = missing_key

        bucket = buckets.get(group)
        if bucket is None:
            bucket = buckets[group] = RollupBucket(
                totals={name: 0 for name in measures}
            )

        bucket.event_count += 1
        for name, measure in measures.items():
            bucket.totals[name] += measure(item)

    for name, places in (decimals or {}).items():
        for bucket in buckets.values():
            if name in bucket.totals:
                bucket.totals[name] = round_half_away(bucket.totals[name], places)

    if sort_by_count:
        ordered = sorted(buckets.items(), key=lambda kv: kv[1].event_count, reverse=True)
        return dict(ordered)

    return buckets


def _entry(event: Event) -> CostEntry:
    payload = event.payload
    if not isinstance(payload, CostEntry):
        raise ValueError(f"Expected a cost-log event, got {event.kind!r}")
    return payload


def _cost(event: Event) -> float:
    return _entry(event).cost_amount


def _tokens(event: Event) -> float:
    return _entry(event).total_tokens


# ========================================
# Cost Summary
# ========================================

@dataclass(frozen=True)
class CostSummary:
    """AI cost breakdown over a period."""
    period_days: int
    total_cost: float
    total_tokens: int
    total_events: int
    by_source: Dict[str, RollupBucket]
    by_model: Dict[str, RollupBucket]
    by_type: Dict[str, RollupBucket]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periodDays": self.period_days,
            "totalCost": self.total_cost,
            "totalTokens": self.total_tokens,
            "totalEvents": self.total_events,
            "bySource": {k: v.to_dict() for k, v in self.by_source.items()},
            "byModel": {k: v.to_dict() for k, v in self.by_model.items()},
            "byType": {k: v.to_dict() for k, v in self.by_type.items()},
        }


def compute_cost_summary(
    events: Sequence[Event],
    period_days: int,
    decimals: int = 6,
) -> CostSummary:
    """
    Roll up cost and token usage by source, model and type.

    Every dimension accounts for the whole batch: records without a model
    or type land in the "unknown" bucket. Records with malformed dates are
    still summed.
    """
    cost_places = {"cost": decimals}
    cost_and_tokens = {"cost": _cost, "tokens": _tokens}

    total_cost = round_half_away(sum(_cost(e) for e in events), decimals)
    total_tokens = sum(_entry(e).total_tokens for e in events)

    return CostSummary(
        period_days=period_days,
        total_cost=total_cost,
        total_tokens=total_tokens,
        total_events=len(events),
        by_source=rollup(
            events,
            key=lambda e: _entry(e).source,
            measures=cost_and_tokens,
            decimals=cost_places,
        ),
        by_model=rollup(
            events,
            key=lambda e: _entry(e).model,
            measures=cost_and_tokens,
            decimals=cost_places,
        ),
        by_type=rollup(
            events,
            key=lambda e: _entry(e).type,
            measures={"cost": _cost},
            sort_by_count=True,
            decimals=cost_places,
        ),
    )


# ========================================
# Activity Stats
# ========================================

@dataclass(frozen=True)
class ActivityStats:
    """Activity frequency over a period."""
    period_days: int
    total_events: int
    avg_per_day: float
    most_active_source: Optional[str]
    most_active_source_events: int
    daily_breakdown: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        most_active = None
        if self.most_active_source is not None:
            most_active = {
                "source": self.most_active_source,
                "events": self.most_active_source_events,
            }
        return {
            "periodDays": self.period_days,
            "totalEvents": self.total_events,
            "avgPerDay": self.avg_per_day,
            "mostActiveSource": most_active,
            "dailyBreakdown": self.daily_breakdown,
        }


def compute_activity_stats(events: Sequence[Event], period_days: int) -> ActivityStats:
    """
    Count events per UTC day and find the most active source.

    Undated events count towards the total but not towards the daily
    breakdown or the source ranking.
    """
    if period_days <= 0:
        raise ValueError(f"period_days must be positive, got {period_days}")

    dated = [e for e in events if e.day is not None]

    by_day = rollup(dated, key=lambda e: e.day.isoformat(), missing_key=None)
    by_source = rollup(dated, key=lambda e: _entry(e).source, sort_by_count=True)

    top_source, top_bucket = next(iter(by_source.items()), (None, None))
    total = len(events)

    return ActivityStats(
        period_days=period_days,
        total_events=total,
        avg_per_day=round_half_away(total / period_days, 1) if total else 0.0,
        most_active_source=top_source,
        most_active_source_events=top_bucket.event_count if top_bucket else 0,
        daily_breakdown={day: bucket.event_count for day, bucket in by_day.items()},
    )
