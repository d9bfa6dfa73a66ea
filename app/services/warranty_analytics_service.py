"""Warranty analytics: homeowner counts and business-day cycle times.

Pure computation over already-loaded claims, homeowners and claim messages.
Nothing is cached or persisted; callers recompute on every request.

Cycle times:
- CBS: business days from claim evaluation to the first subcontractor
  message.
- Contractor: business days from the first subcontractor message to the
  claim's completion (completed claims only).

A claim that cannot produce an interval (no evaluation date, no
subcontractor message, unreadable date, end before start, implausibly long
span) is left out of that metric's average. Everything but a missing
evaluation date or message is also reported as an exclusion so data-entry
problems stay visible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Sequence

from app.services.claim_correlation_service import (
    find_first_subcontractor_contact,
    group_messages_by_claim,
)
from app.services.claim_lifecycle import is_claim_completed
from app.services.claim_records import ClaimMessageRecord, ClaimRecord, HomeownerRecord
from app.services.homeowner_attribution_service import (
    ALL_BUILDER_GROUPS,
    DEFAULT_ACTIVE_WINDOW_DAYS,
    approved_claimant_ids,
    claimant_ids,
    count_active_homeowners,
    filter_claims_by_builder,
    filter_homeowners_by_builder,
    in_process_and_new_claims,
    needs_attention_claims,
)
from app.utils.business_days import business_days_between, to_business_date
from app.utils.datetime_parsing import DEFAULT_TIMEZONE, DateLike, coerce_datetime

logger = logging.getLogger(__name__)

EVEN_SPLIT_PERCENTAGE = 50

# Intervals longer than this (calendar days) are treated as data-entry errors
DEFAULT_MAX_INTERVAL_DAYS = 3650


# =============================================================================
# Options and result types
# =============================================================================


@dataclass(frozen=True)
class AnalyticsOptions:
    """Knobs for the analytics fold. Defaults give the reference behavior."""

    timezone: str = DEFAULT_TIMEZONE
    active_window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS
    exclude_holidays: bool = False
    service_orders_only: bool = False
    max_interval_days: int = DEFAULT_MAX_INTERVAL_DAYS

    @classmethod
    def from_settings(cls, settings) -> "AnalyticsOptions":
        return cls(
            timezone=settings.BUSINESS_TIMEZONE,
            active_window_days=settings.ACTIVE_HOMEOWNER_WINDOW_DAYS,
            exclude_holidays=settings.CYCLE_TIME_EXCLUDE_HOLIDAYS,
            service_orders_only=settings.CYCLE_TIME_SERVICE_ORDERS_ONLY,
            max_interval_days=settings.CYCLE_TIME_MAX_INTERVAL_DAYS,
        )


class CycleTimeMetric(str, Enum):
    CBS = "cbs"
    CONTRACTOR = "contractor"


class ExclusionReason(str, Enum):
    MALFORMED_DATE = "malformed_date"
    NEGATIVE_INTERVAL = "negative_interval"
    INTERVAL_TOO_LONG = "interval_too_long"


@dataclass(frozen=True)
class CycleTimeExclusion:
    claim_id: str
    metric: CycleTimeMetric
    reason: ExclusionReason
    detail: str | None = None


@dataclass(frozen=True)
class CycleTimeSample:
    claim_id: str
    business_days: int


@dataclass(frozen=True)
class CycleTimeStat:
    """
    Rounded mean over the claims that produced an interval.

    `average` is 0 when `sample_size` is 0; use `has_data` to tell a
    genuine zero-day average from an empty metric.
    """

    average: int
    sample_size: int

    @property
    def has_data(self) -> bool:
        return self.sample_size > 0


@dataclass(frozen=True)
class CycleTimeRatio:
    average: float
    cbs_percentage: int
    contractor_percentage: int


@dataclass(frozen=True)
class CycleTimeReport:
    cbs_samples: tuple[CycleTimeSample, ...] = ()
    contractor_samples: tuple[CycleTimeSample, ...] = ()
    exclusions: tuple[CycleTimeExclusion, ...] = ()


@dataclass(frozen=True)
class WarrantyMetrics:
    """Immutable analytics snapshot for one builder-group scope."""

    builder_group_id: str
    computed_at: datetime
    active_homeowners: int
    claimants: int
    approved_claimants: int
    cbs_cycle_time: CycleTimeStat
    contractor_cycle_time: CycleTimeStat
    ratio: CycleTimeRatio
    claims: tuple[ClaimRecord, ...] = ()
    needs_attention_claims: tuple[ClaimRecord, ...] = ()
    in_process_and_new_claims: tuple[ClaimRecord, ...] = ()
    exclusions: tuple[CycleTimeExclusion, ...] = ()

    @property
    def avg_cbs_cycle_time(self) -> int:
        return self.cbs_cycle_time.average

    @property
    def avg_contractor_cycle_time(self) -> int:
        return self.contractor_cycle_time.average

    @property
    def cbs_percentage(self) -> int:
        return self.ratio.cbs_percentage

    @property
    def contractor_percentage(self) -> int:
        return self.ratio.contractor_percentage


# =============================================================================
# Arithmetic helpers
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def average_cycle_time(samples: Sequence[CycleTimeSample]) -> CycleTimeStat:
    if not samples:
        return CycleTimeStat(average=0, sample_size=0)
    total = sum(s.business_days for s in samples)
    return CycleTimeStat(average=round_half_up(total / len(samples)), sample_size=len(samples))


def compute_cycle_time_ratio(cbs_average: int, contractor_average: int) -> CycleTimeRatio:
    """
    Share of the overall cycle spent on each side.

    The contractor share is derived from the CBS share, so the two always
    add up to exactly 100. A zero average splits evenly.
    """
    average = (cbs_average + contractor_average) / 2
    if average > 0:
        cbs_percentage = round_half_up(cbs_average / average * 100)
    else:
        cbs_percentage = EVEN_SPLIT_PERCENTAGE
    return CycleTimeRatio(
        average=average,
        cbs_percentage=cbs_percentage,
        contractor_percentage=100 - cbs_percentage,
    )


# =============================================================================
# Interval derivation
# =============================================================================


def resolve_completion_date(claim: ClaimRecord) -> DateLike | None:
    """
    Best available completion timestamp for a claim.

    Resolution order (first present wins): last comment timestamp, last
    proposed date, evaluation date, submission date.
    """
    if claim.comments:
        return claim.comments[-1].timestamp
    if claim.proposed_dates:
        return claim.proposed_dates[-1].date
    if claim.date_evaluated is not None:
        return claim.date_evaluated
    return claim.date_submitted


def _exclude(
    claim: ClaimRecord,
    metric: CycleTimeMetric,
    reason: ExclusionReason,
    detail: str,
    exclusions: list[CycleTimeExclusion],
) -> None:
    exclusions.append(
        CycleTimeExclusion(claim_id=claim.id, metric=metric, reason=reason, detail=detail)
    )
    logger.debug(
        "Excluded claim from cycle time",
        extra={"claim_id": claim.id, "metric": metric.value, "reason": reason.value},
    )


def _measure(
    claim: ClaimRecord,
    metric: CycleTimeMetric,
    start: DateLike,
    end: DateLike,
    options: AnalyticsOptions,
    exclusions: list[CycleTimeExclusion],
) -> CycleTimeSample | None:
    start_dt = coerce_datetime(start).value
    end_dt = coerce_datetime(end).value
    if start_dt is None or end_dt is None:
        raw = start if start_dt is None else end
        _exclude(claim, metric, ExclusionReason.MALFORMED_DATE, f"Unreadable date: {raw!r}", exclusions)
        return None

    try:
        start_day = to_business_date(start_dt, options.timezone)
        end_day = to_business_date(end_dt, options.timezone)
    except (OverflowError, ValueError):
        _exclude(
            claim,
            metric,
            ExclusionReason.MALFORMED_DATE,
            f"Date out of range: {start_dt.isoformat()} / {end_dt.isoformat()}",
            exclusions,
        )
        return None

    if end_day < start_day:
        _exclude(
            claim,
            metric,
            ExclusionReason.NEGATIVE_INTERVAL,
            f"{end_day.isoformat()} is before {start_day.isoformat()}",
            exclusions,
        )
        return None

    span_days = (end_day - start_day).days
    if span_days > options.max_interval_days:
        _exclude(
            claim,
            metric,
            ExclusionReason.INTERVAL_TOO_LONG,
            f"{span_days} calendar days from {start_day.isoformat()} to {end_day.isoformat()}",
            exclusions,
        )
        return None

    days = business_days_between(start_day, end_day, exclude_holidays=options.exclude_holidays)
    return CycleTimeSample(claim_id=claim.id, business_days=days)


def compute_cycle_times(
    claims: Sequence[ClaimRecord],
    messages: Sequence[ClaimMessageRecord],
    options: AnalyticsOptions | None = None,
) -> CycleTimeReport:
    """Per-claim CBS and contractor intervals plus the claims left out."""
    options = options or AnalyticsOptions()
    by_claim = group_messages_by_claim(messages)

    cbs_samples: list[CycleTimeSample] = []
    contractor_samples: list[CycleTimeSample] = []
    exclusions: list[CycleTimeExclusion] = []

    for claim in claims:
        first_contact = find_first_subcontractor_contact(
            claim.id,
            by_claim.get(claim.id, ()),
            service_orders_only=options.service_orders_only,
            timezone=options.timezone,
        )
        if first_contact is None:
            continue

        if claim.date_evaluated is not None:
            sample = _measure(
                claim, CycleTimeMetric.CBS, claim.date_evaluated, first_contact, options, exclusions
            )
            if sample is not None:
                cbs_samples.append(sample)

        if is_claim_completed(claim):
            completed_at = resolve_completion_date(claim)
            sample = _measure(
                claim, CycleTimeMetric.CONTRACTOR, first_contact, completed_at, options, exclusions
            )
            if sample is not None:
                contractor_samples.append(sample)

    return CycleTimeReport(
        cbs_samples=tuple(cbs_samples),
        contractor_samples=tuple(contractor_samples),
        exclusions=tuple(exclusions),
    )


# =============================================================================
# Snapshot
# =============================================================================


def compute_warranty_metrics(
    claims: Sequence[ClaimRecord],
    homeowners: Sequence[HomeownerRecord],
    messages: Sequence[ClaimMessageRecord],
    builder_group_id: str | None = ALL_BUILDER_GROUPS,
    *,
    as_of: datetime | None = None,
    options: AnalyticsOptions | None = None,
) -> WarrantyMetrics:
    """
    Compute the full warranty analytics snapshot for one builder-group scope.

    Args:
        claims: All claims (any builder group)
        homeowners: All homeowners
        messages: All tracked claim messages
        builder_group_id: Builder group id, or "all"/None for no scoping
        as_of: Reference "now" for the active-homeowner window
        options: Calendar and correlation options

    Returns:
        WarrantyMetrics; never raises on bad dates or missing data.
    """
    options = options or AnalyticsOptions()
    now = as_of or datetime.now(timezone.utc)
    scope = ALL_BUILDER_GROUPS if builder_group_id is None else str(builder_group_id)

    scoped_homeowners = filter_homeowners_by_builder(homeowners, scope)
    scoped_claims = filter_claims_by_builder(claims, homeowners, scope)

    claimants = claimant_ids(scoped_claims, scoped_homeowners)
    approved = approved_claimant_ids(scoped_claims, scoped_homeowners)

    report = compute_cycle_times(scoped_claims, messages, options)
    cbs_stat = average_cycle_time(report.cbs_samples)
    contractor_stat = average_cycle_time(report.contractor_samples)

    if report.exclusions:
        logger.info(
            "Cycle time exclusions: %d",
            len(report.exclusions),
            extra={"builder_group_id": scope},
        )

    return WarrantyMetrics(
        builder_group_id=scope,
        computed_at=now,
        active_homeowners=count_active_homeowners(
            scoped_homeowners, as_of=now, window_days=options.active_window_days
        ),
        claimants=len(claimants),
        approved_claimants=len(approved),
        cbs_cycle_time=cbs_stat,
        contractor_cycle_time=contractor_stat,
        ratio=compute_cycle_time_ratio(cbs_stat.average, contractor_stat.average),
        claims=tuple(scoped_claims),
        needs_attention_claims=tuple(needs_attention_claims(scoped_claims)),
        in_process_and_new_claims=tuple(in_process_and_new_claims(scoped_claims)),
        exclusions=report.exclusions,
    )
