"""
Analytics endpoints for the warranty dashboard.

Metrics are recomputed from the current claims, homeowners and messages on
every request; nothing is cached.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db
from app.core.structured_logging import build_log_context
from app.schemas.analytics import (
    CycleTimeExclusionRead,
    CycleTimeStatRead,
    WarrantyMetricsResponse,
)
from app.services import claim_service
from app.services.homeowner_attribution_service import ALL_BUILDER_GROUPS
from app.services.warranty_analytics_service import (
    AnalyticsOptions,
    CycleTimeStat,
    WarrantyMetrics,
    compute_warranty_metrics,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _stat_read(stat: CycleTimeStat) -> CycleTimeStatRead:
    return CycleTimeStatRead(
        average=stat.average, sample_size=stat.sample_size, has_data=stat.has_data
    )


def to_metrics_response(metrics: WarrantyMetrics) -> WarrantyMetricsResponse:
    return WarrantyMetricsResponse(
        builder_group_id=metrics.builder_group_id,
        computed_at=metrics.computed_at,
        active_homeowners=metrics.active_homeowners,
        claimants=metrics.claimants,
        approved_claimants=metrics.approved_claimants,
        avg_cbs_cycle_time=metrics.avg_cbs_cycle_time,
        avg_contractor_cycle_time=metrics.avg_contractor_cycle_time,
        cbs_percentage=metrics.cbs_percentage,
        contractor_percentage=metrics.contractor_percentage,
        cbs_cycle_time=_stat_read(metrics.cbs_cycle_time),
        contractor_cycle_time=_stat_read(metrics.contractor_cycle_time),
        total_claims=len(metrics.claims),
        needs_attention_claims=[
            claim_service.to_claim_summary(c) for c in metrics.needs_attention_claims
        ],
        in_process_and_new_claims=[
            claim_service.to_claim_summary(c) for c in metrics.in_process_and_new_claims
        ],
        exclusions=[
            CycleTimeExclusionRead(
                claim_id=e.claim_id,
                metric=e.metric.value,
                reason=e.reason.value,
                detail=e.detail,
            )
            for e in metrics.exclusions
        ],
    )


@router.get("/warranty", response_model=WarrantyMetricsResponse)
def get_warranty_metrics(
    builder_group_id: str = Query(ALL_BUILDER_GROUPS, description="Builder group id or 'all'"),
    as_of: datetime | None = Query(None, description="Reference time for the active-homeowner window"),
    db: Session = Depends(get_db),
):
    """Active homeowners, claimants and cycle-time metrics for a builder group."""
    claims, homeowners, messages = claim_service.load_analytics_inputs(db)
    metrics = compute_warranty_metrics(
        claims,
        homeowners,
        messages,
        builder_group_id,
        as_of=as_of,
        options=AnalyticsOptions.from_settings(settings),
    )
    logger.info(
        "Warranty metrics computed",
        extra=build_log_context(
            builder_group_id=metrics.builder_group_id,
            route="/analytics/warranty",
            method="GET",
        ),
    )
    return to_metrics_response(metrics)
