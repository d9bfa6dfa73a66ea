"""Pydantic schemas for warranty analytics responses."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.claim import ClaimSummary


class CycleTimeStatRead(BaseModel):
    average: int
    sample_size: int
    has_data: bool


class CycleTimeExclusionRead(BaseModel):
    claim_id: str
    metric: str
    reason: str
    detail: str | None = None


class WarrantyMetricsResponse(BaseModel):
    """Analytics snapshot for one builder-group scope. Recomputed per request."""
    builder_group_id: str
    computed_at: datetime
    active_homeowners: int
    claimants: int
    approved_claimants: int
    avg_cbs_cycle_time: int
    avg_contractor_cycle_time: int
    cbs_percentage: int
    contractor_percentage: int
    cbs_cycle_time: CycleTimeStatRead
    contractor_cycle_time: CycleTimeStatRead
    total_claims: int
    needs_attention_claims: list[ClaimSummary]
    in_process_and_new_claims: list[ClaimSummary]
    exclusions: list[CycleTimeExclusionRead]
