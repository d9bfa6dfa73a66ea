"""Pydantic schemas for API request/response models."""

from app.schemas.analytics import WarrantyMetricsResponse
from app.schemas.claim import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ClaimCreate,
    ClaimListResponse,
    ClaimMessageCreate,
    ClaimMessageRead,
    ClaimRead,
    ClaimUpdate,
)
from app.schemas.homeowner import (
    BuilderGroupCreate,
    BuilderGroupRead,
    HomeownerCreate,
    HomeownerRead,
)

__all__ = [
    # Claims
    "ClaimCreate",
    "ClaimUpdate",
    "ClaimRead",
    "ClaimListResponse",
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "ClaimMessageCreate",
    "ClaimMessageRead",
    # Homeowners
    "BuilderGroupCreate",
    "BuilderGroupRead",
    "HomeownerCreate",
    "HomeownerRead",
    # Analytics
    "WarrantyMetricsResponse",
]
