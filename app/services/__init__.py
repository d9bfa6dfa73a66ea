"""Service layer modules."""

# Import service modules (not individual functions) for cleaner access
from app.services import claim_service
from app.services import homeowner_service
from app.services import warranty_analytics_service

__all__ = [
    "claim_service",
    "homeowner_service",
    "warranty_analytics_service",
]
