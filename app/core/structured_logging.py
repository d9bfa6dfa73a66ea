"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    builder_group_id: str | None = None,
    claim_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict.

    Homeowner names and addresses never go in here; claim and builder group
    ids are opaque and safe to log.
    """
    context: dict[str, Any] = {}
    if builder_group_id:
        context["builder_group_id"] = builder_group_id
    if claim_id:
        context["claim_id"] = claim_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
