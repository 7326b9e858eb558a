"""
Organization endpoints - registered local bodies and their scorecards.
"""

from fastapi import APIRouter, Depends

from voice2action.services.organization_service import OrganizationService, get_organization_service

router = APIRouter(prefix="/api/orgs", tags=["Organizations"])


@router.get("")
def list_orgs(service: OrganizationService = Depends(get_organization_service)):
    """All organizations, sorted by code."""
    return {"ok": True, "orgs": service.list_organizations()}


@router.get("/{code}/metrics")
def org_metrics(code: str, service: OrganizationService = Depends(get_organization_service)):
    """Scorecard for one organization (404 if the code was never registered)."""
    return {"ok": True, **service.org_metrics(code).model_dump()}
