"""Homeowners router - builder groups and homeowner enrollment."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.schemas.homeowner import (
    BuilderGroupCreate,
    BuilderGroupRead,
    HomeownerCreate,
    HomeownerRead,
)
from app.services import homeowner_service

router = APIRouter(tags=["homeowners"])


@router.get("/builder-groups", response_model=list[BuilderGroupRead])
def list_builder_groups(db: Session = Depends(get_db)):
    return homeowner_service.list_builder_groups(db)


@router.post("/builder-groups", response_model=BuilderGroupRead, status_code=201)
def create_builder_group(data: BuilderGroupCreate, db: Session = Depends(get_db)):
    return homeowner_service.create_builder_group(db, data)


@router.get("/homeowners", response_model=list[HomeownerRead])
def list_homeowners(
    builder_group_id: UUID | None = Query(None),
    db: Session = Depends(get_db),
):
    """List homeowners, optionally for one builder group."""
    return homeowner_service.list_homeowners(db, builder_group_id)


@router.post("/homeowners", response_model=HomeownerRead, status_code=201)
def create_homeowner(data: HomeownerCreate, db: Session = Depends(get_db)):
    try:
        return homeowner_service.create_homeowner(db, data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
