# api/people/views.py
"""
People endpoints: requesters, approvers, assignees and technicians.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import TenantContext
from core.errors import EntityNotFoundError, HasDependentsError
from .models import PersonCreate, PersonRead, PersonUpdate
from . import db_manager

router = APIRouter(prefix="/people", tags=["people"])


@router.get(
    "",
    response_model=list[PersonRead],
    summary="List people",
)
async def list_people_endpoint(
    ctx: TenantContext,
    role: str | None = Query(None, description="Filter by role"),
    search: str | None = Query(None, description="Match on name or email"),
    db: AsyncSession = Depends(get_session),
) -> list[PersonRead]:
    people = await db_manager.list_people(db, ctx.tenant_id, role=role, search=search)
    return [PersonRead.model_validate(p) for p in people]


@router.post(
    "",
    response_model=PersonRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a person",
)
async def create_person_endpoint(
    payload: PersonCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> PersonRead:
    try:
        person = await db_manager.create_person(db, ctx.tenant_id, payload)
    except db_manager.DuplicateEmailError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return PersonRead.model_validate(person)


@router.get(
    "/{person_id}",
    response_model=PersonRead,
    summary="Get person by ID",
)
async def get_person_endpoint(
    person_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> PersonRead:
    try:
        person = await db_manager.get_person(db, ctx.tenant_id, person_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return PersonRead.model_validate(person)


@router.put(
    "/{person_id}",
    response_model=PersonRead,
    summary="Update a person",
)
async def update_person_endpoint(
    person_id: int,
    payload: PersonUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> PersonRead:
    try:
        person = await db_manager.update_person(db, ctx.tenant_id, person_id, payload)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except db_manager.DuplicateEmailError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return PersonRead.model_validate(person)


@router.delete(
    "/{person_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a person",
)
async def delete_person_endpoint(
    person_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    """
    Soft-delete a person. Refused while the person still holds an asset.
    """
    try:
        await db_manager.delete_person(db, ctx.tenant_id, person_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except HasDependentsError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
