"""Business listing endpoint."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.common import BusinessResponse
from app.dependencies import get_db
from core.security import Actor, get_current_actor
from services.business_service import BusinessService

router = APIRouter()


@router.get("/businesses", response_model=list[BusinessResponse])
async def list_businesses(
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
) -> list[BusinessResponse]:
    """List the caller's businesses, newest first."""
    businesses = await BusinessService(db).list_for_user(actor.id, offset=offset, limit=limit)
    return [BusinessResponse(**b.to_dict()) for b in businesses]
