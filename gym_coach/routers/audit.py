from typing import Annotated
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from pydantic import BaseModel
import uuid
from datetime import datetime

from gym_coach.database import get_db
from gym_coach.auth import dependencies
from gym_coach.models.user import Profile
from gym_coach.models.audit import AuditLog
from gym_coach.core.responses import StandardResponse

router = APIRouter()

class AuditLogResponse(BaseModel):
    id: uuid.UUID
    profile_id: uuid.UUID | None
    action: str
    target_id: str | None
    timestamp: datetime
    details: str | None

    class Config:
        from_attributes = True

@router.get("/logs", response_model=StandardResponse[list[AuditLogResponse]])
async def get_audit_logs(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    action: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
):
    """Most recent admin actions, optionally narrowed to one action name."""
    stmt = select(AuditLog)
    if action:
        stmt = stmt.where(AuditLog.action == action)
    stmt = stmt.order_by(AuditLog.timestamp.desc()).limit(limit)
    result = await db.execute(stmt)
    logs = result.scalars().all()

    return StandardResponse(data=[AuditLogResponse.model_validate(log) for log in logs])
