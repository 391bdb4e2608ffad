from datetime import datetime, timezone
import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from gym_coach.models.audit import AuditLog

logger = logging.getLogger(__name__)

class AuditService:
    @staticmethod
    async def log_action(
        db: AsyncSession,
        profile_id: uuid.UUID | None,
        action: str,
        target_id: str | None = None,
        details: str | None = None
    ):
        """
        Record an admin action. The row joins the caller's transaction, so it
        is only persisted when the audited change itself commits.
        """
        audit_entry = AuditLog(
            profile_id=profile_id,
            action=action,
            target_id=target_id,
            details=details,
            timestamp=datetime.now(timezone.utc)
        )
        db.add(audit_entry)
        logger.info("audit action=%s target=%s profile=%s", action, target_id, profile_id)
