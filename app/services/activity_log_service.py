"""
Activity Logging Service
Audit trail of administrator actions
"""

import json
import logging
from uuid import uuid4
from datetime import timedelta
from typing import List, Optional

from app.database import database
from app.utils.datetime_utils import now_local

logger = logging.getLogger(__name__)


class ActivityLogService:
    """Service for activity logging operations"""

    @staticmethod
    async def log_activity(
        admin_id: Optional[str],
        action: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None,
        ip_address: Optional[str] = None
    ) -> str:
        """
        Record an admin action

        Args:
            admin_id: Admin who performed the action
            action: Action type (e.g., 'create_event', 'approve_member')
            resource_type: Type of resource affected (e.g., 'event', 'club')
            resource_id: ID of the resource
            details: Additional JSON details
            ip_address: IP address of the request

        Returns:
            ID of the log entry
        """
        log_id = str(uuid4())

        await database.execute(
            """
            INSERT INTO activity_logs (id, admin_id, action, resource_type, resource_id, details, ip_address, created_at)
            VALUES (:id, :admin_id, :action, :resource_type, :resource_id, :details, :ip_address, :created_at)
            """,
            {
                "id": log_id,
                "admin_id": str(admin_id) if admin_id else None,
                "action": action,
                "resource_type": resource_type,
                "resource_id": str(resource_id) if resource_id else None,
                "details": json.dumps(details, default=str) if details else None,
                "ip_address": ip_address,
                "created_at": now_local()
            }
        )

        logger.debug(f"Audit: {action} on {resource_type} {resource_id} by {admin_id}")
        return log_id

    @staticmethod
    async def get_activity_logs(
        limit: int = 50,
        offset: int = 0,
        action_filter: Optional[str] = None,
        days: int = 30
    ) -> tuple[List[dict], int]:
        """
        Get recent activity logs

        Returns:
            Tuple of (activity logs list, total count)
        """
        since = now_local() - timedelta(days=days)

        where_clause = "l.created_at >= :since"
        params = {"since": since}

        if action_filter:
            where_clause += " AND l.action = :action"
            params["action"] = action_filter

        total = await database.fetch_val(
            f"SELECT COUNT(*) FROM activity_logs l WHERE {where_clause}",
            params
        )

        logs = await database.fetch_all(
            f"""
            SELECT l.id, l.admin_id, l.action, l.resource_type, l.resource_id, l.details,
                   l.ip_address, l.created_at,
                   u.first_name || ' ' || u.last_name AS admin_name, u.email AS admin_email
            FROM activity_logs l
            LEFT JOIN users u ON u.id = l.admin_id
            WHERE {where_clause}
            ORDER BY l.created_at DESC
            LIMIT :limit OFFSET :offset
            """,
            {**params, "limit": limit, "offset": offset}
        )

        return [dict(log) for log in logs], total or 0

    @staticmethod
    async def get_activity_stats(days: int = 7) -> dict:
        """Per-action counts for the last N days"""
        since = now_local() - timedelta(days=days)

        results = await database.fetch_all(
            """
            SELECT
                action,
                COUNT(*) AS count,
                COUNT(DISTINCT admin_id) AS unique_admins,
                MAX(created_at) AS last_activity
            FROM activity_logs
            WHERE created_at >= :since
            GROUP BY action
            ORDER BY count DESC
            """,
            {"since": since}
        )

        return {
            "period_days": days,
            "total_actions": sum(r["count"] for r in results),
            "actions_breakdown": [
                {
                    "action": r["action"],
                    "count": r["count"],
                    "unique_admins": r["unique_admins"],
                    "last_activity": r["last_activity"]
                }
                for r in results
            ]
        }


activity_log_service = ActivityLogService()


def request_ip(request) -> Optional[str]:
    """Client address of a FastAPI request, if known"""
    return request.client.host if request is not None and request.client else None
