"""
Activity Log Schemas
Admin audit trail entries and statistics
"""

import json
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator


class AuditEntry(BaseModel):
    """One recorded admin write"""
    model_config = {"from_attributes": True}

    id: UUID
    admin_id: Optional[UUID] = None
    admin_name: Optional[str] = None
    admin_email: Optional[str] = None
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    details: Optional[dict] = None
    ip_address: Optional[str] = None
    created_at: datetime

    @field_validator("details", mode="before")
    @classmethod
    def parse_details(cls, v):
        # Stored as JSON text
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return {"raw": v}
        return v


class ActivityLogResponse(BaseModel):
    logs: List[AuditEntry]
    total: int
    limit: int
    offset: int
    has_more: bool


class ActionCount(BaseModel):
    action: str
    count: int
    unique_admins: int
    last_activity: datetime


class ActivityStatsResponse(BaseModel):
    """Per-action totals over a period"""
    period_days: int
    total_actions: int
    actions_breakdown: List[ActionCount]
