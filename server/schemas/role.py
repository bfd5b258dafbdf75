from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class RoleRecord(BaseModel):
    """Stored role with its permission list."""
    id: str
    name: str
    description: Optional[str] = None
    permissions: list[str]
    level: int
    users_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RolePermissionRequest(BaseModel):
    permission: str = Field(..., min_length=1)
