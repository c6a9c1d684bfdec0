from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BadgeBase(BaseModel):
    name: str = Field(min_length=1)
    description: str
    icon: Optional[str] = None
    criteria_type: str
    criteria_value: int = Field(ge=0)


class BadgeCreate(BadgeBase):
    pass


class BadgeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    criteria_type: Optional[str] = None
    criteria_value: Optional[int] = Field(default=None, ge=0)


class BadgeRead(BadgeBase):
    id: int

    class Config:
        from_attributes = True


class BadgeWithStatus(BaseModel):
    badge: BadgeRead
    is_unlocked: bool
    awarded_at: Optional[datetime]


class UserBadgeRead(BaseModel):
    badge_id: int
    awarded_at: Optional[datetime]
    badge: BadgeRead

    class Config:
        from_attributes = True
