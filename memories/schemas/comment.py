from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from memories.schemas.user import UserSummary

class CommentCreate(BaseModel):
    text: str = Field(min_length=1, max_length=2000)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class CommentOut(BaseModel):
    id: int
    user: UserSummary
    text: str
    name: str
    avatar: Optional[str] = None
    createdAt: datetime
