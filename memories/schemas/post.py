from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
from memories.schemas.user import UserSummary
from memories.schemas.comment import CommentOut


def clean_tags(value):
    # accepts ["a", "b"] or the form's "a, b"
    if value is None:
        return value
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        raise ValueError("tags must be a list of strings or a comma-separated string")
    tags = []
    for tag in value:
        if tag is None:
            continue
        if not isinstance(tag, str):
            raise ValueError("each tag must be a string")
        if tag.strip():
            tags.append(tag.strip())
    return tags


class PostBase(BaseModel):
    @field_validator("title", "message", mode="before", check_fields=False)
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def normalize_tags(cls, value):
        return clean_tags(value)


class PostCreate(PostBase):
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    tags: List[str] = []
    selectedFile: Optional[str] = None


class PostUpdate(PostBase):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    message: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    selectedFile: Optional[str] = None


class PostOut(BaseModel):
    id: int
    title: str
    message: str
    creator: UserSummary
    creatorName: str
    tags: List[str]
    selectedFile: Optional[str] = None
    likeCount: int
    likes: List[UserSummary]
    comments: List[CommentOut]
    createdAt: datetime
    updatedAt: Optional[datetime] = None


class PostPage(BaseModel):
    posts: List[PostOut]
    totalPages: int
    currentPage: int
