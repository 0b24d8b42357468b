from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from memories.db.base import Base

class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    selected_file = Column(Text, nullable=True)
    media_public_id = Column(String, nullable=True)
    like_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = relationship("User", back_populates="posts")
    tag_items = relationship(
        "PostTag", back_populates="post", cascade="all, delete-orphan", order_by="PostTag.position"
    )
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan", order_by="Like.id")
    # newest first
    comments = relationship(
        "Comment", back_populates="post", cascade="all, delete-orphan", order_by="Comment.id.desc()"
    )

    @property
    def tags(self):
        return [tag.name for tag in self.tag_items]


class PostTag(Base):
    __tablename__ = "post_tags"

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    post = relationship("Post", back_populates="tag_items")
