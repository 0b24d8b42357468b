from fastapi import APIRouter, Depends
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from memories.core.errors import NotFound, Forbidden, InternalError
from memories.core.security import get_current_user
from memories.crud import post as crud
from memories.db.models.comment import Comment
from memories.db.models.user import User
from memories.db.session import get_db
from memories.routers.post import load_post_out
from memories.schemas.comment import CommentCreate
from memories.schemas.post import PostOut

router = APIRouter()


@router.post("/{post_id}/comments", response_model=PostOut)
def add_comment(
    post_id: str,
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = crud.get_post(db, post_id)
    if not post:
        raise NotFound(f"No post with id: {post_id}")

    try:
        db.add(Comment(post_id=post.id, user_id=current_user.id, text=comment_in.text))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error: {str(e)}")
        raise InternalError("Failed to add comment")

    return load_post_out(db, post.id)


@router.delete("/{post_id}/comments/{comment_id}", response_model=PostOut)
def remove_comment(
    post_id: str,
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = crud.get_post(db, post_id)
    if not post:
        raise NotFound(f"No post with id: {post_id}")

    comment = crud.get_comment(db, post, comment_id)
    if not comment:
        raise NotFound("Comment not found")

    # Check if user is comment owner or admin
    if comment.user_id != current_user.id and current_user.role != "admin":
        raise Forbidden("Not authorized to delete this comment")

    try:
        db.delete(comment)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error: {str(e)}")
        raise InternalError("Failed to remove comment")

    return load_post_out(db, post.id)
