from fastapi import APIRouter, Depends
import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from memories.core.errors import NotFound, Conflict, InternalError
from memories.core.security import get_current_user
from memories.crud import post as crud
from memories.db.models.user import User
from memories.db.session import get_db
from memories.routers.post import load_post_out
from memories.schemas.post import PostOut

router = APIRouter()

@router.patch("/{post_id}/likePost", response_model=PostOut)
def toggle_like(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = crud.get_post(db, post_id)
    if not post:
        raise NotFound(f"No post with id: {post_id}")

    try:
        liked = crud.toggle_like(db, post, current_user.id)
        db.commit()
    except IntegrityError:
        # another request inserted the same like between our delete and insert
        db.rollback()
        raise Conflict("Like state changed concurrently, please try again")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error: {str(e)}")
        raise InternalError("Failed to update like")

    logging.info(f"user {current_user.id} {'liked' if liked else 'unliked'} post {post.id}")
    return load_post_out(db, post.id)
