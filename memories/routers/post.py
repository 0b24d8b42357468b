from fastapi import APIRouter, Depends, Query, status
import logging
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from memories.core import config
from memories.core.errors import NotFound, InternalError
from memories.core.media import store_selected_file, destroy_media
from memories.core.security import get_current_user, get_owned_post
from memories.crud import post as crud
from memories.db.models.post import Post
from memories.db.models.user import User
from memories.db.session import get_db
from memories.schemas.post import PostCreate, PostUpdate, PostOut, PostPage

router = APIRouter()

# keeps (page - 1) * limit inside a 32-bit OFFSET
MAX_PAGE = 2**31 // config.POSTS_MAX_PAGE_SIZE


def load_post_out(db: Session, post_id) -> dict:
    post = crud.get_post(db, post_id)
    if post is None:
        raise NotFound(f"No post with id: {post_id}")
    return crud.serialize_post(post)


@router.get("", response_model=PostPage)
def get_posts(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(config.POSTS_PAGE_SIZE, ge=1, le=config.POSTS_MAX_PAGE_SIZE),
    tag: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    posts, total_pages = crud.get_posts(db, page=page, limit=limit, tag=tag, search=search)
    return {
        "posts": [crud.serialize_post(post) for post in posts],
        "totalPages": total_pages,
        "currentPage": page,
    }


# must be declared before /{post_id}
@router.get("/search", response_model=List[PostOut])
def search_posts(
    q: Optional[str] = None,
    tag: Optional[str] = None,
    db: Session = Depends(get_db),
):
    posts = crud.search_posts(db, q=q, tag=tag, limit=config.SEARCH_RESULT_LIMIT)
    return [crud.serialize_post(post) for post in posts]


@router.get("/{post_id}", response_model=PostOut)
def get_post_by_id(post_id: str, db: Session = Depends(get_db)):
    return load_post_out(db, post_id)


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    post_in: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    selected_file, public_id = store_selected_file(post_in.selectedFile, current_user.id)

    try:
        new_post = Post(
            title=post_in.title,
            message=post_in.message,
            creator_id=current_user.id,
            selected_file=selected_file,
            media_public_id=public_id,
        )
        crud.set_tags(new_post, post_in.tags)
        db.add(new_post)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error: {str(e)}")
        # Cleanup uploaded media if database operation failed
        destroy_media(public_id)
        raise InternalError("Failed to create post")

    logging.info(f"post {new_post.id} created by user {current_user.id}")
    return load_post_out(db, new_post.id)


@router.patch("/{post_id}", response_model=PostOut)
def update_post(
    post_in: PostUpdate,
    db: Session = Depends(get_db),
    post: Post = Depends(get_owned_post),
):
    update_data = post_in.model_dump(exclude_unset=True)
    old_public_id = None
    new_public_id = None

    if "selectedFile" in update_data and update_data["selectedFile"] != post.selected_file:
        old_public_id = post.media_public_id
        post.selected_file, new_public_id = store_selected_file(update_data["selectedFile"], post.creator_id)
        post.media_public_id = new_public_id

    try:
        if update_data.get("title") is not None:
            post.title = update_data["title"]
        if update_data.get("message") is not None:
            post.message = update_data["message"]
        if update_data.get("tags") is not None:
            crud.set_tags(post, update_data["tags"])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error: {str(e)}")
        destroy_media(new_public_id)
        raise InternalError("Failed to update post")

    # Delete old media after successful update
    destroy_media(old_public_id)
    return load_post_out(db, post.id)


@router.delete("/{post_id}")
def delete_post(
    db: Session = Depends(get_db),
    post: Post = Depends(get_owned_post),
):
    post_id = post.id
    public_id = post.media_public_id
    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error: {str(e)}")
        raise InternalError("Failed to delete post")

    destroy_media(public_id)
    logging.info(f"post {post_id} deleted")
    return {"message": "Post deleted successfully."}
