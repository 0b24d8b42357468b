import math
from typing import List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload
from memories.db.models.post import Post, PostTag
from memories.db.models.like import Like
from memories.db.models.comment import Comment


def parse_id(value) -> Optional[int]:
    """Return ``value`` as a positive integer id, or None if it isn't one."""
    value = str(value)
    # ascii only; ids past 64-bit range cannot exist
    if not (value.isascii() and value.isdigit()) or len(value) > 18 or int(value) < 1:
        return None
    return int(value)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _with_children(query):
    return query.options(
        selectinload(Post.creator),
        selectinload(Post.tag_items),
        selectinload(Post.likes).selectinload(Like.user),
        selectinload(Post.comments).selectinload(Comment.user),
    )


def get_post(db: Session, post_id) -> Optional[Post]:
    pk = parse_id(post_id)
    if pk is None:
        return None
    return _with_children(db.query(Post)).filter(Post.id == pk).first()


def get_comment(db: Session, post: Post, comment_id) -> Optional[Comment]:
    pk = parse_id(comment_id)
    if pk is None:
        return None
    return db.query(Comment).filter(Comment.id == pk, Comment.post_id == post.id).first()


def get_posts(
    db: Session,
    page: int = 1,
    limit: int = 8,
    tag: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[Post], int]:
    """One page of posts, newest first, plus the total page count."""
    query = db.query(Post)
    if tag:
        query = query.filter(Post.tag_items.any(PostTag.name == tag))
    if search:
        pattern = _like_pattern(search)
        query = query.filter(
            or_(
                Post.title.ilike(pattern, escape="\\"),
                Post.message.ilike(pattern, escape="\\"),
            )
        )

    total = query.count()
    if (page - 1) * limit >= total:
        return [], math.ceil(total / limit)
    posts = (
        _with_children(query)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return posts, math.ceil(total / limit)


def search_posts(db: Session, q: Optional[str] = None, tag: Optional[str] = None, limit: int = 20) -> List[Post]:
    query = db.query(Post)
    if q:
        pattern = _like_pattern(q)
        query = query.filter(
            or_(
                Post.title.ilike(pattern, escape="\\"),
                Post.message.ilike(pattern, escape="\\"),
                Post.tag_items.any(PostTag.name.ilike(pattern, escape="\\")),
            )
        )
    if tag:
        query = query.filter(Post.tag_items.any(PostTag.name == tag))

    return (
        _with_children(query)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit)
        .all()
    )


def set_tags(post: Post, tags: List[str]):
    post.tag_items = [PostTag(name=name, position=position) for position, name in enumerate(tags)]


def toggle_like(db: Session, post: Post, user_id: int) -> bool:
    """Add or remove ``user_id``'s like and recount ``like_count``.

    Both statements run in the caller's transaction. Returns True if the post
    is now liked by the user. A concurrent duplicate insert surfaces as
    IntegrityError from the unique (post_id, user_id) constraint.
    """
    removed = (
        db.query(Like)
        .filter(Like.post_id == post.id, Like.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if not removed:
        db.add(Like(post_id=post.id, user_id=user_id))
        db.flush()

    like_total = select(func.count(Like.id)).where(Like.post_id == post.id).scalar_subquery()
    db.query(Post).filter(Post.id == post.id).update(
        {Post.like_count: like_total}, synchronize_session=False
    )
    return not removed


def _user_summary(user):
    return {"id": user.id, "name": user.name, "avatar": user.avatar}


def serialize_post(post: Post) -> dict:
    """Build the public JSON shape of a post with users resolved by reference."""
    return {
        "id": post.id,
        "title": post.title,
        "message": post.message,
        "creator": _user_summary(post.creator),
        "creatorName": post.creator.name,
        "tags": post.tags,
        "selectedFile": post.selected_file,
        "likeCount": post.like_count,
        "likes": [_user_summary(like.user) for like in post.likes],
        "comments": [
            {
                "id": comment.id,
                "user": _user_summary(comment.user),
                "text": comment.text,
                "name": comment.user.name,
                "avatar": comment.user.avatar,
                "createdAt": comment.created_at,
            }
            for comment in post.comments
        ],
        "createdAt": post.created_at,
        "updatedAt": post.updated_at,
    }
