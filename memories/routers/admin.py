from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from memories.db.session import get_db
from memories.db.models.user import User
from memories.db.models.post import Post
from memories.db.models.comment import Comment
from memories.schemas.user import UserOut
from memories.core.security import get_current_admin


router = APIRouter()

@router.get("/stats")
def admin_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return {
        "totalUsers": db.query(User).count(),
        "totalPosts": db.query(Post).count(),
        "totalComments": db.query(Comment).count(),
    }


#get all users
@router.get("/users", response_model=List[UserOut])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    return db.query(User).order_by(User.id).all()
