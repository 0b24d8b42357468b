from typing import Optional
from sqlalchemy.orm import Session
from memories.core import config
from memories.db.models.user import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def role_for_email(email: str) -> str:
    return "admin" if normalize_email(email) in config.ADMIN_EMAILS else "user"
