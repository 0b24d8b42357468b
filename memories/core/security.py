import logging
from passlib.context import CryptContext
from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from memories.core import config
from memories.core.errors import Unauthorized, Forbidden, NotFound
from memories.schemas.token import TokenData
from memories.db.session import get_db
from memories.db.models.user import User
from memories.db.models.post import Post
from memories.crud import post as post_crud
from memories.crud import user as user_crud

SECRET_KEY = config.SECRET_KEY
ALGORITHM = config.ALGORITHM

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Only "Authorization: Bearer <token>" is accepted
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str):
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def issue_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(
        {"sub": str(user.id), "name": user.name, "role": user.role},
        expires_delta,
    )


def verify_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except JWTError:
        raise Unauthorized("Invalid token")

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit() or "exp" not in payload:
        raise Unauthorized("Invalid token")
    return TokenData(
        id=int(subject),
        name=payload.get("name", ""),
        role=payload.get("role", "user"),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def get_bearer_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        if request.headers.get("Authorization"):
            logging.warning(f"auth: malformed authorization header on {request.url.path}")
            raise Unauthorized("Malformed authorization header, expected 'Bearer <token>'")
        raise Unauthorized("No auth header provided")
    return credentials.credentials


def get_session(token: str = Depends(get_bearer_token)) -> TokenData:
    session = verify_token(token)
    if session.is_expired(datetime.now(timezone.utc)):
        raise Unauthorized("Token has expired")
    return session


def get_current_user(session: TokenData = Depends(get_session), db: Session = Depends(get_db)):
    user = user_crud.get_user(db, session.id)
    if user is None:
        logging.warning(f"auth: token for unknown user {session.id}")
        raise Unauthorized("User no longer exists")
    return user


def get_current_admin(current_user: User = Depends(get_current_user)):
    if current_user.role != "admin":
        raise Forbidden("Access denied. Admin role required.")
    return current_user


def get_owned_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Post:
    post = post_crud.get_post(db, post_id)
    if post is None:
        raise NotFound(f"No post with id: {post_id}")
    if current_user.role == "admin":
        return post
    if post.creator_id != current_user.id:
        logging.warning(f"auth: user {current_user.id} denied access to post {post.id}")
        raise Forbidden("Access denied. You can only modify your own posts.")
    return post
