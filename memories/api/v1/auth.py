from fastapi import APIRouter, Depends, status
import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from memories.db.models.user import User
from memories.schemas.user import UserCreate, UserLogin, UserOut
from memories.schemas.token import AuthResponse
from memories.core.errors import Conflict, Unauthorized, InternalError
from memories.core.security import hash_password, verify_password, issue_token, get_current_user
from memories.crud import user as crud
from memories.db.session import get_db


router = APIRouter()

INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, user_in.email):
        raise Conflict("Email already registered")

    new_user = User(
        name=user_in.name,
        email=crud.normalize_email(user_in.email),
        password=hash_password(user_in.password),
        role=crud.role_for_email(user_in.email),
        avatar=user_in.avatar,
    )
    try:
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Database error: {str(e)}")
        raise InternalError("Failed to register user")

    logging.info(f"registered user {new_user.id} with role {new_user.role}")
    return {"token": issue_token(new_user), "user": new_user}


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    # same message for unknown email and wrong password
    user = crud.get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.password):
        raise Unauthorized(INVALID_CREDENTIALS)

    return {"token": issue_token(user), "user": user}


@router.get("/me", response_model=UserOut)
def get_user_me(current_user: User = Depends(get_current_user)):
    return current_user
