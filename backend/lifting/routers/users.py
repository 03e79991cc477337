from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from lifting.db import get_db
from lifting.repositories.user_repo import UserRepository
from lifting.schemas.user import UserCreate, UserRead
from lifting.deps.user import get_current_user
from lifting.models import User

router = APIRouter(prefix="/users", tags=["users"])

@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    repo = UserRepository(db)
    if repo.get_by_email(payload.email):
        raise HTTPException(status_code=400, detail="email already registered")
    try:
        user = repo.create(email=payload.email, name=payload.name)
    except ValueError as e:
        if str(e) == "email_already_exists":
            raise HTTPException(status_code=400, detail="email already registered")
        raise
    return user

@router.get("/me", response_model=UserRead)
def me(current: User = Depends(get_current_user)):
    return current

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    if user_id != current.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
    user = UserRepository(db).get(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
