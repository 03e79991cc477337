# lifting/deps/user.py
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from lifting.db import get_db
from lifting.models import User

def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: int | None = Header(default=None),
) -> User:
    """
    Resolves the caller from the X-User-Id header. Authentication lives in
    front of this service; here the id is trusted as given.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    user = db.get(User, x_user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return user

def ensure_owner(owner_id: int | None, current: User, what: str) -> None:
    """Owner-only guard; built-in rows (owner None) are readable by everyone."""
    if owner_id is not None and owner_id != current.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Not allowed for this {what}")
