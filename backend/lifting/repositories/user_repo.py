# lifting/repositories/user_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from lifting.models import User
from lifting.repositories.base import BaseRepository

class UserRepository(BaseRepository[User]):
    model = User

    # READS
    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def create(self, *, email: str, name: str) -> User:
        user = User(email=email, name=name)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            # Re-raise a clean marker the router can map to 400
            raise ValueError("email_already_exists")
