from typing import Annotated
from pydantic import BaseModel, EmailStr, StringConstraints
from datetime import datetime

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]

class UserBase(BaseModel):
    email: EmailStr
    name: NameStr

class UserCreate(UserBase):
    pass

class UserRead(UserBase):
    id: int
    created_at: datetime | None = None
    model_config = {"from_attributes": True}
