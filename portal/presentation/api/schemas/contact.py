from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ContactRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    company: Optional[str] = None
    message: str = Field(min_length=1)
