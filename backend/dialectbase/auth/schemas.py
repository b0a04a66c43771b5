from pydantic import BaseModel, Field
from typing import Optional


class RegisterRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=150)
    email: Optional[str] = Field(None, max_length=254)
    password: Optional[str] = Field(None, max_length=256)


class LoginRequest(BaseModel):
    email: Optional[str] = Field(None, max_length=254)
    password: Optional[str] = Field(None, max_length=256)
