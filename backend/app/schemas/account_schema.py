# backend/app/schemas/account_schema.py
import re
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_RULES = (
    (re.compile(r".{8,}"), "at least 8 characters"),
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"[0-9]"), "a number"),
)


def check_password_strength(value: str) -> str:
    value = value.strip()
    missing = [label for rule, label in PASSWORD_RULES if not rule.search(value)]
    if missing:
        raise ValueError("Password needs " + ", ".join(missing))
    return value


class AccountCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=20)
    email: EmailStr
    password: str

    @field_validator("username", mode="before")
    @classmethod
    def _strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def _strong_password(cls, v):
        return check_password_strength(v)


class AccountUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    new_password: Optional[str] = None

    @field_validator("new_password")
    @classmethod
    def _strong_password(cls, v):
        if v is None:
            return v
        return check_password_strength(v)


class LoginIn(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: str


class TokenOut(BaseModel):
    token: str
