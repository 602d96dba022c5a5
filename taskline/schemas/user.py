from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel
from taskline import config


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        """Enforce the minimum length and bcrypt's 72-byte limit when UTF-8 encoded.

        Raise a validation error so API returns a 400 with a clear message.
        """
        if len(v) < config.MIN_PASSWORD_LENGTH:
            raise ValueError(f"password too short: must be at least {config.MIN_PASSWORD_LENGTH} characters")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return v

    @field_validator("name")
    @classmethod
    def name_length(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) > 50:
            raise ValueError("name must be less than 50 characters")
        return v or None


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    name: Optional[str] = None


class PrincipalOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    email: str
    name: Optional[str] = None
