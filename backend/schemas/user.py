from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator
from pydantic.alias_generators import to_camel


def _normalise_phone(v: str) -> str:
    # Strip whitespace and common separators
    cleaned = v.strip().replace(" ", "").replace("-", "").replace("(", "").replace(")", "")
    # Always normalise to E.164 with leading +
    if not cleaned.startswith("+"):
        cleaned = "+" + cleaned
    bare = cleaned[1:]
    if not bare.isdigit() or not (7 <= len(bare) <= 15):
        raise ValueError("Phone must be in E.164 format, e.g. +447700900123")
    return cleaned


class UserRegister(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    phone_number: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name must not be empty")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return _normalise_phone(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    phone_number: str
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
