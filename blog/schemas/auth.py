
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator, ValidationInfo

class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=256)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

class RegisterForm(RegisterIn):
    password_confirmation: str

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("The password confirmation does not match.")
        return value

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class TokenOut(BaseModel):
    token: str
    token_type: str = "Bearer"
    user: UserOut

class MessageOut(BaseModel):
    message: str
