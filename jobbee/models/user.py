from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from jobbee.database.query import to_datetime, to_object_id

# Casters for query-string filters on the users collection
USER_FIELD_TYPES = {
    "_id": to_object_id,
    "createdAt": to_datetime,
}

# Never returned by listings
USER_HIDDEN_FIELDS = ("password", "resetPasswordToken", "resetPasswordExpire")


class UserRegister(BaseModel):
    name: str = Field(min_length=1, description="Please enter your name")
    email: EmailStr
    password: str = Field(min_length=8, description="Your password must be at least 8 characters long")
    role: str = Field(default="user", pattern="^(user|employeer)$")


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None


class PasswordUpdate(BaseModel):
    currentPassword: str
    newPassword: str = Field(min_length=8)


class ForgotPassword(BaseModel):
    email: EmailStr


class ResetPassword(BaseModel):
    password: str = Field(min_length=8)
