# rxdesk/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field


class SignupIn(BaseModel):
    doctor_name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone_no: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=1)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class ProfileOut(BaseModel):
    id: int
    doctor_name: str
    email: str
    phone_no: str


class LoginOut(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    profile: ProfileOut
