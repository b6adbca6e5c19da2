"""User routes: signup, login and self-service profile management."""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field, field_validator

from cafe_ordering_service.auth.password_hasher import MAX_PASSWORD_BYTES, password_too_long
from cafe_ordering_service.handlers.dependencies import UserId, get_user_service
from cafe_ordering_service.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

Users = Annotated[UserService, Depends(get_user_service)]


def check_password_bytes(password: str | None) -> str | None:
    """Reject passwords bcrypt would only partly read."""
    if password is not None and password_too_long(password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


class SignupRequest(BaseModel):
    """Request body for signup."""

    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    birthday: date | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        check_password_bytes(v)
        return v


class LoginRequest(BaseModel):
    """Request body for login."""

    email: str
    password: str


class ProfileUpdateRequest(BaseModel):
    """Request body for a partial profile update."""

    name: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    birthday: date | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return check_password_bytes(v)


@router.get("")
async def list_users(user_service: Users) -> dict[str, Any]:
    """List every user."""
    users = await user_service.list_users()
    return {
        "message": "User router operation",
        "result": [user.model_dump(mode="json") for user in users],
    }


@router.post("/signup", status_code=201)
async def signup(body: SignupRequest, user_service: Users) -> dict[str, Any]:
    """Create an account and return a token for it."""
    result = await user_service.signup(
        email=body.email, password=body.password, name=body.name, birthday=body.birthday
    )
    return {
        "message": f"Thank you for signing up to Three Beans {result.user.name}!",
        "newUser": result.user.model_dump(mode="json"),
        "token": result.token,
        "decodedJwt": result.claims,
    }


@router.post("/login")
async def login(body: LoginRequest, user_service: Users) -> dict[str, Any]:
    """Exchange email and password for a token."""
    result = await user_service.login(email=body.email, password=body.password)
    return {
        "message": f"{result.user.name} has logged in successfully!",
        "token": result.token,
    }


@router.patch("/update")
async def update_profile(
    body: ProfileUpdateRequest, user_service: Users, user_id: UserId
) -> dict[str, Any]:
    """Update the caller's own profile and return a fresh token."""
    result = await user_service.update_profile(
        user_id=user_id,
        name=body.name,
        email=body.email,
        password=body.password,
        birthday=body.birthday,
    )
    return {"message": "Profile updated successfully!", "token": result.token}


@router.delete("/delete")
async def delete_profile(user_service: Users, user_id: UserId) -> dict[str, Any]:
    """Delete the caller's own profile."""
    user = await user_service.delete_profile(user_id)
    return {"message": f"User {user.name} deleted successfully."}
