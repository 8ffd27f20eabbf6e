"""
Auth business logic.

Sessions are stateless: a signed access token is the whole session, so
logging out only asks the client to drop it.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        email=str(user_row["email"]),
        name=user_row.get("name"),
        plan=str(user_row.get("plan") or "free"),
        created_at=user_row.get("created_at"),
    )


def _auth_response(user_row: dict, *, message: str) -> schemas.AuthResponse:
    token = security.build_access_token(user_id=int(user_row["id"]), email=str(user_row["email"]))
    return schemas.AuthResponse(message=message, user=to_user_response(user_row), token=token)


async def register(payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    if await repository.get_user_by_email(payload.email) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists.",
        )

    password_hash = security.hash_password(payload.password)
    try:
        user_row = await repository.create_user(
            email=payload.email,
            password_hash=password_hash,
            name=payload.name,
        )
    except asyncpg.UniqueViolationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists.",
        ) from exc

    logger.info("user_registered user_id=%s", user_row["id"])
    return _auth_response(user_row, message="User registered successfully")


async def login(payload: schemas.LoginRequest) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None or not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive.",
        )

    return _auth_response(user_row, message="Login successful")


async def get_user_from_access_token(access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token subject.",
        )

    user_row = await repository.get_user_by_id(int(subject))
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found.",
        )
    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive.",
        )
    return user_row
