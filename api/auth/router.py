"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    return await service.register(payload)


@router.post("/login")
async def login(payload: schemas.LoginRequest) -> schemas.AuthResponse:
    return await service.login(payload)


@router.get("/me")
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> dict:
    return {"user": service.to_user_response(current_user)}


@router.post("/logout")
async def logout(_: dict = Depends(dependencies.get_current_user)) -> dict:
    # Tokens are not stored server-side; the client discards its copy.
    return {"message": "Logout successful"}
