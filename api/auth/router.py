"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.db import Database, get_database

from . import dependencies, schemas, service

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    db: Database = Depends(get_database),
) -> schemas.AuthResponse:
    return await service.register(db, payload)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    payload: schemas.LoginRequest,
    db: Database = Depends(get_database),
) -> schemas.AuthResponse:
    return await service.login(db, payload)


@router.get("/me", response_model=schemas.UserResponse)
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> schemas.UserResponse:
    return service.me(current_user)
