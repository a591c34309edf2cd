"""
Auth business logic.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from core.db import Database

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=str(user_row["id"]),
        email=str(user_row["email"]),
        name=str(user_row["name"]),
        image=user_row.get("image"),
        created_at=user_row["created_at"],
    )


def _issue_token(user_row: dict) -> schemas.TokenResponse:
    return schemas.TokenResponse(
        access_token=security.build_access_token(user_id=str(user_row["id"])),
        expires_in=security.access_token_expire_minutes() * 60,
    )


async def register(db: Database, payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    existing = await repository.get_user_by_email(db, payload.email)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        )

    try:
        user_row = await repository.create_user(
            db,
            email=payload.email,
            password_hash=security.hash_password(payload.password),
            name=payload.name,
            image=payload.image,
        )
    except asyncpg.UniqueViolationError as exc:
        # Lost a race with a concurrent registration for the same email.
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        ) from exc

    logger.info("user_registered user_id=%s", user_row["id"])
    return schemas.AuthResponse(user=_to_user_response(user_row), tokens=_issue_token(user_row))


async def login(db: Database, payload: schemas.LoginRequest) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(db, payload.email)
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive.",
        )

    if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    return schemas.AuthResponse(user=_to_user_response(user_row), tokens=_issue_token(user_row))


async def get_user_from_access_token(db: Database, access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    user_row = await repository.get_user_by_id(db, str(payload["sub"]).strip())
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


def me(user_row: dict) -> schemas.UserResponse:
    return _to_user_response(user_row)
