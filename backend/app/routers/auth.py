"""Auth routes: session login for the admin console.

Route overview:
  POST /login            username + password → session cookie
  POST /register         create an admin account
  POST /change-password  change the logged-in user's password (requires login)
  POST /logout           clear the session
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.auth.password import hash_password, verify_password
from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisteredUser,
    RegisterRequest,
    SessionUser,
)
from app.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_PASSWORD_LENGTH = 6


# ── Login / logout ───────────────────────────────────────────

@router.post("/login", response_model=SessionUser)
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    username = body.username.strip()
    user = await db.scalar(select(User).where(User.username == username))
    if not user or not verify_password(body.password, user.password_hash):
        logger.warning(f"Failed login for {username!r}")
        raise HTTPException(status_code=401, detail="Invalid username or password")

    session_user = {"id": user.id, "username": user.username}
    request.session["user"] = session_user
    logger.info(f"User {user.username} logged in")
    return SessionUser(**session_user)


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request):
    user = request.session.get("user")
    request.session.clear()
    if user:
        logger.info(f"User {user.get('username')} logged out")
    return MessageResponse(message="Logged out")


# ── Registration ─────────────────────────────────────────────

@router.post("/register", response_model=RegisteredUser, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    if body.confirm_password is not None and body.password != body.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    username = body.username.strip()
    existing = await db.scalar(select(User).where(User.username == username))
    if existing:
        raise HTTPException(status_code=400, detail="Username already exists")

    user = User(username=username, password_hash=hash_password(body.password))
    db.add(user)
    await db.flush()

    logger.info(f"Registered user {user.username}")
    return RegisteredUser.model_validate(user)


# ── Password change ──────────────────────────────────────────

@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    session_user: dict = Depends(require_login),
):
    if not body.old_password or not body.new_password:
        raise HTTPException(status_code=400, detail="Old and new passwords are required")
    if body.confirm_password is not None and body.new_password != body.confirm_password:
        raise HTTPException(status_code=400, detail="New passwords do not match")
    if len(body.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"New password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    user = await db.get(User, session_user["id"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not verify_password(body.old_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Old password is incorrect")

    user.password_hash = hash_password(body.new_password)
    await db.flush()

    logger.info(f"User {user.username} changed password")
    return MessageResponse(message="Password updated")
