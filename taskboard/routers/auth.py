# taskboard/routers/auth.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from taskboard.db import get_db
from taskboard.errors import envelope
from taskboard.models import User
from taskboard.schemas import user_to_dict
from taskboard.security import TokenService, get_current_user, get_token_service
from taskboard.services import accounts

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# -----------------------------
#   REGISTRO
# -----------------------------
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user = accounts.register(db, payload)
    return envelope(
        True,
        "User registered successfully",
        data={"token": tokens.issue(user), "user": user_to_dict(user)},
    )


# -----------------------------
#   LOGIN
# -----------------------------
@router.post("/login")
def login(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user = accounts.login(db, payload)
    return envelope(
        True,
        "Login successful",
        data={"token": tokens.issue(user), "user": user_to_dict(user)},
    )


# -----------------------------
#   USUARIO ACTUAL
# -----------------------------
@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return envelope(True, data={"user": user_to_dict(current_user)})
