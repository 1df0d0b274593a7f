# taskboard/services/accounts.py
import logging
from typing import Dict

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.errors import Conflict, FieldError, ValidationError
from taskboard.models import Role, User
from taskboard.security import authenticate, hash_password
from taskboard.validation import validate_login, validate_registration

log = logging.getLogger("taskboard.accounts")


def register(db: Session, fields: Dict) -> User:
    cleaned, errors = validate_registration(fields)
    if errors:
        raise ValidationError(errors=errors)

    existing = (
        db.query(User)
        .filter(or_(User.email == cleaned["email"], User.username == cleaned["username"]))
        .first()
    )
    if existing:
        field = "email" if existing.email == cleaned["email"] else "username"
        raise Conflict(
            "User with this email or username already exists",
            errors=[FieldError(field, f"{field.capitalize()} is already taken")],
        )

    user = User(
        username=cleaned["username"],
        email=cleaned["email"],
        password_hash=hash_password(cleaned["password"]),
        role=Role.USER,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # dos registros simultáneos con los mismos datos
        db.rollback()
        raise Conflict("User with this email or username already exists")
    db.refresh(user)
    log.info("Usuario registrado: %s (id=%s)", user.username, user.id)
    return user


def login(db: Session, fields: Dict) -> User:
    cleaned, errors = validate_login(fields)
    if errors:
        raise ValidationError(errors=errors)
    return authenticate(db, cleaned["email"], cleaned["password"])


def ensure_admin(db: Session, username: str, email: str, password: str) -> User:
    """Crea la cuenta admin inicial si todavía no existe ese email."""
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=Role.ADMIN,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("Cuenta admin creada: %s", email)
    return user
