"""
Authentication Module
HTTP Basic authentication dependency and password hashing
"""
import secrets
import hashlib
import base64
from fastapi import HTTPException, Request
from .dependencies import auth_config


def hash_password(password: str) -> str:
    """Hash a password using SHA-256"""
    return hashlib.sha256(password.encode()).hexdigest()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"},
    )


def get_current_user(request: Request) -> str:
    """Get current user; returns "anonymous" when authentication is disabled"""
    if not auth_config.get("enabled", False):
        return "anonymous"

    authorization = request.headers.get("Authorization")
    if not authorization:
        raise _unauthorized("Not authenticated")

    try:
        scheme, credentials = authorization.split()
        if scheme.lower() != "basic":
            raise _unauthorized("Invalid authentication scheme")

        decoded = base64.b64decode(credentials).decode("utf-8")
        username, password = decoded.split(":", 1)
    except ValueError:
        raise _unauthorized("Invalid authentication credentials")

    username_correct = secrets.compare_digest(
        username.encode("utf8"), auth_config["username"].encode("utf8")
    )
    password_correct = secrets.compare_digest(
        hash_password(password).encode("utf8"), auth_config["password_hash"].encode("utf8")
    )

    if not (username_correct and password_correct):
        raise _unauthorized("Invalid authentication credentials")

    return username
