"""Shared helpers for API routes (error payloads, public user view)."""


def public_user(user: dict) -> dict:
    """User record without the password hash."""
    return {k: v for k, v in user.items() if k != "passwordHash"}


def error_body(message: str, code: str) -> dict:
    return {"detail": message, "code": code}
