"""
The application key is one static secret shared by every client, anonymous
browsers included. It identifies the application, not a user, so it is not an
authorization boundary on its own; admin routes can additionally require an
admin session token (see dependencies.require_admin_session).

A missing PUBLIC_ANON_KEY does not crash the app at import: a safe default
is used with a loud warning so local development still works.
"""
import os
import secrets
import warnings

_PUBLIC_ANON_KEY: str = os.getenv("PUBLIC_ANON_KEY", "")

if not _PUBLIC_ANON_KEY:
    warnings.warn(
        "PUBLIC_ANON_KEY is not set. Using an insecure default. "
        "Set this env var in production!",
        stacklevel=2,
    )
    _PUBLIC_ANON_KEY = "insecure-default-change-me"

PUBLIC_ANON_KEY: str = _PUBLIC_ANON_KEY


def verify_api_key(provided_key: str) -> bool:
    """Verify the application key using constant-time comparison."""
    if not provided_key:
        return False
    return secrets.compare_digest(str(provided_key).encode(), PUBLIC_ANON_KEY.encode())
