"""Security utilities: password hashing, session tokens, generated codes."""

import hashlib
import re
import secrets
import string

import bcrypt

from pairdiary.config import settings


# --- Password Hashing ---

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(password.encode(), hashed.encode())


# Compared against when the username is unknown, so both failure paths cost a bcrypt check
DUMMY_PASSWORD_HASH = hash_password(secrets.token_urlsafe(16))


# --- Session Tokens ---

SESSION_TOKEN_BYTES = 32
_SESSION_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{43}$")


def generate_session_token() -> str:
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def is_well_formed_session_token(token: str | None) -> bool:
    return bool(token) and _SESSION_TOKEN_RE.match(token) is not None


def hash_token(token: str) -> str:
    """Hash a token for storage (not for password - just fingerprint)."""
    return hashlib.sha256(token.encode()).hexdigest()


# --- Codes ---

_ACCOUNT_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_invite_code() -> str:
    """Random uppercase hex invite code, e.g. ``9F3A0C1B``."""
    return secrets.token_hex(settings.invite_code_length // 2 + 1)[: settings.invite_code_length].upper()


def generate_account_id() -> str:
    return "".join(secrets.choice(_ACCOUNT_ID_ALPHABET) for _ in range(settings.account_id_length))
