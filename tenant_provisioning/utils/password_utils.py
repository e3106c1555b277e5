"""Password generation and hashing for provisioned users."""

import secrets
import string
from functools import lru_cache
from typing import Optional

from passlib.context import CryptContext

from ..config import get_config

_ALPHABET = string.ascii_letters + string.digits + string.punctuation


@lru_cache(maxsize=4)
def _crypt_context(scheme: str) -> CryptContext:
    return CryptContext(schemes=[scheme], deprecated="auto")


def generate_password(length: Optional[int] = None) -> str:
    """Random password. Provisioned users sign in by OTP, so nobody is told this value."""
    length = length or get_config().provisioning.generated_password_length
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def hash_password(password: str) -> str:
    return _crypt_context(get_config().provisioning.password_hash_scheme).hash(password)
