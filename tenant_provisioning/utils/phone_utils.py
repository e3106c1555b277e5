"""
Phone number normalization.

Admin phone numbers arrive in whatever shape the registration form produced
(``0712345678``, ``712345678``, ``254712345678``, ``+254712345678``) and are
stored as E.164 (``+254712345678``). The national subscriber number is nine
digits starting with 7 or 1.
"""

import re
from typing import Optional

from ..config import get_config
from ..exceptions import ErrorCode, ValidationError

_SEPARATORS = re.compile(r"[\s\-().]")
_SUBSCRIBER = re.compile(r"^[17]\d{8}$")


def _country_code(country_code: Optional[str]) -> str:
    return (country_code or get_config().provisioning.default_country_code).lstrip("+")


def normalize_phone_number(phone_number: str, country_code: Optional[str] = None) -> str:
    """
    Normalize a phone number to E.164.

    Args:
        phone_number: Phone number in local or international form
        country_code: Calling code without ``+`` (default: config)

    Returns:
        The number as ``+<country code><subscriber>``

    Raises:
        ValidationError: If the number cannot be normalized
    """
    if not phone_number or not isinstance(phone_number, str):
        raise ValidationError(
            "Phone number is required",
            field="phone_number",
            error_code=ErrorCode.MISSING_REQUIRED,
        )

    cc = _country_code(country_code)
    cleaned = _SEPARATORS.sub("", phone_number.strip())
    if cleaned.startswith("+"):
        cleaned = cleaned[1:]

    if cleaned.startswith(cc) and len(cleaned) == len(cc) + 9:
        subscriber = cleaned[len(cc) :]
    elif cleaned.startswith("0") and len(cleaned) == 10:
        subscriber = cleaned[1:]
    elif len(cleaned) == 9:
        subscriber = cleaned
    else:
        raise ValidationError(
            f"Invalid phone number format. Expected 07XXXXXXXX or +{cc}7XXXXXXXX. "
            f"Received: {phone_number}",
            field="phone_number",
            error_code=ErrorCode.INVALID_FORMAT,
        )

    if not _SUBSCRIBER.match(subscriber):
        raise ValidationError(
            f"Phone number is not a valid mobile number. Received: {phone_number}",
            field="phone_number",
            error_code=ErrorCode.INVALID_FORMAT,
        )

    return f"+{cc}{subscriber}"


def validate_phone_number(phone_number: str, country_code: Optional[str] = None) -> bool:
    """Return True when ``phone_number`` can be normalized."""
    if not phone_number or not isinstance(phone_number, str):
        return False
    try:
        normalize_phone_number(phone_number, country_code)
    except ValidationError:
        return False
    return True
