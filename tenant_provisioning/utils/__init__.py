from .json_utils import dumps
from .logger import ContextAwareLogger, configure_logging, get_logger
from .password_utils import generate_password, hash_password
from .phone_utils import normalize_phone_number, validate_phone_number

__all__ = [
    "ContextAwareLogger",
    "configure_logging",
    "dumps",
    "generate_password",
    "get_logger",
    "hash_password",
    "normalize_phone_number",
    "validate_phone_number",
]
