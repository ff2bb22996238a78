from typing import TypeVar

from app.exceptions import AppException

T = TypeVar("T")


def ensure_id(id_value: T | None, resource_name: str = "Resource") -> T:
    """
    Narrow an optional primary key to its value.

    Raises:
        AppException: If the row has not been flushed yet and has no id.
    """
    if id_value is None:
        raise AppException(f"{resource_name} ID is missing")
    return id_value


def mask_email(email: str) -> str:
    """
    Mask an email address before it reaches the logs.

    'volunteer@example.org' -> 'v***r@example.org'
    """
    user_part, sep, domain = email.partition("@")
    if not sep or not user_part or not domain:
        return "***@***.***"
    if len(user_part) <= 2:
        return f"{user_part[0]}***@{domain}"
    return f"{user_part[0]}***{user_part[-1]}@{domain}"
