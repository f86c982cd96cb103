import re

PHONE_PATTERN = re.compile(r"^01[0-9]-?[0-9]{3,4}-?[0-9]{4}$")


def is_valid_phone(phone: str) -> bool:
    return bool(phone) and PHONE_PATTERN.match(phone) is not None


def normalize_phone(phone: str) -> str:
    """Strip hyphens; Aligo and the user table both store bare digits."""
    return (phone or "").replace("-", "")


def format_price(amount) -> str:
    return f"{int(amount or 0):,}"
