"""
PII (Personally Identifiable Information) masking for log payloads.
"""
import re
from typing import Any

UUID_RE = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$', re.I)

NAME_FIELDS = {"name", "recipient_name", "customer_name"}
PHONE_FIELDS = {"phone", "recipient_phone"}
ID_FIELDS = {"customer_id", "user_id"}
REDACTED_FIELDS = {"card_message"}


def mask_phone(phone: str) -> str:
    """Keep the first two and last two characters."""
    if len(phone) <= 4:
        return "*" * len(phone)
    return phone[:2] + "*" * (len(phone) - 4) + phone[-2:]


def mask_name(name: str) -> str:
    """Keep the first and last character of each word."""
    words = []
    for word in name.split():
        if len(word) <= 2:
            words.append("*" * len(word))
        else:
            words.append(word[0] + "*" * (len(word) - 2) + word[-1])
    return " ".join(words)


def mask_uuid(uuid_str: str) -> str:
    """Mask UUID (show first 8 chars only)."""
    if len(uuid_str) < 8:
        return "*" * len(uuid_str)
    return uuid_str[:8] + "-****-****-****-************"


def mask_value(key: str, value: Any) -> Any:
    key_lower = key.lower()
    if value is None:
        return None
    if key_lower in REDACTED_FIELDS:
        return "[redacted]"
    if key_lower in PHONE_FIELDS:
        return mask_phone(str(value))
    if key_lower in NAME_FIELDS:
        return mask_name(str(value))
    if key_lower in ID_FIELDS:
        value = str(value)
        return mask_uuid(value) if UUID_RE.match(value) else value
    return value


def mask_pii_in_dict(data: dict) -> dict:
    """Mask PII in dictionary recursively."""
    masked = {}
    for key, value in data.items():
        if isinstance(value, dict):
            masked[key] = mask_pii_in_dict(value)
        elif isinstance(value, list):
            masked[key] = [mask_pii_in_dict(item) if isinstance(item, dict) else item for item in value]
        else:
            masked[key] = mask_value(key, value)
    return masked
