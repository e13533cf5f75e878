from typing import Any, Dict

SENSITIVE_KEYS = {"password", "current_password", "new_password", "token"}


def mask_value(value: Any) -> Any:
    """Mask an email or secret-looking value before it reaches the logs."""
    if not isinstance(value, str):
        return value
    if "@" in value:  # email
        name, _, domain = value.partition("@")
        return (name[:2] + "***@" + domain) if name else "***@" + domain
    if len(value) > 12:
        return value[:4] + "..." + value[-4:]
    return "***"


def request_log_payload(data: Any) -> Dict:
    """Request body summary for error logs: secrets dropped, emails masked."""
    if not hasattr(data, "keys"):
        return {}
    allowed = [key for key in data.keys() if key not in SENSITIVE_KEYS]
    return {key: (mask_value(data[key]) if key == "email" else data[key]) for key in allowed}
