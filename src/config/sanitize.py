"""Credential masking for log output"""

import re
from typing import Any, Dict, List, Union


REDACTED = "***REDACTED***"

SENSITIVE_KEYS = {
    'password', 'passwd', 'pwd',
    'secret', 'token', 'apikey', 'cookie',
}

_STRING_PATTERNS = [
    (r'"password"\s*:\s*"([^"]+)"', f'"password": "{REDACTED}"'),
    (r"'password'\s*:\s*'([^']+)'", f"'password': '{REDACTED}'"),
    (r'password=([^\s&]+)', f'password={REDACTED}'),
    (r'(token|secret)\s*[:=]\s*[\'"]*([a-zA-Z0-9_\-\.]+)[\'"]*', rf'\1: {REDACTED}'),
]


def sanitize_credentials(data: Union[str, Dict[str, Any], List]) -> Union[str, Dict[str, Any], List]:
    """
    Mask credentials in strings, dicts, or lists before they reach a log sink

    Args:
        data: Settings dump, log message, or nested structure

    Returns:
        Copy of data with secret values replaced by ***REDACTED***
    """
    if isinstance(data, str):
        return _sanitize_string(data)
    elif isinstance(data, dict):
        return _sanitize_dict(data)
    elif isinstance(data, list):
        return [sanitize_credentials(item) for item in data]
    else:
        return data


def _sanitize_string(text: str) -> str:
    if not text:
        return text

    sanitized = text
    for pattern, replacement in _STRING_PATTERNS:
        sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)
    return sanitized


def _is_sensitive_key(key: str) -> bool:
    key_lower = key.lower().replace('_', '').replace('-', '')
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    sanitized = {}
    for key, value in data.items():
        if _is_sensitive_key(str(key)):
            sanitized[key] = REDACTED if value else value
        else:
            sanitized[key] = sanitize_credentials(value)
    return sanitized
