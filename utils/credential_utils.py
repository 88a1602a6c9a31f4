"""
Credential Display Utilities
Helpers for showing credential values without exposing secrets
"""
from service_properties import SENTINEL


# Substrings marking a credential key as secret
SECRET_MARKERS = ['key', 'password', 'secret', 'token']


def is_secret_key(name):
    """Check if a credential or field name refers to a secret."""
    lowered = name.lower()
    return any(marker in lowered for marker in SECRET_MARKERS)


def mask_secret(value, visible=4):
    """
    Mask all but the last few characters of a secret.

    Args:
        value (str): Secret value
        visible (int): Trailing characters left readable

    Returns:
        str: Masked value
    """
    if value is None or value == SENTINEL:
        return value
    if len(value) <= visible:
        return '*' * len(value)
    return '*' * (len(value) - visible) + value[-visible:]


def display_value(name, value):
    """Return value masked when name looks like a secret."""
    if is_secret_key(name):
        return mask_secret(value)
    return value
