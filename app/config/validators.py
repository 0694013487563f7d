"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    storage = config_dict.get("storage", {})
    if isinstance(storage, dict):
        backend = str(storage.get("backend", "sql")).strip().lower()
        if backend == "memory":
            warning_messages.append(
                "storage.backend is 'memory'; volunteers, enrollments and notifications "
                "will be lost when the process exits"
            )
            if storage.get("database_url"):
                warning_messages.append(
                    "storage.database_url is ignored while storage.backend is 'memory'"
                )

    notifications = config_dict.get("notifications", {})
    if isinstance(notifications, dict):
        email = notifications.get("email", {})
        if isinstance(email, dict) and email.get("enabled"):
            if email.get("async_delivery") is False:
                max_retries = email.get("max_retries", 3)
                if isinstance(max_retries, int) and max_retries > 3:
                    warning_messages.append(
                        f"Synchronous email delivery with max_retries={max_retries} "
                        "can delay match responses"
                    )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
