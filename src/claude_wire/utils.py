"""Utility functions for claude-wire."""

import logging
import sys
from typing import Optional

from .config import LOG_LEVELS, get_settings
from .models.claude import ErrorData


def setup_logging(log_level: Optional[str] = None) -> None:
    """Setup library logging, defaulting to the configured log level.

    Raises:
        ValueError: ``log_level`` is not one of LOG_LEVELS.
    """
    level = (log_level or get_settings().log_level).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'")
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def describe_api_error(error: ErrorData) -> str:
    """Turn an API error body into a readable message."""
    error_type = error.type.lower()

    if error_type == "authentication_error":
        return "Invalid API key. Please check your credentials."
    elif error_type == "permission_error":
        return "Permission denied. Your API key cannot use this resource."
    elif error_type == "not_found_error":
        return "Resource not found. Please check the model name."
    elif error_type == "rate_limit_error":
        return "Rate limit exceeded. Please try again later."
    elif error_type == "overloaded_error":
        return "API is temporarily overloaded. Please try again later."
    elif error_type == "invalid_request_error":
        return f"Bad request: {error.message}"
    elif error_type == "api_error":
        return "Internal server error. Please try again later."
    else:
        return f"API Error: {error.message}"
