"""Secure logging utilities for the bridge.

Provides sanitized logging that removes sensitive information like tokens,
emails, and credentials before outputting to logs.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('jirabridge')


def configure_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Apply the configured level and format to the bridge logger."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if fmt:
        formatter = logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


def sanitize_text(text: str) -> str:
    """Remove sensitive information from text.

    Args:
        text: Input text that may contain sensitive data

    Returns:
        Sanitized text with sensitive patterns replaced
    """
    if not text:
        return text

    # Credentials embedded in URLs (before emails, user:pw@host looks like one)
    text = re.sub(r'(https?://)[^/\s:@]+:[^/\s@]+@', r'\1<credentials>@', text)

    # Email addresses
    text = re.sub(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}', '<email>', text)

    # Basic-auth headers and API tokens
    text = re.sub(r'Basic [A-Za-z0-9+/=]{8,}', 'Basic <credentials>', text)
    text = re.sub(r'ATATT[A-Za-z0-9_\-=]{20,}', '<api-token>', text)

    return text


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Safely serialize object to JSON with sensitive data sanitized.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string

    Returns:
        Sanitized JSON string
    """
    try:
        json_str = json.dumps(obj, indent=2, ensure_ascii=False, default=str)
        sanitized = sanitize_text(json_str)

        if len(sanitized) > max_length:
            sanitized = sanitized[:max_length] + "... [truncated]"

        return sanitized
    except (TypeError, ValueError):
        return "<unable to serialize>"


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.info(f"{message} | Context: {context}")
    else:
        logger.info(message)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.warning(f"{message} | Context: {context}")
    else:
        logger.warning(message)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.error(f"{message} | Context: {context}")
    else:
        logger.error(message)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.debug(f"{message} | Context: {context}")
    else:
        logger.debug(message)


def log_api_response(operation: str, status_code: int, response_data: Optional[Dict] = None) -> None:
    """Log API response with sanitized data.

    Args:
        operation: Description of the API operation
        status_code: HTTP status code
        response_data: Optional response data to log (will be sanitized)
    """
    if response_data:
        sanitized_data = safe_json(response_data, max_length=500)
        log_debug(f"API {operation} completed",
                  status_code=status_code,
                  response_preview=sanitized_data)
    else:
        log_debug(f"API {operation} completed", status_code=status_code)


def log_ticket_operation(operation: str, ticket_key: Optional[str] = None, **kwargs) -> None:
    """Log ticket-related operations with sanitized context.

    Args:
        operation: Description of the ticket operation
        ticket_key: Optional Jira ticket key
        **kwargs: Additional context to log
    """
    context = {"operation": operation}
    if ticket_key:
        context["ticket_key"] = ticket_key
    context.update(kwargs)

    log_info(f"Ticket operation: {operation}", **context)


def log_duplicate_detection(existing_key: str, match_count: int, **kwargs) -> None:
    """Log duplicate detection results.

    More than one match is logged as a warning since only the first
    ticket will be updated.
    """
    if match_count > 1:
        log_warning("Multiple open tickets match this fingerprint; using the first",
                    existing_ticket=existing_key,
                    match_count=match_count,
                    **kwargs)
    else:
        log_info("Duplicate detected",
                 existing_ticket=existing_key,
                 match_count=match_count,
                 **kwargs)
