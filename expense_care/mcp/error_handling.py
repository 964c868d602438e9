"""Consistent error handling for MCP tool functions."""

from __future__ import annotations

import functools
import logging
from typing import Callable

from pydantic import ValidationError

from expense_care.core.store import StoreError

logger = logging.getLogger("expense_care")


def _first_message(error: ValidationError) -> str:
    msg = error.errors()[0].get("msg", "")
    return msg.removeprefix("Value error, ")


def handle_tool_errors(fn: Callable) -> Callable:
    """Decorator that catches known exceptions and returns user-friendly error strings.

    MCP tools must return ``str``, not raise.  This ensures all tools
    follow that contract without duplicating try/except blocks.
    """

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except StoreError as e:
            return str(e)
        except ValidationError as e:
            return (
                f"Invalid data: {e.error_count()} validation error(s). "
                f"{_first_message(e)}"
            )
        except Exception as e:
            logger.exception("Unexpected error in tool %s", fn.__name__)
            return f"Unexpected error: {type(e).__name__}: {e}"

    return wrapper
