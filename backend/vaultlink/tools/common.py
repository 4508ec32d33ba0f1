"""Shared plumbing for tool functions"""

import functools
import logging
from typing import Any, Awaitable, Callable

from ..errors import ToolInputError, VaultError, describe_error
from ..models import ToolResult

logger = logging.getLogger("vaultlink.tools")


def require(value: Any, name: str) -> None:
    """Reject a missing or empty argument"""
    if value is None or value == "":
        raise ToolInputError(f"{name} parameter is required")


def tool_handler(name: str) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[ToolResult]]]:
    """
    Wrap a tool coroutine so it always returns a ToolResult.

    The wrapped coroutine returns the payload on success; any exception is
    turned into a failed result carrying a readable message.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[ToolResult]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ToolResult:
            try:
                data = await func(*args, **kwargs)
            except VaultError as e:
                logger.warning(f"{name} rejected: {e}")
                return ToolResult.fail(describe_error(e))
            except Exception as e:
                logger.error(f"{name} failed: {describe_error(e)}", exc_info=logger.isEnabledFor(logging.DEBUG))
                return ToolResult.fail(describe_error(e))
            if isinstance(data, ToolResult):
                return data
            return ToolResult.ok(data)

        return wrapper

    return decorator
