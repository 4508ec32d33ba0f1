"""Error types and user-facing error messages"""

import httpx


class VaultError(Exception):
    """Base class for vaultlink errors"""


class InvalidPathError(VaultError, ValueError):
    """Path is absolute or tries to escape the vault"""


class ToolInputError(VaultError, ValueError):
    """Missing or malformed tool argument"""


class SearchPatternError(VaultError, ValueError):
    """Content search pattern failed to compile"""


class UnknownToolError(VaultError, LookupError):
    """No tool registered under the requested name"""


def describe_error(exc: BaseException) -> str:
    """Turn an exception into a short, human-readable message"""
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        path = exc.request.url.path
        reason = response.reason_phrase or "error"
        return f"Vault API returned {response.status_code} {reason} for {path}"
    if isinstance(exc, httpx.TimeoutException):
        return "Vault API request timed out"
    if isinstance(exc, httpx.ConnectError):
        return "Cannot connect to vault API"
    if isinstance(exc, httpx.HTTPError):
        return f"Vault API request failed: {exc}"
    message = str(exc)
    return message or exc.__class__.__name__
