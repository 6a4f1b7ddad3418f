"""
Custom Exceptions - Skald client exception hierarchy

@file_name: exceptions.py
@author: NetMind.AI
@date: 2026-10-12
@description: Define custom exception types for the Skald client

=============================================================================
Design Goals
=============================================================================

Every failure a caller can see maps to exactly one type:
- Bad arguments are rejected before any network call
- Transport failures keep the original httpx exception as cause
- Non-2xx responses keep the status code and the verbatim body
- 2xx bodies that cannot be read are reported separately

Exception hierarchy:
    SkaldError (base class)
    ├── InvalidArgumentError
    ├── TransportError
    ├── ApiError
    └── ProtocolError

Usage example:
    try:
        memo = await skald.get_memo("external-id-123", id_type="reference_id")
    except ApiError as e:
        if e.status_code == 404:
            ...

=============================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional


# =============================================================================
# Base Exception
# =============================================================================

class SkaldError(Exception):
    """
    Base exception class for the Skald client

    Attributes:
        message: Error message
        cause: Original exception (if any)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        **context: Any,
    ):
        self.message = message
        self.cause = cause
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message"""
        parts = [self.message]

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"[{context_str}]")

        if self.cause:
            parts.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging purposes"""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "cause_type": type(self.cause).__name__ if self.cause else None,
            **self.context,
        }


# =============================================================================
# Client-Side Errors
# =============================================================================

class InvalidArgumentError(SkaldError, ValueError):
    """
    Raised before any request is sent when an argument is unusable

    Example:
        raise InvalidArgumentError(
            "Invalid id_type: 'slug'. Must be 'memo_uuid' or 'reference_id'."
        )
    """
    pass


class TransportError(SkaldError):
    """
    The request never produced an HTTP response (DNS, connect, TLS, read errors)

    The underlying httpx exception is available as ``cause`` and is also
    chained as ``__cause__``.
    """
    pass


class ProtocolError(SkaldError):
    """A 2xx response whose body is missing or cannot be read as the expected record"""
    pass


# =============================================================================
# Server-Side Errors
# =============================================================================

class ApiError(SkaldError):
    """
    Non-2xx HTTP response

    The message always reads ``Skald API error (<status>): <body>`` so that
    the status code and the raw response text reach the caller unchanged.

    Attributes:
        status_code: HTTP status code returned by the server
        body: Raw response body text
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Skald API error ({status_code}): {body}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        data["body"] = self.body
        return data
