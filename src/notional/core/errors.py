# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exceptions raised by Notional.

Only transport failures and table resolution problems are fatal to callers.
:class:`UnknownColumnError` is raised by the schema index but write paths
catch it and drop the offending field.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

_SERIALIZED_FIELDS = (
    "message",
    "code",
    "subcode",
    "status_code",
    "details",
    "source",
    "is_transient",
    "timestamp",
)


class NotionalError(Exception):
    """Base structured error for Notional."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in _SERIALIZED_FIELDS}

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class _ClientError(NotionalError):
    """Raised before any request is sent; ``error_code`` names the family."""

    error_code = "client_error"

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=self.error_code, subcode=subcode, details=details, source="client")


class ValidationError(_ClientError):
    error_code = "validation_error"


class UnresolvedIdentifierError(_ClientError):
    """A page URL or table reference matched zero or several tables."""

    error_code = "unresolved_identifier"


class UnknownColumnError(_ClientError):
    """A column display name is not part of the table's visible schema."""

    error_code = "unknown_column"

    def __init__(self, column: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Unrecognised column {column!r}",
            subcode=subcode,
            details={**(details or {}), "column": column},
        )
        self.column = column


class HttpError(NotionalError):
    """
    Non-2xx response from the Notion API.

    ``details`` carries the endpoint ``path``, a ``body_excerpt`` of the
    response and the server's ``retry_after`` hint when present.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        path: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        extra = {"path": path, "body_excerpt": body_excerpt, "retry_after": retry_after}
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details={**(details or {}), **{k: v for k, v in extra.items() if v is not None}},
            source="server",
            is_transient=is_transient,
        )


__all__ = [
    "NotionalError",
    "HttpError",
    "ValidationError",
    "UnknownColumnError",
    "UnresolvedIdentifierError",
]
