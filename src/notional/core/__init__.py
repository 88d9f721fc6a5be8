# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for Notional.

This module contains the foundational components including configuration,
the HTTP client, and error handling.
"""

from .config import NotionalConfig
from .errors import (
    NotionalError,
    HttpError,
    ValidationError,
    UnknownColumnError,
    UnresolvedIdentifierError,
)

__all__ = [
    "NotionalConfig",
    "NotionalError",
    "HttpError",
    "ValidationError",
    "UnknownColumnError",
    "UnresolvedIdentifierError",
]
