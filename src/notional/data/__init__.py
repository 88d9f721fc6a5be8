# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data access layer for Notional.

This package contains the Notion transport, the value codec, the schema
index, the user directory, the row query engine and the transaction builder.
Its modules are internal; use :class:`~notional.client.NotionalClient`.
"""

__all__ = []
