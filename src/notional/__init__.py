# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Notional: a typed row client for Notion collections.

Import the client directly::

    from notional.client import NotionalClient
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
