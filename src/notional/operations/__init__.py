# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Handle classes returned by :class:`~notional.client.NotionalClient`:

- Table: row reads, inserts, updates and soft deletes on one collection view
- Block: edits to a single block
"""

__all__ = []
