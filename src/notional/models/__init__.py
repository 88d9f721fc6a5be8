# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models and type definitions for Notional.

- :class:`~notional.models.table_keys.TableKeySet`: coordinates of a table view.
- :class:`~notional.models.schema.ColumnSchema`: one visible column of a collection.
- :class:`~notional.models.user.User`: a workspace member.
- :class:`~notional.models.operation.Operation` and
  :class:`~notional.models.operation.Transaction`: write batch building blocks.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from
    the specific module files.
"""

__all__ = []
