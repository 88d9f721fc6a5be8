#!/usr/bin/env python3
# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Notional quickstart: read, insert, update and archive rows of a Notion table.

Prerequisites:
- ``pip install -e .`` from the repository root
- A page holding exactly one table, plus the ``token_v2`` cookie and user id
  of an account that can edit it

Usage:
    NOTION_TOKEN=... NOTION_USER_ID=... python examples/basic/quickstart.py <page url>

The table is expected to have a ``Name`` title column and a ``Done`` checkbox.
"""

import logging
import os
import sys

from notional.client import NotionalClient
from notional.core.errors import HttpError, NotionalError


def log_call(call: str) -> None:
    print({"call": call})


def main() -> None:
    if len(sys.argv) != 2:
        print("Usage: quickstart.py <page url>")
        sys.exit(1)
    page_url = sys.argv[1]

    token = os.environ.get("NOTION_TOKEN")
    user_id = os.environ.get("NOTION_USER_ID")
    if not token or not user_id:
        print("Set NOTION_TOKEN and NOTION_USER_ID first.")
        sys.exit(1)

    logging.basicConfig(level=logging.INFO)

    with NotionalClient(token, user_id) as client:
        log_call(f"client.table({page_url!r})")
        table = client.table(page_url)
        print({"columns": {name: col.type for name, col in table.get_schema().items()}})

        log_call("table.insert_rows(...)")
        table.insert_rows([{"Name": "quickstart-1"}, {"Name": "quickstart-2", "Done": True}])

        log_call("table.get_rows({'Name': startswith quickstart-})")
        rows = table.get_rows({"Name": lambda name: (name or "").startswith("quickstart-")})
        for row in rows:
            print({"id": row["id"], "Name": row["Name"], "Done": row.get("Done")})

        log_call("table.where({'Name': 'quickstart-1'}).update({'Done': True})")
        table.where({"Name": "quickstart-1"}).update({"Done": True})

        log_call("table.get_dataframe()")
        print(table.get_dataframe().head())

        log_call("table.delete_rows(...)")
        table.delete_rows({"Name": lambda name: (name or "").startswith("quickstart-")})

        # Table keys can be persisted and passed back as ``cache=`` next time.
        print({"cached_tables": {url: keys.to_dict() for url, keys in client.get_cached_table_keys().items()}})


if __name__ == "__main__":
    try:
        main()
    except HttpError as e:
        print({"status": e.status_code, "subcode": e.subcode, "message": e.message})
        sys.exit(1)
    except NotionalError as e:
        print(e.to_dict())
        sys.exit(1)
