# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_409 = "http_409"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

ALL_HTTP_SUBCODES = {
    HTTP_400,
    HTTP_401,
    HTTP_403,
    HTTP_404,
    HTTP_409,
    HTTP_429,
    HTTP_500,
    HTTP_502,
    HTTP_503,
    HTTP_504,
}

TRANSIENT_STATUS_CODES = {429, 502, 503, 504}

# Validation subcodes
VALIDATION_CREDENTIALS_MISSING = "validation_credentials_missing"
VALIDATION_PAGE_URL_INVALID = "validation_page_url_invalid"
VALIDATION_ROWS_NOT_LIST = "validation_rows_not_list"

# Table resolution subcodes
TABLE_NOT_FOUND = "table_not_found"
TABLE_AMBIGUOUS = "table_ambiguous"

# Schema subcodes
SCHEMA_COLUMN_NOT_FOUND = "schema_column_not_found"


def _http_subcode(status: int) -> str:
    """Return the ``http_<status>`` subcode for a response status."""
    return f"http_{int(status)}"


def _is_transient_status(status: int) -> bool:
    return int(status) in TRANSIENT_STATUS_CODES
