"""Parquet schema definitions for headless run artifacts.

The trace-log column contracts live here so the runner and its readers work
against the same schemas.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

SUMMARY_SCHEMA_VERSION = 1
KINDS_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Trace schemas
# ---------------------------------------------------------------------------

MACHINE_TRACE_SCHEMA = pa.schema(
    [
        ("batch", pa.int64()),
        ("tick", pa.int64()),
        ("machine_id", pa.int64()),
        ("kind_id", pa.string()),
        ("x", pa.int64()),
        ("y", pa.int64()),
        ("orientation", pa.int64()),
        ("color", pa.string()),
    ]
)

TOUCHED_CELLS_SCHEMA = pa.schema(
    [
        ("batch", pa.int64()),
        ("tick", pa.int64()),
        ("x", pa.int64()),
        ("y", pa.int64()),
        ("color", pa.string()),
    ]
)
