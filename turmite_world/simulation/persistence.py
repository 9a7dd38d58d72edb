"""Buffered Parquet output for the trace-log streams."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq


class TraceLog:
    """Column buffers for one Parquet file, written out in row groups.

    The ``ParquetWriter`` opens on the first non-empty flush. ``close`` always
    leaves a readable file at ``path``, with zero rows if nothing was appended.
    """

    def __init__(self, path: Path, schema: pa.Schema, flush_threshold: int) -> None:
        self.path = path
        self.schema = schema
        self.flush_threshold = flush_threshold
        self.columns: dict[str, list[int | str]] = {name: [] for name in schema.names}
        self.rows_written = 0
        self._writer: pq.ParquetWriter | None = None
        self._closed = False

    @property
    def pending(self) -> int:
        return len(self.columns[self.schema.names[0]])

    def append(self, **row: int | str) -> None:
        for name, values in self.columns.items():
            values.append(row[name])

    def maybe_flush(self) -> bool:
        """Flush if the buffer has reached the threshold; report whether it did."""
        if self.pending < self.flush_threshold:
            return False
        self.flush()
        return True

    def flush(self) -> None:
        if not self.pending:
            return
        table = pa.Table.from_pydict(self.columns, schema=self.schema)
        if self._writer is None:
            self._writer = pq.ParquetWriter(self.path, self.schema)
        self._writer.write_table(table)
        self.rows_written += table.num_rows
        for values in self.columns.values():
            values.clear()

    def close(self) -> None:
        """Close the writer, or write an empty table when no row group was written."""
        if self._closed:
            return
        self._closed = True
        if self._writer is None:
            pq.write_table(self.schema.empty_table(), self.path)
        else:
            self._writer.close()
