from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

"""Table model: the canonical in-memory data unit.

A Table is an ordered header plus ordered string records. It is immutable;
merge and in-place edit always produce a new Table.

Rows are not forced to ``len(headers)`` - ragged rows read from a sheet are
kept as they are.
"""

__all__ = [
    "Table",
]


@dataclass(frozen=True)
class Table:
    """Header + data rows read from (or destined for) one spreadsheet.

    Attributes:
        headers: column names, compared positionally
        rows: data records, each a tuple of strings
        source_name: originating file name (diagnostics only)
    """
    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()
    source_name: str = ""
    row_count: int = field(init=False)

    def __post_init__(self) -> None:
        # list で渡された場合もタプル化して不変にする
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "rows", tuple(tuple(r) for r in self.rows))
        object.__setattr__(self, "row_count", len(self.rows))

    @classmethod
    def empty(cls) -> Table:
        return cls()

    @property
    def is_empty(self) -> bool:
        """True when no header is present (no base table yet)."""
        return not self.headers

    def to_frame(self) -> pd.DataFrame:
        """Return the rows as a DataFrame labelled with the headers.

        Columns beyond the header (ragged rows) get ``Unnamed: <n>`` labels;
        cells missing from short rows are NaN.
        """
        frame = pd.DataFrame([list(r) for r in self.rows], dtype=object)
        width = max(len(self.headers), frame.shape[1])
        frame = frame.reindex(columns=range(width))
        frame.columns = [
            self.headers[i] if i < len(self.headers) else f"Unnamed: {i}" for i in range(width)
        ]
        return frame
