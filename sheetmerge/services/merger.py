from __future__ import annotations

from collections.abc import Sequence

from ..models.table import Table

"""Header validation and append-only merge of Tables.

``merge`` does not check header compatibility itself; callers run
``validate_headers`` first (template uploads deliberately skip it).
"""

__all__ = [
    "merge",
    "validate_headers",
]


def validate_headers(base: Sequence[str], incoming: Sequence[str]) -> bool:
    """True iff both headers have the same length and equal names at every position.

    Comparison is exact: case-sensitive and without trimming.
    """
    if len(base) != len(incoming):
        return False
    return all(a == b for a, b in zip(base, incoming))


def merge(base: Table, incoming: Table) -> Table:
    """Append ``incoming`` rows after ``base`` rows.

    The result keeps the base headers and source name; the incoming headers
    are discarded.
    """
    return Table(
        headers=base.headers,
        rows=base.rows + incoming.rows,
        source_name=base.source_name,
    )
