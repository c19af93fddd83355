from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Upload batch progress (tqdm, TTY only).

One bar per batch, one step per uploaded file. The tracker also keeps the
batch tallies (merged row total, failed files) and shows them as the bar
postfix. Without a TTY the bar is disabled and only the tallies are kept.
"""

__all__ = [
    "BatchProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class BatchProgress:
    """Progress of one upload batch.

    Attributes:
        total_files: number of files submitted to the batch
        done_files: files finished so far (success or failure)
        failed_files: files that failed so far
        merged_rows: row count of the merged table after the last success
    """

    def __init__(self, total_files: int, *, description: str = "Uploading", merged_rows: int = 0) -> None:
        self.total_files = total_files
        self.description = description
        self.done_files = 0
        self.failed_files = 0
        self.merged_rows = merged_rows

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_name: str) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_name})")

    def file_merged(self, merged_rows: int) -> None:
        """A file was parsed and merged; ``merged_rows`` is the running table size."""
        self.merged_rows = merged_rows
        self._advance()

    def file_failed(self) -> None:
        self.failed_files += 1
        self._advance()

    def _advance(self) -> None:
        self.done_files += 1
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            self.pbar.set_postfix(rows=self.merged_rows, failed=self.failed_files)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> BatchProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
