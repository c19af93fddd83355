from __future__ import annotations

from unittest.mock import MagicMock, patch

from sheetmerge.services.orchestrator import upload_files
from sheetmerge.services.progress import BatchProgress


def test_tallies_without_tty():
    with patch("sheetmerge.services.progress.is_tty_enabled", return_value=False):
        with BatchProgress(3, merged_rows=4) as progress:
            progress.start_file("a.xlsx")
            progress.file_merged(6)
            progress.start_file("b.xlsx")
            progress.file_failed()
            assert progress.pbar is None
    assert progress.done_files == 2
    assert progress.failed_files == 1
    assert progress.merged_rows == 6


def test_tty_bar_shows_rows_and_failures():
    bar = MagicMock()
    with patch("sheetmerge.services.progress.is_tty_enabled", return_value=True), patch(
        "sheetmerge.services.progress.tqdm", return_value=bar
    ) as tqdm_cls:
        progress = BatchProgress(2, description="Uploading (generic)")
        progress.start_file("a.xlsx")
        progress.file_merged(10)
        progress.start_file("c.xlsx")
        progress.file_failed()
        progress.close()

    assert tqdm_cls.call_args.kwargs["total"] == 2
    assert tqdm_cls.call_args.kwargs["unit"] == "file"
    bar.set_description.assert_any_call("Uploading (generic) (a.xlsx)")
    assert bar.update.call_count == 2
    assert bar.set_postfix.call_args_list[-1].kwargs == {"rows": 10, "failed": 1}
    bar.close.assert_called_once()
    assert progress.pbar is None


def test_batch_drives_progress(store, upload_factory):
    seen: list[BatchProgress] = []
    real = BatchProgress

    def capture(*args, **kwargs):
        progress = real(*args, **kwargs)
        seen.append(progress)
        return progress

    with patch("sheetmerge.services.orchestrator.BatchProgress", side_effect=capture):
        upload_files(
            store,
            "s",
            [upload_factory("a.xlsx", [["id"], [1], [2]]), upload_factory("c.xlsx", [["x"], [1]])],
        )
    [progress] = seen
    assert progress.done_files == 2
    assert progress.failed_files == 1
    assert progress.merged_rows == 2
