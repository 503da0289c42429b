from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

One bar over the files of a batch. In non-TTY environments (CI, redirected
output) no bar is created, so log lines are not interleaved with control
sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and the progress bar should be drawn
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """File-level progress bar; every method is a no-op without a TTY."""

    def __init__(self, total_files: int, *, description: str = "Loading reports") -> None:
        """Create the bar (only when stdout is a TTY).

        Args:
            total_files: number of files in the batch
            description: label shown left of the bar
        """
        self.total_files = total_files
        self.description = description
        self.current_file = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_file(self, file_name: str) -> None:
        """Show the file currently being parsed.

        Args:
            file_name: name of the file being parsed
        """
        self.current_file += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_name})")

    def finish_file(self, success: bool = True) -> None:
        """Advance the bar by one file.

        Args:
            success: whether the file parsed; failures are reported through
                ``set_postfix``, the bar advances either way
        """
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def set_postfix(self, **kwargs: Any) -> None:
        """Show running counts (success=..., failed=...) next to the bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the bar; safe to call more than once."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
