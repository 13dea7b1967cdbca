"""Human-readable audit log for bulk operations.

Format:
- first line is the title as a `//` comment
- comment lines start with `//`
- action lines are `ACTION data`
- the last line is the result code (SUCCESS, WARNING or FAILURE)
"""

import logging
import os
import sys
import time
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DATE_PLACEHOLDER = "<DATE>"


class LogErrorLevel(IntEnum):
    """Severity of the worst problem recorded in a log."""
    NONE = 0
    WARNING = 1
    ERROR = 2


@dataclass
class LogItem:
    """A single line of the audit log."""
    comment: bool
    data: str
    action: Optional[str] = None


def default_log_path(item_type: str, action: str) -> str:
    """Default log location, e.g. ~/.amplience/logs/content-item-publish-<DATE>.log."""
    home = os.environ.get("USERPROFILE" if sys.platform == "win32" else "HOME") or str(Path.home())
    return str(Path(home) / ".amplience" / "logs" / f"{item_type}-{action}-{DATE_PLACEHOLDER}.log")


class FileLog:
    """Audit log that echoes lines to stdout and is written to disk on close."""

    def __init__(self, filename: Optional[str] = None, title: Optional[str] = None):
        self.filename = filename.replace(DATE_PLACEHOLDER, str(int(time.time() * 1000))) if filename else None
        self.title = title
        self.items: list[LogItem] = []
        self.error_level = LogErrorLevel.NONE
        self.closed = False

    def append_line(self, text: str, silent: bool = False) -> None:
        """Print a line and record it as a comment."""
        if not silent:
            print(text)
        self.add_comment(text)

    def add_comment(self, comment: str) -> None:
        for line in comment.split("\n"):
            self.items.append(LogItem(comment=True, data=line))

    def add_action(self, action: str, data: str) -> None:
        self.items.append(LogItem(comment=False, action=action, data=data))

    def add_error(self, level: LogErrorLevel, message: str, error: Optional[BaseException] = None) -> None:
        """Record a warning or error and raise the log's result level accordingly."""
        if level > self.error_level:
            self.error_level = level

        self.add_action(level.name, "")
        self.add_comment(f"{level.name}: {message}")
        print(f"{level.name}: {message}", file=sys.stderr)

        if error is not None:
            self.add_comment(str(error))
            print(str(error), file=sys.stderr)

    def get_data(self, action: str) -> list[str]:
        """All data values recorded for the given action."""
        return [item.data for item in self.items if not item.comment and item.action == action]

    def result_code(self) -> str:
        if self.error_level == LogErrorLevel.NONE:
            return "SUCCESS"
        if self.error_level == LogErrorLevel.ERROR:
            return "FAILURE"
        return self.error_level.name

    def render(self) -> str:
        lines = [f"// {self.title}"]
        for item in self.items:
            if item.comment:
                lines.append(f"// {item.data}")
            else:
                lines.append(f"{item.action} {item.data}")
        lines.append(self.result_code())
        return "\n".join(lines)

    def close(self, write: bool = True) -> bool:
        """
        Close the log, writing it to `filename` when requested.

        Returns:
            True if the file was written
        """
        self.closed = True
        if not write or self.filename is None:
            return False

        path = Path(self.filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.render(), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write log to {path}: {e}")
            print("Could not write log.")
            return False

        print(f'Log written to "{path}".')
        return True
