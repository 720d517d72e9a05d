"""Per-run diagnostics channel.

Matchers and the classifier record their accept/reject decisions here. The
lines are purely observational: nothing reads them back to make a decision.
"""

import logging


class DiagnosticsLog:
    """Ordered, human-readable decision log for one processing run."""

    def __init__(self, logger: logging.Logger | None = None):
        self._lines: list[str] = []
        self._logger = logger or logging.getLogger(__name__)

    def add(self, message: str, level: int = logging.DEBUG) -> None:
        self._lines.append(message)
        self._logger.log(level, message)

    def warning(self, message: str) -> None:
        self.add(message, logging.WARNING)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines)
