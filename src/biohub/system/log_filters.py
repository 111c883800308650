"""Logging filters attached to handlers."""

import logging
from collections.abc import Iterable


class MessageSuppressionFilter(logging.Filter):
    """Drop records whose rendered message contains a known-noisy substring.

    Attach it to handlers, not to loggers, so removing the handler removes the
    suppression with it.
    """

    def __init__(self, patterns: Iterable[str]):
        super().__init__()
        self.patterns = tuple(pattern for pattern in patterns if pattern)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.patterns:
            return True
        message = record.getMessage()
        return not any(pattern in message for pattern in self.patterns)
