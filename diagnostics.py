import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fallback:
    """
    Record of a substituted value: which operation gave up on what input,
    and what it returned instead.
    """
    operation: str
    value: Any
    fallback: Any
    reason: str = ""


class FallbackLog(list):
    """
    A list usable as a fallback sink: every reported Fallback is appended.
    """

    def __call__(self, event):
        self.append(event)

    def operations(self):
        return [event.operation for event in self]


def report_fallback(on_fallback, operation, value, fallback, reason=""):
    """
    Log a fallback and forward it to the caller's sink, if any.
    Never raises and never changes what the caller returns.
    """
    event = Fallback(operation, value, fallback, reason)
    logger.warning("%s: %r replaced by %r (%s)", operation, value, fallback, reason or "invalid input")
    if on_fallback is not None:
        on_fallback(event)
    return event
