"""
Error types raised by the data-access layer.

Store-level failures are not wrapped here: pymongo exceptions
propagate to the caller unchanged.
"""

from typing import List, Optional


class MalformedInputError(ValueError):
    """A single call was rejected because its input could not be used."""


class PartialIngestError(Exception):
    """
    A batch ingest stopped partway through.

    Nothing is rolled back. ``completed`` lists the results of the events
    that were fully written before the failure, in batch order, and
    ``failed_index`` is the position of the event that raised. The
    original exception is chained as ``__cause__``.
    """

    def __init__(self, completed: List, failed_index: int, total: int, reason: Optional[str] = None):
        self.completed = completed
        self.failed_index = failed_index
        self.total = total
        message = (
            f"Ingest stopped at event {failed_index} of {total} "
            f"after {len(completed)} succeeded"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
