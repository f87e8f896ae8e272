"""Exceptions raised by the wellness analytics engine."""


class WellnessAnalyticsError(Exception):
    """Base class for analytics engine errors."""


class RecordFetchError(WellnessAnalyticsError):
    """Raised when a backing store read fails during snapshot assembly.

    The underlying store exception is chained as ``__cause__``.
    """

    def __init__(self, collection: str, subject_id: str, message: str):
        super().__init__(f"Failed to read {collection} for subject {subject_id}: {message}")
        self.collection = collection
        self.subject_id = subject_id
        self.message = message
