"""Error taxonomy for the rag-search pipeline.

Request-level errors (``UnauthorizedError``, ``InvalidArgumentError``,
``EmbeddingFailure``, ``StoreQueryFailure``, ``RequestTimeoutError``) abort a
request and reach the caller as a tool error. ``PartialDecodeError`` and
``ExpansionFailure`` are recovered inside the pipeline and only logged.
"""


class RagSearchError(Exception):
    """Base class for pipeline errors; ``str(err)`` is safe to show callers."""


class UnauthorizedError(RagSearchError):
    """No tenant identifier could be resolved for the request."""


class InvalidArgumentError(RagSearchError):
    """A tool argument is missing or malformed."""


class EmbeddingFailure(RagSearchError):
    """The embedding service failed to produce a query vector."""


class StoreQueryFailure(RagSearchError):
    """A document store query failed.

    Attributes:
        retryable: True when the failure is transient (e.g. every store
            slot was busy) and the caller may simply try again.
    """

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class RequestTimeoutError(RagSearchError):
    """The request exceeded its deadline; in-flight work was cancelled."""


class PartialDecodeError(RagSearchError):
    """A single result row could not be decoded and was dropped."""


class ExpansionFailure(RagSearchError):
    """Context for a single hit could not be fetched."""
