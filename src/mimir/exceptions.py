"""Exception types raised by mimir.

Lookups and writes against the cache do not raise for expected outcomes:
a miss is ``None`` and deleting something that is not there is ``False``.
The types below cover the remaining cases.
"""


class MimirError(Exception):
    """Base class for all mimir errors."""


class CacheBackendError(MimirError):
    """A cache backend failed to complete a write.

    Reserved for backends that are not memory-resident. The in-memory
    repository never raises it.
    """


class CacheInvariantError(MimirError):
    """Internal cache state is inconsistent.

    This is a programming error, not a runtime condition, and is never
    caught inside the library.
    """


class EmbeddingError(MimirError):
    """The embedding provider could not produce a vector."""


class UpstreamError(MimirError):
    """The upstream LLM provider rejected a request or could not be reached."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Upstream error (status {status_code}): {body}")
        self.status_code = status_code
        self.body = body
