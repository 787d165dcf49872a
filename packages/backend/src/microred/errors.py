"""Error taxonomy shared by the REST and real-time layers.

Learn: Services raise these, they never build HTTP responses.
main.py maps NotFoundError → 404 and StoreFailure → 500; the
WebSocket layer turns ListenerFailure into an outbound `error` frame,
since there is no synchronous caller to report it to.
"""


class MicroredError(Exception):
    """Base class for all application errors."""


class NotFoundError(MicroredError):
    """A lookup by business key returned no document."""


class StoreFailure(MicroredError):
    """The underlying document store rejected an operation."""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"{operation} failed: {reason}")
        self.operation = operation
        self.reason = reason


class ListenerFailure(MicroredError):
    """An active watch reported an error asynchronously."""

    def __init__(self, target: str, reason: str):
        super().__init__(f"Error watching {target}: {reason}")
        self.target = target
        self.reason = reason


class UnknownClientError(MicroredError):
    """A registry operation referenced a client that never connected."""
