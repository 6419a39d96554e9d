"""
Error taxonomy for the relay. Every error carries the stage it came from and a kind,
so the invocation response can say which step failed and why.
"""

# Fetch kinds
TRANSIENT = "Transient"
AUTH = "Auth"
NOT_FOUND = "NotFound"
PROTOCOL = "Protocol"

# Publish kinds (TRANSIENT is shared)
REJECTED = "Rejected"

# Config kinds
MISSING_VARIABLE = "MissingVariable"
INVALID_VARIABLE = "InvalidVariable"

UNKNOWN_OPERATION = "UnknownOperation"


class RelayError(Exception):
    stage = "relay"

    def __init__(self, kind: str, detail: str = ""):
        super().__init__(f"{kind}: {detail}" if detail else kind)
        self.kind = kind
        self.detail = detail

    def cause(self) -> str:
        """Human-readable cause, e.g. 'fetch: Transient (timed out)'."""
        text = f"{self.stage}: {self.kind}"
        return f"{text} ({self.detail})" if self.detail else text


class ConfigError(RelayError):
    stage = "config"


class FetchError(RelayError):
    stage = "fetch"


class PublishError(RelayError):
    stage = "publish"

    def __init__(self, kind: str, detail: str = "", status=None):
        super().__init__(kind, detail)
        self.status = status


class UnknownOperation(RelayError):
    stage = "receive"

    def __init__(self, operation: str):
        super().__init__(UNKNOWN_OPERATION, operation or "<empty>")
        self.operation = operation
