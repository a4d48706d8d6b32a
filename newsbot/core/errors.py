"""
Run-level errors. Both end an orchestration run; the API maps them to 503 and 500.

Tool failures are not exceptions: handlers return them as {"ok": false, "error"} payloads.
"""


class ServiceUnavailableError(Exception):
    """Raised when a required service (e.g. edge URL, LLM key) is unavailable or misconfigured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class LLMError(Exception):
    """Raised when classification or generation fails (transport error, empty or malformed output)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
