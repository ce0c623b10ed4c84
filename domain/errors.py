class PlannerError(Exception):
    pass


class TransportError(PlannerError):
    """Network failure or timeout talking to the recipe API."""


class AuthError(PlannerError):
    pass


class RateLimitError(PlannerError):
    pass


class ServerError(PlannerError):
    def __init__(self, status: int) -> None:
        super().__init__(f"Recipe API responded with {status}.")
        self.status = status


class DecodeError(PlannerError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class EncodeError(PlannerError):
    pass


class CacheIOError(PlannerError):
    """Raised inside the cache store only. Never escapes `get`/`put`."""


class GenerationError(PlannerError):
    pass


class PlanNotFound(PlannerError):
    pass
