from __future__ import annotations

from typing import Any, Optional


class WormholesError(Exception):
    pass


class PrivateKeyError(WormholesError):
    pass


class EncodingError(WormholesError, ValueError):
    pass


class NotFoundError(WormholesError):
    def __init__(self, method: str, params: Optional[tuple] = None):
        super().__init__(f"{method}: not found")
        self.method = method
        self.params = params or ()


class RemoteError(WormholesError):
    def __init__(self, message: str, code: Optional[int] = None, data: Optional[Any] = None, status_code: Optional[int] = None, method: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data
        self.status_code = status_code
        self.method = method
