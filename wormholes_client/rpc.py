from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Optional

import httpx

from .encoding import stable_json
from .errors import RemoteError

logger = logging.getLogger(__name__)

USER_AGENT = "wormholes-client-python/0.1.0"


class RPCClient:
    """JSON-RPC 2.0 over HTTP. No caching and no retries: every failure is
    raised to the caller as :class:`RemoteError`."""

    def __init__(self, endpoint: str, timeout_seconds: float = 10.0, headers: Optional[Dict[str, str]] = None):
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self.headers = headers or {}
        self.http = httpx.Client(timeout=self.timeout_seconds)
        self._ids = itertools.count(1)

    def call(self, method: str, *params: Any) -> Any:
        request_id = next(self._ids)
        body = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": list(params)}
        headers: Dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            **self.headers,
        }
        logger.debug("rpc %s id=%d", method, request_id)
        try:
            resp = self.http.post(self.endpoint, content=stable_json(body).encode("utf-8"), headers=headers)
        except httpx.HTTPError as exc:
            raise RemoteError(f"{method}: {exc}", method=method) from exc
        if not 200 <= resp.status_code < 300:
            raise self._to_error(resp, method)
        try:
            parsed = resp.json()
        except ValueError as exc:
            raise RemoteError(f"{method}: invalid JSON response", status_code=resp.status_code, method=method) from exc
        if not isinstance(parsed, dict):
            raise RemoteError(f"{method}: unexpected response", status_code=resp.status_code, method=method)
        error = parsed.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise RemoteError(f"{method}: {error}", status_code=resp.status_code, method=method)
            raise RemoteError(
                error.get("message") or f"{method} failed",
                code=error.get("code"),
                data=error.get("data"),
                status_code=resp.status_code,
                method=method,
            )
        if "result" not in parsed:
            raise RemoteError(f"{method}: response has neither result nor error", status_code=resp.status_code, method=method)
        return parsed["result"]

    def close(self) -> None:
        self.http.close()

    def _to_error(self, resp: httpx.Response, method: str) -> RemoteError:
        try:
            parsed = resp.json()
        except ValueError:
            return RemoteError(resp.text or f"HTTP {resp.status_code}", status_code=resp.status_code, method=method)
        inner = parsed.get("error") if isinstance(parsed, dict) and isinstance(parsed.get("error"), dict) else {}
        return RemoteError(
            inner.get("message") or f"HTTP {resp.status_code}",
            code=inner.get("code"),
            data=inner.get("data"),
            status_code=resp.status_code,
            method=method,
        )
