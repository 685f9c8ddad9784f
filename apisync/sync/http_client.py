"""
Shared HTTP plumbing for the documentation service and the workspace API.

Wraps a single ``requests.Session`` and turns every failure mode into one of
the sync exceptions, so callers only deal with ``SyncException`` subclasses.
The session is shared by all module workers; nothing mutates it after
construction.

``timeout`` bounds the whole exchange: connecting, sending, and receiving the
complete body. ``requests`` only bounds each socket operation, so the
exchange runs on a daemon thread and the caller stops waiting at the
deadline. A response that arrives after the deadline is closed unread.
"""

import json
import threading
from typing import Any, Iterable, Optional

import requests

from ..config import API_KEY_HEADER, DEFAULT_TIMEOUT_SECONDS
from .error_tracker import DecodeError, RequestConstructionError, TransportError, UnexpectedStatusError
from .logging_manager import get_logger

logger = get_logger(__name__)

_CONSTRUCTION_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)

_AUTH_FAILURES = (401, 403)


class _Exchange:
    """One request running on its own thread, abandoned at the deadline."""

    def __init__(self, session: requests.Session, method: str, url: str, kwargs: dict):
        self.session = session
        self.method = method
        self.url = url
        self.kwargs = kwargs
        self.response: Optional[requests.Response] = None
        self.error: Optional[Exception] = None
        self._lock = threading.Lock()
        self._abandoned = False

    def run(self):
        try:
            response = self.session.request(self.method, self.url, **self.kwargs)
        except Exception as e:
            self.error = e
            return
        with self._lock:
            if self._abandoned:
                response.close()
                return
            self.response = response

    def wait(self, timeout: float) -> requests.Response:
        worker = threading.Thread(target=self.run, name=f"http {self.method} {self.url}", daemon=True)
        worker.start()
        worker.join(timeout)
        with self._lock:
            if worker.is_alive():
                self._abandoned = True
                raise requests.exceptions.Timeout(f"no complete response from {self.url}")
        if self.error is not None:
            raise self.error
        return self.response


class HTTPClient:
    """Authenticated JSON-over-HTTP client with a fixed per-request timeout."""

    def __init__(self, api_key: str, timeout: float = DEFAULT_TIMEOUT_SECONDS, session: Optional[requests.Session] = None, credential: str = "API key"):
        self.api_key = api_key
        self.credential = credential
        self.timeout = timeout
        self.session = session or requests.Session()

    def request(self, method: str, url: str, *, operation: str, accepted: Iterable[int] = (200,), headers: Optional[dict] = None, **kwargs) -> requests.Response:
        """
        Send one request and check its status.

        Args:
            method: HTTP method
            url: Absolute URL
            operation: Short description used in error messages
            accepted: Status codes that count as success
            headers: Extra headers; the API key header is always set

        Returns:
            The response with its body fully read, whose status is in ``accepted``

        Raises:
            RequestConstructionError, TransportError, UnexpectedStatusError
        """
        request_headers = {API_KEY_HEADER: self.api_key}
        if headers:
            request_headers.update(headers)

        logger.debug(f"{method} {url}")
        exchange = _Exchange(self.session, method, url, dict(kwargs, headers=request_headers, timeout=self.timeout))
        try:
            response = exchange.wait(self.timeout)
        except _CONSTRUCTION_ERRORS as e:
            raise RequestConstructionError(f"creating request: {e}") from e
        except requests.exceptions.Timeout as e:
            raise TransportError(f"making request: timed out after {self.timeout}s: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"making request: {e}") from e

        if response.status_code not in tuple(accepted):
            suggestion = None
            if response.status_code in _AUTH_FAILURES:
                suggestion = f"check the {self.credential}"
            raise UnexpectedStatusError(operation, status_code=response.status_code, body=response.text, recovery_suggestion=suggestion)
        return response

    @staticmethod
    def decode_json(response: requests.Response, operation: str) -> Any:
        """Parse a response body as JSON, raising DecodeError on malformed data."""
        try:
            return json.loads(response.text)
        except ValueError as e:
            raise DecodeError(f"{operation}: {e}") from e

    def close(self) -> None:
        self.session.close()
