"""A single HTTP request whose result arrives as JSON, raw bytes or a file."""

from __future__ import annotations

import json
import logging
import os
from enum import Enum, IntEnum
from typing import IO, Any, Optional, Union

import requests

from .events import Signal

log = logging.getLogger(__name__)

_CHUNK_SIZE = 8192
_CANCELED = "Operation canceled"

FileTarget = Union[str, "os.PathLike[str]", IO[bytes]]


class HttpMethod(Enum):
    """HTTP verb of a request."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


class ResultType(Enum):
    """How the body of the reply is handed back."""

    JSON = "json"
    RAW_DATA = "raw"
    FILE = "file"


class RequestStatus(IntEnum):
    """Outcome of a finished request."""

    SUCCESS = 0
    HTTP_ERROR = 1
    JSON_PARSE_ERROR = 2


class NetworkRequest:
    """One HTTP request.

    Depending on ``result_type`` the outcome is emitted on ``finished_json``
    (status, decoded document or None), ``finished_data`` (status, bytes) or
    ``finished`` (status) once the body has been written to ``file``. Every
    chunk of body received is also emitted on ``data_ready_read``.
    """

    def __init__(
        self,
        url: str = "",
        method: HttpMethod = HttpMethod.GET,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.method = method
        self.session = session or requests.Session()
        self.result_type = ResultType.JSON
        self.post_data = b""
        self.file: Optional[FileTarget] = None
        self.headers: dict[str, str] = {}
        self.last_error = ""
        self.ca_certificates: Optional[str] = None

        self.finished_json = Signal()
        self.finished_data = Signal()
        self.finished = Signal()
        self.data_ready_read = Signal()

        self._active = False
        self._cancelled = False

    def set_header(self, header: str, value: str) -> None:
        """Add or replace a request header."""
        self.headers[header] = value

    def set_certificate(self, path: str) -> None:
        """Trust the CA certificates in a PEM file or directory."""
        self.ca_certificates = path

    @property
    def in_progress(self) -> bool:
        return self._active

    def start(self) -> bool:
        """Run the request; False if it could not be started."""
        if self._active:
            log.debug("Request already in progress")
            return False

        if self.result_type is ResultType.FILE and self.file is None:
            self.last_error = "dlFile is invalid!, aborting request."
            log.warning("dlFile is invalid!, aborting request.")
            return False

        self._active = True
        self._cancelled = False
        self.last_error = ""
        log.debug("[*] New request to %s", self.url)
        try:
            self._run()
        finally:
            self._active = False
        return True

    def cancel(self) -> None:
        """Abort the request in progress; it then finishes with an error."""
        if self._active:
            self._cancelled = True

    def _send(self) -> requests.Response:
        data = self.post_data if self.method in (HttpMethod.POST, HttpMethod.PUT) else None
        kwargs: dict[str, Any] = {"headers": dict(self.headers), "data": data, "stream": True}
        verify: Union[bool, str] = self.ca_certificates or True
        try:
            return self.session.request(self.method.value, self.url, verify=verify, **kwargs)
        except requests.exceptions.SSLError as exc:
            log.warning("SSL errors: %s", exc)
            return self.session.request(self.method.value, self.url, verify=False, **kwargs)

    def _run(self) -> None:
        try:
            response = self._send()
        except requests.RequestException as exc:
            self._fail(str(exc), b"")
            return

        target: Optional[IO[bytes]] = None
        owned = False
        if self.result_type is ResultType.FILE:
            if isinstance(self.file, (str, os.PathLike)):
                target = open(self.file, "wb")
                owned = True
            else:
                target = self.file

        try:
            with response:
                body = bytearray()
                try:
                    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                        if self._cancelled:
                            break
                        if not chunk:
                            continue
                        self.data_ready_read.emit(bytes(chunk))
                        if target is not None:
                            target.write(chunk)
                        else:
                            body.extend(chunk)
                except requests.RequestException as exc:
                    self._fail(str(exc), bytes(body))
                    return

                if self._cancelled:
                    self._fail(_CANCELED, bytes(body))
                    return
                if not response.ok:
                    self._fail(f"{response.status_code} {response.reason}", bytes(body))
                    return
                self._succeed(bytes(body))
        finally:
            if owned and target is not None:
                target.close()

    def _fail(self, message: str, body: bytes) -> None:
        self.last_error = message
        log.debug("Error in %s: %s", self.url, message)
        if body:
            log.debug("Request body: %s", body.decode("utf-8", "replace"))

        if self.result_type is ResultType.JSON:
            try:
                doc = json.loads(body) if body else None
            except ValueError:
                doc = None
            self.finished_json.emit(RequestStatus.HTTP_ERROR, doc)
        elif self.result_type is ResultType.RAW_DATA:
            self.finished_data.emit(RequestStatus.HTTP_ERROR, b"")
        else:
            self.finished.emit(RequestStatus.HTTP_ERROR)

    def _succeed(self, body: bytes) -> None:
        if self.result_type is ResultType.RAW_DATA:
            self.finished_data.emit(RequestStatus.SUCCESS, body)
            return
        if self.result_type is ResultType.FILE:
            self.finished.emit(RequestStatus.SUCCESS)
            return

        if not body:
            # an empty reply is not treated as an error
            self.finished_json.emit(RequestStatus.SUCCESS, None)
            return
        try:
            doc = json.loads(body)
        except ValueError as exc:
            reason = getattr(exc, "msg", str(exc))
            offset = getattr(exc, "pos", 0)
            self.last_error = f"JSON parse error {reason} at offset: {offset}"
            log.warning("%s", self.last_error)
            self.finished_json.emit(RequestStatus.JSON_PARSE_ERROR, None)
            return
        self.finished_json.emit(RequestStatus.SUCCESS, doc)