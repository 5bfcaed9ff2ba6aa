"""HTTP handlers for submitting tasks, reading status and switching strategy."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from .scheduler import UnsupportedStrategyError
from .services import TaskService

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Response:
    """A finished HTTP response: status code, encoded body and content type."""

    status: int
    body: bytes
    content_type: str = "application/json"

    @property
    def status_line(self) -> str:
        try:
            phrase = HTTPStatus(self.status).phrase
        except ValueError:
            phrase = ""
        return f"{self.status} {phrase}".rstrip()

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body)


def _jsonable(data: Any) -> Any:
    to_dict = getattr(data, "to_dict", None)
    return to_dict() if callable(to_dict) else data


def _encode(data: Any) -> bytes:
    text = json.dumps(_jsonable(data), ensure_ascii=False, separators=(",", ":"))
    # HTML-sensitive characters only occur inside JSON strings, so escaping
    # them here cannot break the document.
    text = (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )
    return (text + "\n").encode("utf-8")


def json_response(status: int, data: Any) -> Response:
    """Build a JSON response from a payload or an object with ``to_dict``."""
    return Response(status=int(status), body=_encode(data))


def error_response(status: int, message: str) -> Response:
    """Build a JSON error response of the form ``{"error": message}``."""
    return json_response(status, {"error": message})


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def _decode_first(body: bytes | str | None) -> Any:
    """Decode the first JSON value in ``body``; raise ValueError if there is none."""
    if body is None:
        body = b""
    text = body.decode("utf-8") if isinstance(body, (bytes, bytearray)) else body
    text = text.lstrip(" \t\r\n")
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    value, _ = decoder.raw_decode(text)
    return value


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"not an integer: {value!r}")
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {value}")
    return value


def _parse_time_slices(value: Any) -> list[int]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("expected an array")
    return [_as_int(item) for item in value]


def _parse_strategy(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, dict):
        raise ValueError("expected an object")
    strategy = ""
    for key, item in value.items():
        if key.lower() != "strategy":
            continue
        if item is None:
            continue
        if not isinstance(item, str):
            raise ValueError("strategy must be a string")
        strategy = item
    return strategy


def _format_list(values: Iterable[str]) -> str:
    return "[" + " ".join(values) + "]"


class TaskHandler:
    """Turns HTTP method and body into calls on a TaskService."""

    def __init__(self, task_service: TaskService) -> None:
        self.task_service = task_service

    def submit_tasks(self, method: str, body: bytes | str | None) -> Response:
        if method != "POST":
            return error_response(HTTPStatus.METHOD_NOT_ALLOWED, "Only POST method is allowed")
        try:
            time_slices = _parse_time_slices(_decode_first(body))
        except ValueError:
            return error_response(
                HTTPStatus.BAD_REQUEST, "Invalid request format, expected integer array"
            )
        if not time_slices:
            return error_response(HTTPStatus.BAD_REQUEST, "Task list cannot be empty")
        response = self.task_service.submit_tasks(time_slices)
        return json_response(HTTPStatus.OK, response)

    def get_status(self, method: str) -> Response:
        if method != "GET":
            return error_response(HTTPStatus.METHOD_NOT_ALLOWED, "Only GET method is allowed")
        return json_response(HTTPStatus.OK, self.task_service.status())

    def switch_scheduler(self, method: str, body: bytes | str | None) -> Response:
        if method != "POST":
            return error_response(HTTPStatus.METHOD_NOT_ALLOWED, "Only POST method is allowed")
        try:
            strategy = _parse_strategy(_decode_first(body))
        except ValueError:
            return error_response(HTTPStatus.BAD_REQUEST, "Invalid request format")
        if not strategy:
            return error_response(HTTPStatus.BAD_REQUEST, "Scheduler strategy cannot be empty")

        available = self.task_service.available_strategies()
        if strategy not in available:
            return error_response(
                HTTPStatus.BAD_REQUEST,
                f"Unsupported scheduler strategy: {strategy}, "
                f"available strategies: {_format_list(available)}",
            )
        try:
            self.task_service.switch_scheduler(strategy)
        except UnsupportedStrategyError:
            return error_response(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to switch scheduler strategy"
            )
        return json_response(
            HTTPStatus.OK,
            {
                "current_strategy": strategy,
                "message": f"Scheduler strategy switched to: {strategy}",
            },
        )


_NOT_FOUND = Response(
    status=HTTPStatus.NOT_FOUND,
    body=b"404 page not found\n",
    content_type="text/plain; charset=utf-8",
)


def _read_body(environ: dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    if length <= 0 or stream is None:
        return b""
    return stream.read(length)


def create_app(handler: TaskHandler) -> Callable[..., list[bytes]]:
    """Return a WSGI application routing /tasks, /status and /scheduler."""

    def app(environ: dict[str, Any], start_response: Callable[..., Any]) -> list[bytes]:
        path = environ.get("PATH_INFO", "")
        method = environ.get("REQUEST_METHOD", "GET").upper()
        if path == "/tasks":
            response = handler.submit_tasks(method, _read_body(environ))
        elif path == "/status":
            response = handler.get_status(method)
        elif path == "/scheduler":
            response = handler.switch_scheduler(method, _read_body(environ))
        else:
            response = _NOT_FOUND
        start_response(
            response.status_line,
            [
                ("Content-Type", response.content_type),
                ("Content-Length", str(len(response.body))),
            ],
        )
        return [response.body]

    return app