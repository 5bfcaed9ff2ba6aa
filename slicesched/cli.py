"""Command line entry point: run the scheduler and its HTTP server."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from collections.abc import Callable, Sequence
from socketserver import ThreadingMixIn
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from .handlers import TaskHandler, create_app
from .services import SchedulerService, TaskService

log = logging.getLogger(__name__)


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _QuietRequestHandler(WSGIRequestHandler):
    """Request handler that sends access lines to the debug log, not stderr."""

    def log_message(self, format: str, *args: Any) -> None:
        log.debug("%s - %s", self.address_string(), format % args)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the port and bandwidth options."""
    parser = argparse.ArgumentParser(
        prog="slicesched", description="Time-slice task scheduler service."
    )
    parser.add_argument(
        "-port", "--port", default="8080", help="Port for the HTTP server"
    )
    parser.add_argument(
        "-bandwidth", "--bandwidth", type=int, default=5, help="Bandwidth of the scheduler"
    )
    return parser.parse_args(argv)


def _make_server(port: str, app: Callable[..., Any]) -> WSGIServer:
    return make_server(
        "",
        int(port),
        app,
        server_class=_ThreadingWSGIServer,
        handler_class=_QuietRequestHandler,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Serve until SIGINT or SIGTERM, then shut down gracefully."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    task_service = TaskService(args.bandwidth)
    handler = TaskHandler(task_service)
    scheduler_service = SchedulerService(task_service)
    scheduler_service.start()

    stop = threading.Event()

    def on_signal(signum: int, frame: Any) -> None:
        stop.set()

    previous = {
        sig: signal.signal(sig, on_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        try:
            server = _make_server(args.port, create_app(handler))
        except (OSError, ValueError, OverflowError) as exc:
            log.error("Failed to start server: %s", exc)
            scheduler_service.stop()
            return 1

        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        log.info("Server starting on port %s with bandwidth %d", args.port, args.bandwidth)

        while not stop.wait(0.5):
            pass

        log.info("Shutting down server...")
        scheduler_service.graceful_stop()
        server.shutdown()
        server.server_close()
        thread.join()
        log.info("Server exited")
        return 0
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)