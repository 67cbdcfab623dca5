"""In-process fake of the supervisor daemon's remote-call surface.

Serves the JSON-RPC protocol on a real Unix socket from a background thread
and records every request it receives, so tests can assert exactly which
remote calls a command made.
"""

import os
import socketserver
import threading
from pathlib import Path
from typing import Any

from pmctl.adapters.daemon.protocol import ProtocolError, Request, Response


class _Handler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        fake: FakeDaemon = self.server.fake  # type: ignore[attr-defined]
        line = self.rfile.readline()
        if not line:
            return
        try:
            request = Request.from_json(line.decode("utf-8"))
        except ProtocolError as e:
            response = Response.failure(400, str(e))
        else:
            response = fake.handle(request)
        self.wfile.write(response.to_json().encode("utf-8"))


class _Server(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True


class FakeDaemon:
    """Fake supervisor holding an in-memory process table.

    Attributes:
        processes: name -> descriptor dict as sent on the wire.
        calls: (method, params) for every request, in arrival order.
        failures: (method, name or None) -> error message to answer with.
        raw_results: method -> result returned verbatim, bypassing the table.
    """

    def __init__(self, socket_path: Path):
        self.socket_path = socket_path
        self.processes: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: dict[tuple[str, str | None], str] = {}
        self.raw_results: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._server: _Server | None = None
        self._thread: threading.Thread | None = None

    def add_process(self, name: str, status: str = "running", **fields: Any) -> None:
        self.processes[name] = {
            "name": name,
            "pid": fields.pop("pid", 1000 + len(self.processes)),
            "status": status,
            "uptime": fields.pop("uptime", "1m"),
            "restarts": fields.pop("restarts", 0),
            "cpu_percent": fields.pop("cpu_percent", 0.5),
            "memory_bytes": fields.pop("memory_bytes", 2048),
            **fields,
        }

    def fail(self, method: str, name: str | None = None, message: str = "boom") -> None:
        """Make ``method`` (optionally only for ``name``) answer with an error."""
        self.failures[(method, name)] = message

    def methods_called(self, method: str) -> list[dict[str, Any]]:
        return [params for m, params in self.calls if m == method]

    def remote_methods(self) -> list[str]:
        """Methods called, excluding the connect health probe."""
        return [m for m, _ in self.calls if m != "health"]

    def start(self) -> "FakeDaemon":
        self._server = _Server(str(self.socket_path), _Handler)
        self._server.fake = self  # type: ignore[attr-defined]
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self.socket_path.exists():
            os.unlink(self.socket_path)

    def handle(self, request: Request) -> Response:
        with self._lock:
            self.calls.append((request.method, dict(request.params)))
            name = request.params.get("name")
            message = self.failures.get((request.method, name)) or self.failures.get(
                (request.method, None)
            )
            if message is not None:
                return Response.failure(500, message, request.id)
            if request.method in self.raw_results:
                return Response.success(self.raw_results[request.method], request.id)
            handler = getattr(self, f"_on_{request.method}", None)
            if handler is None:
                return Response.failure(404, f"unknown method {request.method}", request.id)
            return handler(request)

    def _on_health(self, request: Request) -> Response:
        return Response.success({"pid": os.getpid()}, request.id)

    def _on_save(self, request: Request) -> Response:
        return Response.success(True, request.id)

    def _on_start_from_source(self, request: Request) -> Response:
        self.add_process(request.params["name"], status="running")
        return Response.success(True, request.id)

    def _require(self, request: Request) -> Response | None:
        if request.params.get("name") not in self.processes:
            return Response.failure(404, "process not found", request.id)
        return None

    def _set_status(self, request: Request, status: str) -> Response:
        missing = self._require(request)
        if missing:
            return missing
        self.processes[request.params["name"]]["status"] = status
        return Response.success(True, request.id)

    def _on_start(self, request: Request) -> Response:
        return self._set_status(request, "running")

    def _on_restart(self, request: Request) -> Response:
        response = self._set_status(request, "running")
        if not response.is_error():
            self.processes[request.params["name"]]["restarts"] += 1
        return response

    def _on_stop(self, request: Request) -> Response:
        return self._set_status(request, "stopped")

    def _on_delete(self, request: Request) -> Response:
        missing = self._require(request)
        if missing:
            return missing
        del self.processes[request.params["name"]]
        return Response.success(True, request.id)

    def _on_get_process(self, request: Request) -> Response:
        proc = self.processes.get(request.params.get("name"))
        return Response.success(dict(proc) if proc else {}, request.id)

    def _on_status(self, request: Request) -> Response:
        return Response.success({"processes": list(self.processes.values())}, request.id)
