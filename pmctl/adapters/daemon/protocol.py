"""JSON-RPC protocol for talking to the supervisor daemon.

Newline-delimited JSON messages over a Unix socket, one request and one
response per connection.
"""

import json
import logging
import socket
from typing import Any

logger = logging.getLogger(__name__)

RECV_CHUNK_SIZE = 4096


class ProtocolError(Exception):
    """Base exception for protocol errors."""

    pass


class Request:
    """JSON-RPC request message."""

    def __init__(self, method: str, params: dict[str, Any], request_id: int = 1):
        """Create a request.

        Args:
            method: Daemon method name (e.g., "restart")
            params: Method parameters
            request_id: Request ID echoed back in the response
        """
        self.method = method
        self.params = params
        self.id = request_id

    def to_json(self) -> str:
        """Serialize to JSON string with newline."""
        data = {"method": self.method, "params": self.params, "id": self.id}
        return json.dumps(data) + "\n"

    @classmethod
    def from_json(cls, line: str) -> "Request":
        """Deserialize from a JSON line.

        Raises:
            ProtocolError: If JSON is invalid or the method is missing
        """
        data = _load_object(line, "Request")
        if "method" not in data:
            raise ProtocolError("Request missing 'method' field")
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise ProtocolError("Request 'params' must be a JSON object")
        return cls(method=data["method"], params=params, request_id=data.get("id", 1))


class Response:
    """JSON-RPC response message."""

    def __init__(
        self,
        result: Any = None,
        error: dict[str, Any] | None = None,
        request_id: int = 1,
    ):
        """Create a response.

        Args:
            result: Result value (if success)
            error: Error dict with 'code' and 'message' (if failure)
            request_id: ID of the request being answered
        """
        self.result = result
        self.error = error
        self.id = request_id

    def to_json(self) -> str:
        """Serialize to JSON string with newline."""
        data = {"result": self.result, "error": self.error, "id": self.id}
        return json.dumps(data) + "\n"

    @classmethod
    def from_json(cls, line: str) -> "Response":
        """Deserialize from a JSON line.

        Raises:
            ProtocolError: If JSON is invalid or the error field is malformed
        """
        data = _load_object(line, "Response")
        error = data.get("error")
        if error is not None and not isinstance(error, dict):
            raise ProtocolError("Response 'error' must be a JSON object or null")
        return cls(
            result=data.get("result"),
            error=error,
            request_id=data.get("id", 1),
        )

    @classmethod
    def success(cls, result: Any, request_id: int = 1) -> "Response":
        """Create a success response."""
        return cls(result=result, error=None, request_id=request_id)

    @classmethod
    def failure(cls, code: int, message: str, request_id: int = 1) -> "Response":
        """Create an error response."""
        return cls(result=None, error={"code": code, "message": message}, request_id=request_id)

    def is_error(self) -> bool:
        """Check if this response is an error."""
        return self.error is not None

    @property
    def error_message(self) -> str:
        if not self.error:
            return ""
        return str(self.error.get("message", "Unknown error"))

    @property
    def error_code(self) -> int | None:
        if not self.error:
            return None
        code = self.error.get("code")
        return code if isinstance(code, int) else None


def _load_object(line: str, kind: str) -> dict[str, Any]:
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ProtocolError(f"{kind} must be a JSON object")
    return data


def send_message(sock: socket.socket, message: Request | Response) -> None:
    """Send a message over a socket.

    Raises:
        ProtocolError: If send fails
    """
    try:
        sock.sendall(message.to_json().encode("utf-8"))
    except OSError as e:
        raise ProtocolError(f"Failed to send message: {e}") from e


def receive_message(
    sock: socket.socket, message_type: type[Request] | type[Response]
) -> Request | Response:
    """Receive one newline-delimited message from a socket.

    Only the first message is parsed; trailing bytes after the delimiter are
    discarded with a warning since each connection carries one message.

    Raises:
        ProtocolError: If the connection closes early, times out, or the
            message is invalid
    """
    buffer = b""
    try:
        while b"\n" not in buffer:
            chunk = sock.recv(RECV_CHUNK_SIZE)
            if not chunk:
                raise ProtocolError("Connection closed before a full message arrived")
            buffer += chunk
    except OSError as e:
        raise ProtocolError(f"Failed to receive message: {e}") from e

    message_bytes, _, remaining = buffer.partition(b"\n")
    if remaining:
        logger.warning(
            "Discarding %d bytes received after the first message", len(remaining)
        )

    try:
        line = message_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProtocolError(f"Message is not valid UTF-8: {e}") from e
    return message_type.from_json(line)
