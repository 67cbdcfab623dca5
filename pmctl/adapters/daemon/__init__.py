"""Client side of the supervisor daemon's remote-call channel.

Architecture:
- protocol.py: JSON-RPC messages over a Unix socket
- client.py: RemoteClient (implements the SupervisorClient port)
- timeouts.py: Timeout defaults
"""

from pmctl.adapters.daemon.client import RemoteClient

__all__ = ["RemoteClient"]
