"""Override state store for running tunnels."""

import threading

from ..common.logging import get_logger

logger = get_logger(__name__)

LocalEndpoint = int | str


class OverrideStateStore:
    """In-memory record of the local endpoint each running tunnel uses.

    An entry is written when a tunnel is started and removed when it is
    stopped. While present, it takes precedence over the definition's own
    local_port/local_socket. An int entry is a port, a str entry a socket
    path. Nothing is persisted; a new store starts empty.
    """

    def __init__(self) -> None:
        self._entries: dict[str, LocalEndpoint] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> LocalEndpoint | None:
        """Get the override for a tunnel.

        Args:
            name: Tunnel name

        Returns:
            Port or socket path if an override is recorded, None otherwise
        """
        with self._lock:
            return self._entries.get(name)

    def set(self, name: str, endpoint: LocalEndpoint) -> None:
        """Record the local endpoint a tunnel was started with.

        Args:
            name: Tunnel name
            endpoint: Port number or socket path

        Raises:
            TypeError: If endpoint is neither an int nor a str
        """
        if isinstance(endpoint, bool) or not isinstance(endpoint, (int, str)):
            raise TypeError(
                f"Override for tunnel '{name}' must be a port or socket path, "
                f"got {type(endpoint).__name__}"
            )
        with self._lock:
            self._entries[name] = endpoint
        logger.debug("Override recorded", tunnel=name, endpoint=endpoint)

    def remove(self, name: str) -> LocalEndpoint | None:
        """Forget the override for a tunnel. Missing entries are ignored.

        Args:
            name: Tunnel name

        Returns:
            The removed endpoint, or None if there was none
        """
        with self._lock:
            endpoint = self._entries.pop(name, None)
        if endpoint is not None:
            logger.debug("Override removed", tunnel=name, endpoint=endpoint)
        return endpoint

    def snapshot(self) -> dict[str, LocalEndpoint]:
        """Copy of all current overrides."""
        with self._lock:
            return dict(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
