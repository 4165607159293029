# mountains/utils/db/connection_state.py
"""
Cloud connection state for the store.

The UI reads this on every frame, the write path reads it before each
opportunistic sync, and only the replica upgrade writes it.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ConnectionStatus(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionState:
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    message: Optional[str] = None

    @classmethod
    def disconnected(cls) -> "ConnectionState":
        return cls(ConnectionStatus.DISCONNECTED)

    @classmethod
    def connected(cls) -> "ConnectionState":
        return cls(ConnectionStatus.CONNECTED)

    @classmethod
    def error(cls, message: str) -> "ConnectionState":
        return cls(ConnectionStatus.ERROR, message)

    @property
    def is_connected(self) -> bool:
        return self.status is ConnectionStatus.CONNECTED

    def __str__(self):
        if self.status is ConnectionStatus.ERROR:
            return f"error: {self.message}"
        return self.status.value


class ConnectionStateCell:
    """
    Lock-guarded holder for the current ConnectionState.

    States are immutable, so get() hands out the snapshot itself and nobody
    can change the cell without going through set().
    """

    def __init__(self, initial: Optional[ConnectionState] = None):
        self._lock = threading.Lock()
        self._state = initial or ConnectionState.disconnected()

    def get(self) -> ConnectionState:
        with self._lock:
            return self._state

    def set(self, state: ConnectionState) -> None:
        with self._lock:
            previous, self._state = self._state, state
        if previous != state:
            logger.info("Connection state: %s -> %s", previous, state)


class SyncStatus(Enum):
    OFFLINE = "offline"
    SYNCED = "synced"
    SYNC_ERROR = "sync-error"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    SyncStatus.OFFLINE: "⚪ Offline",
    SyncStatus.SYNCED: "✓ Synced",
    SyncStatus.SYNC_ERROR: "⚠ Sync Error",
}


def sync_status_for(state: ConnectionState) -> SyncStatus:
    if state.status is ConnectionStatus.CONNECTED:
        return SyncStatus.SYNCED
    if state.status is ConnectionStatus.ERROR:
        return SyncStatus.SYNC_ERROR
    return SyncStatus.OFFLINE
