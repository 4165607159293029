# tests/test_connection_state.py

import threading

from mountains.utils.db.connection_state import (
    ConnectionState,
    ConnectionStateCell,
    ConnectionStatus,
    SyncStatus,
    sync_status_for,
)


def test_cell_starts_disconnected():
    cell = ConnectionStateCell()
    assert cell.get() == ConnectionState.disconnected()
    assert cell.get().is_connected is False


def test_status_labels():
    assert sync_status_for(ConnectionState.disconnected()).label == "⚪ Offline"
    assert sync_status_for(ConnectionState.connected()).label == "✓ Synced"
    assert sync_status_for(ConnectionState.error("boom")).label == "⚠ Sync Error"


def test_error_keeps_message():
    state = ConnectionState.error("Failed to create replica: timeout")
    assert state.status is ConnectionStatus.ERROR
    assert state.message == "Failed to create replica: timeout"
    assert "timeout" in str(state)


def test_snapshots_are_immutable():
    cell = ConnectionStateCell()
    snap = cell.get()
    cell.set(ConnectionState.connected())
    # the earlier snapshot still describes the earlier state
    assert snap.status is ConnectionStatus.DISCONNECTED
    assert cell.get().is_connected


def test_concurrent_readers_see_only_whole_states():
    """
    Readers racing a writer only ever observe one of the states that
    were actually set, never a mix.
    """
    cell = ConnectionStateCell()
    valid = {ConnectionState.disconnected(), ConnectionState.connected(),
             ConnectionState.error("x")}
    seen = set()
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            seen.add(cell.get())

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    for _ in range(500):
        cell.set(ConnectionState.connected())
        cell.set(ConnectionState.error("x"))
        cell.set(ConnectionState.disconnected())
    stop.set()
    for t in readers:
        t.join()
    assert seen <= valid


def test_sync_status_enum_values():
    assert {s.value for s in SyncStatus} == {"offline", "synced", "sync-error"}
