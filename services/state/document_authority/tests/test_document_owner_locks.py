"""Per-owner lock registry tests."""

from __future__ import annotations

import threading
import time

from services.state.document_authority.locks import OwnerLockRegistry


def test_same_owner_reuses_one_lock() -> None:
    registry = OwnerLockRegistry()

    first = registry.lock_for("owner-a")
    second = registry.lock_for("owner-a")

    assert first is second
    assert len(registry) == 1


def test_different_owners_get_different_locks() -> None:
    registry = OwnerLockRegistry()

    assert registry.lock_for("owner-a") is not registry.lock_for("owner-b")
    assert len(registry) == 2


def test_hold_releases_on_exception() -> None:
    registry = OwnerLockRegistry()

    try:
        with registry.hold("owner-a"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert registry.lock_for("owner-a").locked() is False


def test_same_owner_blocks_while_other_owner_proceeds() -> None:
    registry = OwnerLockRegistry()
    other_owner_done = threading.Event()
    same_owner_done = threading.Event()

    def run(uuid: str, done: threading.Event) -> None:
        with registry.hold(uuid):
            done.set()

    with registry.hold("owner-a"):
        same = threading.Thread(target=run, args=("owner-a", same_owner_done))
        other = threading.Thread(target=run, args=("owner-b", other_owner_done))
        same.start()
        other.start()
        assert other_owner_done.wait(timeout=5.0)
        time.sleep(0.05)
        assert same_owner_done.is_set() is False

    same.join(timeout=5.0)
    other.join(timeout=5.0)
    assert same_owner_done.is_set() is True
