"""Lock acquire/release/stale recovery on top of the refs backend."""

import time

from ref_lock import log
from ref_lock.backend import ABSENT, BackendError, RefBackend


def acquire(
    backend: RefBackend,
    name: str,
    owner: str,
    timeout: int = 300,
    poll_interval: int = 10,
    stale_threshold: int = 600,
) -> bool:
    """Poll until the lock is acquired or *timeout* seconds have passed.

    Returns True if acquired, False on timeout. A lock older than
    *stale_threshold* seconds is deleted and retried immediately.
    """
    deadline = time.time() + timeout

    while True:
        try:
            acquired = backend.try_create(name, owner)
        except BackendError as e:
            log.warning(f"lock attempt failed: {e}")
            acquired = False
        if acquired:
            log.success(f"Lock {name!r} acquired")
            return True

        try:
            age = backend.read_age(name)
        except BackendError as e:
            log.warning(f"could not read lock age: {e}")
            age = ABSENT

        if age != ABSENT and age > stale_threshold:
            log.notice(
                f"Stale lock detected ({age}s old, threshold {stale_threshold}s), removing..."
            )
            try:
                backend.delete(name)
            except BackendError as e:
                log.warning(f"failed to remove stale lock: {e}")
                if time.time() >= deadline:
                    return False
            continue

        if time.time() >= deadline:
            return False

        remaining = deadline - time.time()
        log.info(
            f"Lock {name!r} held by another process, retrying in {poll_interval}s... "
            f"({remaining:.0f}s remaining)"
        )
        time.sleep(poll_interval)


def release(backend: RefBackend, name: str) -> None:
    """Release the lock. Releasing a lock that is not held is not an error."""
    backend.delete(name)


def lock_age(backend: RefBackend, name: str) -> int:
    """Age of the lock in seconds, or -1 if it is not held."""
    return backend.read_age(name)
