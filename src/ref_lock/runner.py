"""Run one lock action end to end. Returns exit code (0=success, 1=failure)."""

from ref_lock import lock, log, outputs
from ref_lock.backend import ABSENT, BackendError, RefBackend
from ref_lock.config import Config


def run(cfg: Config, backend: RefBackend | None = None) -> int:
    """Dispatch on cfg.action. Builds (and closes) a backend when none is given."""
    if backend is None:
        with RefBackend(cfg.repository, cfg.token, api_url=cfg.api_url) as owned:
            return run(cfg, owned)

    if cfg.action == "acquire":
        return run_acquire(cfg, backend)
    if cfg.action == "release":
        return run_release(cfg, backend)
    return run_status(cfg, backend)


def run_acquire(cfg: Config, backend: RefBackend) -> int:
    acquired = lock.acquire(
        backend,
        cfg.lock_name,
        cfg.sha,
        timeout=cfg.timeout,
        poll_interval=cfg.poll_interval,
        stale_threshold=cfg.stale_threshold,
    )
    outputs.set_output("acquired", "true" if acquired else "false")
    outputs.set_output("lock_ref", cfg.lock_ref)

    if acquired:
        return 0

    msg = f"Failed to acquire lock {cfg.lock_name!r} within {cfg.timeout}s"
    if not cfg.fail_on_timeout:
        log.warning(msg)
        return 0
    log.error(msg)
    return 1


def run_release(cfg: Config, backend: RefBackend) -> int:
    try:
        lock.release(backend, cfg.lock_name)
    except BackendError as e:
        log.warning(f"failed to release lock: {e}")
    else:
        log.success(f"Lock {cfg.lock_name!r} released")

    outputs.set_output("acquired", "false")
    outputs.set_output("lock_ref", cfg.lock_ref)
    return 0


def run_status(cfg: Config, backend: RefBackend) -> int:
    try:
        age = lock.lock_age(backend, cfg.lock_name)
    except BackendError as e:
        log.error(f"could not read lock {cfg.lock_name!r}: {e}")
        return 1

    locked = age != ABSENT
    if locked:
        log.info(f"Lock {cfg.lock_name!r} held for {age}s")
    else:
        log.info(f"Lock {cfg.lock_name!r} is free")

    outputs.set_output("locked", "true" if locked else "false")
    outputs.set_output("age", str(age))
    outputs.set_output("lock_ref", cfg.lock_ref)
    return 0
