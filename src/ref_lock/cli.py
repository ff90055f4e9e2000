"""Click entry point — all commands."""

import sys

import click

from ref_lock import __version__, config, log, runner


def _run(**overrides) -> None:
    try:
        cfg = config.parse(**overrides)
    except config.ConfigError as e:
        log.error(str(e))
        sys.exit(1)
    sys.exit(runner.run(cfg))


@click.group()
@click.version_option(version=__version__, prog_name="ref-lock")
def main():
    """Workflow locks backed by git refs on GitHub."""


@main.command()
def run():
    """GitHub Action entry point: INPUT_ACTION selects the action."""
    _run()


@main.command()
@click.argument("lock_name", required=False)
@click.option("--timeout", type=int, default=None, help="Seconds to wait for the lock")
@click.option("--poll-interval", type=int, default=None, help="Seconds between attempts")
@click.option(
    "--stale-threshold", type=int, default=None, help="Age in seconds after which a lock is broken"
)
@click.option(
    "--fail-on-timeout/--no-fail-on-timeout",
    default=None,
    help="Exit non-zero when the lock is not acquired in time",
)
def acquire(lock_name, timeout, poll_interval, stale_threshold, fail_on_timeout):
    """Wait for and take the lock."""
    _run(
        INPUT_ACTION="acquire",
        INPUT_LOCK_NAME=lock_name,
        INPUT_TIMEOUT=None if timeout is None else str(timeout),
        INPUT_POLL_INTERVAL=None if poll_interval is None else str(poll_interval),
        INPUT_STALE_THRESHOLD=None if stale_threshold is None else str(stale_threshold),
        INPUT_FAIL_ON_TIMEOUT=None if fail_on_timeout is None else str(fail_on_timeout).lower(),
    )


@main.command()
@click.argument("lock_name", required=False)
def release(lock_name):
    """Release the lock (no-op if it is not held)."""
    _run(INPUT_ACTION="release", INPUT_LOCK_NAME=lock_name)


@main.command()
@click.argument("lock_name", required=False)
def status(lock_name):
    """Show whether the lock is held and for how long."""
    _run(INPUT_ACTION="status", INPUT_LOCK_NAME=lock_name)


if __name__ == "__main__":
    main()
