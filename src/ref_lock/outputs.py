"""Step outputs via $GITHUB_OUTPUT."""

import os
import sys


def set_output(key: str, value: str) -> None:
    """Append key=value to the step output file.

    Falls back to the legacy set-output command outside of a runner.
    """
    path = os.environ.get("GITHUB_OUTPUT")
    if not path:
        print(f"::set-output name={key}::{value}", flush=True)
        return

    try:
        with open(path, "a") as f:
            f.write(f"{key}={value}\n")
    except OSError as e:
        print(f"::error::Failed to open GITHUB_OUTPUT: {e}", file=sys.stderr, flush=True)
