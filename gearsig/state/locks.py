"""Advisory locks serializing writers of the workspace and signal library."""

from contextlib import contextmanager
import fcntl

from gearsig.state.paths import ensure_dirs, lock_file


@contextmanager
def state_lock(name="state"):
    """Hold an exclusive flock on ``<state_dir>/<name>.lock`` for the block."""
    ensure_dirs()
    with lock_file(name).open("a") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        try:
            yield handle
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
