from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

from casedraft.logging.logger import Log
from casedraft.utils.exceptions import DeadlineExceededError

T = TypeVar("T")


def run_with_deadline(
    fn: Callable[..., T],
    timeout_seconds: float,
    *args: object,
    label: str = "call",
    **kwargs: object,
) -> T:
    """Run fn(*args, **kwargs) as a future and wait at most timeout_seconds.

    Exceptions raised by fn propagate unchanged.

    Raises:
        DeadlineExceededError: if fn has not finished when the deadline expires.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="deadline")
    future = executor.submit(fn, *args, **kwargs)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError as exc:
        future.cancel()
        Log.warning(f"{label} exceeded its {timeout_seconds}s deadline")
        raise DeadlineExceededError(
            f"{label} did not complete within {timeout_seconds} seconds"
        ) from exc
    finally:
        # Do not block on a call that is still running past its deadline.
        executor.shutdown(wait=False, cancel_futures=True)
