import threading

import pytest

from casedraft.utils.deadline import run_with_deadline
from casedraft.utils.exceptions import DeadlineExceededError


class TestRunWithDeadline:
    def test_returns_value_within_deadline(self) -> None:
        assert run_with_deadline(lambda a, b: a + b, 1.0, 2, 3) == 5

    def test_passes_keyword_arguments(self) -> None:
        def greet(name: str, punctuation: str = ".") -> str:
            return f"hi {name}{punctuation}"

        assert run_with_deadline(greet, 1.0, "ana", punctuation="!") == "hi ana!"

    def test_raises_when_deadline_expires(self) -> None:
        release = threading.Event()

        with pytest.raises(DeadlineExceededError, match="slow call did not complete"):
            run_with_deadline(release.wait, 0.05, 5.0, label="slow call")
        release.set()

    def test_propagates_exceptions(self) -> None:
        def boom() -> None:
            raise RuntimeError("inner failure")

        with pytest.raises(RuntimeError, match="inner failure"):
            run_with_deadline(boom, 1.0)
