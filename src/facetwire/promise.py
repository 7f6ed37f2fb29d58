"""Single-settlement promises with continuation chaining.

A :class:`Promise` starts pending and settles exactly once, either resolved with a
value or rejected with an error. Continuations registered through
:meth:`Promise.then` run synchronously when the promise settles (or immediately, if
it already has), and each registration yields a derived promise reflecting the
continuation's outcome.

All scheduling is cooperative and single-threaded: nothing here runs in parallel,
and nothing is ever cancelled. Promises can be awaited from a running asyncio loop,
which is how callers impose deadlines (``asyncio.wait_for``).
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from facetwire.errors import PromiseStateError, RejectionError

__all__ = [
    "PromiseState",
    "Promise",
    "deferred",
    "resolved",
    "rejected",
    "when_all",
    "when_settled",
]

logger = logging.getLogger(__name__)

Callback = Optional[Callable[[Any], Any]]


class PromiseState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Promise:
    """A future value that settles once and notifies registered continuations.

    The promise carries its own settlement capability: whoever holds it may call
    :meth:`resolve` or :meth:`reject`. The first call wins; later calls are ignored.

    Example:
        >>> p = Promise()
        >>> doubled = p.then(lambda x: x * 2)
        >>> p.resolve(21)
        >>> doubled.value
        42
    """

    def __init__(self):
        self._state = PromiseState.PENDING
        self._value: Any = None
        self._continuations: list[tuple[Callback, Callback, "Promise"]] = []

    @property
    def state(self) -> PromiseState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is PromiseState.PENDING

    @property
    def is_resolved(self) -> bool:
        return self._state is PromiseState.RESOLVED

    @property
    def is_rejected(self) -> bool:
        return self._state is PromiseState.REJECTED

    @property
    def value(self) -> Any:
        """The resolution value or rejection error of a settled promise.

        Raises:
            PromiseStateError: If the promise is still pending.
        """
        if self.is_pending:
            raise PromiseStateError("Promise has not settled")
        return self._value

    def resolve(self, value: Any = None) -> None:
        self._settle(PromiseState.RESOLVED, value)

    def reject(self, error: Any) -> None:
        self._settle(PromiseState.REJECTED, error)

    def then(self, on_resolve: Callback = None, on_reject: Callback = None) -> "Promise":
        """Register continuations and return a promise for their outcome.

        Args:
            on_resolve: Called with the value if this promise resolves.
            on_reject: Called with the error if this promise rejects.

        Returns:
            A derived promise. It resolves with whatever the invoked continuation
            returns, adopting the outcome if that is itself a promise, and rejects
            with any exception the continuation raises. Where no continuation was
            given for the outcome, the settlement passes through unchanged.
        """
        derived = Promise()
        continuation = (on_resolve, on_reject, derived)
        if self.is_pending:
            self._continuations.append(continuation)
        else:
            self._run(continuation)
        return derived

    def _settle(self, state: PromiseState, value: Any) -> None:
        if not self.is_pending:
            logger.debug(
                "Ignoring attempt to mark %s promise as %s", self._state.value, state.value
            )
            return

        self._state = state
        self._value = value

        continuations, self._continuations = self._continuations, []
        for continuation in continuations:
            self._run(continuation)

    def _run(self, continuation: tuple[Callback, Callback, "Promise"]) -> None:
        on_resolve, on_reject, derived = continuation
        handler = on_resolve if self.is_resolved else on_reject
        if handler is None:
            derived._settle(self._state, self._value)
            return

        try:
            result = handler(self._value)
        except Exception as e:
            derived.reject(e)
            return

        if isinstance(result, Promise):
            result.then(derived.resolve, derived.reject)
        else:
            derived.resolve(result)

    def __await__(self):
        future = asyncio.get_running_loop().create_future()

        def set_result(value):
            if not future.done():
                future.set_result(value)

        def set_exception(error):
            if not future.done():
                future.set_exception(
                    error if isinstance(error, BaseException) else RejectionError(error)
                )

        self.then(set_result, set_exception)
        return future.__await__()

    def __repr__(self) -> str:
        if self.is_pending:
            return "<Promise pending>"
        return f"<Promise {self._state.value}: {self._value!r}>"


def deferred() -> Promise:
    """Create a new pending promise."""
    return Promise()


def resolved(value: Any = None) -> Promise:
    promise = Promise()
    promise.resolve(value)
    return promise


def rejected(error: Any) -> Promise:
    promise = Promise()
    promise.reject(error)
    return promise


def when_all(promises: Iterable[Promise]) -> Promise:
    """Join promises, first failure wins.

    Args:
        promises: The promises to join.

    Returns:
        A promise resolving with the list of results, in input order, once every
        input has resolved; or rejecting with the first error any input rejects
        with. Inputs are never cancelled, and settlements after the first
        rejection are ignored.
    """
    promises = list(promises)
    joined = Promise()
    if not promises:
        joined.resolve([])
        return joined

    results: list[Any] = [None] * len(promises)
    remaining = len(promises)

    def collect(index: int) -> Callable[[Any], None]:
        def fulfil(value: Any) -> None:
            nonlocal remaining
            results[index] = value
            remaining -= 1
            if remaining == 0:
                joined.resolve(results)

        return fulfil

    for index, promise in enumerate(promises):
        promise.then(collect(index), joined.reject)

    return joined


def when_settled(promises: Iterable[Promise]) -> Promise:
    """Wait for every promise to settle, whatever the outcome.

    Returns:
        A promise resolving with the input promises, in input order, once all of
        them have settled. It never rejects.
    """
    promises = list(promises)
    joined = Promise()
    remaining = len(promises)
    if remaining == 0:
        joined.resolve([])
        return joined

    def settle_one(_outcome: Any) -> None:
        nonlocal remaining
        remaining -= 1
        if remaining == 0:
            joined.resolve(promises)

    for promise in promises:
        promise.then(settle_one, settle_one)

    return joined
