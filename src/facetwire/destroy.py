"""Per-context registry of teardown closures.

Each context owns exactly one :class:`DestroyRegistry`, handed to whatever needs to
register teardowns. When the context's ``destroyed`` signal fires, the registry runs
every teardown once, in the order they were registered, and forgets them.
"""

import logging
from typing import Any, Callable, Optional

from facetwire.errors import DestroyError
from facetwire.promise import Promise, rejected, resolved, when_settled

__all__ = ["Teardown", "DestroyRegistry"]

logger = logging.getLogger(__name__)

Teardown = Callable[[], Optional[Promise]]


class DestroyRegistry:
    """Ordered teardown closures for a single context.

    A teardown may return a promise for its own completion. Failures, whether
    raised or signalled by rejection, do not stop later teardowns from running;
    they are collected and reported together through the promise returned by
    :meth:`destroy`.
    """

    def __init__(self):
        self._teardowns: list[Teardown] = []

    def register(self, teardown: Teardown) -> None:
        self._teardowns.append(teardown)

    def bind(self, destroyed: Promise) -> Promise:
        """Run :meth:`destroy` when ``destroyed`` resolves.

        Returns:
            A promise for the completion of that teardown.
        """
        return destroyed.then(lambda _context: self.destroy())

    def destroy(self) -> Promise:
        """Run and clear every registered teardown.

        Returns:
            A promise resolving once every teardown has settled, or rejecting with a
            :class:`DestroyError` listing every failure in registration order.
            Calling this again without new registrations does nothing.
        """
        teardowns, self._teardowns = self._teardowns, []
        logger.debug("Running %d teardown(s)", len(teardowns))

        outcomes = [self._run(teardown) for teardown in teardowns]
        return when_settled(outcomes).then(_report_failures)

    @staticmethod
    def _run(teardown: Teardown) -> Promise:
        try:
            result = teardown()
        except Exception as e:
            logger.exception("Teardown %r raised", teardown)
            return rejected(e)
        return result if isinstance(result, Promise) else resolved(result)

    def __len__(self) -> int:
        return len(self._teardowns)


def _report_failures(outcomes: list[Promise]) -> Any:
    errors = [outcome.value for outcome in outcomes if outcome.is_rejected]
    if errors:
        logger.error("%d teardown(s) failed: %r", len(errors), errors)
        raise DestroyError(errors)
    return None
