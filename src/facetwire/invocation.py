"""Invoke component methods with arguments resolved from specs."""

import logging
from typing import Any

from facetwire.domain import ComponentHandle, FacetRecord
from facetwire.errors import MissingMethodError
from facetwire.plugin import Resolver
from facetwire.promise import Promise

__all__ = ["invoke", "invoke_all"]

logger = logging.getLogger(__name__)


def invoke(
    promise: Promise,
    method_name: str,
    target: ComponentHandle,
    args_spec: Any,
    resolver: Resolver,
    *,
    strict: bool = False,
) -> None:
    """Call ``method_name`` on ``target`` once its arguments have resolved.

    Without an ``args_spec`` the method is called before this function returns.
    With one, the call waits for the arguments to resolve, so it happens later if
    any argument is still pending.

    Args:
        promise: Settled with the method's return value, or with the error that
            prevented or interrupted the call.
        method_name: Name of the method, looked up through the target's proxy.
        target: The component to invoke the method on.
        args_spec: ``None`` to call without arguments; otherwise a spec resolved
            through ``resolver``. A resolved list or tuple is spread into
            positional arguments, any other value is passed as the sole argument.
        resolver: Host resolution services.
        strict: If True, a ``method_name`` that is not callable rejects
            ``promise`` with :class:`MissingMethodError`. Otherwise the call is
            skipped with a warning and ``promise`` is left pending.
    """
    method = target.proxy.get(method_name)
    if not callable(method):
        if strict:
            promise.reject(MissingMethodError(method_name, target.component))
        else:
            logger.warning(
                "Not invoking '%s' on %r: not callable; invocation stays pending",
                method_name,
                target.component,
            )
        return

    def call(resolved_args: Any) -> None:
        try:
            result = target.proxy.invoke(method, _as_arguments(resolved_args))
        except Exception as e:
            logger.debug("Invocation of '%s' on %r failed: %r", method_name, target.component, e)
            promise.reject(e)
        else:
            promise.resolve(result)

    if args_spec is None:
        call(())
    else:
        resolver.resolve(args_spec).then(call, promise.reject)


def invoke_all(
    promise: Promise, facet: FacetRecord, resolver: Resolver, *, strict: bool = False
) -> None:
    """Invoke every method named by ``facet.options``.

    A string names a single method called without arguments. A mapping names one
    method per key, with the value as its argument spec; the calls are issued in
    mapping order and ``promise`` resolves once all of them have, or rejects with
    the first failure.
    """
    options = facet.options
    if isinstance(options, str):
        invoke(promise, options, facet.target, None, resolver, strict=strict)
        return

    invocations = []
    for method_name, args_spec in options.items():
        invocation = resolver.deferred()
        invocations.append(invocation)
        invoke(invocation, method_name, facet.target, args_spec, resolver, strict=strict)

    resolver.when_all(invocations).then(promise.resolve, promise.reject)


def _as_arguments(resolved_args: Any) -> tuple:
    if isinstance(resolved_args, (list, tuple)):
        return tuple(resolved_args)
    return (resolved_args,)
