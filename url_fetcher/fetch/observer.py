"""Redirect observers decide whether each redirect is followed."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class RedirectObserver(Protocol):
    """Protocol for redirect observers.

    Allows callers (and tests) to veto individual redirects without
    subclassing the resolver.
    """

    def on_redirect(self, candidate_url: str) -> bool:
        """Decide whether to follow a redirect.

        Args:
            candidate_url: Absolute URL the redirect points to.

        Returns:
            True to follow the redirect, False to stop and return it.
        """
        ...


class AllowAllRedirects:
    """Default observer: follows every redirect."""

    def on_redirect(self, candidate_url: str) -> bool:  # noqa: ARG002
        return True


class CallbackRedirectObserver:
    """Adapts a plain callable to the RedirectObserver protocol.

    Only an explicit ``False`` from the callback aborts; ``None`` and any
    other value continue.
    """

    def __init__(self, callback: Callable[[str], object]) -> None:
        self._callback = callback

    def on_redirect(self, candidate_url: str) -> bool:
        return self._callback(candidate_url) is not False


def as_observer(
    observer: RedirectObserver | Callable[[str], object] | None,
) -> RedirectObserver:
    """Coerce an observer argument into a RedirectObserver.

    Args:
        observer: An observer, a callable, or None.

    Returns:
        A RedirectObserver instance.
    """
    if observer is None:
        return AllowAllRedirects()
    if isinstance(observer, RedirectObserver):
        return observer
    return CallbackRedirectObserver(observer)
