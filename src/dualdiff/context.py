"""Differentiation contexts and the stack of active contexts.

Every call to :func:`dualdiff.diff` creates one :class:`Context`. Dual values
are stamped with the context that created them, and the dispatch layer only
unwraps dual values whose context is currently active. Contexts compare by
identity and are never reused.

Active contexts form a stack that mirrors the nesting of ``diff`` calls. The
stack lives in a :class:`contextvars.ContextVar`, so every thread sees its
own stack.
"""

from __future__ import annotations

import contextvars
import itertools
from contextlib import contextmanager
from typing import Iterable, Iterator

__all__ = [
    "Context",
    "new_context",
    "activate",
    "active_contexts",
    "active_context",
    "is_active",
    "innermost",
]

_serials = itertools.count(1)

_active_var: contextvars.ContextVar[tuple["Context", ...]] = contextvars.ContextVar(
    "dualdiff_active_contexts", default=()
)


class Context:
    """Identity token of one differentiation session.

    The serial number only makes ``repr`` readable; equality and hashing are
    by identity.
    """

    __slots__ = ("serial", "__weakref__")

    def __init__(self) -> None:
        """Initializes a context with the next serial number."""
        self.serial = next(_serials)

    def __repr__(self) -> str:
        return f"Context(#{self.serial})"


def new_context() -> Context:
    """Creates a fresh differentiation context.

    Returns:
        A context that compares unequal to every other context.
    """
    return Context()


@contextmanager
def activate(ctx: Context) -> Iterator[Context]:
    """Pushes ``ctx`` on the active stack for the duration of the block.

    Args:
        ctx: Context to activate.

    Yields:
        Context: The activated context (popped again on exit).
    """
    token = _active_var.set(_active_var.get() + (ctx,))
    try:
        yield ctx
    finally:
        _active_var.reset(token)


def active_contexts() -> tuple[Context, ...]:
    """Returns the active contexts, outermost first."""
    return _active_var.get()


def active_context() -> Context | None:
    """Returns the innermost active context, or ``None`` outside any ``diff`` call."""
    stack = _active_var.get()
    return stack[-1] if stack else None


def is_active(ctx: Context) -> bool:
    """Checks whether ``ctx`` is on the active stack."""
    return any(c is ctx for c in _active_var.get())


def innermost(contexts: Iterable[Context]) -> Context | None:
    """Selects the context nearest the top of the active stack.

    Args:
        contexts: Candidate contexts (e.g. the owners of some dual operands).

    Returns:
        The innermost active candidate, or ``None`` if no candidate is active.
    """
    candidates = tuple(contexts)
    for ctx in reversed(_active_var.get()):
        if any(c is ctx for c in candidates):
            return ctx
    return None
