"""FormSession — the caller-side owner of a form's current state.

The engine is a pure function; something still has to hold "the" state
and feed UI events through it one at a time. ``FormSession`` does that
the way an input screen does::

    session = FormSession(schema, {"email": "", "password": ""})

    session.change("email", " a@b.co")   # keystroke: validate, keep whitespace
    session.blur("email")                 # focus lost: mark filled, trim, validate

    session.state.messages["email"]       # None
    session.state.is_form_valid           # False until password is filled

Transitions are serialized on a ``threading.Lock``. Async callers first
queue on an ``anyio.Lock``, then apply their edit in a worker thread so
the event loop keeps running while a sync caller holds the state.
Whichever transition finishes last owns ``state``.

Listeners registered with ``subscribe()`` receive every new state, which
is where a UI would re-render.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from typing import TypeAlias

import anyio
import anyio.to_thread

from formstate.config import COMMIT, EDITING, ValidationConfig
from formstate.engine import init_form, validate_form
from formstate.schema import CompiledSchema, FormRules, compile_schema
from formstate.state import FormState

logger = logging.getLogger("formstate.session")

Listener: TypeAlias = Callable[[FormState], None]


class FormSession:
    """Holds the latest ``FormState`` of one form and applies edits to it.

    Args:
        schema: A compiled schema or anything ``compile_schema`` accepts.
            Compiled once, here.
        initial_values: Starting values for ``init_form``.
        editing: Config used for ``change()`` (no destructive trimming).
        commit: Config used for ``blur()`` and ``revalidate()``.
    """

    __slots__ = (
        "_async_lock",
        "_commit",
        "_editing",
        "_initial",
        "_listeners",
        "_lock",
        "_schema",
        "_state",
    )

    def __init__(
        self,
        schema: CompiledSchema | FormRules | Mapping,
        initial_values: Mapping[str, str | None] | None = None,
        *,
        editing: ValidationConfig = EDITING,
        commit: ValidationConfig = COMMIT,
    ) -> None:
        self._schema = compile_schema(schema)
        self._initial = dict(initial_values or {})
        self._editing = editing
        self._commit = commit
        self._lock = threading.Lock()
        self._async_lock: anyio.Lock | None = None  # Created lazily on first use
        self._listeners: list[Listener] = []
        self._state = init_form(self._initial, self._schema, config=self._commit)

    @property
    def state(self) -> FormState:
        """The most recent state."""
        return self._state

    @property
    def schema(self) -> CompiledSchema:
        return self._schema

    # -- Events --

    def change(self, field: str, value: str) -> FormState:
        """Apply a keystroke: set the value and validate without trimming."""
        with self._lock:
            state = self._store(validate_form(self._state.with_value(field, value), self._editing))
        return self._notify(state)

    def blur(self, field: str) -> FormState:
        """Apply a loss of focus: mark the field filled, trim, and validate."""
        with self._lock:
            state = self._store(validate_form(self._state.with_filled(field), self._commit))
        return self._notify(state)

    def revalidate(self) -> FormState:
        """Re-run validation on the current state, e.g. before submitting."""
        with self._lock:
            state = self._store(validate_form(self._state, self._commit))
        return self._notify(state)

    def reset(self, initial_values: Mapping[str, str | None] | None = None) -> FormState:
        """Start over from *initial_values* (or the ones given at construction)."""
        with self._lock:
            if initial_values is not None:
                self._initial = dict(initial_values)
            state = self._store(init_form(self._initial, self._schema, config=self._commit))
        return self._notify(state)

    # -- Async variants --

    async def achange(self, field: str, value: str) -> FormState:
        """Async ``change()``; concurrent calls are applied one at a time.

        Runs in a worker thread so waiting on a sync caller's lock never
        blocks the event loop.
        """
        async with self._get_async_lock():
            return await anyio.to_thread.run_sync(self.change, field, value)

    async def ablur(self, field: str) -> FormState:
        """Async ``blur()``; concurrent calls are applied one at a time."""
        async with self._get_async_lock():
            return await anyio.to_thread.run_sync(self.blur, field)

    # -- Listeners --

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- Internals --

    def _get_async_lock(self) -> anyio.Lock:
        # Can't create in __init__: there may be no event loop yet.
        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        return self._async_lock

    def _store(self, state: FormState) -> FormState:
        self._state = state
        logger.debug("Form state updated: valid=%s", state.is_form_valid)
        return state

    def _notify(self, state: FormState) -> FormState:
        # Outside the lock so listeners may trigger further edits.
        for listener in list(self._listeners):
            listener(state)
        return state

    def __repr__(self) -> str:
        return f"FormSession(fields={self._schema.field_names!r}, valid={self._state.is_form_valid})"
