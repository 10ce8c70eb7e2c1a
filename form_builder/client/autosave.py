"""Debounced autosave for form specs being edited.

State machine::

    idle -> dirty -> saving -> synced | error
             ^         |
             +---------+   (edit while saving)

An edit (re)starts the debounce timer. When it fires, the latest spec is
validated; an invalid spec is not saved and the controller stays ``dirty``
with ``errors`` set, while ``last_valid_spec`` keeps the previous valid one.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from form_builder.domain.validation import validate_spec

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.9


class SaveState(str, Enum):
    IDLE = "idle"
    DIRTY = "dirty"
    SAVING = "saving"
    SYNCED = "synced"
    ERROR = "error"


SaveFn = Callable[[Any], Awaitable[None]]
ValidateFn = Callable[[Any], List[str]]
StateListener = Callable[[SaveState], None]


class AutosaveController:
    """
    Coalesces rapid edits into one save per quiet period.

    Must be driven from inside a running event loop. Failed saves are not
    retried; the next edit schedules a new attempt.
    """

    def __init__(
        self,
        save_fn: SaveFn,
        validate_fn: ValidateFn = validate_spec,
        delay: float = DEFAULT_DELAY,
        on_state_change: Optional[StateListener] = None,
    ):
        self._save = save_fn
        self._validate = validate_fn
        self.delay = delay
        self._listener = on_state_change

        self._state = SaveState.IDLE
        self._pending: Any = None
        self._has_pending = False
        self._generation = 0
        self._timer: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

        self.errors: List[str] = []
        self.last_valid_spec: Any = None
        self.last_error: Optional[BaseException] = None

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    def _set_state(self, state: SaveState) -> None:
        if state == self._state:
            return
        logger.debug(f"Autosave state {self._state.value} -> {state.value}")
        self._state = state
        if self._listener:
            self._listener(state)

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self) -> None:
        self._disarm()
        self._timer = asyncio.get_running_loop().create_task(self._fire())

    async def _fire(self) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        await self._commit()

    def edit(self, spec: Any) -> None:
        """Record a new version of the spec and restart the debounce timer."""
        self._pending = spec
        self._has_pending = True
        self._generation += 1
        if self._state != SaveState.SAVING:
            self._set_state(SaveState.DIRTY)
        self._arm()

    async def _commit(self) -> None:
        async with self._lock:
            if not self._has_pending:
                return
            spec = self._pending
            generation = self._generation

            self.errors = list(self._validate(spec))
            if self.errors:
                self._set_state(SaveState.DIRTY)
                return

            self.last_valid_spec = spec
            self._set_state(SaveState.SAVING)
            try:
                await self._save(spec)
            except Exception as e:
                logger.warning(f"Autosave failed: {e}")
                self.last_error = e
                if generation == self._generation:
                    self._has_pending = False
                    self._set_state(SaveState.ERROR)
                else:
                    self._set_state(SaveState.DIRTY)
                return

            self.last_error = None
            if generation == self._generation:
                self._has_pending = False
                self._set_state(SaveState.SYNCED)
            else:
                # A newer edit arrived mid-save; its timer is already armed.
                self._set_state(SaveState.DIRTY)

    async def flush(self) -> None:
        """Validate and save the latest edit now, skipping the debounce."""
        self._disarm()
        await self._commit()

    def cancel(self) -> None:
        """Drop the pending edit without saving it."""
        self._disarm()
        self._pending = None
        self._has_pending = False
        if self._state == SaveState.DIRTY:
            self._set_state(SaveState.IDLE)

    async def wait(self) -> None:
        """Wait until no timer is armed and no save is running."""
        while self._timer is not None:
            await asyncio.wait({self._timer})
        async with self._lock:
            pass
