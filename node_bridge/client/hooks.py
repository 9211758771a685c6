"""Action hook registry: lets CMS code react to named lifecycle events"""
import asyncio
import inspect
from typing import Any, Callable, Dict, List, Set, Tuple

from ..utils.logging_config import get_logger

logger = get_logger(__name__)


class ActionHooks:
    """Named actions with ordered callbacks"""

    def __init__(self):
        self._actions: Dict[str, List[Tuple[Callable[..., Any], bool]]] = {}
        self._pending: Set[asyncio.Future] = set()

    def add_action(self, name: str, callback: Callable[..., Any], background: bool = False):
        """
        Attach a callback (sync or async) to an action.

        With ``background=True`` a coroutine result is scheduled as a task
        instead of awaited, so the action's caller does not wait on it.
        """
        self._actions.setdefault(name, []).append((callback, background))

    async def do_action(self, name: str, *args: Any) -> int:
        """
        Run every callback for ``name`` in registration order.

        A failing callback is logged and skipped; the caller never sees it.
        Returns the number of callbacks that completed or were scheduled.
        """
        completed = 0
        for callback, background in list(self._actions.get(name, [])):
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    if background:
                        self._schedule(name, callback, result)
                    else:
                        await result
                completed += 1
            except Exception as e:
                logger.warning("Action %s callback %r failed: %s", name, callback, e)
        return completed

    def _schedule(self, name: str, callback: Callable[..., Any], awaitable) -> None:
        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)

        def _done(t: asyncio.Future):
            self._pending.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                logger.warning("Action %s callback %r failed: %s", name, callback, exc)

        task.add_done_callback(_done)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled background callback to finish"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
