"""Observable state container."""

import threading
from collections.abc import Callable
from dataclasses import replace
from typing import Generic, TypeVar

from wordbook.exceptions import ApiError
from wordbook.interfaces import StateListener
from wordbook.models import ApiResponse

S = TypeVar("S")


class Store(Generic[S]):
    """Hold an immutable state object and notify subscribers on every change.

    State is replaced wholesale (``dataclasses.replace``), never mutated in
    place, so a listener always receives a consistent snapshot.
    """

    def __init__(self, initial_state: S):
        self._state = initial_state
        self._listeners: list[StateListener] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> S:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with the new state after each update.

        Returns:
            Function that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes) -> S:
        """Replace fields of the state and notify listeners."""
        with self._lock:
            self._state = replace(self._state, **changes)
            state = self._state
            listeners = list(self._listeners)

        for listener in listeners:
            listener(state)
        return state


def require_success(response: ApiResponse, action: str) -> ApiResponse:
    """Turn a failed ApiResponse into an ApiError.

    Raises:
        ApiError: If the response is not successful
    """
    if not response.success:
        raise ApiError(f"Could not {action}: {response.error}", response.status_code)
    return response
