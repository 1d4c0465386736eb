"""Protocol for state change subscribers."""

from typing import Any, Protocol


class StateListener(Protocol):
    """Callable notified with the new state after every store update.

    The UI layer subscribes one of these per store and re-renders when called.
    """

    def __call__(self, state: Any) -> None: ...
