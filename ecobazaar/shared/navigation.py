"""
Client location tracking.

The HTTP access layer decides whether a forced logout should send the user
to the login route. It only needs to know where the user currently is and
how to move them, which is what INavigator provides.
"""

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class INavigator(Protocol):
    """Current location and redirects for the embedding application."""

    @property
    def current_path(self) -> str:
        ...

    def navigate(self, path: str) -> None:
        ...


class MemoryNavigator:
    """Navigator that tracks the location in memory and records redirects."""

    def __init__(self, current_path: str = "/"):
        self._current_path = current_path
        self.history: list[str] = []

    @property
    def current_path(self) -> str:
        return self._current_path

    def navigate(self, path: str) -> None:
        self.history.append(path)
        self._current_path = path


def is_public_path(path: str, public_routes: Iterable[str]) -> bool:
    """
    True if the path is reachable without a session.

    "/" only matches exactly. Other routes match themselves and anything
    below them, so "/login?next=/cart" and "/register/seller" are public.
    """
    path = (path or "/").split("?", 1)[0].split("#", 1)[0] or "/"
    for route in public_routes:
        if route == "/":
            if path == "/":
                return True
        elif path == route or path.startswith(route.rstrip("/") + "/"):
            return True
    return False
