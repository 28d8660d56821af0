"""core.ports

Interfaces the core consumes but does not implement.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol


class KeyValueStore(Protocol):
    """String key/value persistence. `get` may hand back anything a previous
    writer (or a user) left behind; callers must tolerate malformed values."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


# epoch milliseconds
NowMs = Callable[[], int]

CompletionNotifier = Callable[[], None]

ValueListener = Callable[[int], None]
