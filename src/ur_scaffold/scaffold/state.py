"""View-facing UI flags backed by per-operation tokens."""

from __future__ import annotations

import itertools

LOADING = "loading"
SAVING = "saving"


class UIState:
    """``loading``/``saving`` flags a view can bind to for spinners.

    Each in-flight operation holds its own token; a flag is true while any
    token for it is outstanding.  Overlapping operations therefore cannot
    clear each other's flag.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, set[int]] = {LOADING: set(), SAVING: set()}
        self._counter = itertools.count(1)

    @property
    def loading(self) -> bool:
        return bool(self._tokens[LOADING])

    @property
    def saving(self) -> bool:
        return bool(self._tokens[SAVING])

    def acquire(self, flag: str) -> int:
        token = next(self._counter)
        self._tokens[flag].add(token)
        return token

    def release(self, flag: str, token: int) -> None:
        self._tokens[flag].discard(token)

    def outstanding(self, flag: str) -> int:
        return len(self._tokens[flag])

    def snapshot(self) -> dict[str, bool]:
        return {LOADING: self.loading, SAVING: self.saving}

    def __repr__(self) -> str:
        return f"UIState(loading={self.loading}, saving={self.saving})"
