"""Global hotkey adapter based on pynput."""

from __future__ import annotations

import threading
from typing import Callable, Mapping, Optional

from models import TriggerKind

try:
    from pynput import keyboard
except Exception:  # pragma: no cover
    keyboard = None  # type: ignore


def build_bindings(hotkeys: Mapping[TriggerKind, str]) -> dict[str, TriggerKind]:
    """Invert ``{kind: key name}`` into listener bindings; one key per trigger."""
    bindings: dict[str, TriggerKind] = {}
    for kind, key in hotkeys.items():
        if not key:
            raise ValueError(f"No hotkey set for {kind.value}")
        if key in bindings:
            raise ValueError(f"{key} is bound to both {bindings[key].value} and {kind.value}")
        bindings[key] = kind
    return bindings


class GlobalHotkeyAdapter:
    """Fires a trigger when a bound key is released.

    ``bindings`` maps pynput key names (``str(key)``, e.g. ``Key.f9``) to the
    trigger they raise. Auto-repeat presses are folded into one release.
    """

    def __init__(self, bindings: dict[str, TriggerKind]) -> None:
        self._bindings = dict(bindings)
        self._listener: Optional[object] = None
        self._pressed: set[str] = set()
        self._lock = threading.Lock()

    def start(self, on_trigger: Callable[[TriggerKind], None]) -> None:
        if keyboard is None:
            raise RuntimeError("pynput is not installed")

        def _on_press(key: object) -> None:
            name = str(key)
            if name not in self._bindings:
                return
            with self._lock:
                self._pressed.add(name)

        def _on_release(key: object) -> None:
            name = str(key)
            kind = self._bindings.get(name)
            if kind is None:
                return
            with self._lock:
                if name not in self._pressed:
                    return
                self._pressed.discard(name)
            on_trigger(kind)

        self._listener = keyboard.Listener(on_press=_on_press, on_release=_on_release)
        self._listener.start()

    def stop(self) -> None:
        listener = self._listener
        if listener is not None:
            listener.stop()
            self._listener = None
