from typing import Callable, Optional

from .timers import TimerSlot

# Seconds the word stays up after being drawn
AUTO_HIDE_SEC = 1.0
# Delay between a hold starting and the word appearing, so the timer
# display can move out of the way first
HOLD_REVEAL_SEC = 0.2


class RevealController:
    """Decides when the secret word is visible on the host screen."""

    def __init__(self, scheduler, on_change: Optional[Callable[[], None]] = None):
        self.visible = False
        self.holding = False
        self._on_change = on_change
        self._hide = TimerSlot(scheduler)
        self._show = TimerSlot(scheduler)

    def on_word_drawn(self) -> None:
        self.visible = True
        self._hide.cancel()
        if not self.holding:
            self._hide.arm(AUTO_HIDE_SEC, self._auto_hide)

    def on_hold_start(self) -> None:
        self.holding = True
        self._hide.cancel()
        self._show.arm(HOLD_REVEAL_SEC, self._hold_reveal)

    def on_hold_end(self) -> None:
        self.holding = False
        self.visible = False
        self._show.cancel()
        self._hide.cancel()

    def reset(self) -> None:
        self._hide.cancel()
        self._show.cancel()
        self.visible = False
        self.holding = False

    def _auto_hide(self) -> None:
        if self.holding:
            return
        self.visible = False
        self._changed()

    def _hold_reveal(self) -> None:
        if not self.holding:
            return
        self.visible = True
        self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
