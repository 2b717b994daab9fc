"""Base class for on-screen controls and a transparent click catcher."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

Hook = Optional[Callable[[], Any]]


@dataclass(frozen=True)
class Rect:
    """An integer rectangle: top-left corner and size."""

    x: int
    y: int
    width: int
    height: int


class Control(ABC):
    """Something drawn on a panel that has bounds and reacts to the mouse.

    The hooks are plain attributes holding callables, or None when unset.
    """

    def __init__(self) -> None:
        self.x = 0
        self.y = 0
        self.width = 100
        self.height = 40
        self.font_style = 0
        self.font_size = 12
        self.visible = True
        self.enabled = True
        self.on_click: Hook = None
        self.on_mouse_up_pre_hook: Hook = None
        self.on_mouse_up_aft_hook: Hook = None
        self.on_mouse_down_hook: Hook = None
        self.on_mouse_reset_hook: Hook = None

    @abstractmethod
    def draw(self, surface: Any) -> None:
        """Paint the control onto a surface."""

    def on_mouse_down(self, x: int, y: int) -> None:
        if self.on_mouse_down_hook:
            self.on_mouse_down_hook()

    def on_mouse_up(self, x: int, y: int) -> None:
        """Run the pre hook, the click handler and the after hook, in that order."""
        if self.on_mouse_up_pre_hook:
            self.on_mouse_up_pre_hook()
        if self.on_click:
            self.on_click()
        if self.on_mouse_up_aft_hook:
            self.on_mouse_up_aft_hook()

    def on_mouse_reset(self) -> None:
        if self.on_mouse_reset_hook:
            self.on_mouse_reset_hook()

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @rect.setter
    def rect(self, value: Rect) -> None:
        self.x, self.y = value.x, value.y
        self.width, self.height = value.width, value.height

    def contains(self, x: int, y: int) -> bool:
        """Whether a point lies inside the bounds, edges included."""
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    def set_position(self, x: int, y: int) -> None:
        self.x, self.y = x, y

    def set_size(self, width: int, height: int) -> None:
        self.width, self.height = width, height


class ClickPaper(Control):
    """An invisible control; the callback it is built with fires on mouse down."""

    def __init__(self, on_press: Hook) -> None:
        super().__init__()
        self.on_mouse_down_hook = on_press

    def draw(self, surface: Any) -> None:
        """Nothing is drawn."""

    def on_mouse_up(self, x: int, y: int) -> None:
        if self.on_click:
            self.on_click()