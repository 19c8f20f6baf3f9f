"""An in-memory display server: windows, event hooks and an event loop.

Windows own a 32-bit framebuffer. Events are posted to a queue and handed
to per-window hooks by ``Display.loop``, with the argument conventions of
the X11 event types they are named after.
"""

from __future__ import annotations

import sys
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from pacmaze.image import Image, channel_shifts, convert_color

NO_EVENT_MASK = 0
KEY_PRESS_MASK = 1 << 0
KEY_RELEASE_MASK = 1 << 1
BUTTON_PRESS_MASK = 1 << 2
BUTTON_RELEASE_MASK = 1 << 3
POINTER_MOTION_MASK = 1 << 6
EXPOSURE_MASK = 1 << 15
STRUCTURE_NOTIFY_MASK = 1 << 17

DELETE_WINDOW = "WM_DELETE_WINDOW"

_NATIVE_BIG_ENDIAN = sys.byteorder == "big"


class EventType(IntEnum):
    """Event numbers, matching the X11 core protocol."""

    KEY_PRESS = 2
    KEY_RELEASE = 3
    BUTTON_PRESS = 4
    BUTTON_RELEASE = 5
    MOTION_NOTIFY = 6
    ENTER_NOTIFY = 7
    LEAVE_NOTIFY = 8
    FOCUS_IN = 9
    FOCUS_OUT = 10
    KEYMAP_NOTIFY = 11
    EXPOSE = 12
    GRAPHICS_EXPOSE = 13
    NO_EXPOSE = 14
    VISIBILITY_NOTIFY = 15
    CREATE_NOTIFY = 16
    DESTROY_NOTIFY = 17
    UNMAP_NOTIFY = 18
    MAP_NOTIFY = 19
    MAP_REQUEST = 20
    REPARENT_NOTIFY = 21
    CONFIGURE_NOTIFY = 22
    CONFIGURE_REQUEST = 23
    GRAVITY_NOTIFY = 24
    RESIZE_REQUEST = 25
    CIRCULATE_NOTIFY = 26
    CIRCULATE_REQUEST = 27
    PROPERTY_NOTIFY = 28
    SELECTION_CLEAR = 29
    SELECTION_REQUEST = 30
    SELECTION_NOTIFY = 31
    COLORMAP_NOTIFY = 32
    CLIENT_MESSAGE = 33
    MAPPING_NOTIFY = 34
    GENERIC_EVENT = 35


class DisplayError(RuntimeError):
    """Raised when the display or one of its windows cannot be used."""


@dataclass
class _Hook:
    func: Callable[..., Any]
    param: Any
    mask: int


_KEY_EVENTS = (EventType.KEY_PRESS, EventType.KEY_RELEASE)
_BUTTON_EVENTS = (EventType.BUTTON_PRESS, EventType.BUTTON_RELEASE)


@dataclass(eq=False)
class Window:
    """A window with a framebuffer, drawn text and a table of event hooks."""

    width: int
    height: int
    title: str = ""
    big_endian: bool = _NATIVE_BIG_ENDIAN
    buffer: Image = field(init=False, repr=False)
    texts: list[tuple[int, int, int, str]] = field(default_factory=list, repr=False)
    hooks: dict[EventType, _Hook] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.buffer = Image(self.width, self.height, self.big_endian)

    def hook(self, event: int, mask: int, func: Callable[..., Any], param: Any = None) -> None:
        """Install func for an event type, selecting input with mask."""
        self.hooks[EventType(event)] = _Hook(func, param, mask)

    def key_hook(self, func: Callable[..., Any], param: Any = None) -> None:
        """Call func(keysym, param) on key release."""
        self.hook(EventType.KEY_RELEASE, KEY_RELEASE_MASK, func, param)

    def mouse_hook(self, func: Callable[..., Any], param: Any = None) -> None:
        """Call func(button, x, y, param) on button press."""
        self.hook(EventType.BUTTON_PRESS, BUTTON_PRESS_MASK, func, param)

    def expose_hook(self, func: Callable[..., Any], param: Any = None) -> None:
        """Call func(param) on the last expose event of a series."""
        self.hook(EventType.EXPOSE, EXPOSURE_MASK, func, param)

    def event_mask(self) -> int:
        """Return the union of the input masks of all installed hooks."""
        mask = NO_EVENT_MASK
        for installed in self.hooks.values():
            mask |= installed.mask
        return mask

    def dispatch(self, event: int, *args: Any) -> Any:
        """Hand an event to its hook and return what the hook returned.

        Key events take (keysym,), button events (button, x, y), motion
        events (x, y) and expose events an optional (count,); an expose
        with a non-zero count is not passed on. Other events take no
        arguments. Returns None when no hook is installed.
        """
        kind = EventType(event)
        installed = self.hooks.get(kind)
        if installed is None:
            return None
        if kind in _KEY_EVENTS:
            (keysym,) = args
            return installed.func(keysym, installed.param)
        if kind in _BUTTON_EVENTS:
            button, x, y = args
            return installed.func(button, x, y, installed.param)
        if kind is EventType.MOTION_NOTIFY:
            x, y = args
            return installed.func(x, y, installed.param)
        if kind is EventType.EXPOSE:
            count = args[0] if args else 0
            if count:
                return None
            return installed.func(installed.param)
        return installed.func(installed.param)


class Display:
    """A screen holding windows, a pending event queue and a loop hook."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise DisplayError(f"screen size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.depth = 24
        self.shifts = channel_shifts(0xFF0000, 0x00FF00, 0x0000FF)
        self._windows: list[Window] = []
        self._queue: deque[tuple[Window, EventType, tuple[Any, ...]]] = deque()
        self._loop_hook: Callable[..., Any] | None = None
        self._loop_param: Any = None
        self._end_loop = False
        self._closed = False

    def __enter__(self) -> Display:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def windows(self) -> tuple[Window, ...]:
        """Open windows, most recently created first."""
        return tuple(self._windows)

    def _check_open(self) -> None:
        if self._closed:
            raise DisplayError("display is closed")

    def _check_window(self, window: Window) -> None:
        self._check_open()
        if window not in self._windows:
            raise DisplayError(f"window {window.title!r} is not open on this display")

    def new_window(self, width: int, height: int, title: str) -> Window:
        """Open a window; its first expose event is queued straight away."""
        self._check_open()
        if width <= 0 or height <= 0:
            raise DisplayError(f"window size must be positive, got {width}x{height}")
        window = Window(width, height, title)
        self._windows.insert(0, window)
        self._queue.append((window, EventType.EXPOSE, (0,)))
        return window

    def destroy_window(self, window: Window) -> None:
        """Close a window; events still queued for it are dropped by the loop."""
        self._check_window(window)
        self._windows.remove(window)

    def loop_hook(self, func: Callable[..., Any] | None, param: Any = None) -> None:
        """Call func(param) each time the event queue has been drained."""
        self._loop_hook = func
        self._loop_param = param

    def post_event(self, window: Window, event: int, *args: Any) -> None:
        """Queue an event for a window."""
        self._check_window(window)
        self._queue.append((window, EventType(event), args))

    def loop(self) -> None:
        """Deliver events until loop_end is called or no window is left.

        Without a loop hook, the loop also returns once the queue is empty,
        since nothing else could ever arrive.
        """
        self._check_open()
        while self._windows and not self._end_loop:
            while not self._end_loop and (self._loop_hook is None or self._queue):
                if not self._queue:
                    return
                window, event, args = self._queue.popleft()
                if window not in self._windows:
                    continue
                destroy = window.hooks.get(EventType.DESTROY_NOTIFY)
                if (
                    event is EventType.CLIENT_MESSAGE
                    and args
                    and args[0] == DELETE_WINDOW
                    and destroy is not None
                ):
                    destroy.func(destroy.param)
                if event in window.hooks:
                    window.dispatch(event, *args)
            if self._loop_hook is not None:
                self._loop_hook(self._loop_param)

    def loop_end(self) -> None:
        """Make the running loop return; later loops return at once."""
        self._end_loop = True

    def screen_size(self) -> tuple[int, int]:
        """Return the (width, height) of the screen."""
        self._check_open()
        return self.width, self.height

    def put_image(self, window: Window, image: Image, x: int, y: int) -> None:
        """Copy an image into a window with its top-left corner at (x, y)."""
        self._check_window(window)
        dest = window.buffer
        x0, y0 = max(x, 0), max(y, 0)
        x1 = min(x + image.width, dest.width)
        y1 = min(y + image.height, dest.height)
        if x0 >= x1 or y0 >= y1:
            return
        if image.big_endian == dest.big_endian and image.bpp == dest.bpp:
            opp = dest.bpp // 8
            span = (x1 - x0) * opp
            for dy in range(y0, y1):
                src = (dy - y) * image.size_line + (x0 - x) * opp
                dst = dy * dest.size_line + x0 * opp
                dest.data[dst:dst + span] = image.data[src:src + span]
            return
        for dy in range(y0, y1):
            for dx in range(x0, x1):
                dest.put_pixel(dx, dy, image.get_pixel(dx - x, dy - y))

    def pixel_put(self, window: Window, x: int, y: int, color: int) -> None:
        """Set one window pixel; points outside the window are ignored."""
        self._check_window(window)
        if 0 <= x < window.width and 0 <= y < window.height:
            window.buffer.put_pixel(x, y, convert_color(color, self.depth, self.shifts))

    def string_put(self, window: Window, x: int, y: int, color: int, text: str) -> None:
        """Draw a string with its baseline starting at (x, y)."""
        self._check_window(window)
        window.texts.append((x, y, convert_color(color, self.depth, self.shifts), text))

    def clear_window(self, window: Window) -> None:
        """Fill a window with black and remove the text drawn in it."""
        self._check_window(window)
        window.buffer.data[:] = bytes(len(window.buffer.data))
        window.texts.clear()

    def window_pixel(self, window: Window, x: int, y: int) -> int:
        """Return the pixel value at (x, y) of a window."""
        self._check_window(window)
        return window.buffer.get_pixel(x, y)

    def close(self) -> None:
        """Close the display and every window on it."""
        self._windows.clear()
        self._queue.clear()
        self._closed = True