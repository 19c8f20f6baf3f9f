import random

import pytest

from pacmaze.image import Image
from pacmaze.window import (
    BUTTON_PRESS_MASK,
    DELETE_WINDOW,
    EXPOSURE_MASK,
    KEY_RELEASE_MASK,
    POINTER_MOTION_MASK,
    Display,
    DisplayError,
    EventType,
    Window,
)


@pytest.fixture
def display():
    return Display(800, 600)


def test_screen_size(display):
    assert display.screen_size() == (800, 600)


def test_invalid_screen_size():
    with pytest.raises(DisplayError):
        Display(0, 600)


def test_new_windows_listed_newest_first(display):
    first = display.new_window(300, 300, "win1")
    second = display.new_window(600, 600, "win2")
    assert display.windows == (second, first)
    assert (first.width, first.height, first.title) == (300, 300, "win1")


def test_new_window_rejects_bad_size(display):
    with pytest.raises(DisplayError):
        display.new_window(0, 10, "bad")


def test_event_mask_combines_hooks():
    window = Window(10, 10, "w")
    window.key_hook(lambda key, p: None)
    window.mouse_hook(lambda b, x, y, p: None)
    window.expose_hook(lambda p: None)
    window.hook(EventType.MOTION_NOTIFY, POINTER_MOTION_MASK, lambda x, y, p: None)
    assert window.event_mask() == (
        KEY_RELEASE_MASK | BUTTON_PRESS_MASK | EXPOSURE_MASK | POINTER_MOTION_MASK
    )


def test_event_mask_empty():
    assert Window(5, 5).event_mask() == 0


def test_dispatch_key_release_passes_keysym_and_param():
    window = Window(10, 10)
    seen = []
    window.key_hook(lambda key, p: seen.append((key, p)) or 7, "param")
    assert window.dispatch(EventType.KEY_RELEASE, 0xFF1B) == 7
    assert seen == [(0xFF1B, "param")]


def test_dispatch_button_and_motion():
    window = Window(10, 10)
    seen = []
    window.mouse_hook(lambda b, x, y, p: seen.append(("button", b, x, y, p)), 1)
    window.hook(EventType.MOTION_NOTIFY, POINTER_MOTION_MASK,
                lambda x, y, p: seen.append(("motion", x, y, p)), 2)
    window.dispatch(EventType.BUTTON_PRESS, 1, 4, 5)
    window.dispatch(EventType.MOTION_NOTIFY, 8, 9)
    assert seen == [("button", 1, 4, 5, 1), ("motion", 8, 9, 2)]


def test_dispatch_expose_only_on_last_of_series():
    window = Window(10, 10)
    calls = []
    window.expose_hook(lambda p: calls.append(p), "x")
    window.dispatch(EventType.EXPOSE, 2)
    window.dispatch(EventType.EXPOSE, 0)
    assert calls == ["x"]


def test_dispatch_generic_event_gets_param_only():
    window = Window(10, 10)
    window.hook(EventType.DESTROY_NOTIFY, 0, lambda p: p * 2, 21)
    assert window.dispatch(EventType.DESTROY_NOTIFY) == 42


def test_dispatch_without_hook_returns_none():
    assert Window(3, 3).dispatch(EventType.KEY_PRESS, 65) is None


def test_dispatch_rejects_unknown_event():
    with pytest.raises(ValueError):
        Window(3, 3).dispatch(1)


def test_new_window_queues_first_expose(display):
    window = display.new_window(50, 50, "w")
    exposed = []
    window.expose_hook(lambda p: exposed.append(p), "first")
    display.loop()
    assert exposed == ["first"]


def test_loop_delivers_events_in_order(display):
    window = display.new_window(50, 50, "w")
    keys = []
    window.key_hook(lambda key, p: keys.append(key))
    for key in (97, 98, 99):
        display.post_event(window, EventType.KEY_RELEASE, key)
    display.loop()
    assert keys == [97, 98, 99]


def test_mouse_hook_recreates_window(display):
    state = {}

    def on_mouse(button, x, y, param):
        display.destroy_window(state["win1"])
        state["win1"] = display.new_window(
            random.randint(1, 499), random.randint(1, 499), "new win"
        )
        state["win1"].mouse_hook(on_mouse)
        state["count"] = state.get("count", 0) + 1

    state["win1"] = display.new_window(300, 300, "win1")
    win2 = display.new_window(600, 600, "win2")
    state["win1"].mouse_hook(on_mouse)
    win2.mouse_hook(on_mouse)
    original = state["win1"]
    display.post_event(win2, EventType.BUTTON_PRESS, 1, 10, 10)
    display.loop()
    assert state["count"] == 1
    assert original not in display.windows
    assert state["win1"].title == "new win"
    assert set(display.windows) == {state["win1"], win2}


def test_loop_hook_runs_until_loop_end(display):
    window = display.new_window(10, 10, "w")
    ticks = []

    def tick(param):
        ticks.append(param)
        if len(ticks) == 3:
            display.loop_end()

    display.loop_hook(tick, "t")
    display.loop()
    assert ticks == ["t", "t", "t"]
    assert display.windows == (window,)


def test_loop_stops_when_last_window_destroyed(display):
    window = display.new_window(10, 10, "w")
    ticks = []
    window.key_hook(lambda key, p: display.destroy_window(window))
    display.loop_hook(lambda p: ticks.append(1))
    display.post_event(window, EventType.KEY_RELEASE, 0xFF1B)
    display.loop()
    assert display.windows == ()
    assert len(ticks) == 1


def test_delete_window_message_calls_destroy_hook(display):
    window = display.new_window(10, 10, "w")
    closed = []
    window.hook(EventType.DESTROY_NOTIFY, 0, lambda p: closed.append(p), "bye")
    display.post_event(window, EventType.CLIENT_MESSAGE, DELETE_WINDOW)
    display.loop()
    assert closed == ["bye"]


def test_events_for_destroyed_window_are_dropped(display):
    window = display.new_window(10, 10, "w")
    keep = display.new_window(10, 10, "keep")
    keys = []
    window.key_hook(lambda key, p: keys.append(key))
    display.post_event(window, EventType.KEY_RELEASE, 65)
    display.destroy_window(window)
    display.loop()
    assert keys == []
    assert display.windows == (keep,)


def test_destroy_unknown_window_raises(display):
    with pytest.raises(DisplayError):
        display.destroy_window(Window(5, 5, "stray"))


def test_put_image_copies_and_clips(display):
    window = display.new_window(4, 4, "w")
    image = Image(3, 3, window.big_endian)
    for y in range(3):
        for x in range(3):
            image.put_pixel(x, y, 0x100 * y + x + 1)
    display.put_image(window, image, 2, -1)
    assert display.window_pixel(window, 2, 0) == 0x101
    assert display.window_pixel(window, 3, 1) == 0x202
    assert display.window_pixel(window, 1, 0) == 0
    assert display.window_pixel(window, 2, 2) == 0


def test_put_image_other_byte_order(display):
    window = display.new_window(2, 2, "w")
    image = Image(2, 2, not window.big_endian)
    image.put_pixel(1, 1, 0x00ABCDEF)
    display.put_image(window, image, 0, 0)
    assert display.window_pixel(window, 1, 1) == 0x00ABCDEF


def test_pixel_put_and_clear(display):
    window = display.new_window(5, 5, "w")
    display.pixel_put(window, 2, 3, 0xFF99FF)
    display.pixel_put(window, 9, 9, 0xFFFFFF)
    assert display.window_pixel(window, 2, 3) == 0xFF99FF
    display.clear_window(window)
    assert display.window_pixel(window, 2, 3) == 0


def test_string_put_recorded_and_cleared(display):
    window = display.new_window(242, 242, "w")
    display.string_put(window, 5, 121, 0xFF99FF, "String output")
    assert window.texts == [(5, 121, 0xFF99FF, "String output")]
    display.clear_window(window)
    assert window.texts == []


def test_closed_display_refuses_work():
    display = Display(100, 100)
    display.new_window(10, 10, "w")
    display.close()
    assert display.windows == ()
    with pytest.raises(DisplayError):
        display.new_window(10, 10, "again")


def test_context_manager_closes():
    with Display(100, 100) as display:
        display.new_window(10, 10, "w")
    with pytest.raises(DisplayError):
        display.screen_size()