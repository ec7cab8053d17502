"""
test_state_machine.py
---------------------
Unit tests for LoadingStateMachine.

Covers:
- Phase sequencing and guards (progress threshold, minimum wait, countdown)
- Lifecycle events and load source interaction
- Failure handling on request_load
- Rotator wiring and display events
- Process-wide instance access
"""

from unittest.mock import patch

import pytest

from loadscreen.core.services.event_manager import (
    AnimatorFlagEvent,
    BackgroundChangedEvent,
    LoadingEndedEvent,
    LoadingStartedEvent,
    ProgressChangedEvent,
    ScreenResetEvent,
    TextChangedEvent,
)
from loadscreen.loading.config import LoadingConfig
from loadscreen.loading.errors import InvalidConfiguration, TargetLoadUnavailable
from loadscreen.loading.session import Hint, LoadingSession
from loadscreen.loading.state_machine import (
    LoadingStateMachine,
    get_loading_screen,
    init_loading_screen,
    reset_loading_screen,
)
from loadscreen.loading.states import LoadingPhase
from tests.conftest import ScriptedLoadSource, tick


def record_phases(machine):
    """Patch set_state so every entered phase is recorded."""
    phases = []
    original = machine.set_state

    def spy(state):
        phases.append(state.phase)
        original(state)

    machine.set_state = spy
    return phases


def texts(recorder, field):
    return [e.text for e in recorder.of_type(TextChangedEvent) if e.field == field]


# ===========================================================
# Initial State
# ===========================================================

def test_starts_idle_with_reset_display(source, events, recorder):
    machine = LoadingStateMachine(source, events=events)

    assert machine.phase is LoadingPhase.IDLE
    assert machine.session is None
    assert recorder.count(ScreenResetEvent) == 1
    assert texts(recorder, "status") == [""]


def test_idle_advance_does_nothing(machine, source, recorder):
    tick(machine, 5)
    assert machine.phase is LoadingPhase.IDLE
    assert source.started == []
    assert recorder.received == []


def test_non_finite_wait_rejected_at_request(machine, source, recorder):
    session = LoadingSession("X")
    object.__setattr__(session, "minimum_wait", float("nan"))

    with pytest.raises(InvalidConfiguration):
        machine.request_load(session)

    assert machine.phase is LoadingPhase.IDLE
    assert source.started == []
    assert recorder.received == []


# ===========================================================
# Full Sequences
# ===========================================================

def test_instant_load_without_waits_finishes_in_one_tick(machine, source, recorder):
    source.value = 1.0
    phases = record_phases(machine)

    machine.request_load(LoadingSession("X", continue_wait=0, minimum_wait=0))
    machine.advance(0.1)

    assert phases == [
        LoadingPhase.LOADING,
        LoadingPhase.POST_LOAD_WAIT,
        LoadingPhase.ENDING,
        LoadingPhase.IDLE,
    ]
    assert recorder.count(LoadingStartedEvent) == 1
    assert recorder.count(LoadingEndedEvent) == 1
    assert machine.session is None

    machine.advance(0.1)
    assert recorder.count(LoadingEndedEvent) == 1


def test_completion_is_withheld_until_ending(machine, source):
    machine.request_load(LoadingSession("X", continue_wait=0))
    assert source.completion_calls == [("handle:X", False)]

    source.value = 1.0
    machine.advance(0.1)
    assert source.completion_calls[-1] == ("handle:X", True)


def test_continue_countdown_lasts_its_full_duration(machine, source):
    source.value = 1.0
    machine.request_load(LoadingSession("X", continue_wait=5, minimum_wait=0))

    machine.advance(0.5)
    assert machine.phase is LoadingPhase.CONTINUE

    tick(machine, 4.5)
    assert machine.phase is LoadingPhase.CONTINUE

    machine.advance(0.5)
    assert machine.phase is LoadingPhase.IDLE


def test_countdown_display_rounds_remaining_time(machine, source, recorder):
    source.value = 1.0
    machine.request_load(LoadingSession("X", continue_wait=3))
    machine.advance(0.5)
    recorder.clear()

    tick(machine, 3.0)

    assert texts(recorder, "countdown") == ["2", "2", "2", "1", "0", "0", ""]


def test_returning_to_idle_clears_the_countdown(machine, source, recorder):
    source.value = 1.0
    machine.request_load(LoadingSession("X", continue_wait=3))
    tick(machine, 1.0)
    assert machine.phase is LoadingPhase.CONTINUE
    recorder.clear()

    machine.advance(0.1, any_input=True)

    assert machine.phase is LoadingPhase.IDLE
    assert texts(recorder, "countdown")[-1] == ""
    bars = [e for e in recorder.of_type(ProgressChangedEvent) if e.field == "countdown"]
    assert (bars[-1].value, bars[-1].maximum) == (0.0, 0.0)


def test_any_input_skips_the_countdown(machine, source):
    source.value = 1.0
    machine.request_load(LoadingSession("X", continue_wait=10))
    machine.advance(0.5)
    assert machine.phase is LoadingPhase.CONTINUE

    machine.advance(0.5, any_input=True)
    assert machine.phase is LoadingPhase.IDLE


def test_input_while_loading_does_not_skip_the_countdown(machine, source):
    source.value = 1.0
    machine.request_load(LoadingSession("X", continue_wait=10))

    machine.advance(0.5, any_input=True)

    assert machine.phase is LoadingPhase.CONTINUE


def test_zero_continue_wait_never_enters_continue(machine, source):
    phases = record_phases(machine)
    machine.request_load(LoadingSession("X", continue_wait=0, minimum_wait=2))

    for value in (0.2, 0.5, 0.95, 1.0):
        source.value = value
        tick(machine, 1.0)

    assert LoadingPhase.CONTINUE not in phases
    assert phases[-2:] == [LoadingPhase.ENDING, LoadingPhase.IDLE]


# ===========================================================
# Guards
# ===========================================================

@pytest.mark.parametrize("progress", [0.0, 0.3, 0.5, 0.89, 0.8999])
def test_stays_loading_below_threshold(machine, source, progress):
    machine.request_load(LoadingSession("X"))
    source.value = progress

    tick(machine, 30)

    assert machine.phase is LoadingPhase.LOADING


def test_leaves_loading_at_threshold(machine, source, recorder):
    machine.request_load(LoadingSession("X", continue_wait=5))
    source.value = 0.9

    machine.advance(0.5)

    assert machine.phase is LoadingPhase.CONTINUE
    assert texts(recorder, "status")[-1] == "90%"


def test_status_text_shows_rounded_percentage(machine, source, recorder):
    machine.request_load(LoadingSession("X"))
    source.value = 0.456
    machine.advance(0.5)
    assert texts(recorder, "status")[-1] == "46%"


def test_minimum_wait_holds_after_instant_load(machine, source):
    source.value = 1.0
    machine.request_load(LoadingSession("X", continue_wait=0, minimum_wait=3))

    tick(machine, 2.5)
    assert machine.phase is LoadingPhase.POST_LOAD_WAIT

    machine.advance(0.5)
    assert machine.phase is LoadingPhase.IDLE
    assert machine.loading_time == pytest.approx(3.0)


def test_minimum_wait_counts_time_spent_loading(machine, source):
    machine.request_load(LoadingSession("X", continue_wait=0, minimum_wait=3))
    tick(machine, 2.0)

    source.value = 1.0
    machine.advance(0.5)
    assert machine.phase is LoadingPhase.POST_LOAD_WAIT

    machine.advance(0.5)
    assert machine.phase is LoadingPhase.IDLE


def test_ending_waits_for_screen_to_fade(source, events, recorder):
    opacity = [1.0]
    machine = LoadingStateMachine(source, events=events, visibility=lambda: opacity[0])
    source.value = 1.0
    machine.request_load(LoadingSession("X", continue_wait=0))

    tick(machine, 3)
    assert machine.phase is LoadingPhase.ENDING
    assert recorder.count(LoadingEndedEvent) == 0

    opacity[0] = 0.0
    machine.advance(0.5)
    assert machine.phase is LoadingPhase.IDLE
    assert recorder.count(LoadingEndedEvent) == 1


def test_custom_progress_threshold(source, events):
    machine = LoadingStateMachine(source, events=events,
                                  config=LoadingConfig(progress_threshold=1.0))
    machine.request_load(LoadingSession("X", continue_wait=5))

    source.value = 0.95
    machine.advance(0.5)
    assert machine.phase is LoadingPhase.LOADING

    source.value = 1.0
    machine.advance(0.5)
    assert machine.phase is LoadingPhase.CONTINUE


# ===========================================================
# Failures
# ===========================================================

def test_unavailable_target_raises_and_stays_idle(events, recorder):
    source = ScriptedLoadSource(fail=True)
    machine = LoadingStateMachine(source, events=events)
    recorder.clear()

    with pytest.raises(TargetLoadUnavailable) as exc_info:
        machine.request_load(LoadingSession("missing_level"))

    assert exc_info.value.target_id == "missing_level"
    assert machine.phase is LoadingPhase.IDLE
    assert machine.session is None
    assert recorder.count(LoadingStartedEvent) == 0


def test_non_session_rejected_before_any_change(machine, source, recorder):
    with pytest.raises(InvalidConfiguration):
        machine.request_load({"target_id": "X"})

    assert machine.phase is LoadingPhase.IDLE
    assert source.started == []
    assert recorder.received == []


def test_failed_request_does_not_block_next_one(events):
    source = ScriptedLoadSource(fail=True)
    machine = LoadingStateMachine(source, events=events)
    with pytest.raises(TargetLoadUnavailable):
        machine.request_load(LoadingSession("X"))

    source.fail = False
    machine.request_load(LoadingSession("X"))
    assert machine.phase is LoadingPhase.LOADING


# ===========================================================
# Display & Rotators
# ===========================================================

def test_loading_entry_shows_session_content(machine, recorder):
    hints = (Hint("Hint one"), Hint("Hint two"))
    machine.request_load(LoadingSession(
        "X", title="Level 1", description="", images=("a.png", "b.png"), hints=hints
    ))

    assert texts(recorder, "title") == ["Level 1"]
    assert texts(recorder, "description") == []
    assert recorder.of_type(BackgroundChangedEvent)[-1].image == "a.png"
    assert texts(recorder, "hint")[-1] == "Hint one"
    assert AnimatorFlagEvent("screen", "active", True) in recorder.received


def test_background_rotates_while_loading(machine, recorder):
    machine.request_load(LoadingSession("X", images=("A", "B"), image_change_speed=10))
    recorder.clear()

    tick(machine, 7.5)
    assert recorder.of_type(AnimatorFlagEvent) == []

    machine.advance(0.5)
    assert recorder.of_type(AnimatorFlagEvent) == [AnimatorFlagEvent("background", "active", False)]

    tick(machine, 2.0)
    assert recorder.of_type(BackgroundChangedEvent) == [BackgroundChangedEvent("B")]
    assert recorder.of_type(AnimatorFlagEvent)[-1] == AnimatorFlagEvent("background", "active", True)


def test_hints_use_configured_default_duration(source, events, recorder):
    machine = LoadingStateMachine(source, events=events, config=LoadingConfig(
        default_hint_duration=4, hint_fade_offset=1
    ))
    machine.request_load(LoadingSession("X", hints=(Hint("a"), Hint("b", read_time=6))))
    recorder.clear()

    tick(machine, 4)

    assert texts(recorder, "hint") == ["b"]


def test_idle_clears_display_after_session(machine, source, recorder):
    source.value = 1.0
    machine.request_load(LoadingSession("X", title="T", continue_wait=0, hints=(Hint("h"),)))
    recorder.clear()

    machine.advance(0.5)

    assert texts(recorder, "title")[-1] == ""
    assert texts(recorder, "hint")[-1] == ""
    assert recorder.of_type(BackgroundChangedEvent)[-1].image is None


# ===========================================================
# Reuse
# ===========================================================

def test_machine_is_reusable_across_sessions(machine, source, recorder):
    source.value = 1.0
    for target in ("A", "B"):
        machine.request_load(LoadingSession(target, continue_wait=0))
        machine.advance(0.5)
        assert machine.phase is LoadingPhase.IDLE

    assert source.started == ["A", "B"]
    assert recorder.count(LoadingStartedEvent) == 2
    assert recorder.count(LoadingEndedEvent) == 2


def test_next_load_can_be_requested_from_ended_callback(machine, source, events):
    source.value = 1.0
    queue = ["second"]

    def on_ended(event):
        if queue:
            machine.request_load(LoadingSession(queue.pop(), continue_wait=5))

    events.subscribe(LoadingEndedEvent, on_ended)
    machine.request_load(LoadingSession("first", continue_wait=0))
    machine.advance(0.5)

    assert source.started == ["first", "second"]
    assert machine.session.target_id == "second"
    assert machine.phase is LoadingPhase.CONTINUE


def test_loading_time_is_kept_after_session_ends(machine, source):
    machine.request_load(LoadingSession("X", continue_wait=0))
    tick(machine, 2)
    source.value = 1.0
    machine.advance(0.5)

    assert machine.phase is LoadingPhase.IDLE
    assert machine.loading_time == pytest.approx(2.5)


# ===========================================================
# Process-wide Access
# ===========================================================

def test_process_wide_instance_is_created_once(source, events):
    reset_loading_screen()
    try:
        with pytest.raises(RuntimeError):
            get_loading_screen()

        first = init_loading_screen(source, events=events)
        second = init_loading_screen(ScriptedLoadSource(), events=events)

        assert first is second
        assert get_loading_screen() is first
        assert first.load_source is source
    finally:
        reset_loading_screen()


def test_set_state_logs_each_transition(machine, source):
    source.value = 1.0
    with patch("loadscreen.loading.state_machine.DebugLogger.state") as mock_state:
        machine.request_load(LoadingSession("X", continue_wait=0))
        machine.advance(0.5)

    messages = [c.args[0] for c in mock_state.call_args_list]
    assert messages == [
        "idle → loading",
        "loading → post_load_wait",
        "post_load_wait → ending",
        "ending → idle",
    ]
