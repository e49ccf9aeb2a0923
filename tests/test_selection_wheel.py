import logging
import random
from collections import Counter

import pytest

from gamenight.config.settings import WheelSettings
from gamenight.core.events import EventType
from gamenight.core.state import SpinPhase
from gamenight.wheel.selection import SelectionWheel

from conftest import ScriptedRandom, make_items


def run_to_end(pump, wheel, step_ms=16.0):
    frames = 0
    while wheel.is_spinning:
        pump.advance(step_ms)
        frames += 1
        assert frames < 10_000
    return frames


def test_worked_example_selects_b(pump, sink, abcd, pointer_at_zero):
    # 3 full turns + 225 degrees, 3000 ms
    rng = ScriptedRandom([0.0, 0.625, 0.0])
    wheel = SelectionWheel(pump, on_resolved=sink, settings=pointer_at_zero, rng=rng, items=abcd)

    assert wheel.spin()
    assert wheel.spin_plan.spin_target == 1305.0
    assert wheel.spin_plan.duration_ms == 3000.0

    for _ in range(3):
        pump.advance(1000)

    assert wheel.phase == SpinPhase.IDLE
    assert wheel.rotation == 225.0
    assert [item.display_name for item in sink.items] == ["B"]
    assert wheel.last_result.index == 1


def test_boundary_rotation_selects_segment_starting_there(pump, sink, abcd, pointer_at_zero):
    # 3 full turns + 180 degrees lands exactly on the B/C boundary
    rng = ScriptedRandom([0.0, 0.5, 0.0])
    wheel = SelectionWheel(pump, on_resolved=sink, settings=pointer_at_zero, rng=rng, items=abcd)

    wheel.spin()
    run_to_end(pump, wheel, step_ms=500)

    assert wheel.rotation == 180.0
    assert sink.items[0].display_name == "C"


def test_spin_draws_from_configured_ranges(pump, abcd):
    settings = WheelSettings(min_rotations=3, max_rotations=6, min_duration_ms=3000, max_duration_ms=5000)
    rng = ScriptedRandom([0.5, 0.25, 0.5])
    wheel = SelectionWheel(pump, settings=settings, rng=rng, items=abcd)

    wheel.spin()
    plan = wheel.spin_plan

    assert plan.base_rotations == 4.5
    assert plan.final_offset == 90.0
    assert plan.duration_ms == 4000.0
    assert plan.spin_target == 4.5 * 360 + 90
    assert rng.calls == 3


def test_spin_target_guarantees_three_full_turns(pump, abcd):
    wheel = SelectionWheel(pump, rng=random.Random(7), items=abcd)
    for _ in range(50):
        wheel.spin()
        plan = wheel.spin_plan
        assert plan.spin_target >= 3 * 360
        assert 3000 <= plan.duration_ms < 5000
        run_to_end(pump, wheel, step_ms=1000)


def test_tightest_rotation_range_still_turns_three_times(pump, abcd):
    settings = WheelSettings(min_rotations=3, max_rotations=3)
    wheel = SelectionWheel(pump, settings=settings, rng=ScriptedRandom([0.0, 0.0, 0.0]), items=abcd)

    wheel.spin()
    assert wheel.spin_plan.spin_target == 3 * 360


def test_second_spin_while_spinning_is_ignored(pump, sink, abcd, bus):
    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(1), event_bus=bus, items=abcd)

    assert wheel.spin() is True
    plan = wheel.spin_plan
    assert wheel.spin() is False

    assert wheel.spin_plan is plan
    assert pump.pending_count == 1
    assert len(bus.get_history(EventType.SPIN_STARTED)) == 1

    run_to_end(pump, wheel)
    assert len(sink.items) == 1


def test_spin_with_no_items_never_starts(pump, sink):
    wheel = SelectionWheel(pump, on_resolved=sink)

    assert wheel.can_spin is False
    assert wheel.spin() is False
    assert wheel.phase == SpinPhase.IDLE
    assert pump.pending_count == 0

    pump.advance(10_000)
    assert sink.items == []


def test_sink_fires_once_after_progress_reaches_one(pump, abcd):
    seen = []

    def sink(item):
        seen.append((item, wheel.phase, wheel.progress))

    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(3), items=abcd)
    wheel.spin()
    run_to_end(pump, wheel)

    # Keep pumping: no stray notifications
    for _ in range(20):
        pump.advance(100)

    assert len(seen) == 1
    item, phase, progress = seen[0]
    assert item in abcd
    assert phase == SpinPhase.IDLE
    assert progress == 1.0
    assert pump.pending_count == 0


def test_sink_is_not_called_before_duration_elapses(pump, sink, abcd):
    rng = ScriptedRandom([0.0, 0.1, 0.0])
    wheel = SelectionWheel(pump, on_resolved=sink, rng=rng, items=abcd)
    wheel.spin()

    pump.advance(2999)
    assert sink.items == []
    assert wheel.is_spinning

    pump.advance(1)
    assert len(sink.items) == 1


def test_rotation_stays_normalized_every_tick(pump, abcd):
    wheel = SelectionWheel(pump, rng=random.Random(11), items=abcd)
    for _ in range(5):
        wheel.spin()
        while wheel.is_spinning:
            pump.advance(7.3)
            assert 0.0 <= wheel.rotation < 360.0


def test_easing_exponent_shapes_rotation(pump, abcd):
    # 3 full turns, no offset, 1000 ms
    linear = WheelSettings(min_duration_ms=1000, max_duration_ms=1000, easing_exponent=1.0)
    wheel = SelectionWheel(pump, settings=linear, rng=ScriptedRandom([0.0, 0.0, 0.0]), items=abcd)
    wheel.spin()
    pump.advance(500)
    assert wheel.rotation == pytest.approx(180.0)  # 540 mod 360

    cubic = WheelSettings(min_duration_ms=1000, max_duration_ms=1000)
    other = SelectionWheel(pump, settings=cubic, rng=ScriptedRandom([0.0, 0.0, 0.0]), items=abcd)
    other.spin()
    pump.advance(500)
    assert other.rotation == pytest.approx(225.0)  # 1080 * 0.875 = 945


def test_next_spin_starts_from_resting_rotation(pump, abcd, pointer_at_zero):
    rng = ScriptedRandom([0.0, 0.625, 0.0, 0.0, 0.25, 0.0])
    wheel = SelectionWheel(pump, settings=pointer_at_zero, rng=rng, items=abcd)

    wheel.spin()
    run_to_end(pump, wheel, step_ms=1000)
    assert wheel.rotation == 225.0

    wheel.spin()
    assert wheel.spin_plan.start_rotation == 225.0
    run_to_end(pump, wheel, step_ms=1000)
    assert wheel.rotation == 315.0  # 225 + 1080 + 90


def test_configure_during_spin_keeps_snapshot(pump, sink, pointer_at_zero):
    five = make_items("A", "B", "C", "D", "E")
    three = make_items("X", "Y", "Z")
    # 3 turns + 36 degrees: (0 - 36) mod 360 = 324, floor(324 / 72) = 4
    rng = ScriptedRandom([0.0, 0.1, 0.0])
    wheel = SelectionWheel(pump, on_resolved=sink, settings=pointer_at_zero, rng=rng, items=five)

    wheel.spin()
    pump.advance(1000)
    wheel.configure(three)

    assert wheel.items == tuple(three)
    assert wheel.snapshot == tuple(five)
    assert wheel.visible_items == tuple(five)

    run_to_end(pump, wheel, step_ms=1000)

    assert sink.items == [five[4]]
    assert wheel.last_result.segment_count == 5
    assert wheel.visible_items == tuple(three)
    assert wheel.snapshot == ()


def test_configure_with_empty_list_mid_spin_still_resolves(pump, sink, abcd):
    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(5), items=abcd)
    wheel.spin()
    wheel.configure([])
    run_to_end(pump, wheel)

    assert len(sink.items) == 1
    assert sink.items[0] in abcd
    assert wheel.can_spin is False
    assert wheel.spin() is False


def test_external_list_mutation_does_not_leak_into_wheel(pump, sink, pointer_at_zero):
    source = make_items("A", "B", "C", "D")
    rng = ScriptedRandom([0.0, 0.625, 0.0])
    wheel = SelectionWheel(pump, on_resolved=sink, settings=pointer_at_zero, rng=rng, items=source)

    wheel.spin()
    source.clear()
    run_to_end(pump, wheel, step_ms=1000)

    assert sink.items[0].display_name == "B"


def test_cancel_mid_spin_skips_sink_and_stops_ticking(pump, sink, abcd, bus):
    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(2), event_bus=bus, items=abcd)
    wheel.spin()
    pump.advance(500)
    frozen = wheel.rotation

    assert wheel.cancel() is True
    assert wheel.phase == SpinPhase.IDLE
    assert pump.pending_count == 0

    for _ in range(100):
        pump.advance(100)

    assert sink.items == []
    assert wheel.rotation == frozen
    assert len(bus.get_history(EventType.SPIN_CANCELLED)) == 1


def test_cancel_when_idle_is_a_noop(pump, abcd):
    wheel = SelectionWheel(pump, items=abcd)
    assert wheel.cancel() is False


def test_context_exit_disposes_mid_spin(pump, sink, abcd):
    with SelectionWheel(pump, on_resolved=sink, rng=random.Random(4), items=abcd) as wheel:
        wheel.spin()
        pump.advance(100)

    assert wheel.disposed
    assert pump.pending_count == 0
    pump.advance(10_000)
    assert sink.items == []
    assert wheel.spin() is False


def test_context_exit_disposes_on_error(pump, sink, abcd):
    with pytest.raises(RuntimeError):
        with SelectionWheel(pump, on_resolved=sink, rng=random.Random(4), items=abcd) as wheel:
            wheel.spin()
            raise RuntimeError("view torn down")

    assert pump.pending_count == 0
    assert wheel.phase == SpinPhase.IDLE
    assert sink.items == []


def test_dispose_is_idempotent(pump, abcd):
    wheel = SelectionWheel(pump, items=abcd)
    wheel.dispose()
    wheel.dispose()
    assert wheel.disposed


def test_stale_frame_from_cancelled_spin_is_ignored(pump, sink, abcd):
    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(8), items=abcd)
    wheel.spin()
    old_id = wheel.spin_plan.spin_id
    wheel.cancel()
    wheel.spin()
    rotation = wheel.rotation

    wheel._on_frame(old_id, pump.now() + 60_000)

    assert wheel.is_spinning
    assert wheel.rotation == rotation
    assert sink.items == []


def test_respin_from_sink_waits_for_next_frame(pump, abcd):
    results = []

    def sink(item):
        results.append(item)
        if len(results) == 1:
            assert wheel.spin() is True

    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(9), items=abcd)
    wheel.spin()
    pump.advance(10_000)

    assert len(results) == 1
    assert wheel.is_spinning

    pump.advance(10_000)
    assert len(results) == 2


def test_failing_sink_is_logged_and_wheel_recovers(pump, abcd, caplog):
    def sink(item):
        raise RuntimeError("storage down")

    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(6), items=abcd)
    wheel.spin()
    with caplog.at_level(logging.ERROR, logger="gamenight.wheel.selection"):
        run_to_end(pump, wheel)

    assert "Selection sink failed" in caplog.text
    assert wheel.phase == SpinPhase.IDLE
    assert wheel.last_result is not None
    assert wheel.spin() is True


def test_failing_sink_emits_error_event(pump, abcd, bus, caplog):
    def sink(item):
        raise RuntimeError("storage down")

    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(6), event_bus=bus, items=abcd)
    wheel.spin()
    with caplog.at_level(logging.ERROR, logger="gamenight.wheel.selection"):
        run_to_end(pump, wheel)

    assert caplog.records[-1].exc_info is not None
    errors = bus.get_history(EventType.ERROR)
    assert len(errors) == 1
    assert errors[0].source == "wheel"
    assert errors[0].data == {"message": "storage down", "item": wheel.last_result.item}


def test_async_sink_without_loop_is_dropped_with_warning(pump, abcd, caplog):
    called = []

    async def sink(item):
        called.append(item)

    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(6), items=abcd)
    wheel.spin()
    with caplog.at_level(logging.WARNING, logger="gamenight.wheel.selection"):
        run_to_end(pump, wheel)

    assert "no event loop is running" in caplog.text
    assert called == []


def test_events_describe_the_spin(pump, abcd, bus):
    wheel = SelectionWheel(pump, rng=random.Random(12), event_bus=bus, items=abcd)
    wheel.configure(abcd)
    wheel.spin()
    run_to_end(pump, wheel)

    started = bus.get_history(EventType.SPIN_STARTED)
    resolved = bus.get_history(EventType.SPIN_RESOLVED)
    assert len(bus.get_history(EventType.ITEMS_CONFIGURED)) == 1
    assert len(started) == 1 and len(resolved) == 1
    assert resolved[0].data["item"] == wheel.last_result.item
    assert resolved[0].data["spin_id"] == started[0].data["spin_id"]
    assert resolved[0].source == "wheel"


def test_segments_follow_visible_items(pump, abcd):
    wheel = SelectionWheel(pump, items=abcd)
    assert [s.index for s in wheel.segments()] == [0, 1, 2, 3]
    wheel.configure([])
    assert wheel.segments() == []


def test_selection_is_roughly_uniform(pump):
    items = make_items("A", "B", "C", "D")
    counts = Counter()

    def sink(item):
        counts[item.id] += 1

    wheel = SelectionWheel(pump, on_resolved=sink, rng=random.Random(2024), items=items)
    for _ in range(4000):
        wheel.spin()
        pump.advance(5000)

    assert sum(counts.values()) == 4000
    for item in items:
        assert 850 < counts[item.id] < 1150
