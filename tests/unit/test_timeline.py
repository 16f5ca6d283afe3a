"""Unit tests for show timeline playback.

The timeline is advanced manually, so no threads or timers are involved.

Run with: pytest tests/unit/test_timeline.py -v
"""

import numpy as np
import pytest

from droneshow.coordination import interpolate_formation
from droneshow.core import ShowConfig
from droneshow.simulation import (
    FramePhase,
    PlaybackState,
    ShowTimeline,
    project_formation,
)


def _positions(drones):
    return [(d.latitude, d.longitude, d.altitude) for d in drones]


def _assert_same_positions(got, want):
    assert len(got) == len(want)
    for (lat, lon, alt), (wlat, wlon, walt) in zip(_positions(got), _positions(want)):
        assert lat == pytest.approx(wlat, abs=1e-12)
        assert lon == pytest.approx(wlon, abs=1e-12)
        assert alt == pytest.approx(walt)


@pytest.fixture
def timeline(show_formations):
    """Star, triangle, circle at 5s each (15s show)."""
    return ShowTimeline(show_formations, ShowConfig.for_testing())


class TestTimelineSetup:
    """Tests for timeline construction."""

    def test_requires_formations(self):
        """Test an empty sequence is refused."""
        with pytest.raises(ValueError):
            ShowTimeline([])

    def test_duration(self, timeline):
        """Test duration is formations times formation duration."""
        assert timeline.duration == pytest.approx(15.0)
        assert timeline.formation_duration == pytest.approx(5.0)

    def test_initial_state(self, timeline, show_formations):
        """Test a new timeline is stopped on the first formation."""
        state = timeline.state

        assert state.state == PlaybackState.STOPPED
        assert state.is_playing is False
        assert state.current_time == 0.0
        assert timeline.current_formation is show_formations[0]
        assert len(timeline.drones) == len(show_formations[0].slots)

    def test_state_is_a_copy(self, timeline):
        """Test mutating the returned state does not affect playback."""
        state = timeline.state
        state.current_time = 99.0
        assert timeline.state.current_time == 0.0

    def test_drones_are_lit(self, timeline):
        """Test projected drones carry names and light settings."""
        first = timeline.drones[0]

        assert first.name == "Light 1"
        assert first.light_color == "hsl(30, 100%, 60%)"
        assert first.light_intensity == 2.5
        assert 90.0 <= first.battery <= 100.0


class TestFrameAt:
    """Tests for hold/transition frame computation."""

    def test_hold_phase(self, timeline, show_formations):
        """Test the first 80% of a share holds the formation."""
        frame = timeline.frame_at(2.0)

        assert frame.phase == FramePhase.HOLD
        assert frame.formation_index == 0
        assert frame.transition_progress == 0.0
        _assert_same_positions(frame.drones, project_formation(show_formations[0]))

    def test_transition_starts_at_hold_boundary(self, timeline, show_formations):
        """Test t=4.0 is the start of the transition."""
        frame = timeline.frame_at(4.0)
        star, triangle, _ = show_formations

        assert frame.phase == FramePhase.TRANSITION
        assert frame.transition_progress == pytest.approx(0.0)
        _assert_same_positions(
            frame.drones, project_formation(interpolate_formation(star, triangle, 0.0))
        )

    def test_transition_midpoint(self, timeline, show_formations):
        """Test t=4.5 is halfway between star and triangle."""
        frame = timeline.frame_at(4.5)
        star, triangle, _ = show_formations

        assert frame.phase == FramePhase.TRANSITION
        assert frame.local_progress == pytest.approx(0.9)
        assert frame.transition_progress == pytest.approx(0.5)
        _assert_same_positions(
            frame.drones, project_formation(interpolate_formation(star, triangle, 0.5))
        )

    def test_next_formation_at_share_boundary(self, timeline, show_formations):
        """Test t=5.0 shows the triangle in hold."""
        frame = timeline.frame_at(5.0)

        assert frame.formation_index == 1
        assert frame.phase == FramePhase.HOLD
        _assert_same_positions(frame.drones, project_formation(show_formations[1]))

    def test_last_formation_never_transitions(self, timeline, show_formations):
        """Test the final share is hold throughout."""
        frame = timeline.frame_at(14.5)

        assert frame.formation_index == 2
        assert frame.phase == FramePhase.HOLD
        _assert_same_positions(frame.drones, project_formation(show_formations[2]))

    def test_end_of_show(self, timeline):
        """Test t=duration is the last formation at full progress."""
        frame = timeline.frame_at(15.0)

        assert frame.formation_index == 2
        assert frame.local_progress == 1.0

    def test_frame_at_has_no_side_effects(self, timeline):
        """Test frame_at leaves playback state untouched."""
        timeline.frame_at(7.0)
        assert timeline.state.current_time == 0.0

    def test_frame_at_with_own_rng_keeps_sequence(self, show_formations):
        """Test a preview with its own generator does not shift later frames."""
        previewed = ShowTimeline(show_formations, ShowConfig.for_testing(seed=11))
        untouched = ShowTimeline(show_formations, ShowConfig.for_testing(seed=11))

        previewed.frame_at(7.0, rng=np.random.default_rng(0))
        previewed.play()
        untouched.play()

        assert [d.battery for d in previewed.advance(1.0).drones] == [
            d.battery for d in untouched.advance(1.0).drones
        ]

    def test_frame_at_default_rng_advances_sequence(self, show_formations):
        """Test a preview without a generator draws from the timeline's own."""
        previewed = ShowTimeline(show_formations, ShowConfig.for_testing(seed=11))
        untouched = ShowTimeline(show_formations, ShowConfig.for_testing(seed=11))

        previewed.frame_at(7.0)
        previewed.play()
        untouched.play()

        assert [d.battery for d in previewed.advance(1.0).drones] != [
            d.battery for d in untouched.advance(1.0).drones
        ]

    def test_single_formation(self, show_formations):
        """Test a one-formation show only ever holds."""
        timeline = ShowTimeline(show_formations[:1])
        assert timeline.frame_at(4.9).phase == FramePhase.HOLD


class TestPlayback:
    """Tests for play, pause, stop and advance."""

    def test_advance_requires_play(self, timeline):
        """Test advancing a stopped timeline does nothing."""
        assert timeline.advance(1.0) is None
        assert timeline.state.current_time == 0.0

    def test_play_and_advance(self, timeline):
        """Test time moves with advance while playing."""
        timeline.play()
        frame = timeline.advance(1.5)

        assert frame.time == pytest.approx(1.5)
        assert timeline.state.state == PlaybackState.PLAYING
        assert timeline.is_playing

    def test_finish_clamps_time(self, timeline):
        """Test overshooting the end finishes playback at the duration."""
        timeline.play()
        frame = timeline.advance(100.0)
        state = timeline.state

        assert frame.time == pytest.approx(15.0)
        assert state.state == PlaybackState.FINISHED
        assert state.is_playing is False
        assert state.current_time == pytest.approx(15.0)
        assert state.transition_progress == 1.0
        assert timeline.advance(1.0) is None

    def test_play_after_finish_restarts(self, timeline):
        """Test play from finished starts over."""
        timeline.play()
        timeline.advance(100.0)
        timeline.play()

        assert timeline.state.current_time == 0.0
        assert timeline.advance(1.0).time == pytest.approx(1.0)

    def test_pause_freezes_time(self, timeline):
        """Test pause stops the clock."""
        timeline.play()
        timeline.advance(2.0)
        timeline.pause()

        assert timeline.state.state == PlaybackState.PAUSED
        assert timeline.advance(1.0) is None
        assert timeline.state.current_time == pytest.approx(2.0)

    def test_resume_after_pause(self, timeline):
        """Test play after pause continues from the same time."""
        timeline.play()
        timeline.advance(2.0)
        timeline.pause()
        timeline.play()

        assert timeline.advance(1.0).time == pytest.approx(3.0)

    def test_stop_rewinds(self, timeline, show_formations):
        """Test stop goes back to t=0 and the first formation."""
        timeline.play()
        timeline.advance(7.0)
        timeline.stop()
        state = timeline.state

        assert state.state == PlaybackState.STOPPED
        assert state.current_time == 0.0
        assert state.current_formation_index == 0
        _assert_same_positions(timeline.drones, project_formation(show_formations[0]))

    def test_speed_multiplier(self, timeline):
        """Test speed scales show time per advance."""
        timeline.set_speed(2.0)
        timeline.play()

        assert timeline.advance(1.0).time == pytest.approx(2.0)

    @pytest.mark.parametrize("speed", [0.0, -1.0])
    def test_invalid_speed(self, timeline, speed):
        """Test non-positive speeds are refused."""
        with pytest.raises(ValueError):
            timeline.set_speed(speed)

    def test_default_speed_from_config(self, show_formations):
        """Test initial speed comes from the config."""
        timeline = ShowTimeline(show_formations, ShowConfig(default_speed=3.0))
        assert timeline.state.speed == 3.0


class TestSeekAndStep:
    """Tests for seek and formation stepping."""

    def test_seek_clamps_negative(self, timeline):
        """Test seeking before the start lands on 0."""
        frame = timeline.seek(-5.0)

        assert frame.time == 0.0
        assert timeline.state.state == PlaybackState.STOPPED

    def test_seek_clamps_past_end(self, timeline):
        """Test seeking past the end lands on the duration."""
        frame = timeline.seek(timeline.duration + 100.0)

        assert frame.time == pytest.approx(15.0)
        assert frame.formation_index == 2
        assert timeline.state.state == PlaybackState.PAUSED

    def test_seek_updates_drones(self, timeline, show_formations):
        """Test seek re-renders the drones at the new time."""
        timeline.seek(6.0)

        assert timeline.state.current_formation_index == 1
        _assert_same_positions(timeline.drones, project_formation(show_formations[1]))

    def test_seek_while_playing_keeps_playing(self, timeline):
        """Test a playing timeline continues from the seek target."""
        timeline.play()
        timeline.seek(10.0)

        assert timeline.is_playing
        assert timeline.advance(1.0).time == pytest.approx(11.0)

    def test_step_next(self, timeline):
        """Test stepping forward jumps to formation starts."""
        assert timeline.step_next().time == pytest.approx(5.0)
        assert timeline.step_next().time == pytest.approx(10.0)

    def test_step_next_stops_at_last(self, timeline):
        """Test stepping past the last formation stays on it."""
        timeline.seek(12.0)
        frame = timeline.step_next()

        assert frame.formation_index == 2
        assert frame.time == pytest.approx(10.0)

    def test_step_previous(self, timeline):
        """Test stepping back, clamped at the first formation."""
        timeline.seek(12.0)

        assert timeline.step_previous().time == pytest.approx(5.0)
        assert timeline.step_previous().time == 0.0
        assert timeline.step_previous().time == 0.0


class TestCallbacksAndTick:
    """Tests for the formation callback and timestamp-driven ticks."""

    def test_callback_on_advance(self, timeline, show_formations):
        """Test the callback receives the active formation and index."""
        calls = []
        timeline.on_formation_change(lambda f, i: calls.append((f, i)))
        timeline.play()

        timeline.advance(1.0)
        timeline.advance(5.0)

        assert calls == [(show_formations[0], 0), (show_formations[1], 1)]

    def test_callback_on_final_frame(self, timeline, show_formations):
        """Test the finishing advance still notifies."""
        calls = []
        timeline.on_formation_change(lambda f, i: calls.append(i))
        timeline.play()
        timeline.advance(100.0)

        assert calls == [2]

    def test_callback_not_called_on_seek(self, timeline):
        """Test seeking does not notify."""
        calls = []
        timeline.on_formation_change(lambda f, i: calls.append(i))
        timeline.seek(6.0)

        assert calls == []

    def test_callback_error_does_not_stop_playback(self, timeline):
        """Test a failing callback is logged, not raised."""
        def broken(formation, index):
            raise RuntimeError("renderer gone")

        timeline.on_formation_change(broken)
        timeline.play()

        assert timeline.advance(1.0) is not None
        assert timeline.is_playing

    def test_first_tick_sets_reference(self, timeline):
        """Test the first tick only records the timestamp."""
        timeline.play()

        assert timeline.tick(100.0) is None
        assert timeline.tick(101.5).time == pytest.approx(1.5)

    def test_tick_ignores_backwards_clock(self, timeline):
        """Test a timestamp going backwards does not rewind."""
        timeline.play()
        timeline.tick(100.0)
        timeline.tick(101.0)

        assert timeline.tick(99.0).time == pytest.approx(1.0)

    def test_tick_when_stopped(self, timeline):
        """Test ticks do nothing unless playing."""
        assert timeline.tick(1.0) is None


class TestDeterminism:
    """Tests for seeded cosmetic values."""

    def test_same_seed_same_batteries(self, show_formations):
        """Test two timelines with the same seed render identically."""
        a = ShowTimeline(show_formations, ShowConfig.for_testing(seed=3))
        b = ShowTimeline(show_formations, ShowConfig.for_testing(seed=3))

        assert [d.battery for d in a.drones] == [d.battery for d in b.drones]

    def test_injected_rng(self, show_formations):
        """Test an explicit generator is used as given."""
        a = ShowTimeline(show_formations, rng=np.random.default_rng(9))
        b = ShowTimeline(show_formations, rng=np.random.default_rng(9))

        assert [d.battery for d in a.drones] == [d.battery for d in b.drones]
