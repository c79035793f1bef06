"""Tests for the fixed-step Animator."""
import pytest

from claw_machine import Animator, Engine, RigObject


@pytest.fixture
def engine():
    return Engine(tick_ms=10, seed=3)


@pytest.fixture
def animator(engine):
    return Animator(engine)


class TestStepping:
    """Per-tick movement toward the target."""

    def test_moves_at_most_max_step_per_tick(self, engine, animator):
        box = RigObject(name="box")
        animator.move(box, "x", 25)

        engine.run_for(90)
        assert box.x == 0
        engine.run_for(10)
        assert box.x == 10
        engine.run_for(100)
        assert box.x == 20

    def test_last_step_lands_on_target(self, engine, animator):
        box = RigObject(name="box")
        done = []
        animator.move(box, "x", 25, on_complete=lambda: done.append(engine.now))

        engine.run_for(300)

        assert box.x == 25
        assert done == [300]
        assert box.motion is None

    def test_moves_in_negative_direction(self, engine, animator):
        box = RigObject(name="box", y=40)
        animator.move(box, "y", 15)
        engine.run_for(300)
        assert box.y == 15

    def test_custom_interval(self, engine, animator):
        box = RigObject(name="box")
        animator.move(box, "x", 30, interval_ms=50)
        engine.run_for(150)
        assert box.x == 30

    def test_custom_max_step(self, engine):
        animator = Animator(engine, max_step=4)
        box = RigObject(name="box")
        animator.move(box, "x", 10)
        engine.run_for(100)
        assert box.x == 4

    def test_rejects_non_positive_step(self, engine):
        with pytest.raises(ValueError):
            Animator(engine, max_step=0)

    def test_already_at_target_completes_on_first_tick(self, engine, animator):
        box = RigObject(name="box", x=5)
        done = []
        animator.move(box, "x", 5, on_complete=lambda: done.append(True))
        engine.run_for(100)
        assert done == [True]

    def test_on_complete_fires_exactly_once(self, engine, animator):
        box = RigObject(name="box")
        done = []
        animator.move(box, "x", 10, on_complete=lambda: done.append(True))
        engine.run_for(2000)
        assert done == [True]
        assert engine.pending_timers() == 0


class TestHome:
    def test_default_target_is_home(self, engine, animator):
        box = RigObject(name="box", x=50)
        box.x = 0
        animator.move(box, "x")
        engine.run_for(1000)
        assert box.x == 50

    def test_set_home_changes_default_target(self, engine, animator):
        box = RigObject(name="box")
        box.set_home(x=20)
        animator.move(box, "x")
        engine.run_for(1000)
        assert box.x == 20


class TestCarrying:
    """Followers and payloads ride along with the same delta."""

    def test_followers_and_payload_follow_axis(self, engine, animator):
        joint = RigObject(name="joint", x=3)
        prize = RigObject(name="prize", x=100, y=7)
        rail = RigObject(name="rail", followers=[joint], payload=prize)

        animator.move(rail, "x", 25)
        engine.run_for(300)

        assert joint.x == 28
        assert prize.x == 125
        assert prize.y == 7

    def test_extension_moves_payload_vertically(self, engine):
        extended = []
        animator = Animator(engine, on_extend=lambda obj: extended.append(obj.h))
        prize = RigObject(name="prize", y=100)
        arm = RigObject(name="arm", h=20, payload=prize)

        animator.move(arm, "h", 45)
        engine.run_for(300)

        assert arm.h == 45
        assert prize.y == 125
        assert extended == [30, 40, 45]

    def test_detached_payload_stops_following(self, engine, animator):
        prize = RigObject(name="prize", y=0)
        joint = RigObject(name="joint", payload=prize)
        animator.move(joint, "y", 50)

        engine.run_for(200)
        joint.payload = None
        engine.run_for(1000)

        assert joint.y == 50
        assert prize.y == 20


class TestInterruption:
    """Finishing, cancelling and re-entrant moves."""

    def test_finish_stops_without_snapping(self, engine, animator):
        box = RigObject(name="box")
        done = []
        animator.move(box, "x", 100, on_complete=lambda: done.append(box.x))

        engine.run_for(300)
        assert animator.finish(box)
        engine.run_for(1000)

        assert box.x == 30
        assert done == [30]
        assert not box.moving

    def test_cancel_drops_continuation(self, engine, animator):
        box = RigObject(name="box")
        done = []
        animator.move(box, "x", 100, on_complete=lambda: done.append(True))
        engine.run_for(200)

        assert animator.cancel(box)
        engine.run_for(1000)

        assert box.x == 20
        assert done == []

    def test_finish_and_cancel_idle_object(self, animator):
        box = RigObject(name="box")
        assert not animator.finish(box)
        assert not animator.cancel(box)

    def test_move_while_moving_finishes_running_motion(self, engine, animator):
        """A second move short-circuits the first instead of queueing."""
        box = RigObject(name="box")
        first, second = [], []
        animator.move(box, "x", 100, on_complete=lambda: first.append(box.x))
        engine.run_for(200)

        result = animator.move(box, "x", 0, on_complete=lambda: second.append(True))
        engine.run_for(1000)

        assert result is None
        assert first == [20]
        assert second == []
        assert box.x == 20
