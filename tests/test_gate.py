from __future__ import annotations

from dataclasses import replace

from conftest import FREE, SOURCE, make_config

from core.config import GateConfig
from core.gate import IntakeGate, normalize_phone
from core.models import Rejection, RoutePath


def _gate(make_state, **gate_overrides):
    config = make_config(gate=GateConfig(**gate_overrides)) if gate_overrides else None
    state = make_state(config)
    return IntakeGate(state), state


def test_admits_source_group_on_path_a(make_state, make_event) -> None:
    gate, state = _gate(make_state)
    decision = gate.evaluate(make_event())

    assert decision.admitted
    assert decision.path is RoutePath.A
    assert decision.fingerprint in state.pending


def test_admits_free_group_on_path_b(make_state, make_event) -> None:
    gate, _ = _gate(make_state)
    assert gate.evaluate(make_event(source=FREE)).path is RoutePath.B


def test_rejects_unmonitored_group(make_state, make_event) -> None:
    gate, _ = _gate(make_state)
    assert gate.evaluate(make_event(source="chat_id:-1999")).rejection is Rejection.NOT_MONITORED


def test_first_failing_check_wins(make_state, make_event) -> None:
    gate, _ = _gate(make_state)
    event = make_event(is_group=False, is_self=True, age=1000)
    assert gate.evaluate(event).rejection is Rejection.NOT_GROUP
    assert gate.evaluate(replace(event, is_group=True)).rejection is Rejection.FROM_SELF


def test_rejects_old_messages(make_state, make_event) -> None:
    gate, state = _gate(make_state)
    assert gate.evaluate(make_event(age=301)).rejection is Rejection.TOO_OLD
    # Stale events never reach the replay window.
    assert len(state.replay_ids) == 0
    assert gate.evaluate(make_event(age=299)).admitted


def test_strict_age_right_after_reconnect(make_state, make_event, clock) -> None:
    gate, state = _gate(make_state)
    state.mark_reconnected()

    assert gate.evaluate(make_event(age=11)).rejection is Rejection.RECONNECT_AGE
    assert gate.evaluate(make_event("Need cab to Mohali, call 9876543210", age=5)).admitted

    clock.advance(30)
    assert gate.evaluate(make_event("Need cab to Delhi, call 9876543210", age=11)).admitted


def test_rejects_replayed_event_id(make_state, make_event) -> None:
    gate, _ = _gate(make_state)
    event = make_event()
    assert gate.evaluate(event).admitted
    assert gate.evaluate(event).rejection is Rejection.REPLAY


def test_rejects_empty_text(make_state, make_event) -> None:
    gate, _ = _gate(make_state)
    assert gate.evaluate(make_event("   ")).rejection is Rejection.EMPTY


def test_rejects_own_phone(make_state, make_event) -> None:
    gate, _ = _gate(make_state, bot_phone="+91 98765 43210")
    decision = gate.evaluate(make_event(sender_phone="919876543210"))
    assert decision.rejection is Rejection.BOT_SENDER
    assert gate.evaluate(make_event(sender_phone="9123456789")).admitted


def test_rejects_short_text(make_state, make_event) -> None:
    gate, _ = _gate(make_state)
    assert gate.evaluate(make_event("taxi pls")).rejection is Rejection.TOO_SHORT


def test_concurrent_twin_is_rejected_as_race(make_state, make_event) -> None:
    gate, _ = _gate(make_state)
    first = gate.evaluate(make_event())
    second = gate.evaluate(make_event(source=FREE))

    assert first.admitted
    assert second.rejection is Rejection.RACE
    assert second.fingerprint == first.fingerprint


def test_commit_turns_twin_into_duplicate(make_state, make_event) -> None:
    gate, state = _gate(make_state)
    first = gate.evaluate(make_event())
    gate.complete(first.fingerprint, delivered=True)

    assert first.fingerprint in state.committed
    assert first.fingerprint not in state.pending
    assert state.stats.committed == 1
    assert gate.evaluate(make_event()).rejection is Rejection.DUPLICATE


def test_release_lets_twin_through(make_state, make_event) -> None:
    gate, state = _gate(make_state)
    first = gate.evaluate(make_event())
    gate.complete(first.fingerprint, delivered=False)

    assert first.fingerprint not in state.committed
    assert state.stats.released == 1
    assert gate.evaluate(make_event(source=SOURCE)).admitted


def test_normalize_phone_keeps_last_ten_digits() -> None:
    assert normalize_phone("+91 98765-43210") == "9876543210"
    assert normalize_phone("") == ""
