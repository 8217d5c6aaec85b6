from __future__ import annotations

import asyncio

from conftest import FakeFingerprintFile

from core.maintenance import MaintenanceTicker


def test_run_once_sweeps_and_flushes(make_state, clock) -> None:
    file = FakeFingerprintFile()
    state = make_state(fingerprint_file=file)
    state.cooldowns.mark("g1")
    state.pending.acquire("fp-stuck")
    state.committed.commit("fp-done")
    for _ in range(state.config.breaker.max_failures):
        state.breaker.record_failure()

    clock.advance(61)
    results = MaintenanceTicker(state).run_once()

    assert results["cooldown-sweep"] == 1
    assert results["pending-sweep"] == 1
    assert results["fingerprint-flush"] is True
    assert file.saves[0][0][0] == "fp-done"
    assert state.breaker.reopen_at is None


def test_stop_flushes_dirty_fingerprints(make_state) -> None:
    file = FakeFingerprintFile()
    state = make_state(fingerprint_file=file)
    ticker = MaintenanceTicker(state)

    async def scenario() -> None:
        ticker.start()
        state.committed.commit("fp-late")
        await ticker.stop(flush=True)

    asyncio.run(scenario())

    assert file.saves == [[("fp-late", int(state.clock() * 1000))]]
    assert not state.committed.dirty


def test_stop_without_flush(make_state) -> None:
    file = FakeFingerprintFile()
    state = make_state(fingerprint_file=file)
    ticker = MaintenanceTicker(state)

    async def scenario() -> None:
        ticker.start()
        state.committed.commit("fp-late")
        await ticker.stop(flush=False)

    asyncio.run(scenario())

    assert file.saves == []
    assert state.committed.dirty
