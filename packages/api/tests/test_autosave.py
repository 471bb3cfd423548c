# This project was developed with assistance from AI tools.
"""Tests for the debounced single-slot auto-saver."""

import asyncio

from rekro_api.services.autosave import AutoSaver

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Recorder:
    """Save function that records states; optionally blocks or fails."""

    def __init__(self, fail_times: int = 0, gate: asyncio.Event | None = None):
        self.saved: list[dict] = []
        self.fail_times = fail_times
        self.gate = gate
        self.started = asyncio.Event()

    async def __call__(self, state):
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_times:
            self.fail_times -= 1
            raise RuntimeError("network down")
        self.saved.append(state)
        return {"id": len(self.saved)}


# ---------------------------------------------------------------------------
# Debounce and coalescing
# ---------------------------------------------------------------------------


async def test_debounced_edits_coalesce_into_one_save():
    save = _Recorder()
    saver = AutoSaver(save, debounce_seconds=0.01)

    for n in range(3):
        saver.schedule({"rental_duration": n})
    await asyncio.sleep(0.1)

    assert save.saved == [{"rental_duration": 2}]
    assert saver.has_pending is False


async def test_nothing_saved_before_debounce_window():
    save = _Recorder()
    saver = AutoSaver(save, debounce_seconds=10)

    saver.schedule({"message": "hi"})
    await asyncio.sleep(0.01)
    assert save.saved == []
    assert saver.has_pending is True

    await saver.flush()
    assert save.saved == [{"message": "hi"}]


async def test_edits_during_save_collapse_to_latest():
    gate = asyncio.Event()
    save = _Recorder(gate=gate)
    saver = AutoSaver(save, debounce_seconds=0)

    saver.schedule({"v": "a"})
    await asyncio.wait_for(save.started.wait(), timeout=1)
    assert saver.is_saving is True

    saver.schedule({"v": "b"})
    saver.schedule({"v": "c"})
    gate.set()
    await saver.flush()

    assert save.saved == [{"v": "a"}, {"v": "c"}]
    assert saver.save_count == 2


async def test_scheduled_state_is_cloned():
    save = _Recorder()
    saver = AutoSaver(save, debounce_seconds=10)

    state = {"inclusions": {"bills": {"selected": True}}}
    saver.schedule(state)
    state["inclusions"]["bills"]["selected"] = False
    await saver.flush()

    assert save.saved == [{"inclusions": {"bills": {"selected": True}}}]


async def test_unchanged_state_is_skipped():
    save = _Recorder()
    saver = AutoSaver(save, debounce_seconds=10)
    saver.mark_saved({"v": 1})

    saver.schedule({"v": 1})
    await saver.flush()

    assert save.saved == []
    assert saver.has_pending is False


async def test_on_saved_receives_state_and_result():
    calls = []
    saver = AutoSaver(_Recorder(), debounce_seconds=10, on_saved=lambda s, r: calls.append((s, r)))

    saver.schedule({"v": 1})
    await saver.flush()

    assert calls == [({"v": 1}, {"id": 1})]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


async def test_failed_save_keeps_state_for_retry():
    save = _Recorder(fail_times=1)
    saver = AutoSaver(save, debounce_seconds=10)

    saver.schedule({"v": 1})
    await saver.flush()
    assert isinstance(saver.last_error, RuntimeError)
    assert saver.has_pending is True
    assert saver.save_count == 0

    await saver.flush()
    assert save.saved == [{"v": 1}]
    assert saver.last_error is None
    assert saver.has_pending is False


async def test_failed_save_superseded_by_newer_edit():
    gate = asyncio.Event()
    save = _Recorder(fail_times=1, gate=gate)
    saver = AutoSaver(save, debounce_seconds=0)

    saver.schedule({"v": "old"})
    await asyncio.wait_for(save.started.wait(), timeout=1)
    saver.schedule({"v": "new"})
    gate.set()
    await saver.flush()

    assert save.saved == [{"v": "new"}]
    assert saver.last_error is None
    assert saver.has_pending is False


async def test_aclose_waits_for_in_flight_save():
    gate = asyncio.Event()
    save = _Recorder(gate=gate)
    saver = AutoSaver(save, debounce_seconds=0)

    saver.schedule({"v": 1})
    await asyncio.wait_for(save.started.wait(), timeout=1)
    asyncio.get_running_loop().call_later(0.01, gate.set)
    await saver.aclose()

    assert save.saved == [{"v": 1}]
    assert saver.is_saving is False
