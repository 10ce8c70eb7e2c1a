"""Tests for the debounced autosave controller."""

import asyncio

import pytest

from form_builder.client.autosave import AutosaveController, SaveState


def require_name(spec):
    return [] if spec.get("name") else ["Form name is required"]


class Recorder:
    """save_fn that records specs, optionally failing or blocking."""

    def __init__(self, error=None):
        self.saved = []
        self.error = error

    async def __call__(self, spec):
        self.saved.append(spec)
        if self.error:
            raise self.error


@pytest.mark.asyncio
async def test_edit_then_save(sample_spec):
    save = Recorder()
    states = []
    controller = AutosaveController(save, delay=0.01, on_state_change=states.append)

    controller.edit(sample_spec)
    assert controller.state == SaveState.DIRTY
    await controller.wait()

    assert save.saved == [sample_spec]
    assert controller.state == SaveState.SYNCED
    assert controller.last_valid_spec == sample_spec
    assert not controller.has_pending
    assert states == [SaveState.DIRTY, SaveState.SAVING, SaveState.SYNCED]


@pytest.mark.asyncio
async def test_rapid_edits_coalesce():
    save = Recorder()
    controller = AutosaveController(save, validate_fn=require_name, delay=0.05)

    for n in range(5):
        controller.edit({"name": f"v{n}"})
        await asyncio.sleep(0)
    await controller.wait()

    assert save.saved == [{"name": "v4"}]


@pytest.mark.asyncio
async def test_invalid_spec_not_saved():
    save = Recorder()
    controller = AutosaveController(save, validate_fn=require_name, delay=0.01)

    controller.edit({"name": "Good"})
    await controller.wait()
    controller.edit({"name": ""})
    await controller.wait()

    assert save.saved == [{"name": "Good"}]
    assert controller.state == SaveState.DIRTY
    assert controller.errors == ["Form name is required"]
    assert controller.last_valid_spec == {"name": "Good"}


@pytest.mark.asyncio
async def test_save_failure_sets_error():
    save = Recorder(error=RuntimeError("storage down"))
    controller = AutosaveController(save, validate_fn=require_name, delay=0.01)

    controller.edit({"name": "Survey"})
    await controller.wait()

    assert controller.state == SaveState.ERROR
    assert str(controller.last_error) == "storage down"

    save.error = None
    controller.edit({"name": "Survey"})
    await controller.wait()
    assert controller.state == SaveState.SYNCED
    assert controller.last_error is None


@pytest.mark.asyncio
async def test_edit_during_save_saves_again():
    started = asyncio.Event()
    release = asyncio.Event()
    saved = []

    async def slow_save(spec):
        saved.append(spec)
        if len(saved) == 1:
            started.set()
            await release.wait()

    states = []
    controller = AutosaveController(
        slow_save, validate_fn=require_name, delay=0.01, on_state_change=states.append,
    )

    controller.edit({"name": "first"})
    await started.wait()
    assert controller.state == SaveState.SAVING

    controller.edit({"name": "second"})
    assert controller.state == SaveState.SAVING
    release.set()
    await controller.wait()

    assert saved == [{"name": "first"}, {"name": "second"}]
    assert controller.state == SaveState.SYNCED
    assert states == [
        SaveState.DIRTY, SaveState.SAVING, SaveState.DIRTY, SaveState.SAVING, SaveState.SYNCED,
    ]


@pytest.mark.asyncio
async def test_flush_skips_delay():
    save = Recorder()
    controller = AutosaveController(save, validate_fn=require_name, delay=60)

    controller.edit({"name": "Now"})
    await controller.flush()

    assert save.saved == [{"name": "Now"}]
    assert controller.state == SaveState.SYNCED


@pytest.mark.asyncio
async def test_cancel_drops_pending():
    save = Recorder()
    controller = AutosaveController(save, validate_fn=require_name, delay=0.01)

    controller.edit({"name": "Never"})
    controller.cancel()
    await asyncio.sleep(0.03)

    assert save.saved == []
    assert controller.state == SaveState.IDLE
    assert not controller.has_pending
