import asyncio
import base64

import pytest

from conftest import FakeRelay
from models.relay_models import RelayResult
from models.session_models import SessionStatus, SpeechState, View
from services.upload_flow import (
    ANALYSIS_ERROR_MESSAGE,
    PROCESSING_ERROR_MESSAGE,
    IncomingFile,
    UploadFlow,
)


@pytest.fixture
def view():
    return View(view_id="v1")


async def test_non_image_drop_leaves_session_unchanged(fake_relay, view):
    flow = UploadFlow(fake_relay)
    before = (view.session.status, view.session.image, view.session.description, view.session.generation)

    accepted = await flow.accept_file(view, "notes.pdf", "application/pdf", b"%PDF-1.4")

    assert accepted is False
    assert (view.session.status, view.session.image, view.session.description, view.session.generation) == before
    assert fake_relay.analyze_calls == []


async def test_image_issues_one_request_with_full_encoded_content(fake_relay, view, png_bytes):
    flow = UploadFlow(fake_relay)

    await flow.accept_file(view, "cat.png", "image/png", png_bytes)

    assert len(fake_relay.analyze_calls) == 1
    sent = fake_relay.analyze_calls[0]
    assert sent == "data:image/png;base64," + base64.b64encode(png_bytes).decode("utf-8")
    assert view.session.image == sent


async def test_successful_analysis_shows_exact_description(fake_relay, view, png_bytes):
    flow = UploadFlow(fake_relay)

    await flow.accept_file(view, "cat.png", "image/png", png_bytes)

    assert view.session.description == "A cat on a windowsill."
    assert view.session.status == SessionStatus.DONE


async def test_failed_analysis_shows_generic_error_and_done(view, png_bytes):
    relay = FakeRelay()
    relay.analyze_result = RelayResult.failure("Replicate quota exceeded")
    flow = UploadFlow(relay)

    await flow.accept_file(view, "cat.png", "image/png", png_bytes)

    assert view.session.description == ANALYSIS_ERROR_MESSAGE
    assert view.session.description.strip()
    assert view.session.status == SessionStatus.DONE
    assert view.session.error == "Replicate quota exceeded"


async def test_reset_while_processing_ignores_late_response(view, png_bytes):
    relay = FakeRelay()
    relay.analyze_gate = asyncio.Event()
    flow = UploadFlow(relay)

    task = asyncio.create_task(flow.accept_file(view, "cat.png", "image/png", png_bytes))
    await asyncio.sleep(0)
    assert view.session.status == SessionStatus.PROCESSING

    flow.reset(view)
    assert view.session.status == SessionStatus.IDLE

    relay.analyze_gate.set()
    await task

    assert view.session.status == SessionStatus.IDLE
    assert view.session.image is None
    assert view.session.description == ""


async def test_newer_upload_supersedes_pending_one(view, png_bytes):
    relay = FakeRelay()
    relay.analyze_gate = asyncio.Event()
    flow = UploadFlow(relay)

    first = asyncio.create_task(flow.accept_file(view, "a.png", "image/png", png_bytes))
    await asyncio.sleep(0)
    relay.analyze_result = RelayResult.success("Second image.")
    second = asyncio.create_task(flow.accept_file(view, "b.png", "image/png", png_bytes))
    await asyncio.sleep(0)
    relay.analyze_gate.set()
    await asyncio.gather(first, second)

    assert view.session.description == "Second image."
    assert view.session.filename == "b.png"


async def test_first_file_wins(fake_relay, view, png_bytes):
    flow = UploadFlow(fake_relay)
    files = [
        IncomingFile("first.png", "image/png", png_bytes),
        IncomingFile("second.jpg", "image/jpeg", b"\xff\xd8other"),
    ]

    await flow.accept_files(view, files)

    assert view.session.filename == "first.png"
    assert len(fake_relay.analyze_calls) == 1


async def test_first_file_not_image_ignores_whole_drop(fake_relay, view, png_bytes):
    flow = UploadFlow(fake_relay)
    files = [
        IncomingFile("notes.txt", "text/plain", b"hello"),
        IncomingFile("cat.png", "image/png", png_bytes),
    ]

    assert await flow.accept_files(view, files) is False
    assert view.session.status == SessionStatus.IDLE


async def test_empty_upload_is_a_processing_error(fake_relay, view):
    flow = UploadFlow(fake_relay)

    await flow.accept_file(view, "empty.png", "image/png", b"")

    assert view.session.status == SessionStatus.ERROR
    assert view.session.description == PROCESSING_ERROR_MESSAGE
    assert fake_relay.analyze_calls == []


async def test_reset_is_idempotent(fake_relay, view, png_bytes):
    flow = UploadFlow(fake_relay)
    await flow.accept_file(view, "cat.png", "image/png", png_bytes)

    flow.reset(view)
    flow.reset(view)

    assert view.session.status == SessionStatus.IDLE
    assert view.session.image is None
    assert view.session.description == ""
    assert view.speech is None


async def test_new_upload_clears_previous_description(view, png_bytes):
    relay = FakeRelay()
    flow = UploadFlow(relay)
    await flow.accept_file(view, "cat.png", "image/png", png_bytes)

    relay.analyze_gate = asyncio.Event()
    task = asyncio.create_task(flow.accept_file(view, "dog.png", "image/png", png_bytes))
    await asyncio.sleep(0)

    assert view.session.description == ""
    assert view.session.status == SessionStatus.PROCESSING
    relay.analyze_gate.set()
    await task


async def test_relay_exception_ends_in_analysis_error(view, png_bytes):
    relay = FakeRelay()
    relay.analyze_error = RuntimeError("socket closed")
    flow = UploadFlow(relay)

    accepted = await flow.accept_file(view, "cat.png", "image/png", png_bytes)

    assert accepted is True
    assert view.session.status == SessionStatus.DONE
    assert view.session.description == ANALYSIS_ERROR_MESSAGE
    assert view.session.error == "socket closed"


async def test_reset_and_new_upload_clear_notifications(fake_relay, view, png_bytes):
    flow = UploadFlow(fake_relay)
    await flow.accept_file(view, "cat.png", "image/png", png_bytes)

    view.notify("Failed to generate speech")
    flow.reset(view)
    assert view.notifications == []

    view.notify("Failed to generate speech")
    await flow.accept_file(view, "dog.png", "image/png", png_bytes)
    assert view.notifications == []


async def test_dropping_speech_discards_its_audio(fake_relay, view, png_bytes):
    flow = UploadFlow(fake_relay)
    await flow.accept_file(view, "cat.png", "image/png", png_bytes)
    view.speech = SpeechState(audio_handle="/audio/cat.mp3", source_text=view.session.description)

    flow.reset(view)
    flow.reset(view)

    assert fake_relay.discarded == ["/audio/cat.mp3"]

    view.speech = SpeechState(audio_handle="/audio/dog.mp3")
    await flow.accept_file(view, "dog.png", "image/png", png_bytes)

    assert fake_relay.discarded == ["/audio/cat.mp3", "/audio/dog.mp3"]
