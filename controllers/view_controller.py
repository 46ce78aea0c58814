"""View lifecycle helpers for the upload and describe page."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import HTTPException, Request, UploadFile

from models.session_models import View
from services.presentation import render_view, request_replay
from services.session_store import ViewStore
from services.upload_flow import IncomingFile, UploadFlow
from services.speech_playback import SpeechPlayback
from utils.media_validation import is_image_type


def _store(request: Request) -> ViewStore:
	return request.app.state.view_store


def _view(request: Request, view_id: str) -> View:
	try:
		return _store(request).get(view_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc


def _render(request: Request, view: View) -> Dict[str, Any]:
	state = request.app.state
	return render_view(view, state.theme, state.presentation)


async def open_view(request: Request) -> Dict[str, Any]:
	"""Create a new view and return its initial view model."""
	view = _store(request).create()
	return _render(request, view)


async def get_view(request: Request, view_id: str) -> Dict[str, Any]:
	return _render(request, _view(request, view_id))


async def close_view(request: Request, view_id: str) -> Dict[str, Any]:
	"""Discard a view and everything it holds."""
	try:
		_store(request).close(view_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return {"view_id": view_id, "closed": True}


async def upload_image(request: Request, view_id: str, files: List[UploadFile]) -> Dict[str, Any]:
	"""Hand the first dropped file to the upload flow and return the settled view.

	Only the first file is read; a non-image first file leaves the view as it was.
	"""
	view = _view(request, view_id)
	flow: UploadFlow = request.app.state.upload_flow
	if files:
		upload = files[0]
		data = await upload.read() if is_image_type(upload.content_type) else b""
		await flow.accept_files(view, [IncomingFile(upload.filename, upload.content_type, data)])
	return _render(request, view)


async def reset_view(request: Request, view_id: str) -> Dict[str, Any]:
	view = _view(request, view_id)
	request.app.state.upload_flow.reset(view)
	return _render(request, view)


async def replay_view(request: Request, view_id: str) -> Dict[str, Any]:
	view = _view(request, view_id)
	request_replay(view)
	return _render(request, view)


async def toggle_speech(request: Request, view_id: str) -> Dict[str, Any]:
	"""Start, stop or generate speech for the current description."""
	view = _view(request, view_id)
	playback: SpeechPlayback = request.app.state.speech_playback
	action = await playback.toggle(view)
	result = _render(request, view)
	result["speech"]["action"] = action
	return result


async def speech_ended(request: Request, view_id: str) -> Dict[str, Any]:
	view = _view(request, view_id)
	request.app.state.speech_playback.finished(view)
	return _render(request, view)


async def clear_notifications(request: Request, view_id: str) -> Dict[str, Any]:
	view = _view(request, view_id)
	view.notifications.clear()
	return _render(request, view)
