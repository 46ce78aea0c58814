"""Simple in-memory store for open views."""

from __future__ import annotations

from typing import Callable, Dict, Optional
from uuid import uuid4

from models.session_models import SessionStatus, UploadSession, View


class ViewStore:
	"""Manage open views, each holding at most one upload session."""

	def __init__(self, discard_audio: Optional[Callable[[str], None]] = None) -> None:
		self._views: Dict[str, View] = {}
		self._discard_audio = discard_audio

	def __len__(self) -> int:
		return len(self._views)

	def create(self) -> View:
		"""Open a new view with an idle session."""
		view_id = uuid4().hex
		view = View(view_id=view_id)
		self._views[view_id] = view
		return view

	def get(self, view_id: str) -> View:
		"""Return a view or raise KeyError if missing."""
		view = self._views.get(view_id)
		if view is None:
			raise KeyError(f"View {view_id} not found")
		return view

	def close(self, view_id: str) -> View:
		"""Discard a view; any response still in flight for it is dropped."""
		view = self._views.pop(view_id, None)
		if view is None:
			raise KeyError(f"View {view_id} not found")
		view.closed = True
		view.session = UploadSession(
			status=SessionStatus.IDLE,
			generation=view.session.generation + 1,
		)
		speech = view.speech
		view.speech = None
		view.notifications.clear()
		if speech is not None and speech.audio_handle and self._discard_audio is not None:
			self._discard_audio(speech.audio_handle)
		return view
