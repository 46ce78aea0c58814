"""Upload and analysis state machine for a single view.

A view moves idle -> processing -> done (or error when the upload itself
cannot be encoded). Every accepted file and every reset bumps the session's
generation; a relay response is applied only if its generation is still
current, so a reset or a newer upload makes late responses harmless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from models.relay_models import RelayResult
from models.session_models import SessionStatus, UploadSession, View
from services.relay_client import RelayClient
from utils.media_validation import first_file, is_image_type, to_data_url

ANALYSIS_ERROR_MESSAGE = "Error analyzing image. Please try again."
PROCESSING_ERROR_MESSAGE = "Error processing image. Please try again."


@dataclass
class IncomingFile:
	"""A file handed over by the drop target or the file picker."""

	filename: Optional[str]
	content_type: Optional[str]
	data: bytes


def is_current(view: View, session: UploadSession, generation: int) -> bool:
	"""True while `generation` is still the live request of an open view."""
	return not view.closed and view.session is session and session.generation == generation


class UploadFlow:
	"""Accept images, relay them for analysis and record the outcome."""

	def __init__(self, relay: RelayClient) -> None:
		if relay is None:
			raise ValueError("A relay client is required.")
		self.relay = relay

	async def accept_files(self, view: View, files: Sequence[IncomingFile]) -> bool:
		"""Accept the first file of a drop; the rest are ignored."""
		incoming = first_file(files)
		if incoming is None:
			return False
		return await self.accept_file(view, incoming.filename, incoming.content_type, incoming.data)

	async def accept_file(
		self,
		view: View,
		filename: Optional[str],
		content_type: Optional[str],
		raw: bytes,
	) -> bool:
		"""Run one upload through analysis.

		Returns False, leaving the view untouched, when the file is not an image.
		"""
		if not is_image_type(content_type):
			logging.info("Ignoring non-image upload %r (%s)", filename, content_type)
			return False

		session = view.session
		session.generation += 1
		generation = session.generation
		session.status = SessionStatus.PROCESSING
		session.description = ""
		session.error = None
		session.image = None
		session.filename = filename
		session.content_type = content_type
		self.drop_speech(view)
		view.notifications.clear()

		try:
			image_data_url = to_data_url(raw, content_type)
		except ValueError as exc:
			logging.error("Error processing image: %s", exc)
			session.status = SessionStatus.ERROR
			session.description = PROCESSING_ERROR_MESSAGE
			session.error = str(exc)
			return True

		session.image = image_data_url
		try:
			result = await self.relay.analyze(image_data_url)
		except Exception as exc:
			logging.error("Analysis relay call failed: %s", exc)
			result = RelayResult.failure(str(exc) or exc.__class__.__name__)

		if not is_current(view, session, generation):
			logging.info("Discarding stale analysis response for view %s", view.view_id)
			return True

		if result.ok:
			session.description = result.value or ""
			session.error = None
		else:
			logging.error("Error analyzing image: %s", result.error)
			session.description = ANALYSIS_ERROR_MESSAGE
			session.error = result.error
		session.status = SessionStatus.DONE
		return True

	def reset(self, view: View) -> View:
		"""Clear the image and description and return the view to idle."""
		session = view.session
		session.generation += 1
		session.image = None
		session.description = ""
		session.error = None
		session.filename = None
		session.content_type = None
		session.status = SessionStatus.IDLE
		self.drop_speech(view)
		view.notifications.clear()
		return view

	def drop_speech(self, view: View) -> None:
		"""Forget the view's speech state and release any audio generated for it."""
		speech = view.speech
		view.speech = None
		if speech is not None and speech.audio_handle:
			self.relay.discard_audio(speech.audio_handle)
