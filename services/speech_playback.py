"""Speak/stop control for the description of a view."""

from __future__ import annotations

import logging
from typing import Optional

from models.relay_models import RelayResult
from models.session_models import SpeechState, View
from services.relay_client import RelayClient
from services.upload_flow import is_current

SPEECH_ERROR_MESSAGE = "Failed to generate speech"

IGNORED = "ignored"
STOPPED = "stopped"
PLAYING = "playing"
FAILED = "failed"
DISCARDED = "discarded"


class SpeechPlayback:
	"""Generate audio for a description once and toggle its playback."""

	def __init__(self, relay: RelayClient, voice: Optional[str] = None) -> None:
		if relay is None:
			raise ValueError("A relay client is required.")
		self.relay = relay
		self.voice = voice

	async def toggle(self, view: View) -> str:
		"""Start or stop speaking and return what happened."""
		speech = view.speech
		if speech is None:
			speech = view.speech = SpeechState()

		if speech.is_generating:
			return IGNORED

		if speech.is_speaking:
			# Stopping rewinds, the next start plays from the beginning.
			speech.is_speaking = False
			return STOPPED

		session = view.session
		if not session.has_description:
			return IGNORED

		if speech.audio_handle and speech.source_text == session.description:
			speech.is_speaking = True
			return PLAYING

		text = session.description
		generation = session.generation
		speech.is_generating = True
		try:
			result = await self.relay.synthesize(text, self.voice)
		except Exception as exc:
			logging.error("Speech relay call failed: %s", exc)
			result = RelayResult.failure(str(exc) or exc.__class__.__name__)
		finally:
			speech.is_generating = False

		if view.speech is not speech or not is_current(view, session, generation):
			logging.info("Discarding stale speech response for view %s", view.view_id)
			if result.ok and result.value:
				self.relay.discard_audio(result.value)
			return DISCARDED

		if not result.ok:
			logging.error("Error generating speech: %s", result.error)
			speech.is_speaking = False
			view.notify(SPEECH_ERROR_MESSAGE)
			return FAILED

		speech.audio_handle = result.value
		speech.source_text = text
		speech.is_speaking = True
		return PLAYING

	def finished(self, view: View) -> View:
		"""Record that playback reached the end on the client."""
		if view.speech is not None:
			view.speech.is_speaking = False
		return view
