"""Clients the upload flow uses to reach the analysis and speech relays.

Both operations return a `RelayResult` instead of raising, so the flow can
turn any failure into its user-facing message without a try block per call.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from models.relay_models import RelayResult
from services.relay.image_describer import ImageDescriber
from services.relay.speech_synthesizer import SpeechSynthesizer

ANALYZE_PATH = "/functions/analyze-image"
SPEECH_PATH = "/functions/text-to-voice"


def normalize_audio_payload(data: Any) -> Optional[str]:
	"""Return a playable URL from a speech relay response body.

	Current relays answer with `audioUrl`. An older relay revision answered
	with base64 `audioContent`, which is wrapped into a data URL.
	"""
	if not isinstance(data, dict):
		return None
	audio_url = data.get("audioUrl")
	if isinstance(audio_url, str) and audio_url:
		return audio_url
	audio_content = data.get("audioContent")
	if isinstance(audio_content, str) and audio_content:
		if audio_content.startswith("data:"):
			return audio_content
		return f"data:audio/mpeg;base64,{audio_content}"
	return None


class RelayClient:
	"""Interface shared by the HTTP and in-process relay clients."""

	async def analyze(self, image_data_url: str) -> RelayResult:
		raise NotImplementedError

	async def synthesize(self, text: str, voice: Optional[str] = None) -> RelayResult:
		raise NotImplementedError

	def discard_audio(self, audio_url: str) -> None:
		"""Release audio the view no longer needs. Remote relays own their files."""
		return None

	async def aclose(self) -> None:
		return None


class HttpRelayClient(RelayClient):
	"""Call relays deployed behind an HTTP base URL."""

	def __init__(
		self,
		base_url: str,
		*,
		timeout: float = 120.0,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

	async def analyze(self, image_data_url: str) -> RelayResult:
		data = await self._post(ANALYZE_PATH, {"image": image_data_url})
		if isinstance(data, RelayResult):
			return data
		description = data.get("description") if isinstance(data, dict) else None
		if not isinstance(description, str) or not description:
			return RelayResult.failure("Analysis relay returned no description.")
		return RelayResult.success(description)

	async def synthesize(self, text: str, voice: Optional[str] = None) -> RelayResult:
		payload = {"text": text}
		if voice:
			payload["voice"] = voice
		data = await self._post(SPEECH_PATH, payload)
		if isinstance(data, RelayResult):
			return data
		audio_url = normalize_audio_payload(data)
		if not audio_url:
			return RelayResult.failure("Speech relay returned no audio.")
		return RelayResult.success(audio_url)

	async def _post(self, path: str, payload: dict) -> Any:
		"""POST JSON and return the decoded body, or a failed RelayResult."""
		try:
			response = await self._client.post(path, json=payload)
		except (httpx.HTTPError, httpx.InvalidURL) as exc:
			logging.error("Relay request to %s failed: %s", path, exc)
			return RelayResult.failure(str(exc) or exc.__class__.__name__)

		try:
			data = response.json()
		except ValueError:
			data = None

		if response.is_error:
			detail = data.get("error") if isinstance(data, dict) else None
			logging.error("Relay %s answered %s: %s", path, response.status_code, detail)
			return RelayResult.failure(detail or f"Relay returned HTTP {response.status_code}")
		if isinstance(data, dict) and data.get("error"):
			return RelayResult.failure(str(data["error"]))
		return data

	async def aclose(self) -> None:
		await self._client.aclose()


class LocalRelayClient(RelayClient):
	"""Call the relay services in-process, skipping the HTTP hop."""

	def __init__(self, describer: ImageDescriber, synthesizer: SpeechSynthesizer) -> None:
		self.describer = describer
		self.synthesizer = synthesizer

	async def analyze(self, image_data_url: str) -> RelayResult:
		try:
			result = await self.describer.describe(image_data_url)
		except Exception as exc:
			logging.error("Error analyzing image: %s", exc)
			return RelayResult.failure(str(exc))
		return RelayResult.success(result["description"])

	async def synthesize(self, text: str, voice: Optional[str] = None) -> RelayResult:
		try:
			audio_url = await self.synthesizer.synthesize(text, voice=voice)
		except Exception as exc:
			logging.error("Text-to-voice error: %s", exc)
			return RelayResult.failure(str(exc))
		return RelayResult.success(audio_url)

	def discard_audio(self, audio_url: str) -> None:
		self.synthesizer.discard(audio_url)
