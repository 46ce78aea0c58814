"""Text-to-speech helper built on OpenAI's speech models.

Generated audio is written into a cache directory that the application
serves under `/audio`, so the relay can answer with a playable URL.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional, Set

import aiofiles
from openai import AsyncOpenAI

SPEECH_MODEL = "gpt-4o-mini-tts"
DEFAULT_VOICE = "alloy"
AUDIO_URL_PREFIX = "/audio"


class SpeechSynthesizer:
    """Create MP3 narrations of description text."""

    def __init__(
        self,
        client: AsyncOpenAI,
        audio_dir: Path,
        *,
        model: str = SPEECH_MODEL,
        default_voice: str = DEFAULT_VOICE,
        url_prefix: str = AUDIO_URL_PREFIX,
    ) -> None:
        """Initialize the service with a shared OpenAI client and a cache directory."""
        if client is None:
            raise ValueError("OpenAI client is required for speech synthesis.")
        self.client = client
        self.audio_dir = Path(audio_dir)
        self.model = model
        self.default_voice = default_voice
        self.url_prefix = url_prefix.rstrip("/")
        self._written: Set[str] = set()

    async def synthesize(self, text: str, *, voice: Optional[str] = None) -> str:
        """Generate audio for `text` and return the URL it is served from."""
        text = (text or "").strip()
        if not text:
            raise ValueError("Text is required")

        voice = voice or self.default_voice
        logging.info("Starting text-to-speech generation (%d chars, voice=%s)", len(text), voice)
        try:
            response = await self.client.audio.speech.create(
                model=self.model,
                voice=voice,
                input=text,
                response_format="mp3",
            )
        except Exception as exc:
            logging.error("OpenAI speech request failed: %s", exc)
            raise

        audio_bytes = getattr(response, "content", None)
        if not audio_bytes:
            raise RuntimeError("Speech response did not include audio.")

        filename = f"{uuid.uuid4().hex}.mp3"
        await self._write(filename, audio_bytes)
        self._written.add(filename)
        audio_url = f"{self.url_prefix}/{filename}"
        logging.info("Audio generation completed: %s", audio_url)
        return audio_url

    async def _write(self, filename: str, audio_bytes: bytes) -> None:
        self.audio_dir.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.audio_dir / filename, "wb") as f:
            await f.write(audio_bytes)

    def discard(self, audio_url: Optional[str]) -> bool:
        """Delete a cached file this synthesizer served; other URLs are left alone."""
        prefix = f"{self.url_prefix}/"
        if not audio_url or not audio_url.startswith(prefix):
            return False
        filename = audio_url[len(prefix):]
        if not filename or Path(filename).name != filename:
            return False

        self._written.discard(filename)
        path = self.audio_dir / filename
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logging.error("Could not remove cached audio %s: %s", path, exc)
            return False
        logging.info("Removed cached audio %s", audio_url)
        return True

    def discard_all(self) -> int:
        """Delete every file written by this synthesizer that is still cached."""
        removed = 0
        for filename in sorted(self._written):
            if self.discard(f"{self.url_prefix}/{filename}"):
                removed += 1
        self._written.clear()
        return removed
