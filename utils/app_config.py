"""Environment-driven application configuration."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
	value = os.getenv(name)
	if value is None or value.strip() == "":
		return default
	return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AppConfig:
	"""Settings read once at startup and attached to `app.state.config`."""

	openai_api_key: Optional[str] = None
	vision_model: str = "gpt-4o-mini"
	tts_model: str = "gpt-4o-mini-tts"
	tts_voice: str = "alloy"
	describe_prompt: str = "Describe this image in detail."
	max_image_side: int = 1536
	audio_cache_dir: Path = Path(tempfile.gettempdir()) / "image-describer-audio"
	relay_base_url: Optional[str] = None
	relay_timeout_seconds: float = 120.0
	presentation_loader: str = "skeleton"
	presentation_typewriter: bool = True

	@classmethod
	def from_env(cls) -> "AppConfig":
		"""Build a config from environment variables, falling back to defaults."""
		defaults = cls()
		audio_dir = os.getenv("AUDIO_CACHE_DIR")
		return cls(
			openai_api_key=os.getenv("OPENAI_API_KEY"),
			vision_model=os.getenv("OPENAI_VISION_MODEL", defaults.vision_model),
			tts_model=os.getenv("OPENAI_TTS_MODEL", defaults.tts_model),
			tts_voice=os.getenv("OPENAI_TTS_VOICE", defaults.tts_voice),
			describe_prompt=os.getenv("DESCRIBE_PROMPT", defaults.describe_prompt),
			max_image_side=int(os.getenv("MAX_IMAGE_SIDE", str(defaults.max_image_side))),
			audio_cache_dir=Path(audio_dir) if audio_dir else defaults.audio_cache_dir,
			relay_base_url=os.getenv("RELAY_BASE_URL") or None,
			relay_timeout_seconds=float(os.getenv("RELAY_TIMEOUT_SECONDS", str(defaults.relay_timeout_seconds))),
			presentation_loader=os.getenv("PRESENTATION_LOADER", defaults.presentation_loader),
			presentation_typewriter=_env_bool("PRESENTATION_TYPEWRITER", defaults.presentation_typewriter),
		)
