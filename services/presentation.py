"""View model builder for the upload and describe page.

The page renders whatever `render_view` returns: an upload affordance while
idle, a loading placeholder while processing, and the revealed description
with its controls once analysis settles. Loader style and text reveal are
options rather than separate page variants.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, List, Optional

from models.session_models import SessionStatus, View
from models.theme import ThemeContext

LOADER_SKELETON = "skeleton"
LOADER_SPINNER = "spinner"
LOADING_LABEL = "Analyzing image..."
UPLOAD_PROMPT = "Drag and drop your image here, or browse"
UPLOAD_FORMATS = "Supported formats: PNG, JPG, JPEG"
RESULT_TITLE = "Image Description"

_SKELETON_WIDTHS = (100, 92, 75, 84, 60)


@dataclass
class PresentationOptions:
	loader: str = LOADER_SKELETON
	skeleton_lines: int = 3
	typewriter: bool = True
	typewriter_interval_ms: int = 30
	show_hover_overlay: bool = True

	def __post_init__(self) -> None:
		if self.loader not in (LOADER_SKELETON, LOADER_SPINNER):
			raise ValueError(f"Unsupported loader '{self.loader}'")
		if self.typewriter_interval_ms <= 0:
			raise ValueError("typewriter_interval_ms must be positive.")
		if self.skeleton_lines < 1:
			raise ValueError("skeleton_lines must be at least 1.")


def typewriter_prefix(text: str, elapsed_ms: float, interval_ms: int = 30) -> str:
	"""Return the part of `text` revealed after `elapsed_ms`, one character per interval."""
	if elapsed_ms <= 0 or not text:
		return ""
	count = int(elapsed_ms // interval_ms)
	return text[:count]


def typewriter_frames(text: str) -> Iterator[str]:
	"""Yield each successive revealed prefix of `text`."""
	for index in range(1, len(text) + 1):
		yield text[:index]


def request_replay(view: View) -> bool:
	"""Restart the text reveal; only meaningful once a description exists."""
	if not view.session.has_description:
		return False
	view.replay_count += 1
	return True


def _stage(status: SessionStatus) -> str:
	if status == SessionStatus.IDLE:
		return "upload"
	if status == SessionStatus.PROCESSING:
		return "loading"
	return "result"


def _loading(options: PresentationOptions) -> Dict[str, Any]:
	placeholder: Dict[str, Any] = {"kind": options.loader, "label": LOADING_LABEL}
	if options.loader == LOADER_SKELETON:
		placeholder["lines"] = [
			_SKELETON_WIDTHS[i % len(_SKELETON_WIDTHS)] for i in range(options.skeleton_lines)
		]
	return placeholder


def _result(view: View, options: PresentationOptions) -> Dict[str, Any]:
	text = view.session.description
	if options.typewriter and view.session.has_description:
		reveal = {
			"mode": "typewriter",
			"interval_ms": options.typewriter_interval_ms,
			"duration_ms": len(text) * options.typewriter_interval_ms,
			"replay": view.replay_count,
		}
	else:
		reveal = {"mode": "instant", "replay": view.replay_count}
	return {"title": RESULT_TITLE, "text": text, "reveal": reveal}


def _controls(view: View, options: PresentationOptions) -> Dict[str, Dict[str, Any]]:
	session = view.session
	speech = view.speech
	ready = session.has_description
	generating = bool(speech and speech.is_generating)
	speaking = bool(speech and speech.is_speaking)

	if generating:
		speak_label = "Generating audio..."
	elif speaking:
		speak_label = "Stop"
	else:
		speak_label = "Listen"

	return {
		"copy": {"label": "Copy", "enabled": ready, "text": session.description if ready else ""},
		"replay": {"label": "Replay", "enabled": ready and options.typewriter},
		"speak": {"label": speak_label, "enabled": ready and not generating, "active": speaking},
		"reset": {"label": "Try Another", "enabled": session.status != SessionStatus.IDLE},
	}


def render_view(
	view: View,
	theme: Optional[ThemeContext] = None,
	options: Optional[PresentationOptions] = None,
) -> Dict[str, Any]:
	"""Return the JSON-serializable view model for one view."""
	options = options or PresentationOptions()
	session = view.session
	stage = _stage(session.status)
	speech = view.speech

	preview = None
	if session.image:
		preview = {
			"src": session.image,
			"alt": session.filename or "Uploaded image",
			"hover_overlay": options.show_hover_overlay,
		}

	notifications: List[Dict[str, Any]] = [asdict(n) for n in view.notifications]

	return {
		"view_id": view.view_id,
		"status": session.status.value,
		"stage": stage,
		"upload": {
			"visible": stage == "upload",
			"prompt": UPLOAD_PROMPT,
			"formats": UPLOAD_FORMATS,
			"accept": "image/*",
			"multiple": False,
		},
		"preview": preview,
		"loading": _loading(options) if stage == "loading" else None,
		"result": _result(view, options) if stage == "result" else None,
		"controls": _controls(view, options),
		"speech": {
			"audio_url": speech.audio_handle if speech else None,
			"is_speaking": bool(speech and speech.is_speaking),
			"is_generating": bool(speech and speech.is_generating),
		},
		"notifications": notifications,
		"theme": (theme or ThemeContext()).to_dict(),
	}
