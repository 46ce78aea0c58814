"""Session domain models for the upload and describe view."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class SessionStatus(str, Enum):
	IDLE = "idle"
	PROCESSING = "processing"
	DONE = "done"
	ERROR = "error"


@dataclass
class UploadSession:
	"""State for one upload, analyze and display interaction."""

	image: Optional[str] = None
	description: str = ""
	status: SessionStatus = SessionStatus.IDLE
	filename: Optional[str] = None
	content_type: Optional[str] = None
	error: Optional[str] = None
	generation: int = 0

	@property
	def has_description(self) -> bool:
		"""True when the description is meaningful, i.e. analysis completed."""
		return self.status == SessionStatus.DONE and bool(self.description)


@dataclass
class SpeechState:
	"""Playback state for the audio generated from a description."""

	audio_handle: Optional[str] = None
	source_text: Optional[str] = None
	is_speaking: bool = False
	is_generating: bool = False


@dataclass
class Notification:
	"""Transient message surfaced to the user, e.g. a failed speech request."""

	level: str
	message: str
	created_at: float = field(default_factory=lambda: time.time())


@dataclass
class View:
	"""One open page: a single upload session plus its optional speech state."""

	view_id: str
	session: UploadSession = field(default_factory=UploadSession)
	speech: Optional[SpeechState] = None
	notifications: List[Notification] = field(default_factory=list)
	replay_count: int = 0
	closed: bool = False

	def notify(self, message: str, level: str = "error") -> None:
		self.notifications.append(Notification(level=level, message=message))
