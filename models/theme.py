"""Dark/light theme flag shared by every view.

The flag lives on a context object created once per application and handed
to the presentation layer, so there is no module-level state to reset
between tests.
"""

from __future__ import annotations

import logging
from typing import Callable, List

ThemeListener = Callable[[bool], None]


class ThemeContext:
	"""Holds the dark mode flag and notifies subscribers on change."""

	def __init__(self, is_dark: bool = False) -> None:
		self._is_dark = is_dark
		self._listeners: List[ThemeListener] = []

	@property
	def is_dark(self) -> bool:
		return self._is_dark

	@property
	def name(self) -> str:
		return "dark" if self._is_dark else "light"

	def set(self, is_dark: bool) -> None:
		"""Set the flag, notifying subscribers only when it actually changes."""
		is_dark = bool(is_dark)
		if is_dark == self._is_dark:
			return
		self._is_dark = is_dark
		for listener in list(self._listeners):
			try:
				listener(is_dark)
			except Exception as exc:
				logging.error("Theme listener failed: %s", exc)

	def toggle(self) -> bool:
		self.set(not self._is_dark)
		return self._is_dark

	def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
		"""Register a listener and return a callable that removes it."""
		self._listeners.append(listener)

		def unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return unsubscribe

	def to_dict(self) -> dict:
		return {"is_dark": self._is_dark, "name": self.name}
