"""Progress banner for Streamlit pages driven by WorklogService callbacks."""

from __future__ import annotations

import streamlit as st


class ProgressReporter:
    """Renders a banner, a status line and a progress bar for one pipeline run."""

    def __init__(self, title: str):
        self._container = st.container()
        self._container.info(title)
        self._message = self._container.empty()
        self._bar = self._container.progress(0.0)
        self._done = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        """Signature compatible with WorklogService progress callbacks."""
        self.update(message, current=current, total=total)

    def update(self, message: str, *, current: int | None = None, total: int | None = None) -> None:
        if self._done:
            return
        self._message.write(message)
        if total:
            self._bar.progress(min(max((current or 0) / total, 0.0), 1.0))

    def complete(self, message: str) -> None:
        if self._done:
            return
        self._bar.progress(1.0)
        self._container.success(message)
        self._done = True

    def error(self, message: str) -> None:
        if self._done:
            return
        self._container.error(message)
        self._done = True
