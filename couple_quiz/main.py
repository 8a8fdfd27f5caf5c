from __future__ import annotations

from couple_quiz.application.app import App

app = App()
