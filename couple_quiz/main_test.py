"""Tests for the main module."""
from __future__ import annotations

from couple_quiz.application.app import App
from couple_quiz.main import app


def test_module_exposes_asgi_app():
    assert isinstance(app, App)
    assert callable(app)
    assert app.fastapi.title == "Couple Quiz Service"
