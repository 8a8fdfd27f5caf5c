from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

DEFAULT_ORIGINS = ("http://localhost:5173",)


def allowed_origins(environ: dict[str, str] | None = None) -> list[str]:
    """Local dev server plus FRONTEND_URL and CORS_ALLOWED_ORIGINS (comma separated)."""
    env = os.environ if environ is None else environ
    origins = list(DEFAULT_ORIGINS)
    candidates = [env.get("FRONTEND_URL", "")]
    candidates.extend(env.get("CORS_ALLOWED_ORIGINS", "").split(","))
    for origin in candidates:
        origin = origin.strip().rstrip("/")
        if origin and origin not in origins:
            origins.append(origin)
    return origins


def add_cors(app: FastAPI, origins: list[str] | None = None) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins if origins is not None else allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Client-ID"],
    )
