"""
CodeMentor - FastAPI Backend
HTTP shell around a single session controller.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from codementor.config import Settings
from codementor.core.session import SessionController, create_session
from codementor.core.templates import DEFAULT_LANGUAGE, get_supported_languages, get_template
from codementor.logging_setup import configure_logging
from codementor.models import (
    CodeUpdate,
    DifficultyUpdate,
    LanguageChangeRequest,
    ModeUpdate,
    SessionView,
)


# ============================================================================
# Lifespan Context Manager
# ============================================================================

@asynccontextmanager
async def lifespan(application: FastAPI):
    """Build the session on startup unless one was injected beforehand."""
    if getattr(application.state, "session", None) is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        application.state.session = create_session(settings)
    yield


# ============================================================================
# FastAPI App Configuration
# ============================================================================

app = FastAPI(
    title="CodeMentor",
    description="AI-powered code explanation, flowcharts, bug review and simulated execution",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_session(request: Request) -> SessionController:
    """Get the session controller from app state."""
    return request.app.state.session


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "CodeMentor",
        "version": "1.0.0"
    }


@app.get("/api/ai-status")
async def get_ai_status(request: Request):
    """Check if the AI backend has a credential."""
    backend = get_session(request).gateway.backend
    configured = backend.is_configured()
    return {
        "provider": backend.provider,
        "configured": configured,
        "message": "AI is ready" if configured else f"Configure an API key for {backend.provider} to enable AI features"
    }


@app.get("/api/languages")
async def get_languages():
    """Get supported languages with their editor hints and templates."""
    return {
        "languages": [
            {"id": lang.value, **info, "template": get_template(lang)}
            for lang, info in get_supported_languages().items()
        ],
        "default": DEFAULT_LANGUAGE.value
    }


@app.get("/api/session", response_model=SessionView)
async def get_session_view(request: Request):
    """Current session state."""
    return get_session(request).view()


@app.put("/api/session/code", response_model=SessionView)
async def update_code(input_data: CodeUpdate, request: Request):
    """Editor change notification."""
    session = get_session(request)
    session.set_code(input_data.code)
    return session.view()


@app.put("/api/session/mode", response_model=SessionView)
async def update_mode(input_data: ModeUpdate, request: Request):
    """Switch the presented analysis mode."""
    session = get_session(request)
    session.set_mode(input_data.mode)
    return session.view()


@app.put("/api/session/difficulty", response_model=SessionView)
async def update_difficulty(input_data: DifficultyUpdate, request: Request):
    """Change the difficulty used for the next analysis."""
    session = get_session(request)
    session.set_difficulty(input_data.difficulty)
    return session.view()


@app.post("/api/session/language")
async def change_language(input_data: LanguageChangeRequest, request: Request):
    """
    Switch language. ``confirm`` is the user's answer to the reset prompt;
    a declined switch leaves the session untouched.
    """
    session = get_session(request)

    async def answer(_message: str) -> bool:
        return input_data.confirm

    changed = await session.change_language(input_data.language, answer)
    return {
        "changed": changed,
        "session": session.view().model_dump(mode="json")
    }


@app.post("/api/analyze", response_model=SessionView)
async def analyze(request: Request):
    """
    Run the current mode on the current code.
    Failures are reported in the session's error field, not as HTTP errors.
    """
    session = get_session(request)
    await session.run_analysis()
    return session.view()


@app.delete("/api/session/error", response_model=SessionView)
async def dismiss_error(request: Request):
    """Dismiss the error banner of the current mode."""
    session = get_session(request)
    session.dismiss_error()
    return session.view()


@app.delete("/api/session/storage-warning", response_model=SessionView)
async def dismiss_storage_warning(request: Request):
    """Dismiss the storage advisory."""
    session = get_session(request)
    session.dismiss_storage_warning()
    return session.view()


# ============================================================================
# Run Server
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("codementor.main:app", host="0.0.0.0", port=8000, reload=True)
