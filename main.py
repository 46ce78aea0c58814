import inspect
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from models.theme import ThemeContext
from routes.relay_route import router as relay_router
from routes.theme_route import router as theme_router
from routes.view_route import router as view_router
from services.image_preparer import ImagePreparer
from services.presentation import PresentationOptions
from services.relay.image_describer import ImageDescriber
from services.relay.speech_synthesizer import AUDIO_URL_PREFIX, SpeechSynthesizer
from services.relay_client import HttpRelayClient, LocalRelayClient, RelayClient
from services.session_store import ViewStore
from services.speech_playback import SpeechPlayback
from services.upload_flow import UploadFlow
from utils.app_config import AppConfig

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

load_dotenv()  # Load environment variables from .env file if present


async def _close_quietly(client) -> None:
    """Close a client exposing a sync or async close/aclose method."""
    if client is None:
        return
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception as exc:
        # Shutdown errors must not mask the reason the app is stopping.
        logging.warning("Error while closing %r: %s", client, exc)


def create_app(
    config: Optional[AppConfig] = None,
    *,
    openai_client: Optional[AsyncOpenAI] = None,
    relay_client: Optional[RelayClient] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    `openai_client` and `relay_client` override what the lifespan would
    otherwise build from the environment.
    """
    config = config or AppConfig.from_env()
    config.audio_cache_dir.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - the OpenAI async client backing both relays
          - the relay client used by the upload flow (HTTP or in-process)
          - the view store, theme context and presentation options
        and attach them to `app.state`.
        """
        client = openai_client
        owns_client = client is None
        if client is None:
            if not config.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY environment variable is not set")
            try:
                client = AsyncOpenAI(api_key=config.openai_api_key)
            except Exception as exc:
                raise RuntimeError("Failed to initialize OpenAI Async client") from exc

        app.state.config = config
        app.state.openai_client = client
        app.state.image_describer = ImageDescriber(
            client,
            model=config.vision_model,
            question=config.describe_prompt,
            preparer=ImagePreparer(max_side=config.max_image_side),
        )
        app.state.speech_synthesizer = SpeechSynthesizer(
            client,
            config.audio_cache_dir,
            model=config.tts_model,
            default_voice=config.tts_voice,
        )

        relay = relay_client
        owns_relay = relay is None
        if relay is None:
            if config.relay_base_url:
                relay = HttpRelayClient(config.relay_base_url, timeout=config.relay_timeout_seconds)
            else:
                relay = LocalRelayClient(app.state.image_describer, app.state.speech_synthesizer)
        app.state.relay_client = relay

        app.state.view_store = ViewStore(discard_audio=relay.discard_audio)
        app.state.theme = ThemeContext()
        app.state.presentation = PresentationOptions(
            loader=config.presentation_loader,
            typewriter=config.presentation_typewriter,
        )
        app.state.upload_flow = UploadFlow(relay)
        app.state.speech_playback = SpeechPlayback(relay, voice=config.tts_voice)

        try:
            yield
        finally:
            app.state.speech_synthesizer.discard_all()
            if owns_relay:
                await _close_quietly(relay)
            if owns_client:
                await _close_quietly(client)

    app = FastAPI(title="Image Describer", lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")
    app.mount(AUDIO_URL_PREFIX, StaticFiles(directory=config.audio_cache_dir), name="audio")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting which collaborators are wired up.
        """
        state = request.app.state
        relay = getattr(state, "relay_client", None)
        return {
            "ok": True,
            "openai_available": getattr(state, "openai_client", None) is not None,
            "relay": type(relay).__name__ if relay is not None else None,
            "open_views": len(state.view_store) if hasattr(state, "view_store") else 0,
        }

    # Register application routers
    app.include_router(view_router)
    app.include_router(relay_router)
    app.include_router(theme_router)

    return app


app = create_app()
