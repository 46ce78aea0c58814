"""FastAPI routes for the analysis and speech relay functions."""

from fastapi import APIRouter, Request

from controllers.relay_controller import analyze_image, text_to_voice
from models.relay_models import AnalyzePayload, SpeechPayload

router = APIRouter(prefix="/functions", tags=["relays"])


@router.post("/analyze-image", summary="Describe a base64-encoded image")
async def analyze_image_route(request: Request, payload: AnalyzePayload):
    return await analyze_image(request, payload)


@router.post("/text-to-voice", summary="Narrate description text")
async def text_to_voice_route(request: Request, payload: SpeechPayload):
    return await text_to_voice(request, payload)
