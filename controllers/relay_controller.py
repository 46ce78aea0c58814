"""Controllers for the analysis and speech relay functions.

Both relays take JSON bodies and answer with either the result field or an
`error` field, using a non-2xx status on failure.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from models.relay_models import AnalyzePayload, SpeechPayload


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def analyze_image(request: Request, payload: AnalyzePayload) -> JSONResponse:
    """Forward an encoded image to the captioning model and return its description."""
    if not payload.image:
        return _error("No image provided", 400)

    describer = getattr(request.app.state, "image_describer", None)
    if describer is None:
        return _error("Image describer not initialized.", 500)

    try:
        result = await describer.describe(payload.image)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logging.error("Error in analyze-image function: %s", exc)
        return _error(str(exc) or "Failed to analyze image.", 500)

    return JSONResponse({"description": result["description"]})


async def text_to_voice(request: Request, payload: SpeechPayload) -> JSONResponse:
    """Forward description text to the speech model and return the audio URL."""
    if not payload.text or not payload.text.strip():
        return _error("Text is required", 400)

    synthesizer = getattr(request.app.state, "speech_synthesizer", None)
    if synthesizer is None:
        return _error("Speech synthesizer not initialized.", 500)

    try:
        audio_url = await synthesizer.synthesize(payload.text, voice=payload.voice)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logging.error("Text-to-voice error: %s", exc)
        return _error(str(exc) or "Failed to generate speech.", 400)

    return JSONResponse({"audioUrl": audio_url})
