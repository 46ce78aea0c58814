"""Description: Image description service using OpenAI's Responses API."""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from services.image_preparer import ImagePreparer
from services.relay.prompts import build_system_prompt, build_user_prompt
from services.relay.response_parser import extract_text, extract_usage

DESCRIBE_MODEL = "gpt-4o-mini"


class ImageDescriber:
    """Turn an image data URL into a natural-language description."""

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = DESCRIBE_MODEL,
        question: Optional[str] = None,
        preparer: Optional[ImagePreparer] = None,
    ) -> None:
        """Initialize the describer with a shared OpenAI async client."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model
        self.system_prompt = build_system_prompt()
        self.user_prompt = build_user_prompt(question)
        self.preparer = preparer or ImagePreparer()

    async def describe(self, image_data_url: str) -> Dict[str, Any]:
        """Describe an image and return the text with latency and token usage.

        Raises:
            ValueError: If the image is missing or cannot be decoded.
            RuntimeError: If the model returned no text.
        """
        if not image_data_url:
            raise ValueError("No image provided")

        start_time = time.time()
        # Pillow work is blocking -> run in thread
        prepared = await asyncio.to_thread(self.preparer.prepare, image_data_url)

        logging.info("Describing image with %s", self.model)
        response = await self._create_response(self._build_inputs(prepared))
        description = extract_text(response)
        if not description:
            logging.error("Empty description received from OpenAI: %r", response)
            raise RuntimeError("The captioning model returned no description.")

        result: Dict[str, Any] = {"description": description, "latency": time.time() - start_time}
        result.update(extract_usage(response))
        return result

    def _build_inputs(self, image_url: str) -> List[Dict[str, Any]]:
        return [
            {
                "type": "message",
                "role": "system",
                "content": [{"type": "input_text", "text": self.system_prompt}],
            },
            {
                "type": "message",
                "role": "user",
                "content": [
                    {"type": "input_text", "text": self.user_prompt},
                    {"type": "input_image", "image_url": image_url},
                ],
            },
        ]

    async def _create_response(self, inputs: List[Dict[str, Any]]) -> Any:
        """Send the multimodal request to the OpenAI Responses API."""
        try:
            return await self.client.responses.create(model=self.model, input=inputs)
        except Exception as exc:
            logging.error("Error during OpenAI Responses API call: %s", exc)
            raise
