"""Generation client turning a subject and a garment photo into a try-on image."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Mapping

from openai import OpenAIError

from tryon.api.aitunnel_client import AITunnelClient, AITunnelRequestError
from tryon.config.settings import TryOnSettings
from tryon.imggen.prompt_builder import TryOnPromptBuilder

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "خطایی در هنگام ایجاد تصویر رخ داد. لطفاً دوباره تلاش کنید."

SUBJECT_NAME = "subject"
GARMENT_NAME = "garment"


class GenerationError(RuntimeError):
    """Raised for any failure of the external generation call."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(message)


class GenerationClient:
    """Single-attempt wrapper around the AITunnel image edit endpoint.

    Every failure is surfaced as :class:`GenerationError`; the caller never
    needs to distinguish network errors from service-side rejections.
    """

    def __init__(
        self,
        client: AITunnelClient,
        settings: TryOnSettings,
        prompt_builder: TryOnPromptBuilder | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._prompt_builder = prompt_builder or TryOnPromptBuilder()

    async def generate(self, subject_image: bytes, garment_image: bytes) -> bytes:
        """Return the composited image bytes or raise :class:`GenerationError`."""

        prompt = self._prompt_builder.build(
            subject_filename=f"{SUBJECT_NAME}.png",
            garment_filename=f"{GARMENT_NAME}.png",
        )
        options = {
            "size": self._settings.image_size,
            "quality": self._settings.image_quality,
        }
        try:
            payload = await self._client.edit_images(
                prompt,
                [(SUBJECT_NAME, subject_image), (GARMENT_NAME, garment_image)],
                options=options,
            )
            return await self._extract_image(payload)
        except GenerationError:
            raise
        except (AITunnelRequestError, OpenAIError, ValueError) as exc:
            logger.error("Try-on generation failed: %s", exc)
            raise GenerationError() from exc

    async def _extract_image(self, payload: Mapping[str, Any]) -> bytes:
        encoded = payload.get("image_base64")
        if encoded:
            try:
                return base64.b64decode(encoded, validate=True)
            except (ValueError, binascii.Error) as exc:
                raise GenerationError() from exc

        image_url = payload.get("image_url")
        if image_url and image_url.startswith("data:") and "," in image_url:
            _, data = image_url.split(",", 1)
            try:
                return base64.b64decode(data)
            except (ValueError, binascii.Error) as exc:
                raise GenerationError() from exc
        if image_url:
            return await self._client.download(image_url)

        logger.warning("AITunnel returned neither image data nor a URL.")
        raise GenerationError()
