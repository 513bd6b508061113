"""Async wrapper around the AITunnel image endpoints."""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Mapping, Sequence

import httpx
from openai import AsyncOpenAI, OpenAIError
from PIL import Image, UnidentifiedImageError

from tryon.config.settings import TryOnSettings


class AITunnelRequestError(RuntimeError):
    """Raised when AITunnel responds with an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


logger = logging.getLogger(__name__)


class AITunnelClient:
    """Provides helper methods for the OpenAI-compatible images API."""

    def __init__(self, settings: TryOnSettings) -> None:
        base_url = settings.aitunnel_base_url.rstrip("/")
        self._settings = settings
        self._client = httpx.AsyncClient(
            timeout=settings.request_timeout,
            follow_redirects=True,
        )
        self._openai = AsyncOpenAI(
            api_key=settings.aitunnel_api_key,
            base_url=base_url,
            timeout=settings.request_timeout,
            max_retries=0,
        )

    async def close(self) -> None:
        """Close the underlying HTTP clients."""

        await self._client.aclose()
        await self._openai.close()

    async def edit_images(
        self,
        prompt: str,
        images: Sequence[tuple[str, bytes]],
        *,
        options: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send named image payloads to ``images.edit`` and normalise the reply."""

        image_files = [self._image_as_png(data, name) for name, data in images]
        try:
            kwargs: dict[str, Any] = {
                "model": self._settings.image_model,
                "image": image_files,
                "prompt": prompt,
            }
            if options:
                kwargs.update(options)
            try:
                result = await self._openai.images.edit(**kwargs)
            except OpenAIError as exc:
                status_code = getattr(exc, "status_code", None)
                raise AITunnelRequestError(
                    f"AITunnel rejected the image request: {exc}",
                    status_code=status_code,
                ) from exc
            return self._normalise_image_response(result)
        finally:
            for file in image_files:
                file.close()

    async def download(self, url: str) -> bytes:
        """Fetch an image returned by URL instead of inline base64."""

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:  # pragma: no cover - network safeguard
            raise AITunnelRequestError("Timed out downloading the generated image.") from exc
        except httpx.HTTPStatusError as exc:
            raise AITunnelRequestError(
                f"Image download failed with {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise AITunnelRequestError(f"Image download failed: {exc}") from exc
        return response.content

    async def ping(self) -> bool:
        """Return ``True`` when the service responds to a model listing call."""

        models = await self._openai.models.list()
        return bool(models.data)

    @staticmethod
    def _image_as_png(data: bytes, name_prefix: str) -> BytesIO:
        try:
            with Image.open(BytesIO(data)) as img:
                img = img.convert("RGBA")
                buffer = BytesIO()
                img.save(buffer, format="PNG")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ValueError(f"Payload {name_prefix} is not a supported image.") from exc
        buffer.seek(0)
        buffer.name = f"{name_prefix}.png"
        return buffer

    @staticmethod
    def _normalise_image_response(result: Any) -> dict[str, Any]:
        data_attr = getattr(result, "data", None)
        payload: dict[str, Any] = {"image_base64": None, "image_url": None}
        if isinstance(data_attr, list) and data_attr:
            primary = data_attr[0]
            image_base64 = getattr(primary, "b64_json", None)
            image_url = getattr(primary, "url", None)
            if image_base64 is None and isinstance(primary, Mapping):
                image_base64 = primary.get("b64_json")
                image_url = image_url or primary.get("url")
            payload["image_base64"] = image_base64
            payload["image_url"] = image_url
        else:
            logger.warning("AITunnel image response has no data entries: %r", result)
        return payload
