"""Image generation tool — text-to-image via the Hugging Face inference API."""
import base64
import functools
import logging

import httpx

from ...config import Settings
from ...contracts import Param
from ...protocol import ImageContent
from ..errors import ToolFailure
from ..registry import ToolDescriptor

logger = logging.getLogger(__name__)

DESCRIPTION = "Generates an image from a text prompt."

DEFAULT_MIME_TYPE = "image/png"


def _new_client(settings: Settings) -> httpx.AsyncClient:
    # Cold models can take a while to load on the provider side
    return httpx.AsyncClient(timeout=max(settings.http_timeout, 120))


async def generate_image(prompt: str, *, settings: Settings) -> ImageContent:
    if not settings.hf_token:
        raise ToolFailure("image generation failed: HF_TOKEN environment variable is not set")

    url = f"{settings.hf_inference_url.rstrip('/')}/{settings.hf_image_model}"
    try:
        async with _new_client(settings) as client:
            resp = await client.post(
                url,
                headers={
                    "Authorization": f"Bearer {settings.hf_token}",
                    "Accept": "image/png",
                },
                json={"inputs": prompt},
            )
    except httpx.HTTPError as e:
        logger.error(f"Hugging Face request error: {e}")
        raise ToolFailure(f"image generation failed: {e}") from e

    if not resp.is_success:
        raise ToolFailure(f"image generation failed: upstream status code {resp.status_code}")

    mime_type = resp.headers.get("content-type", "").split(";")[0].strip()
    if not mime_type.startswith("image/"):
        mime_type = DEFAULT_MIME_TYPE
    if not resp.content:
        raise ToolFailure("image generation failed: empty response from provider")

    logger.info(f"Generated image: {len(resp.content)} bytes ({mime_type})")
    return ImageContent(data=base64.b64encode(resp.content).decode("ascii"), mime_type=mime_type)


def descriptor(settings: Settings) -> ToolDescriptor:
    return ToolDescriptor(
        name="generate-image",
        description=DESCRIPTION,
        params=(
            Param("prompt", description="text prompt describing the image"),
        ),
        handler=functools.partial(generate_image, settings=settings),
    )
