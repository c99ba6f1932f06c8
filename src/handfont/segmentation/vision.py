"""Vision-model cell location.

The sheet is sent as a PNG data URL to an OpenAI-compatible chat completions
endpoint (OpenRouter by default). The model answers with a JSON document
holding one bounding box and quality score per character, which is validated
with pydantic. Any transport, HTTP or format problem surfaces as
CellLocatorError so callers can fall back to the grid.
"""

import base64
import json
import re
from io import BytesIO
from typing import Any

import requests
from pydantic import BaseModel, Field, ValidationError

from handfont.config import DEFAULT_API_URL, DEFAULT_VISION_MODEL
from handfont.domain import PixelBuffer
from handfont.exceptions import CellLocatorError
from handfont.io.reader import buffer_to_image
from handfont.segmentation.base import CellBox, LocatedCell, LocatorResult
from handfont.utils import get_logger

DEFAULT_TIMEOUT_SECONDS = 15.0
MAX_TOKENS = 4096
TEMPERATURE = 0.1

_CODE_FENCE = re.compile(r"```(?:json)?\n?")

SYSTEM_PROMPT = """You are an image analysis assistant specialized in handwriting template processing.

You will receive an image of a handwriting template with a grid layout. The template has:
- A grid of cells arranged in rows and columns
- Each cell contains one handwritten character
- The grid may have slight rotation, skew, or uneven lighting

Your task is to:
1. Identify the grid structure (rows, columns)
2. Locate each character cell's bounding box coordinates (x, y, width, height in pixels)
3. Identify which character corresponds to each cell (left-to-right, top-to-bottom)
4. Assess the quality/clarity of each handwritten character (0-100 score)
5. Note any issues (blurry characters, missing characters, noise, etc.)

Respond ONLY with valid JSON in this exact format:
{
  "characters": [
    {"letter": "A", "bbox": {"x": 10, "y": 10, "width": 100, "height": 100}, "quality_score": 85},
    {"letter": "B", "bbox": {"x": 120, "y": 10, "width": 100, "height": 100}, "quality_score": 72}
  ],
  "issues": ["Character G appears blurry", "Uneven lighting detected on left side"]
}

Important:
- bbox coordinates should be in PIXELS relative to the image
- quality_score: 0-100 (100 = perfect clarity)
- If a character is missing or unreadable, still include it with quality_score < 30"""

USER_PROMPT = (
    "Analyze this handwriting template image. The cells hold these characters, "
    "in order: {characters}. Identify each character cell, provide bounding box "
    "coordinates, and assess quality. Return JSON only."
)

logger = get_logger("handfont.segmentation.vision")


class _BoxPayload(BaseModel):
    x: float
    y: float
    width: float
    height: float


class _CharacterPayload(BaseModel):
    letter: str = Field(min_length=1)
    bbox: _BoxPayload
    quality_score: float = Field(default=0.0)


class _ResponsePayload(BaseModel):
    characters: list[_CharacterPayload] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)


def encode_png_data_url(image: PixelBuffer) -> str:
    """Encode a pixel buffer as a ``data:image/png;base64,...`` URL."""
    output = BytesIO()
    buffer_to_image(image).save(output, format="PNG")
    encoded = base64.b64encode(output.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def strip_code_fences(content: str) -> str:
    """Remove markdown code fences models like to wrap JSON in."""
    return _CODE_FENCE.sub("", content).strip()


def parse_locator_response(content: str) -> LocatorResult:
    """Parse the model's JSON answer into a LocatorResult.

    Raises:
        CellLocatorError: If the content is not the expected JSON document
    """
    try:
        payload = _ResponsePayload.model_validate(json.loads(strip_code_fences(content)))
    except (json.JSONDecodeError, ValidationError) as e:
        raise CellLocatorError(f"invalid response format: {e}") from e

    cells = tuple(
        LocatedCell(
            letter=item.letter,
            bbox=CellBox(item.bbox.x, item.bbox.y, item.bbox.width, item.bbox.height),
            quality_score=max(0, min(100, round(item.quality_score))),
        )
        for item in payload.characters
    )
    return LocatorResult(cells=cells, issues=tuple(payload.issues), method="ai")


class VisionCellLocator:
    """Locates cells by asking a vision language model.

    Example:
        locator = VisionCellLocator(api_key=os.environ["OPENROUTER_API_KEY"])
        result = locator.locate(sheet, list("ABC"))
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        model: str = DEFAULT_VISION_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def build_payload(self, image: PixelBuffer, characters: list[str]) -> dict[str, Any]:
        """Chat completions request body for a sheet."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "text",
                            "text": USER_PROMPT.format(characters=" ".join(characters)),
                        },
                        {
                            "type": "image_url",
                            "image_url": {"url": encode_png_data_url(image)},
                        },
                    ],
                },
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }

    def locate(self, image: PixelBuffer, characters: list[str]) -> LocatorResult:
        """Locate ``characters`` on the sheet.

        Raises:
            CellLocatorError: On missing credentials, transport or HTTP
                errors, or an unusable response
        """
        if not self.api_key:
            raise CellLocatorError("no API key configured")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        logger.info("Requesting cell boxes", model=self.model, characters=len(characters))

        try:
            response = self.session.post(
                self.api_url,
                headers=headers,
                json=self.build_payload(image, characters),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            raise CellLocatorError(f"request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "Vision API error",
                status=response.status_code,
                body=response.text[:500],
            )
            raise CellLocatorError(f"API returned HTTP {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CellLocatorError(f"unexpected response envelope: {e}") from e

        if not content:
            raise CellLocatorError("empty response")

        result = parse_locator_response(content)
        logger.info(
            "Cell boxes received",
            located=len(result.cells),
            issues=len(result.issues),
        )
        return result
