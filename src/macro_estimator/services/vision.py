"""Nutrition label and recipe photo parsing."""

import base64
import binascii
import logging
from dataclasses import dataclass

from macro_estimator.domain.vision import InlineImage, ParsedLabelRecord
from macro_estimator.errors import ImageEncodingError, MissingCredentialsError
from macro_estimator.services.model_output import LanguageModelClient, decode_model_json

_logger = logging.getLogger(__name__)

LABEL_PROMPT = """\
This photo shows either a nutrition facts label or a recipe.
If it is a nutrition label, read the values for one serving exactly as printed.
If it is a recipe, estimate the macronutrients of one serving from the ingredients; \
use the number of servings stated in the recipe, or assume {servings} servings when \
none is stated.
Use null for any text field that is not visible and 0 for any macro that is not visible.
Return ONLY valid JSON. Do not use Markdown formatting.
Schema:
{{ "description": "string or null", "serving_size": "string or null", \
"serving_unit": "string or null", "calories": number or null, \
"protein_g": number, "fat_g": number, "carbs_g": number }}
"""


@dataclass
class LabelVisionService:
    """Reads macros from a label or recipe photo in a single model call."""

    client: LanguageModelClient | None
    default_servings: int = 4

    async def parse_visual_record(self, image_bytes: bytes) -> ParsedLabelRecord:
        """Return the macros the model read from the image."""
        if self.client is None:
            raise MissingCredentialsError("Language model")
        image = to_inline_image(image_bytes)
        prompt = LABEL_PROMPT.format(servings=self.default_servings)
        raw = await self.client.generate(prompt, image=image)
        record = decode_model_json(raw, ParsedLabelRecord)
        _logger.info("Parsed visual record: %s", record.description or "unnamed")
        return record


def to_inline_image(image_bytes: bytes) -> InlineImage:
    """Encode image bytes as base64 with a sniffed MIME type."""
    if not isinstance(image_bytes, bytes | bytearray) or not image_bytes:
        raise ImageEncodingError("Image is empty or not binary data")
    try:
        encoded = base64.b64encode(bytes(image_bytes)).decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ImageEncodingError("Image could not be base64 encoded") from exc
    return InlineImage(mime_type=_detect_mime_type(bytes(image_bytes)), data=encoded)


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[4:8] == b"ftyp" and image_bytes[8:12] in {b"heic", b"heix", b"mif1"}:
        return "image/heic"
    return "image/jpeg"
