"""
Visual descriptor classification with a vision-capable chat model.
"""

import base64
import json
import re
from typing import List, Protocol

from fontcatalog.core.exceptions import ExternalCallError
from fontcatalog.core.models import ChatCompletionRequest, ChatMessage, ImageURLChunk, TextChunk
from fontcatalog.observability.logger import get_logger

from .mistral_client import MistralClient

logger = get_logger(__name__)

CLASSIFY_PROMPT = """I'm going to share an image of a font with you. Analyze the style and essence of the typeface.
Return between 15 and 25 unique descriptors that best capture it, ranked from most to least characteristic.
Descriptors can cover the style, typographic characteristics, likely usage and anything else that defines the font in the image.
Each descriptor is lower-case and uses only letters, hyphens or spaces.
Respond with a strict JSON object of this shape and nothing else:

{"descriptors": ["descriptor1", "descriptor2", "descriptor3"]}

No prose, no commentary, just the JSON object.
"""

CODE_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)


class Renderer(Protocol):
    def render(self, font_source: str) -> bytes: ...


def strip_code_fence(content: str) -> str:
    """
    Trim whitespace and remove a wrapping markdown code fence.

    Examples:
        >>> strip_code_fence('```json\\n{"descriptors": []}\\n```')
        '{"descriptors": []}'
    """
    content = content.strip()
    match = CODE_FENCE.match(content)
    if match:
        return match.group(1).strip()
    return content


def parse_descriptors(content: str) -> List[str]:
    """
    Parse the model's JSON answer into a descriptor list.

    Args:
        content: Raw message content

    Returns:
        Descriptors as received, or [] when the field is absent

    Raises:
        ExternalCallError: If the content is not JSON or the field is not a list
    """
    try:
        parsed = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise ExternalCallError("classify", f"Descriptor response is not JSON: {e}") from e

    if not isinstance(parsed, dict) or not parsed.get("descriptors"):
        return []

    descriptors = parsed["descriptors"]
    if not isinstance(descriptors, list):
        raise ExternalCallError("classify", "'descriptors' field is not a list")

    return [item.strip() for item in descriptors if isinstance(item, str) and item.strip()]


class DescriptorClassifier:
    """
    Renders a font sample and asks a vision model to describe it.
    """

    def __init__(
        self,
        client: MistralClient,
        renderer: Renderer,
        model: str = "pixtral-large-latest",
        enabled: bool = True,
    ):
        """
        Initialize classifier.

        Args:
            client: Provider client
            renderer: Produces PNG bytes for a font file path or URL
            model: Vision-capable chat model
            enabled: When False, classify() returns [] without any call
        """
        self.client = client
        self.renderer = renderer
        self.model = model
        self.enabled = enabled

    def classify(self, sample: str) -> List[str]:
        """
        Describe a font visually.

        Args:
            sample: Path or URL of the font file to render

        Returns:
            Descriptors ranked most to least characteristic (order as received)

        Raises:
            ExternalCallError: If rendering, the model call or parsing fails
        """
        if not self.enabled:
            return []

        image = self.renderer.render(sample)
        encoded = base64.b64encode(image).decode("ascii")

        request = ChatCompletionRequest(
            model=self.model,
            messages=[
                ChatMessage(
                    role="user",
                    content=[
                        TextChunk(text=CLASSIFY_PROMPT),
                        ImageURLChunk(image_url=f"data:image/png;base64,{encoded}"),
                    ],
                )
            ],
        )
        response = self.client.chat(request, operation="classify")

        content = response.first_text()
        if not content:
            logger.warning("Vision model returned no content", extra={"sample": sample})
            return []

        descriptors = parse_descriptors(content)
        logger.debug("Classified font sample", extra={"sample": sample, "descriptor_count": len(descriptors)})
        return descriptors
