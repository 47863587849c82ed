"""
Vision Analysis Integration

Sends the user's photo to an external generative vision endpoint and
normalizes the reply into one of two shapes:

- AttributeGuess: quiz-style attributes, fed to the candidate matcher
- DirectIdentification: a single best species with safety information

Accepted reply variants (all normalized here, nowhere else):
- {"attributes": {"color": "yellow", ...}}
- {"attributes": [{"key": "color", "value": "yellow"}, ...], "isPoisonous": true}
- {"name": ..., "scientificName": ..., "isPoisonous": ..., ...}
Any of these may be wrapped in {"output": ...}.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from snaptheplant.catalog.records import CareTip
from snaptheplant.core.errors import AnalysisError
from snaptheplant.services.prompts import render_attribute_prompt, render_identify_prompt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeGuess:
    """Observed attributes guessed from the photo."""
    attributes: Dict[str, str] = field(default_factory=dict)
    is_poisonous: Optional[bool] = None


@dataclass(frozen=True)
class DirectIdentification:
    """A single species identified directly from the photo."""
    name: str
    scientific_name: str = ""
    is_poisonous: bool = False
    toxicity_warning: Optional[str] = None
    key_information: str = ""
    care_tips: Tuple[CareTip, ...] = ()


AnalysisResult = Union[AttributeGuess, DirectIdentification]


# === Wire schemas ===

class _AttributePair(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    key: str
    value: str


class _CareTipPayload(BaseModel):
    title: str
    description: str


class _IdentificationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1)
    scientific_name: str = Field(default="", alias="scientificName")
    is_poisonous: bool = Field(default=False, alias="isPoisonous")
    toxicity_warning: Optional[str] = Field(default=None, alias="toxicityWarning")
    key_information: str = Field(default="", alias="keyInformation")
    care_tips: Optional[List[_CareTipPayload]] = Field(default=None, alias="careTips")


class _AttributePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    attributes: Union[Dict[str, str], List[_AttributePair]]
    is_poisonous: Optional[bool] = Field(default=None, alias="isPoisonous")


def parse_analysis_response(data: Any) -> AnalysisResult:
    """
    Normalize a raw analyzer reply.

    Raises:
        AnalysisError: If the reply matches none of the accepted shapes
    """
    if isinstance(data, dict) and isinstance(data.get("output"), dict):
        data = data["output"]

    if not isinstance(data, dict) or not data:
        raise AnalysisError("The AI model failed to return a valid identification.")

    try:
        if "name" in data:
            payload = _IdentificationPayload.model_validate(data)
            return DirectIdentification(
                name=payload.name.strip(),
                scientific_name=payload.scientific_name.strip(),
                is_poisonous=payload.is_poisonous,
                toxicity_warning=payload.toxicity_warning if payload.is_poisonous else None,
                key_information=payload.key_information,
                care_tips=tuple(
                    CareTip(title=tip.title, description=tip.description)
                    for tip in payload.care_tips or []
                ),
            )

        if "attributes" in data:
            payload = _AttributePayload.model_validate(data)
            if isinstance(payload.attributes, dict):
                attributes = dict(payload.attributes)
            else:
                attributes = {pair.key: pair.value for pair in payload.attributes}
            return AttributeGuess(attributes=attributes, is_poisonous=payload.is_poisonous)
    except ValidationError as e:
        raise AnalysisError(f"Malformed analysis response: {e.error_count()} validation errors")

    raise AnalysisError("Analysis response has neither a species name nor attributes")


class VisionAnalyzer(ABC):
    """Base class for vision analysis collaborators."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable analyzer name."""
        pass

    @abstractmethod
    async def analyze(self, image_data_uri: str, category: str) -> AnalysisResult:
        """
        Analyze a photo.

        Raises:
            AnalysisError: On transport failure, non-2xx status or bad payload
        """
        pass


class HttpVisionAnalyzer(VisionAnalyzer):
    """
    Vision analyzer backed by a JSON prompt endpoint.

    The request carries the rendered prompt, the category and the photo as
    a data URI. `mode` selects which prompt is sent: "identify" asks for a
    direct identification, "attributes" for quiz-style attributes.
    """

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        mode: str = "identify",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if mode not in ("identify", "attributes"):
            raise ValueError(f"Unknown analysis mode: {mode}")
        self.api_url = api_url
        self.api_key = api_key
        self.mode = mode
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return f"HTTP vision analyzer ({self.mode})"

    def _build_payload(self, image_data_uri: str, category: str) -> Dict[str, Any]:
        if self.mode == "attributes":
            prompt = render_attribute_prompt(category)
        else:
            prompt = render_identify_prompt(category)
        return {
            "prompt": prompt,
            "category": category,
            "photoDataUri": image_data_uri,
            "responseFormat": "json",
        }

    async def analyze(self, image_data_uri: str, category: str) -> AnalysisResult:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    json=self._build_payload(image_data_uri, category),
                    headers=headers,
                )
        except httpx.TimeoutException:
            raise AnalysisError("Vision analysis timed out")
        except httpx.HTTPError as e:
            raise AnalysisError(f"Vision analysis request failed: {e}")

        processing_time = (time.time() - start_time) * 1000
        logger.debug(f"Vision analysis answered {response.status_code} in {processing_time:.0f}ms")

        if response.status_code // 100 != 2:
            raise AnalysisError(f"Vision analysis returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise AnalysisError("Vision analysis returned invalid JSON")

        return parse_analysis_response(data)


class UnconfiguredAnalyzer(VisionAnalyzer):
    """Stand-in used when no vision endpoint is configured; always fails."""

    @property
    def name(self) -> str:
        return "unconfigured"

    async def analyze(self, image_data_uri: str, category: str) -> AnalysisResult:
        raise AnalysisError("Vision analysis endpoint is not configured")
