"""
Pydantic schemas for API request/response validation.

These schemas define the contract between the API and the web client,
ensuring type safety and automatic documentation.
"""

from pydantic import BaseModel, Field
from typing import Optional


# === Species Schemas ===

class CareTipSchema(BaseModel):
    """Single care instruction."""
    title: str = Field(..., description="Tip type, e.g. 'Watering', 'Sunlight'")
    description: str = Field(..., description="Tip details")


class SpeciesSchema(BaseModel):
    """
    Species record as shown to the user.

    Transient records synthesized from an AI identification have id -1
    and `is_new` set; their image is the user's own photo.
    """
    id: int
    category: str
    name: str
    scientific_name: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)
    is_poisonous: bool = False
    toxicity_warning: Optional[str] = None
    care_tips: list[CareTipSchema] = Field(default_factory=list)
    image: str = ""
    further_reading: str = ""
    key_information: str = ""
    is_new: bool = False


class ScoredCandidateSchema(BaseModel):
    """Species with its match confidence for one query."""
    species: SpeciesSchema
    score: int = Field(..., ge=0, description="Number of agreeing attributes")
    confidence: int = Field(..., ge=0, le=100, description="Agreement percentage (0-100)")
    confidence_level: str = Field(..., description="exact, high, partial, low or none")


class SpeciesListResponse(BaseModel):
    """List of species with a count."""
    results: list[SpeciesSchema]
    count: int


class QuizQuestion(BaseModel):
    """One disambiguating question of a category quiz."""
    key: str
    options: list[str]


class QuizResponse(BaseModel):
    """Quiz for a category."""
    category: str
    questions: list[QuizQuestion]


class MatchRequest(BaseModel):
    """
    Request to rank a category's species by observed attributes.

    Attributes:
        category: Category name (e.g. "Insect")
        attributes: Quiz answers, attribute key -> chosen option
    """
    category: str = Field(..., description="Category to match within")
    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Observed attributes; empty lists the whole category"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "category": "Insect",
                "attributes": {"color": "yellow", "wings": "yes", "legs": "6"}
            }
        }


class MatchResponse(BaseModel):
    """Ranked candidates; an empty list means nothing matched."""
    category: str
    candidates: list[ScoredCandidateSchema]
    count: int


# === Session Schemas ===

class AnalyzeRequest(BaseModel):
    """
    Request to analyze a captured or uploaded photo.

    Attributes:
        category: Selected category
        image: Photo as a data URI (data:image/jpeg;base64,...)
    """
    category: Optional[str] = Field(default=None, description="Selected category")
    image: Optional[str] = Field(default=None, description="Photo as a base64 data URI")


class AnswersRequest(BaseModel):
    """Quiz answers for the session's disambiguation step."""
    category: str
    answers: dict[str, str] = Field(default_factory=dict)


class SelectRequest(BaseModel):
    """Pick one of the offered candidates."""
    species_id: int


class SaveResultRequest(BaseModel):
    """Save the confirmed result to the user's collection."""
    notes: str = Field(default="", max_length=2000)


class SessionErrorSchema(BaseModel):
    error: str
    message: str


class SessionResponse(BaseModel):
    """Current view of an identification session."""
    session_id: str
    state: str = Field(..., description="idle, analyzing, matches_ready or result_confirmed")
    generation: int
    category: Optional[str] = None
    has_image: bool = False
    candidates: list[ScoredCandidateSchema] = Field(default_factory=list)
    result: Optional[SpeciesSchema] = None
    error: Optional[SessionErrorSchema] = None
    warnings: list[str] = Field(default_factory=list)


class RateLimitResponse(BaseModel):
    """Today's identification budget."""
    count: int
    date: str
    limit: int
    remaining: int
    unlimited: bool = False


# === Collection Schemas ===

class CollectionItemSchema(BaseModel):
    """A saved identification."""
    instance_id: str
    species_id: int
    category: str
    name: str
    scientific_name: str = ""
    saved_image: str
    is_poisonous: bool = False
    toxicity_warning: Optional[str] = None
    key_information: str = ""
    further_reading: str = ""
    care_tips: list[CareTipSchema] = Field(default_factory=list)
    notes: str = ""
    saved_at: str = ""


class SaveItemRequest(BaseModel):
    """Save a catalog species with the user's own photo."""
    species_id: int
    saved_image: str = Field(..., min_length=1, description="The user's photo (data URI or URL)")


class NotesRequest(BaseModel):
    notes: str = Field(default="", max_length=2000)


# === Enrichment Schemas ===

class EnrichRequest(BaseModel):
    """Species to illustrate or tell a story about."""
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    species_id: Optional[int] = Field(default=None, description="Catalog id, enables image caching")


class ImageResponse(BaseModel):
    image_data_uri: str
    is_placeholder: bool = False


class StoryResponse(BaseModel):
    story: str


# === Error Schemas ===

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
