"""Models for field evidence captured at a project site."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Coordinates(BaseModel):
    """Capture position."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class EvidenceMetadata(BaseModel):
    """Capture context attached to a field photo."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="When the evidence was captured")
    coordinates: Coordinates = Field(..., description="Where the evidence was captured")
    weather: str = Field(..., description="Weather descriptor, e.g. PARTLY CLOUDY")
    lighting: str = Field(..., description="Lighting descriptor, e.g. DAYLIGHT")

    @classmethod
    def capture(
        cls,
        lat: float,
        lng: float,
        weather: str = "PARTLY CLOUDY",
        lighting: str = "DAYLIGHT",
    ) -> "EvidenceMetadata":
        """Stamp metadata with the current UTC time."""
        return cls(
            timestamp=datetime.now(timezone.utc),
            coordinates=Coordinates(lat=lat, lng=lng),
            weather=weather,
            lighting=lighting,
        )


class IssueCategory(BaseModel):
    """A reportable class of site issue."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    icon: str


ISSUE_CATEGORIES: tuple[IssueCategory, ...] = (
    IssueCategory(id="incomplete", label="INCOMPLETE WORK", icon="◧"),
    IssueCategory(id="quality", label="QUALITY DEFECT", icon="◨"),
    IssueCategory(id="material", label="MATERIAL VARIANCE", icon="◩"),
    IssueCategory(id="measurement", label="MEASUREMENT GAP", icon="◪"),
    IssueCategory(id="safety", label="SAFETY HAZARD", icon="◆"),
    IssueCategory(id="environmental", label="ENVIRONMENTAL", icon="◇"),
    IssueCategory(id="accessibility", label="ACCESSIBILITY", icon="□"),
    IssueCategory(id="other", label="OTHER ISSUE", icon="○"),
)

_ISSUE_IDS = frozenset(category.id for category in ISSUE_CATEGORIES)


class EvidenceSubmission(BaseModel):
    """A field report: photo, capture metadata and flagged issues."""

    model_config = ConfigDict(frozen=True)

    metadata: EvidenceMetadata
    issues: tuple[str, ...] = Field(..., min_length=1, description="Flagged issue category ids")
    image: bytes = Field(..., min_length=1, description="Raw image bytes")
    mime_type: str = Field(default="image/jpeg")

    @field_validator("issues")
    @classmethod
    def _known_issues(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        unknown = [issue for issue in value if issue not in _ISSUE_IDS]
        if unknown:
            raise ValueError(f"Unknown issue categories: {', '.join(unknown)}")
        # Keep first occurrence order, drop repeats
        return tuple(dict.fromkeys(value))

    @field_validator("mime_type")
    @classmethod
    def _image_mime(cls, value: str) -> str:
        if not value.startswith("image/"):
            raise ValueError(f"Evidence must be an image, got {value}")
        return value
