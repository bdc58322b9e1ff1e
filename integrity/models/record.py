"""Models for the official project record."""

from pydantic import BaseModel, ConfigDict, Field

NOT_MENTIONED = "Not Mentioned"


class Location(BaseModel):
    """Geolocation of a project site."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="Physical address as stated")
    lat: float | None = Field(None, ge=-90, le=90, description="Latitude")
    lng: float | None = Field(None, ge=-180, le=180, description="Longitude")


class ProjectRecord(BaseModel):
    """Immutable snapshot of a claimed civic project."""

    model_config = ConfigDict(frozen=True)

    project_id: str = Field(..., description="Project identifier, e.g. MH-2024-PWD-01847")
    title: str = Field(..., description="Project title")
    budget: str = Field(..., description="Budget with currency symbol")
    contractor: str = Field(..., description="Contractor name")
    status: str = Field(..., description="Claimed status")
    completion_date: str = Field(..., description="Claimed completion date")
    sanctioned_by: str = Field(..., description="Sanctioning authority")
    location: Location | None = Field(None, description="Optional geolocation")

    def display_fields(self) -> list[tuple[str, str]]:
        """Primitive fields as (label, value) pairs in declaration order."""
        return [
            (name.replace("_", " ").upper(), value)
            for name, value in self.model_dump(exclude={"location"}).items()
        ]

    def missing_fields(self) -> list[str]:
        """Names of fields the source document did not mention."""
        missing = [
            name
            for name, value in self.model_dump(exclude={"location"}).items()
            if value == NOT_MENTIONED
        ]
        if self.location is not None and self.location.address == NOT_MENTIONED:
            missing.append("location_address")
        return missing
