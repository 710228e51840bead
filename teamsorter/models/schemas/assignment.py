from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AssignTeamRequest(BaseModel):
    """Schema for POST /api/assign-team (API Input)."""

    # Deployments submit either a typed name or a client-side fingerprint
    identity_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("identity_key", "name", "fingerprint"),
        description="Visitor name or device fingerprint.",
    )


class AssignTeamResponse(BaseModel):
    success: bool = True
    name: str = Field(..., description="The normalized identity key.")
    team: str
    color: str
    emoji: Optional[str] = None
    is_new_assignment: bool = Field(..., serialization_alias="isNewAssignment")

    model_config = ConfigDict(populate_by_name=True)


class TeamModel(BaseModel):
    name: str
    color: str
    emoji: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TeamsResponse(BaseModel):
    success: bool = True
    teams: List[TeamModel]


class StatsResponse(BaseModel):
    success: bool = True
    stats: Dict[str, int] = Field(..., description="Assignment count per configured team.")


class QrCodeResponse(BaseModel):
    success: bool = True
    qr_code: str = Field(..., serialization_alias="qrCode", description="PNG image as a data URI.")
    url: str

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
