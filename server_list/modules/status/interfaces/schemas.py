"""Server list API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ServerResponse(BaseModel):
    """One element of the server list."""

    model_config = ConfigDict(from_attributes=True)

    players_online: int = Field(..., description="Players online")
    version_name: str = Field(..., description="Version name")
    description: str = Field(..., description="Description, may contain line breaks")
    icon: str = Field(..., description="Icon item name")
    is_online: bool = Field(..., description="Whether the server answered the last ping")
    ip: str = Field(..., description="Server address")
    port: int = Field(..., description="Server port")
    name: str = Field(..., description="Server name")
    players_max: int = Field(..., description="Max players")
