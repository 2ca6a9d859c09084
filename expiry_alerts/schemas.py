from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ServiceAccountKey(BaseModel):
    type: Literal["service_account"]
    project_id: str = Field(min_length=1)
    private_key: str = Field(min_length=1)
    client_email: str = Field(min_length=3)
    private_key_id: str | None = None
    client_id: str | None = None
    token_uri: str = "https://oauth2.googleapis.com/token"

    model_config = ConfigDict(extra="allow")
