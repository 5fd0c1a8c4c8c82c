from pydantic import BaseModel, ConfigDict, Field


class Airport(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., pattern=r"^[A-Z]{3}$")
    name: str
    city: str
    state: str
