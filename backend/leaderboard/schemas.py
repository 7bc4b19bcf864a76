from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List

INT64_MAX = 2**63 - 1

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class UserIn(CamelModel):
    user_id: str = Field(strict=True, min_length=1, max_length=255)
    total_watchtime: int = Field(strict=True, ge=0, le=INT64_MAX)

class AnonRankingOut(CamelModel):
    position: int
    total_watchtime: int

class RankingOut(CamelModel):
    position: int
    total_watchtime: int
    closest_neighbors: List[AnonRankingOut] = Field(default_factory=list)

class ErrorOut(CamelModel):
    error: str
    error_message: str
