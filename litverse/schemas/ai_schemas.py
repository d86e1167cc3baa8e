from pydantic import BaseModel, Field
from typing import Literal


class ReadingJourneyRequest(BaseModel):
    goal: str = Field(..., min_length=1, max_length=200)


class CompanionContentRequest(BaseModel):
    content_type: Literal["discussion", "activities", "soundtrack", "recipes"] = "discussion"
