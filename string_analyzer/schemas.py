from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

from string_analyzer.utils import compute_sha256


class StringCreate(BaseModel):
    # Typed loosely so a missing value (400) and a non-string value (422)
    # can be told apart by the caller.
    value: Optional[Any] = Field(None, description="String to analyze")


class StringProperties(BaseModel):
    length: int = Field(..., ge=0)
    is_palindrome: bool
    unique_characters: int = Field(..., ge=0)
    word_count: int = Field(..., ge=0)
    sha256_hash: str = Field(..., min_length=64, max_length=64)
    character_frequency_map: Dict[str, int]

    model_config = ConfigDict(frozen=True)


class StringRecord(BaseModel):
    """A persisted analyzed string, keyed by the SHA-256 of its value"""
    id: str
    value: str
    properties: StringProperties
    created_at: datetime

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @model_validator(mode="after")
    def check_identity(self):
        digest = compute_sha256(self.value)
        if self.id != digest or self.properties.sha256_hash != digest:
            raise ValueError("id does not match the SHA-256 of value")
        return self


FilterValue = Union[bool, int, str]


class StringListResponse(BaseModel):
    data: List[StringRecord]
    count: int
    filters_applied: Dict[str, FilterValue] = {}


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, FilterValue]


class NaturalLanguageResponse(BaseModel):
    data: List[StringRecord]
    count: int
    interpreted_query: InterpretedQuery
