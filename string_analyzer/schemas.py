from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, List

from string_analyzer.models import AnalysisRecord


class StringCreate(BaseModel):
    # Typed loosely so non-string values reach the analyzer and get a 422, not a 400
    value: Any = Field(None, description="String to analyze")


class FilterCriteria(BaseModel):
    """Independently optional predicates, combined with logical AND"""
    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = None

    class Config:
        extra = "ignore"

    def applied(self) -> Dict[str, Any]:
        """Only the predicates that were actually supplied"""
        return self.model_dump(exclude_none=True)


class StringListResponse(BaseModel):
    data: List[AnalysisRecord]
    count: int
    filters_applied: Optional[Dict] = None


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResponse(BaseModel):
    data: List[AnalysisRecord]
    count: int
    interpreted_query: InterpretedQuery
