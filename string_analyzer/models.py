from pydantic import BaseModel
from typing import Dict


class StringProperties(BaseModel):
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]

    class Config:
        frozen = True

    # Every other property is derived from the string the hash was taken of
    def __hash__(self) -> int:
        return hash(self.sha256_hash)


class AnalysisRecord(BaseModel):
    id: str  # SHA-256 hash of value
    value: str
    properties: StringProperties
    created_at: str

    class Config:
        frozen = True

    def __hash__(self) -> int:
        return hash((self.id, self.created_at))
