"""Result models shared by providers, the fallback generator and the service.

Every provider call returns one of these shapes. A result is either a success
(only the success payload is set) or a failure (``error`` plus a ready-to-use
fallback payload), so callers can always display
``result.summary or result.fallback_summary`` without branching on the error
kind.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ErrorKind(str, Enum):
    NOT_CONFIGURED = 'not_configured'
    INVALID_INPUT = 'invalid_input'
    BACKEND_FAILURE = 'backend_failure'


class AnalysisRequest(BaseModel):
    text: str = ''

    @field_validator('text', mode='before')
    @classmethod
    def _coerce_text(cls, v):
        return '' if v is None else v


class Flashcard(BaseModel):
    id: int = Field(..., ge=0)
    question: str
    answer: str


def _check_dense_ids(cards: List[Flashcard]) -> List[Flashcard]:
    for expected, card in enumerate(cards):
        if card.id != expected:
            raise ValueError(f'flashcard ids must be 0..{len(cards) - 1} in order, got {card.id} at position {expected}')
    return cards


class SummaryResult(BaseModel):
    success: bool
    summary: Optional[str] = None
    error: Optional[str] = None
    fallback_summary: Optional[str] = None
    error_type: Optional[ErrorKind] = None

    @model_validator(mode='after')
    def _one_payload(self):
        if self.success:
            if self.summary is None or self.error is not None or self.fallback_summary is not None:
                raise ValueError('successful summary result must carry only summary')
        elif self.error is None or self.fallback_summary is None or self.summary is not None:
            raise ValueError('failed summary result must carry error and fallback_summary only')
        return self

    @classmethod
    def ok(cls, summary: str) -> 'SummaryResult':
        return cls(success=True, summary=summary)

    @classmethod
    def failed(cls, error: str, fallback_summary: str, error_type: ErrorKind) -> 'SummaryResult':
        return cls(success=False, error=error, fallback_summary=fallback_summary, error_type=error_type)

    @property
    def display_summary(self) -> str:
        return self.summary if self.success else self.fallback_summary


class FlashcardResult(BaseModel):
    success: bool
    flashcards: Optional[List[Flashcard]] = None
    error: Optional[str] = None
    fallback_flashcards: Optional[List[Flashcard]] = None
    error_type: Optional[ErrorKind] = None

    @model_validator(mode='after')
    def _one_payload(self):
        if self.success:
            if self.flashcards is None or self.error is not None or self.fallback_flashcards is not None:
                raise ValueError('successful flashcard result must carry only flashcards')
            _check_dense_ids(self.flashcards)
        else:
            if self.error is None or self.fallback_flashcards is None or self.flashcards is not None:
                raise ValueError('failed flashcard result must carry error and fallback_flashcards only')
            _check_dense_ids(self.fallback_flashcards)
        return self

    @classmethod
    def ok(cls, flashcards: List[Flashcard]) -> 'FlashcardResult':
        return cls(success=True, flashcards=flashcards)

    @classmethod
    def failed(cls, error: str, fallback_flashcards: List[Flashcard], error_type: ErrorKind) -> 'FlashcardResult':
        return cls(success=False, error=error, fallback_flashcards=fallback_flashcards, error_type=error_type)

    @property
    def display_flashcards(self) -> List[Flashcard]:
        return self.flashcards if self.success else self.fallback_flashcards
