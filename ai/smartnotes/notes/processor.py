"""Caller-side orchestration: summary first, then flashcards, merged for display."""
from __future__ import annotations

import time
from typing import List, Optional

from pydantic import BaseModel, Field

from smartnotes.models import Flashcard
from smartnotes.providers.base import Provider, ProgressCallback
from smartnotes.utils import get_logger

LOG = get_logger()

UNEXPECTED_ERROR = 'An unexpected error occurred. Please try again.'
ERROR_SUMMARY = 'Could not generate summary. Please try again.'
ERROR_FLASHCARD = Flashcard(id=0, question='Error generating flashcards', answer='Please try again later.')


class NoteProcessorError(Exception):
    pass


class EmptyNoteError(NoteProcessorError):
    pass


class NoteResult(BaseModel):
    provider: str
    summary: str
    flashcards: List[Flashcard] = Field(default_factory=list)
    api_error: Optional[str] = None
    used_fallback: bool = False
    metadata: dict = Field(default_factory=dict)


class NoteProcessor:
    def __init__(self, provider: Provider):
        self.provider = provider

    def process(self, note: Optional[str], progress: Optional[ProgressCallback] = None, request_id: Optional[str] = None) -> NoteResult:
        if not note or not note.strip():
            raise EmptyNoteError('note is empty')

        start = time.time()
        try:
            summary_res = self.provider.generate_summary(note, progress=progress, request_id=request_id)
            cards_res = self.provider.generate_flashcards(note, progress=progress, request_id=request_id)
        except Exception:
            LOG.exception('note_processing_failed', exc_info=True)
            return NoteResult(
                provider=self.provider.name,
                summary=ERROR_SUMMARY,
                flashcards=[ERROR_FLASHCARD.model_copy()],
                api_error=UNEXPECTED_ERROR,
                used_fallback=True,
            )

        # the first error wins, as the summary is produced first
        api_error = summary_res.error or cards_res.error
        duration_ms = int((time.time() - start) * 1000)
        LOG.info('note_processed', extra={'request_id': request_id, 'provider': self.provider.name, 'duration_ms': duration_ms, 'api_error': api_error})
        return NoteResult(
            provider=self.provider.name,
            summary=summary_res.display_summary,
            flashcards=cards_res.display_flashcards,
            api_error=api_error,
            used_fallback=not (summary_res.success and cards_res.success),
            metadata={
                'processing_time_ms': duration_ms,
                'summary_error_type': summary_res.error_type.value if summary_res.error_type else None,
                'flashcards_error_type': cards_res.error_type.value if cards_res.error_type else None,
            },
        )
