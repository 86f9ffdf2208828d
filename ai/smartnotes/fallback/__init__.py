"""
Deterministic, credential-free fallback for summaries and flashcards.
"""
from .generator import (
	FallbackGenerator,
	fallback_summary,
	fallback_flashcards,
	split_sentences,
	FALLBACK_SUMMARY_SUFFIX,
	FALLBACK_FLASHCARD_SUFFIX,
)

__all__ = [
	'FallbackGenerator',
	'fallback_summary',
	'fallback_flashcards',
	'split_sentences',
	'FALLBACK_SUMMARY_SUFFIX',
	'FALLBACK_FLASHCARD_SUFFIX',
]
