"""Offline summary and flashcard heuristics.

Used whenever a provider is unconfigured, rejects its input or fails. Both
functions are pure: no I/O, no randomness, same input gives the same output.
"""
from __future__ import annotations

import re
from typing import List, Optional

from smartnotes.models import Flashcard

SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')

FALLBACK_SUMMARY_SUFFIX = '. (Fallback summary - API not used)'
FALLBACK_FLASHCARD_SUFFIX = ' (Fallback flashcard - API not used)'
FALLBACK_SUMMARY_SENTENCES = 2
FALLBACK_MAX_FLASHCARDS = 3
FALLBACK_MIN_SENTENCE_LENGTH = 5
FALLBACK_QUESTION_PREVIEW = 40


def split_sentences(text: Optional[str]) -> List[str]:
    """Split on runs of sentence terminators, keeping the raw (untrimmed) segments."""
    return SENTENCE_SPLIT_RE.split(text or '')


class FallbackGenerator:

    def summary(self, text: Optional[str]) -> str:
        sentences = [s for s in split_sentences(text) if s.strip()]
        return '. '.join(sentences[:FALLBACK_SUMMARY_SENTENCES]) + FALLBACK_SUMMARY_SUFFIX

    def flashcards(self, text: Optional[str]) -> List[Flashcard]:
        sentences = [s.strip() for s in split_sentences(text) if len(s.strip()) > FALLBACK_MIN_SENTENCE_LENGTH]
        cards = []
        for idx, sentence in enumerate(sentences[:FALLBACK_MAX_FLASHCARDS]):
            cards.append(Flashcard(
                id=idx,
                question=f'What is the main point of: "{sentence[:FALLBACK_QUESTION_PREVIEW]}..."?',
                answer=sentence + FALLBACK_FLASHCARD_SUFFIX,
            ))
        return cards


def fallback_summary(text: Optional[str]) -> str:
    return FallbackGenerator().summary(text)


def fallback_flashcards(text: Optional[str]) -> List[Flashcard]:
    return FallbackGenerator().flashcards(text)
