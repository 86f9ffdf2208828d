"""Keyword/cue heuristic used to phrase a flashcard question for a passage."""
from __future__ import annotations

import random
import re
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict

DEFAULT_STOPWORDS = frozenset({'about', 'these', 'those', 'their', 'there', 'would', 'could', 'should'})
DEFAULT_KEYWORD = 'concept'

_FIRST_SENTENCE_RE = re.compile(r'[.!?]+')


class QuestionTemplate(BaseModel):
    """Picks a keyword from a passage and slots it into a cue-selected template.

    ``cues`` is checked in order; the first entry whose substrings appear in
    the passage wins, otherwise ``default`` is used. Templates take a single
    ``{keyword}`` placeholder.
    """

    model_config = ConfigDict(frozen=True)

    cues: Tuple[Tuple[Tuple[str, ...], str], ...] = ()
    default: str
    stopwords: FrozenSet[str] = DEFAULT_STOPWORDS
    min_word_length: int = 4
    case_sensitive: bool = False
    first_sentence_only: bool = False

    def _keyword_scope(self, text: str) -> str:
        if not self.first_sentence_only:
            return text
        for sentence in _FIRST_SENTENCE_RE.split(text):
            if sentence.strip():
                return sentence
        return text

    def candidate_words(self, text: str):
        words = [w for w in self._keyword_scope(text).split() if len(w) > self.min_word_length]
        return [w for w in words if w.lower() not in self.stopwords]

    def pick_keyword(self, text: str, rng: Optional[random.Random] = None) -> str:
        words = self.candidate_words(text or '')
        if not words:
            return DEFAULT_KEYWORD
        return (rng or random).choice(words)

    def select(self, text: str) -> str:
        haystack = text if self.case_sensitive else text.lower()
        for needles, template in self.cues:
            if any(n in haystack for n in needles):
                return template
        return self.default

    def render(self, text: str, rng: Optional[random.Random] = None) -> str:
        text = text or ''
        return self.select(text).format(keyword=self.pick_keyword(text, rng))


CUE_LADDER = (
    (('because', 'since'), 'Why is {keyword} important in this context?'),
    (('how',), 'How does {keyword} function in this scenario?'),
    (('what',), 'What is the significance of {keyword}?'),
    (('when',), 'When does {keyword} occur or apply?'),
    (('where',), 'Where is {keyword} relevant?'),
)

DEFAULT_QUESTION_TEMPLATE = QuestionTemplate(
    cues=CUE_LADDER,
    default='What is the main point about {keyword} in this passage?',
)
