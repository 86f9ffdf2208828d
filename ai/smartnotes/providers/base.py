"""Generic text-analysis provider with mandatory fallback.

One ``Provider`` class serves every backend variant; the differences between
backends (credential key, endpoints, thresholds, caps, question phrasing) live
in a ``ProviderConfig`` record. Provider calls never raise: missing
credentials, too-short input and backend failures all come back as failure
results carrying a fallback payload.
"""
from __future__ import annotations

import random
import re
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from smartnotes.fallback import FallbackGenerator
from smartnotes.models import ErrorKind, Flashcard, FlashcardResult, SummaryResult
from smartnotes.providers.credentials import CredentialStore
from smartnotes.providers.questions import QuestionTemplate, DEFAULT_QUESTION_TEMPLATE
from smartnotes.providers.transport import BackendError, BackendRequest, BackendTransport, SimulatedTransport
from smartnotes.utils import get_logger, log_backend_call, log_summarization, log_flashcard_generation, log_provider_fallback

LOG = get_logger()

PARAGRAPH_SPLIT_RE = re.compile(r'\n\s*\n')

TOO_SHORT_SUMMARY_ERROR = 'Text is too short for summarization. Please provide more content.'
TOO_SHORT_SUMMARY_FALLBACK = 'The provided text is too short for summarization.'
TOO_SHORT_FLASHCARDS_ERROR = 'Text is too short for flashcard generation. Please provide more content.'
TOO_SHORT_FLASHCARD = Flashcard(
    id=0,
    question='Why is the text too short?',
    answer='The provided text needs to be longer to generate meaningful flashcards.',
)


class ProviderError(Exception):
    pass


class UnknownProviderError(ProviderError):
    pass


class ProgressPhase(str, Enum):
    VALIDATING = 'validating'
    CONTACTING_BACKEND = 'contacting_backend'
    DONE = 'done'


ProgressCallback = Callable[[ProgressPhase], None]


class ProviderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    credential_key: str
    api_style: str
    summary_endpoint: str
    question_endpoint: Optional[str] = None
    model_info: Dict[str, str] = Field(default_factory=dict)
    min_summary_length: int = 50
    min_flashcard_length: int = 50
    summary_sentences: int = 3
    max_paragraphs: int = Field(3, ge=1)
    min_paragraph_length: int = 30
    summary_prefix: str = ''
    question_template: QuestionTemplate = DEFAULT_QUESTION_TEMPLATE
    default_question: str = 'What is the main point of this paragraph?'
    simulated_error: str = 'Simulated API error'
    summary_parameters: Dict[str, Any] = Field(default_factory=dict)
    question_parameters: Dict[str, Any] = Field(default_factory=dict)

    @property
    def not_configured_error(self) -> str:
        return f'API key not configured. Please add your {self.display_name} API key ({self.credential_key}).'


def split_paragraphs(text: str, min_length: int = 30) -> List[str]:
    """Blank-line separated paragraphs, trimmed, longer than ``min_length``."""
    return [p.strip() for p in PARAGRAPH_SPLIT_RE.split(text or '') if len(p.strip()) > min_length]


class Provider:

    def __init__(
        self,
        config: ProviderConfig,
        credentials: CredentialStore,
        transport: Optional[BackendTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.credentials = credentials
        self._rng = rng or random.Random()
        self.transport = transport or SimulatedTransport(
            question_template=config.question_template,
            error_message=config.simulated_error,
            rng=self._rng,
        )
        self.fallback = FallbackGenerator()

    @property
    def name(self) -> str:
        return self.config.name

    def _credential(self) -> Optional[str]:
        return self.credentials.get(self.config.credential_key)

    def is_configured(self) -> bool:
        return self._credential() is not None

    def info(self) -> Dict[str, Any]:
        return {
            'name': self.config.name,
            'display_name': self.config.display_name,
            'credential_key': self.config.credential_key,
            'summary_endpoint': self.config.summary_endpoint,
            'question_endpoint': self.config.question_endpoint,
            'models': dict(self.config.model_info),
            'configured': self.is_configured(),
        }

    def _report(self, progress: Optional[ProgressCallback], phase: ProgressPhase):
        if progress is None:
            return
        try:
            progress(phase)
        except Exception:
            LOG.exception('progress_callback_failed', exc_info=True)

    def _call_backend(self, operation: str, endpoint: str, text: str, parameters: Dict[str, Any], request_id: Optional[str]) -> str:
        request = BackendRequest(
            operation=operation,
            endpoint=endpoint,
            text=text,
            credential=SecretStr(self._credential() or ''),
            parameters=parameters,
        )
        start = time.time()
        ok = False
        try:
            resp = self.transport.call(request)
            ok = True
            return resp.text
        finally:
            duration_ms = int((time.time() - start) * 1000)
            log_backend_call(request_id or '', self.name, operation, endpoint, ok, duration_ms)

    def generate_summary(self, text: Optional[str], progress: Optional[ProgressCallback] = None, request_id: Optional[str] = None) -> SummaryResult:
        text = text or ''
        start = time.time()
        self._report(progress, ProgressPhase.VALIDATING)
        try:
            if not self.is_configured():
                result = SummaryResult.failed(self.config.not_configured_error, self.fallback.summary(text), ErrorKind.NOT_CONFIGURED)
            elif len(text.strip()) < self.config.min_summary_length:
                result = SummaryResult.failed(TOO_SHORT_SUMMARY_ERROR, TOO_SHORT_SUMMARY_FALLBACK, ErrorKind.INVALID_INPUT)
            else:
                self._report(progress, ProgressPhase.CONTACTING_BACKEND)
                parameters = {'sentences': self.config.summary_sentences}
                parameters.update(self.config.summary_parameters)
                try:
                    summary = self._call_backend('summarize', self.config.summary_endpoint, text, parameters, request_id)
                    result = SummaryResult.ok(self.config.summary_prefix + (summary or 'No summary generated.'))
                except BackendError as e:
                    result = SummaryResult.failed(f'Failed to generate summary: {e}', self.fallback.summary(text), ErrorKind.BACKEND_FAILURE)
                except Exception as e:
                    LOG.exception('summary_backend_unexpected_error', exc_info=True)
                    result = SummaryResult.failed(f'Failed to generate summary: {e}', self.fallback.summary(text), ErrorKind.BACKEND_FAILURE)
        finally:
            self._report(progress, ProgressPhase.DONE)

        duration_ms = int((time.time() - start) * 1000)
        if not result.success:
            log_provider_fallback(request_id or '', self.name, 'summarize', result.error_type.value, result.error)
        log_summarization(request_id or '', self.name, result.success, len(result.display_summary.split()), duration_ms,
                          error_type=result.error_type.value if result.error_type else None)
        return result

    def _question_for(self, paragraph: str, request_id: Optional[str]) -> str:
        if self.config.question_endpoint:
            question = self._call_backend('question', self.config.question_endpoint, paragraph, dict(self.config.question_parameters), request_id)
            return question or self.config.default_question
        return self.config.question_template.render(paragraph, self._rng)

    def generate_flashcards(self, text: Optional[str], progress: Optional[ProgressCallback] = None, request_id: Optional[str] = None) -> FlashcardResult:
        text = text or ''
        start = time.time()
        self._report(progress, ProgressPhase.VALIDATING)
        try:
            if not self.is_configured():
                result = FlashcardResult.failed(self.config.not_configured_error, self.fallback.flashcards(text), ErrorKind.NOT_CONFIGURED)
            elif len(text.strip()) < self.config.min_flashcard_length:
                result = FlashcardResult.failed(TOO_SHORT_FLASHCARDS_ERROR, [TOO_SHORT_FLASHCARD.model_copy()], ErrorKind.INVALID_INPUT)
            else:
                self._report(progress, ProgressPhase.CONTACTING_BACKEND)
                paragraphs = split_paragraphs(text, self.config.min_paragraph_length)[:self.config.max_paragraphs]
                try:
                    cards = [
                        Flashcard(id=idx, question=self._question_for(paragraph, request_id), answer=paragraph)
                        for idx, paragraph in enumerate(paragraphs)
                    ]
                    result = FlashcardResult.ok(cards)
                except BackendError as e:
                    result = FlashcardResult.failed(f'Failed to generate flashcards: {e}', self.fallback.flashcards(text), ErrorKind.BACKEND_FAILURE)
                except Exception as e:
                    LOG.exception('flashcard_backend_unexpected_error', exc_info=True)
                    result = FlashcardResult.failed(f'Failed to generate flashcards: {e}', self.fallback.flashcards(text), ErrorKind.BACKEND_FAILURE)
        finally:
            self._report(progress, ProgressPhase.DONE)

        duration_ms = int((time.time() - start) * 1000)
        if not result.success:
            log_provider_fallback(request_id or '', self.name, 'flashcards', result.error_type.value, result.error)
        log_flashcard_generation(request_id or '', self.name, result.success, len(result.display_flashcards), duration_ms,
                                 error_type=result.error_type.value if result.error_type else None)
        return result
