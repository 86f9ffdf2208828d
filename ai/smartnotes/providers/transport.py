"""Backend transports: the one place a provider talks to a text-analysis API.

A transport has a single method, ``call(request) -> BackendResponse``, and
raises ``BackendError`` on any failure. ``SimulatedTransport`` stands in for
the network with a random delay and random failures; ``HttpTransport`` makes
the real request with ``requests``.
"""
from __future__ import annotations

import os
import random
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Literal, Optional, Tuple

import requests
from pydantic import BaseModel, Field, SecretStr
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from smartnotes.fallback.generator import split_sentences
from smartnotes.providers.questions import QuestionTemplate, DEFAULT_QUESTION_TEMPLATE
from smartnotes.utils import get_logger

LOG = get_logger()

# Config
HTTP_TIMEOUT = int(os.getenv('HTTP_TIMEOUT', '30'))
HTTP_RETRY_ATTEMPTS = int(os.getenv('HTTP_RETRY_ATTEMPTS', '3'))
HTTP_RETRY_MULTIPLIER = float(os.getenv('HTTP_RETRY_MULTIPLIER', '1'))
HTTP_RETRY_MAX_WAIT = int(os.getenv('HTTP_RETRY_MAX_WAIT', '10'))

SIMULATED_FAILURE_RATE = 0.1
SIMULATED_LATENCY_S = (1.5, 2.5)


class BackendError(Exception):
    pass


class TransientBackendError(BackendError):
    pass


Operation = Literal['summarize', 'question']


class BackendRequest(BaseModel):
    operation: Operation
    endpoint: str
    text: str
    credential: SecretStr
    parameters: Dict[str, Any] = Field(default_factory=dict)


class BackendResponse(BaseModel):
    text: str
    raw: Dict[str, Any] = Field(default_factory=dict)


class BackendTransport(ABC):
    @abstractmethod
    def call(self, request: BackendRequest) -> BackendResponse:
        """Perform one backend round trip; raise BackendError on failure."""


def leading_sentences(text: str, count: int) -> str:
    sentences = [s for s in split_sentences(text) if s.strip()]
    return '. '.join(sentences[:count]) + '.'


class SimulatedTransport(BackendTransport):
    """Fakes a backend round trip.

    Sleeps for a random delay, fails with probability ``failure_rate`` and
    otherwise answers ``summarize`` with the leading sentences of the text and
    ``question`` with the configured question template.
    """

    def __init__(
        self,
        question_template: Optional[QuestionTemplate] = None,
        failure_rate: float = SIMULATED_FAILURE_RATE,
        latency: Tuple[float, float] = SIMULATED_LATENCY_S,
        error_message: str = 'Simulated API error',
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError('failure_rate must be between 0 and 1')
        low, high = latency
        if low < 0 or high < low:
            raise ValueError('latency must be a (min, max) pair with 0 <= min <= max')
        self.question_template = question_template or DEFAULT_QUESTION_TEMPLATE
        self.failure_rate = failure_rate
        self.latency = (low, high)
        self.error_message = error_message
        self._rng = rng or random.Random()
        self._sleep = sleep

    def call(self, request: BackendRequest) -> BackendResponse:
        delay = self._rng.uniform(*self.latency)
        if delay:
            self._sleep(delay)

        if not request.credential.get_secret_value():
            raise BackendError('Missing API key')

        if self._rng.random() < self.failure_rate:
            raise BackendError(self.error_message)

        if request.operation == 'summarize':
            count = int(request.parameters.get('sentences', 3))
            summary = leading_sentences(request.text, count)
            return BackendResponse(text=summary, raw={'summary_text': summary})

        question = self.question_template.render(request.text, self._rng)
        return BackendResponse(text=question, raw={'generated_text': question})


class HttpTransport(BackendTransport):
    """Calls a real backend over HTTP.

    ``api_style`` selects the request/response shape: ``openai`` (chat
    completions), ``huggingface`` (inference API) or ``meaningcloud``
    (summarization form post). Connection errors, timeouts and 5xx answers are
    retried; anything else fails straight away.
    """

    def __init__(
        self,
        api_style: str,
        timeout: int = HTTP_TIMEOUT,
        retry_attempts: int = HTTP_RETRY_ATTEMPTS,
        retry_multiplier: float = HTTP_RETRY_MULTIPLIER,
        retry_max_wait: int = HTTP_RETRY_MAX_WAIT,
        session: Optional[requests.Session] = None,
    ):
        if api_style not in ('openai', 'huggingface', 'meaningcloud'):
            raise ValueError(f'unsupported api_style: {api_style}')
        self.api_style = api_style
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self.retry_multiplier = retry_multiplier
        self.retry_max_wait = retry_max_wait
        self._http = session or requests

    def call(self, request: BackendRequest) -> BackendResponse:
        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_multiplier, max=self.retry_max_wait),
            retry=retry_if_exception_type(TransientBackendError),
            reraise=True,
        )
        payload = retrying(self._post, request)
        return self._parse(request, payload)

    def _build(self, request: BackendRequest) -> Dict[str, Any]:
        key = request.credential.get_secret_value()
        params = dict(request.parameters)
        if self.api_style == 'meaningcloud':
            data = {'key': key, 'txt': request.text}
            data.update({k: str(v) for k, v in params.items()})
            return {'data': data}
        if self.api_style == 'huggingface':
            params.pop('sentences', None)
            return {
                'json': {'inputs': request.text, 'parameters': params},
                'headers': {'Authorization': f'Bearer {key}'},
            }
        model = params.pop('model', 'gpt-3.5-turbo')
        if request.operation == 'summarize':
            instruction = f"Summarize the following notes in at most {params.pop('sentences', 3)} sentences."
        else:
            instruction = 'Write one study question answered by the following passage.'
        body = {
            'model': model,
            'messages': [
                {'role': 'system', 'content': 'You help students turn notes into summaries and flashcards.'},
                {'role': 'user', 'content': f'{instruction}\n\n{request.text}'},
            ],
        }
        body.update(params)
        return {'json': body, 'headers': {'Authorization': f'Bearer {key}'}}

    def _post(self, request: BackendRequest) -> Any:
        kwargs = self._build(request)
        start = time.time()
        try:
            resp = self._http.post(request.endpoint, timeout=self.timeout, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as e:
            LOG.warning('backend_http_transient', extra={'endpoint': request.endpoint, 'error': str(e)})
            raise TransientBackendError(str(e))
        except requests.RequestException as e:
            raise BackendError(str(e))
        duration_ms = int((time.time() - start) * 1000)
        LOG.info('backend_http_response', extra={'endpoint': request.endpoint, 'status_code': resp.status_code, 'duration_ms': duration_ms})
        if resp.status_code >= 500:
            raise TransientBackendError(f'HTTP {resp.status_code} from {request.endpoint}')
        try:
            payload = resp.json()
        except ValueError:
            raise BackendError(f'Invalid JSON response from {request.endpoint}')
        if resp.status_code >= 400:
            raise BackendError(self._error_message(payload) or f'HTTP {resp.status_code} from {request.endpoint}')
        return payload

    def _error_message(self, payload: Any) -> Optional[str]:
        if not isinstance(payload, dict):
            return None
        err = payload.get('error')
        if isinstance(err, dict):
            return err.get('message')
        if err:
            return str(err)
        status = payload.get('status')
        if isinstance(status, dict):
            return status.get('msg')
        return None

    def _parse(self, request: BackendRequest, payload: Any) -> BackendResponse:
        if self.api_style == 'huggingface':
            if isinstance(payload, dict) and payload.get('error'):
                raise BackendError(str(payload['error']))
            first = payload[0] if isinstance(payload, list) and payload else {}
            text = first.get('summary_text') or first.get('generated_text') or ''
            return BackendResponse(text=text, raw={'items': payload})

        if not isinstance(payload, dict):
            raise BackendError(f'Unexpected response shape from {request.endpoint}')

        if self.api_style == 'meaningcloud':
            status = payload.get('status') or {}
            if str(status.get('code', '0')) != '0':
                raise BackendError(status.get('msg') or 'API Error')
            return BackendResponse(text=payload.get('summary') or '', raw=payload)

        choices = payload.get('choices') or []
        if not choices:
            raise BackendError(self._error_message(payload) or 'No choices in response')
        text = (choices[0].get('message') or {}).get('content') or ''
        return BackendResponse(text=text.strip(), raw=payload)
