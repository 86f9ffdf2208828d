from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

from smartnotes.providers.base import Provider, ProviderConfig, UnknownProviderError
from smartnotes.providers.credentials import CredentialStore
from smartnotes.providers.questions import QuestionTemplate, CUE_LADDER, DEFAULT_QUESTION_TEMPLATE
from smartnotes.providers.transport import BackendTransport, HttpTransport, SimulatedTransport, SIMULATED_FAILURE_RATE, SIMULATED_LATENCY_S

HF_INFERENCE_API = 'https://api-inference.huggingface.co/models/'
HF_SUMMARIZATION_MODEL = 'facebook/bart-large-cnn'
HF_QUESTION_GENERATION_MODEL = 'valhalla/t5-base-qa-qg-hl'

OPENAI_CHAT_ENDPOINT = 'https://api.openai.com/v1/chat/completions'
OPENAI_MODEL = 'gpt-3.5-turbo'

MEANINGCLOUD_SUMMARIZATION_API = 'https://api.meaningcloud.com/summarization-1.0'


OPENAI = ProviderConfig(
    name='openai',
    display_name='OpenAI',
    credential_key='OPENAI_API_KEY',
    api_style='openai',
    summary_endpoint=OPENAI_CHAT_ENDPOINT,
    model_info={'summarizationModel': OPENAI_MODEL},
    max_paragraphs=5,
    summary_prefix='Summary: ',
    question_template=QuestionTemplate(
        default='What is the significance of "{keyword}" in this context?',
        stopwords=frozenset(),
    ),
    simulated_error='Simulated API error: Service temporarily unavailable',
    summary_parameters={'model': OPENAI_MODEL, 'temperature': 0.3, 'max_tokens': 300},
)

HUGGINGFACE = ProviderConfig(
    name='huggingface',
    display_name='Hugging Face',
    credential_key='HUGGINGFACE_API_KEY',
    api_style='huggingface',
    summary_endpoint=HF_INFERENCE_API + HF_SUMMARIZATION_MODEL,
    question_endpoint=HF_INFERENCE_API + HF_QUESTION_GENERATION_MODEL,
    model_info={
        'summarizationModel': HF_SUMMARIZATION_MODEL,
        'questionGenerationModel': HF_QUESTION_GENERATION_MODEL,
    },
    max_paragraphs=3,
    question_template=QuestionTemplate(
        cues=CUE_LADDER[:2],
        default='What is the significance of {keyword} in this passage?',
        stopwords=frozenset(),
        case_sensitive=True,
    ),
    simulated_error='Simulated API error: Model is currently loading',
    summary_parameters={'max_length': 100, 'min_length': 30, 'temperature': 0.7},
    question_parameters={'max_length': 64, 'num_return_sequences': 1},
)

MEANINGCLOUD = ProviderConfig(
    name='meaningcloud',
    display_name='MeaningCloud',
    credential_key='MEANINGCLOUD_API_KEY',
    api_style='meaningcloud',
    summary_endpoint=MEANINGCLOUD_SUMMARIZATION_API,
    max_paragraphs=5,
    question_template=DEFAULT_QUESTION_TEMPLATE.model_copy(update={'first_sentence_only': True}),
    simulated_error='Simulated API error: Rate limit exceeded',
    summary_parameters={'lang': 'en'},
)

PROVIDERS: Dict[str, ProviderConfig] = {c.name: c for c in (OPENAI, HUGGINGFACE, MEANINGCLOUD)}


def available_providers() -> List[str]:
    return list(PROVIDERS)


def get_provider_config(name: str) -> ProviderConfig:
    try:
        return PROVIDERS[(name or '').strip().lower()]
    except KeyError:
        raise UnknownProviderError(f'unknown provider: {name!r} (expected one of {", ".join(PROVIDERS)})')


def credential_keys() -> List[str]:
    return [c.credential_key for c in PROVIDERS.values()]


def build_provider(
    name: str,
    credentials: CredentialStore,
    transport: Optional[BackendTransport] = None,
    simulated: bool = True,
    failure_rate: float = SIMULATED_FAILURE_RATE,
    latency: Tuple[float, float] = SIMULATED_LATENCY_S,
    rng: Optional[random.Random] = None,
) -> Provider:
    config = get_provider_config(name)
    rng = rng or random.Random()
    if transport is None:
        if simulated:
            transport = SimulatedTransport(
                question_template=config.question_template,
                failure_rate=failure_rate,
                latency=latency,
                error_message=config.simulated_error,
                rng=rng,
            )
        else:
            transport = HttpTransport(config.api_style)
    return Provider(config, credentials, transport=transport, rng=rng)
