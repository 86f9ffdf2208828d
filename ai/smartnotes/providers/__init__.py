"""
Text-analysis providers: one generic Provider, three backend variants,
pluggable transports and the injected credential store.
"""
from .credentials import CredentialStore
from .questions import QuestionTemplate, DEFAULT_QUESTION_TEMPLATE
from .transport import (
	BackendTransport,
	BackendRequest,
	BackendResponse,
	BackendError,
	TransientBackendError,
	SimulatedTransport,
	HttpTransport,
)
from .base import Provider, ProviderConfig, ProviderError, UnknownProviderError, ProgressPhase, split_paragraphs
from .variants import OPENAI, HUGGINGFACE, MEANINGCLOUD, PROVIDERS, available_providers, get_provider_config, credential_keys, build_provider

__all__ = [
	'CredentialStore',
	'QuestionTemplate', 'DEFAULT_QUESTION_TEMPLATE',
	'BackendTransport', 'BackendRequest', 'BackendResponse', 'BackendError', 'TransientBackendError',
	'SimulatedTransport', 'HttpTransport',
	'Provider', 'ProviderConfig', 'ProviderError', 'UnknownProviderError', 'ProgressPhase', 'split_paragraphs',
	'OPENAI', 'HUGGINGFACE', 'MEANINGCLOUD', 'PROVIDERS',
	'available_providers', 'get_provider_config', 'credential_keys', 'build_provider',
]
