"""Utility subpackage for smartnotes"""

from .logger import (
	get_logger,
	log_request,
	log_error,
	log_backend_call,
	set_request_context,
	get_request_context,
	log_summarization,
	log_flashcard_generation,
	log_provider_fallback,
)

__all__ = [
	'get_logger',
	'log_request',
	'log_error',
	'log_backend_call',
	'set_request_context',
	'get_request_context',
	'log_summarization',
	'log_flashcard_generation',
	'log_provider_fallback',
]
