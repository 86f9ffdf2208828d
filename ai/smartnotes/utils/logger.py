import os
import sys
import logging
import pathlib
import contextvars
from logging.handlers import RotatingFileHandler
from pythonjsonlogger import jsonlogger

_request_ctx_var = contextvars.ContextVar('request_ctx', default={})


def set_request_context(request_id: str, provider: str = None):
    _request_ctx_var.set({'request_id': request_id, 'provider': provider})


def get_request_context():
    return _request_ctx_var.get()


def _inject_request_context(record):
    ctx = get_request_context()
    # explicit extra= values win over the request context
    if not getattr(record, 'request_id', None):
        record.request_id = ctx.get('request_id')
    if not getattr(record, 'provider', None):
        record.provider = ctx.get('provider')
    return True


def get_logger(name: str = 'smartnotes'):
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'json')
    # relative to the working directory unless absolute
    LOG_FILE_PATH = os.getenv('LOG_FILE_PATH', 'logs')
    LOG_MAX_SIZE = int(os.getenv('LOG_MAX_SIZE', str(10 * 1024 * 1024)))
    LOG_MAX_FILES = int(os.getenv('LOG_MAX_FILES', '7'))

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(LOG_LEVEL.upper())
    log_path = pathlib.Path(LOG_FILE_PATH)
    if not log_path.is_absolute():
        log_path = pathlib.Path(os.getcwd()) / log_path
    log_path.mkdir(parents=True, exist_ok=True)

    # Console handler
    ch = logging.StreamHandler(sys.stdout)
    if LOG_FORMAT == 'json':
        fmt = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s')
    else:
        fmt = logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s')
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # Rotating file handlers
    combined = RotatingFileHandler(log_path / 'combined.log', maxBytes=LOG_MAX_SIZE, backupCount=LOG_MAX_FILES)
    combined.setFormatter(fmt)
    logger.addHandler(combined)

    errors = RotatingFileHandler(log_path / 'error.log', maxBytes=LOG_MAX_SIZE, backupCount=LOG_MAX_FILES)
    errors.setLevel(logging.ERROR)
    errors.setFormatter(fmt)
    logger.addHandler(errors)

    # inject context
    f = logging.Filter()
    f.filter = _inject_request_context
    logger.addFilter(f)

    logging.captureWarnings(True)

    return logger


def log_request(request_id: str, method: str, path: str, status_code: int, duration_ms: float, ip: str = None):
    logger = get_logger()
    logger.info('http_request', extra={'request_id': request_id, 'method': method, 'path': path, 'status_code': status_code, 'duration_ms': duration_ms, 'ip': ip})


def log_error(error: Exception, context: dict = None):
    logger = get_logger()
    logger.exception('error', exc_info=error, extra=context or {})


def log_backend_call(request_id: str, provider: str, operation: str, endpoint: str, success: bool, duration_ms: float):
    logger = get_logger()
    logger.info('backend_call', extra={
        'request_id': request_id,
        'provider': provider,
        'operation': operation,
        'endpoint': endpoint,
        'success': success,
        'duration_ms': duration_ms,
    })


def log_summarization(request_id: str, provider: str, success: bool, summary_length: int, duration_ms: float, error_type: str = None):
    logger = get_logger()
    logger.info('summarization', extra={
        'request_id': request_id,
        'provider': provider,
        'success': success,
        'summary_word_count': summary_length,
        'duration_ms': duration_ms,
        'error_type': error_type,
    })


def log_flashcard_generation(request_id: str, provider: str, success: bool, flashcard_count: int, duration_ms: float, error_type: str = None):
    logger = get_logger()
    logger.info('flashcard_generation', extra={
        'request_id': request_id,
        'provider': provider,
        'success': success,
        'flashcard_count': flashcard_count,
        'duration_ms': duration_ms,
        'error_type': error_type,
    })


def log_provider_fallback(request_id: str, provider: str, operation: str, error_type: str, error: str):
    logger = get_logger()
    logger.warning('provider_fallback', extra={
        'request_id': request_id,
        'provider': provider,
        'operation': operation,
        'error_type': error_type,
        'error': error,
    })
