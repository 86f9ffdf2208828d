import os
import time
import signal
import asyncio
from datetime import datetime
from typing import Optional, List

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from smartnotes.models import Flashcard
from smartnotes.notes import NoteProcessor, EmptyNoteError
from smartnotes.providers import (
    CredentialStore,
    Provider,
    UnknownProviderError,
    available_providers,
    build_provider,
    credential_keys,
    get_provider_config,
)
from smartnotes.utils import get_logger, set_request_context, log_request, log_error

LOG = get_logger()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    HOST: str = '0.0.0.0'
    PORT: int = 8000
    ENVIRONMENT: str = 'development'
    LOG_LEVEL: str = 'INFO'
    CORS_ORIGIN: str = '*'
    DEFAULT_PROVIDER: str = 'meaningcloud'
    CREDENTIALS_FILE: str = '.env'
    SIMULATED_BACKEND: bool = True
    SIMULATED_FAILURE_RATE: float = 0.1
    SIMULATED_MIN_LATENCY_S: float = 1.5
    SIMULATED_MAX_LATENCY_S: float = 2.5
    PROVIDER_REQUIRED_FOR_READY: bool = False


settings = Settings()


def load_credentials(path: str) -> CredentialStore:
    # process environment wins over the dotenv file
    return CredentialStore.from_env_file(path).merge(CredentialStore.from_environ(credential_keys()))


credentials = load_credentials(settings.CREDENTIALS_FILE)

app = FastAPI(title='Smart Note Taker AI Service', version='1.0.0', description='Summaries and flashcards for notes')

origins = [o.strip() for o in settings.CORS_ORIGIN.split(',') if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware('http')
async def add_request_id_and_logging(request: Request, call_next):
    # prefer incoming X-Request-ID header for cross-service tracing
    request_id = request.headers.get('x-request-id') or os.urandom(8).hex()
    request.state.request_id = request_id
    set_request_context(request_id)
    start = time.time()
    LOG.info('http_request_start', extra={'method': request.method, 'path': request.url.path, 'request_id': request_id, 'client': request.client.host if request.client else None})
    try:
        response: Response = await call_next(request)
    except Exception as e:
        log_error(e, {'request_id': request_id, 'path': request.url.path})
        body = {'success': False, 'error': {'message': 'Internal server error', 'request_id': request_id}}
        return JSONResponse(status_code=500, content=body, headers={'X-Request-ID': request_id})
    duration = int((time.time() - start) * 1000)
    log_request(request_id, request.method, request.url.path, response.status_code, duration, request.client.host if request.client else None)
    response.headers['X-Request-ID'] = request_id
    return response


def get_provider(name: Optional[str] = None) -> Provider:
    return build_provider(
        name or settings.DEFAULT_PROVIDER,
        credentials,
        simulated=settings.SIMULATED_BACKEND,
        failure_rate=settings.SIMULATED_FAILURE_RATE,
        latency=(settings.SIMULATED_MIN_LATENCY_S, settings.SIMULATED_MAX_LATENCY_S),
    )


def _request_id(fastapi_request: Request) -> str:
    return getattr(fastapi_request.state, 'request_id', None) or os.urandom(8).hex()


def _bad_request(error: str, details: str, request_id: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={'success': False, 'error': error, 'details': details, 'request_id': request_id})


@app.get('/health')
async def health():
    return {'status': 'ok', 'timestamp': datetime.utcnow().isoformat() + 'Z', 'service': 'smartnotes'}


@app.get('/ready')
async def ready():
    services = {}
    for name in available_providers():
        services[name] = 'ok' if get_provider(name).is_configured() else 'error: credential not configured'

    ready_ok = True
    try:
        default_status = services[get_provider_config(settings.DEFAULT_PROVIDER).name]
    except UnknownProviderError:
        default_status = 'error: unknown default provider'
    if settings.PROVIDER_REQUIRED_FOR_READY and default_status.startswith('error'):
        ready_ok = False

    status_code = 200 if ready_ok else 503
    return JSONResponse(status_code=status_code, content={'status': 'ready' if ready_ok else 'not ready', 'default_provider': settings.DEFAULT_PROVIDER, 'services': services})


@app.get('/providers')
async def list_providers():
    return {'default': settings.DEFAULT_PROVIDER, 'providers': [get_provider(name).info() for name in available_providers()]}


class AnalyzeRequest(BaseModel):
    text: str = Field('', description='Raw note text')
    provider: Optional[str] = Field(None, description='openai|huggingface|meaningcloud (defaults to DEFAULT_PROVIDER)')


class SummarizeResponse(BaseModel):
    success: bool
    provider: str
    summary: Optional[str] = None
    error: Optional[str] = None
    fallback_summary: Optional[str] = None
    error_type: Optional[str] = None
    request_id: str


class FlashcardGenerateResponse(BaseModel):
    success: bool
    provider: str
    flashcards: Optional[List[Flashcard]] = None
    error: Optional[str] = None
    fallback_flashcards: Optional[List[Flashcard]] = None
    error_type: Optional[str] = None
    request_id: str


class ProcessNoteResponse(BaseModel):
    success: bool
    provider: str
    summary: str
    flashcards: List[Flashcard]
    api_error: Optional[str] = None
    used_fallback: bool
    metadata: dict
    request_id: str


@app.post('/summarize', response_model=SummarizeResponse)
async def summarize_content(req: AnalyzeRequest, fastapi_request: Request):
    request_id = _request_id(fastapi_request)
    try:
        provider = get_provider(req.provider)
    except UnknownProviderError as e:
        return _bad_request('Unknown provider', str(e), request_id)

    set_request_context(request_id, provider.name)
    LOG.info('summarize_start', extra={'request_id': request_id, 'provider': provider.name})
    result = await run_in_threadpool(provider.generate_summary, req.text, None, request_id)
    return SummarizeResponse(provider=provider.name, request_id=request_id, **result.model_dump(mode='json'))


@app.post('/flashcards/generate', response_model=FlashcardGenerateResponse)
async def generate_flashcards_endpoint(req: AnalyzeRequest, fastapi_request: Request):
    request_id = _request_id(fastapi_request)
    try:
        provider = get_provider(req.provider)
    except UnknownProviderError as e:
        return _bad_request('Unknown provider', str(e), request_id)

    set_request_context(request_id, provider.name)
    LOG.info('flashcard_generation_start', extra={'request_id': request_id, 'provider': provider.name})
    result = await run_in_threadpool(provider.generate_flashcards, req.text, None, request_id)
    return FlashcardGenerateResponse(provider=provider.name, request_id=request_id, **result.model_dump(mode='json'))


@app.post('/process-note', response_model=ProcessNoteResponse)
async def process_note(req: AnalyzeRequest, fastapi_request: Request):
    request_id = _request_id(fastapi_request)
    try:
        provider = get_provider(req.provider)
    except UnknownProviderError as e:
        return _bad_request('Unknown provider', str(e), request_id)

    set_request_context(request_id, provider.name)
    try:
        result = await run_in_threadpool(NoteProcessor(provider).process, req.text, None, request_id)
    except EmptyNoteError as e:
        return _bad_request('Empty note', str(e), request_id)
    return ProcessNoteResponse(success=result.api_error is None, request_id=request_id, **result.model_dump(mode='json'))


@app.on_event('startup')
async def on_startup():
    LOG.info('Smart Note Taker AI service starting', extra={'env': settings.ENVIRONMENT, 'default_provider': settings.DEFAULT_PROVIDER, 'simulated_backend': settings.SIMULATED_BACKEND})
    for name in available_providers():
        if not get_provider(name).is_configured():
            LOG.warning('provider_not_configured', extra={'provider': name})


def _install_signal_handlers(loop: Optional[asyncio.AbstractEventLoop] = None):
    if loop is None:
        loop = asyncio.get_event_loop()

    def _handler(signum, frame):
        LOG.info('Received shutdown signal', extra={'signal': signum})
        loop.call_soon_threadsafe(loop.stop)

    signal.signal(signal.SIGTERM, _handler)
    signal.signal(signal.SIGINT, _handler)


if __name__ == '__main__':
    import uvicorn

    _install_signal_handlers()
    reload_enabled = settings.ENVIRONMENT == 'development'

    uvicorn.run(
        'main:app',
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=reload_enabled,
    )
