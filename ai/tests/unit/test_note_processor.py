import pytest

from smartnotes.notes import NoteProcessor, EmptyNoteError
from smartnotes.notes.processor import ERROR_SUMMARY, UNEXPECTED_ERROR
from smartnotes.providers import Provider, ProgressPhase
from smartnotes.providers.base import TOO_SHORT_SUMMARY_ERROR, TOO_SHORT_SUMMARY_FALLBACK
from smartnotes.providers.variants import MEANINGCLOUD
from tests.fixtures.fake_transport import FailingTransport
from tests.fixtures.sample_data import PARAGRAPHS


class _BrokenProvider(Provider):
    def generate_summary(self, text, progress=None, request_id=None):
        raise RuntimeError('provider bug')


@pytest.mark.unit
@pytest.mark.parametrize('note', ['', '   \n\t', None])
def test_empty_note_is_rejected(note, all_credentials, ok_transport):
    with pytest.raises(EmptyNoteError):
        NoteProcessor(Provider(MEANINGCLOUD, all_credentials, transport=ok_transport)).process(note)
    assert ok_transport.requests == []


@pytest.mark.unit
def test_successful_processing(all_credentials, ok_transport, sample_note):
    result = NoteProcessor(Provider(MEANINGCLOUD, all_credentials, transport=ok_transport)).process(sample_note, request_id='req-1')
    assert result.provider == 'meaningcloud'
    assert result.summary == 'Scripted summary.'
    assert [c.answer for c in result.flashcards] == PARAGRAPHS
    assert result.api_error is None
    assert result.used_fallback is False
    assert result.metadata['summary_error_type'] is None


@pytest.mark.unit
def test_unconfigured_provider_still_displays_content(no_credentials, ok_transport, sample_note):
    result = NoteProcessor(Provider(MEANINGCLOUD, no_credentials, transport=ok_transport)).process(sample_note)
    assert result.used_fallback is True
    assert result.api_error == MEANINGCLOUD.not_configured_error
    assert result.summary.endswith('(Fallback summary - API not used)')
    assert result.flashcards
    assert result.metadata['flashcards_error_type'] == 'not_configured'


@pytest.mark.unit
def test_first_error_wins(all_credentials):
    result = NoteProcessor(Provider(MEANINGCLOUD, all_credentials, transport=FailingTransport('down'))).process('Too short.')
    assert result.api_error == TOO_SHORT_SUMMARY_ERROR
    assert result.summary == TOO_SHORT_SUMMARY_FALLBACK


@pytest.mark.unit
def test_backend_failure_error_is_surfaced(all_credentials, failing_transport, sample_note):
    result = NoteProcessor(Provider(MEANINGCLOUD, all_credentials, transport=failing_transport)).process(sample_note)
    assert result.api_error == 'Failed to generate summary: Simulated API error: Rate limit exceeded'
    assert result.used_fallback is True
    assert len(result.flashcards) == 3


@pytest.mark.unit
def test_unexpected_failure_gives_static_content(all_credentials, ok_transport, sample_note):
    result = NoteProcessor(_BrokenProvider(MEANINGCLOUD, all_credentials, transport=ok_transport)).process(sample_note)
    assert result.summary == ERROR_SUMMARY
    assert result.api_error == UNEXPECTED_ERROR
    assert [c.question for c in result.flashcards] == ['Error generating flashcards']


@pytest.mark.unit
def test_progress_spans_both_operations(all_credentials, ok_transport, sample_note):
    seen = []
    NoteProcessor(Provider(MEANINGCLOUD, all_credentials, transport=ok_transport)).process(sample_note, progress=seen.append)
    assert seen.count(ProgressPhase.DONE) == 2
    assert seen[0] == ProgressPhase.VALIDATING
