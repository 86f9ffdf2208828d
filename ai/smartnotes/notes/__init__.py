"""
Note processing: runs a provider over a note and merges results with fallbacks.
"""
from .processor import NoteProcessor, NoteResult, NoteProcessorError, EmptyNoteError

__all__ = ['NoteProcessor', 'NoteResult', 'NoteProcessorError', 'EmptyNoteError']
