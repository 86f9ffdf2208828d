"""Smart Note Taker: note summaries and flashcards from pluggable text-analysis backends."""

__version__ = '1.0.0'
