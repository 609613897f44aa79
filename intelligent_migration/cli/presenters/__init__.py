"""Rich table presenters for CLI output."""

from .history import HistoryPresenter
from .suggestions import SuggestionPresenter

__all__ = ["HistoryPresenter", "SuggestionPresenter"]
