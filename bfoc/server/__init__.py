from .app import create_app, serve
from .store import TranslationRecord, TranslationStore

__all__ = [
    "create_app",
    "serve",
    "TranslationRecord",
    "TranslationStore",
]
