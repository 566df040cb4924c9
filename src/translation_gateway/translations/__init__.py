"""
Translation Updates
"""

from .merger import apply_translations, TranslationUpdater

__all__ = ['apply_translations', 'TranslationUpdater']
