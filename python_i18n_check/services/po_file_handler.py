"""
PO file handling service for the i18n checker.
This module provides utilities for loading and saving translation files and
for checking the language they declare.
"""
import logging
import re
from typing import Optional

import polib
import pycountry

PLURAL_FORMS_NPLURALS = re.compile(r'nplurals\s*=\s*(\d+)')


class POFileHandler:
    """Handles operations related to .po files."""

    @staticmethod
    def load_po_file(po_file_path: str):
        """Load a PO file with UTF-8 encoding.

        Always sets UTF-8 encoding regardless of what the file's Content-Type header says,
        so rewritten files can hold any character a translation needs.

        Args:
            po_file_path (str): Path to the .po file

        Returns:
            polib.POFile: The loaded PO file with UTF-8 encoding
        """
        po_file = polib.pofile(po_file_path)
        po_file.encoding = 'UTF-8'
        return po_file

    @staticmethod
    def get_nplurals(po_file) -> int:
        """Number of plural forms declared by the Plural-Forms header (2 when absent)."""
        match = PLURAL_FORMS_NPLURALS.search(po_file.metadata.get('Plural-Forms', ''))
        if match:
            return max(1, int(match.group(1)))
        return 2

    @staticmethod
    def normalize_language_code(lang):
        """Convert a language name or locale code to its ISO 639-1 base code.

        For example: fr_CA -> fr, pt-BR -> pt, sr@latin -> sr, Dutch -> nl

        Args:
            lang (str): Language name, code, or locale to normalize

        Returns:
            str or None: The base ISO 639-1 language code or None if not found
        """
        if not lang:
            return None

        base = re.split(r"[_\-@]", lang, maxsplit=1)[0].lower()
        if len(base) == 2:
            language = POFileHandler._lookup_language(alpha_2=base)
        elif len(base) == 3:
            language = POFileHandler._lookup_language(alpha_3=base)
        else:
            language = POFileHandler._lookup_language(name=lang.title())
        return getattr(language, "alpha_2", None)

    @staticmethod
    def _lookup_language(**query):
        # Older pycountry releases raise KeyError instead of returning None
        try:
            return pycountry.languages.get(**query)
        except (KeyError, LookupError):
            return None

    @staticmethod
    def check_language(po_file_path, po_file) -> Optional[str]:
        """Warn when a translation file declares no known language.

        Returns:
            str or None: The declared language code if it is recognized
        """
        file_lang = po_file.metadata.get('Language', '')
        if not file_lang:
            logging.warning("Translation file %s has no Language header", po_file_path)
            return None
        if POFileHandler.normalize_language_code(file_lang) is None:
            logging.warning("Translation file %s declares unknown language '%s'", po_file_path, file_lang)
            return None
        return file_lang
