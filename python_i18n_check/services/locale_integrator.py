"""
Locale file integration for the i18n checker.
Compares a translation file with the extracted default messages and, when
asked to, rewrites it so that it matches them.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import List

import anyio.to_thread
import polib

from ..errors import LocaleFileError
from ..models.config import IntegrationOptions
from ..models.messages import MessageCatalog, MessageInfo, MessageKey, describe_key
from ..utils.placeholders import placeholders_match
from .po_file_handler import POFileHandler


@dataclass
class CompatibilityReport:
    """Differences between a translation file and the message catalog."""
    missing: List[MessageKey] = field(default_factory=list)
    unused: List[MessageKey] = field(default_factory=list)
    incompatible: List[MessageKey] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.missing or self.unused or self.incompatible)


def entry_key(entry) -> MessageKey:
    return (entry.msgctxt or None, entry.msgid)


def is_translated(entry) -> bool:
    if entry.msgstr_plural:
        return any(value for value in entry.msgstr_plural.values())
    return bool(entry.msgstr)


def is_entry_compatible(entry, message: MessageInfo) -> bool:
    """Check plural shape and placeholders of a translated entry against its message."""
    if bool(entry.msgid_plural) != bool(message.msgid_plural):
        return False
    if not is_translated(entry):
        return True
    if message.msgid_plural:
        # Some languages drop the count in a form, so either source is acceptable
        sources = (message.msgid, message.msgid_plural)
        return all(
            any(placeholders_match(source, value) for source in sources)
            for value in entry.msgstr_plural.values() if value
        )
    return placeholders_match(message.msgid, entry.msgstr)


def compare_with_catalog(po_file, messages: MessageCatalog) -> CompatibilityReport:
    """Work out which catalog messages the file lacks, which entries nobody uses and which are broken."""
    report = CompatibilityReport()
    entries = {}
    for entry in po_file:
        if entry.obsolete or not entry.msgid:
            continue
        entries[entry_key(entry)] = entry

    for key, message in messages.items():
        entry = entries.get(key)
        if entry is None:
            report.missing.append(key)
        elif not is_entry_compatible(entry, message):
            report.incompatible.append(key)

    report.unused = [key for key in entries if key not in messages]
    return report


def _new_entry(message: MessageInfo, nplurals: int):
    entry = polib.POEntry(
        msgid=message.msgid,
        msgctxt=message.msgctxt,
        occurrences=[(os.path.relpath(path), str(lineno)) for path, lineno in message.locations],
        comment="\n".join(message.comments) or '',
    )
    if message.msgid_plural:
        entry.msgid_plural = message.msgid_plural
        entry.msgstr_plural = {index: '' for index in range(nplurals)}
    return entry


def apply_fixes(po_file, messages: MessageCatalog, report: CompatibilityReport):
    """Make the file compatible: retire unused entries, clear broken translations, add missing messages."""
    entries = {entry_key(entry): entry for entry in po_file if not entry.obsolete and entry.msgid}
    for key in report.unused:
        entries[key].obsolete = True
    for key in report.incompatible:
        entry = entries[key]
        message = messages[key]
        entry.msgid_plural = message.msgid_plural or ''
        entry.msgstr = ''
        entry.msgstr_plural = (
            {index: '' for index in range(POFileHandler.get_nplurals(po_file))} if message.msgid_plural else {}
        )
        if 'fuzzy' in entry.flags:
            entry.flags.remove('fuzzy')
    nplurals = POFileHandler.get_nplurals(po_file)
    for key in report.missing:
        po_file.append(_new_entry(messages[key], nplurals))


def _format_keys(title: str, keys: List[MessageKey]) -> str:
    return f"{title}:\n" + "\n".join(f"  {describe_key(key)}" for key in keys)


class LocaleIntegrator:
    """Checks translation files against the default messages."""

    def integrate_locale_file_sync(self, messages: MessageCatalog, options: IntegrationOptions) -> CompatibilityReport:
        """
        Compare one translation file with the catalog and optionally rewrite it.

        Args:
            messages: Default messages extracted from the sources
            options: Which file to read, where to write and what to tolerate

        Returns:
            CompatibilityReport: What differed before any fix was applied

        Raises:
            LocaleFileError: If the file cannot be read or holds problems that are not ignored
        """
        if not os.path.isfile(options.source_file):
            raise LocaleFileError(f"Translation file {options.source_file} does not exist")
        try:
            po_file = POFileHandler.load_po_file(options.source_file)
        except (OSError, UnicodeDecodeError) as e:
            raise LocaleFileError(f"Unable to read translation file {options.source_file}: {e}") from e
        POFileHandler.check_language(options.source_file, po_file)

        report = compare_with_catalog(po_file, messages)
        problems = []
        if report.incompatible and not options.ignore_incompatible:
            problems.append(_format_keys("Incompatible translations", report.incompatible))
        if report.missing and not options.ignore_missing:
            problems.append(_format_keys("Missing translations", report.missing))
        if report.unused and not options.ignore_unused:
            problems.append(_format_keys("Unused translations", report.unused))
        if problems:
            raise LocaleFileError(f"Translation file {options.source_file} is not compatible:\n" + "\n".join(problems))

        logging.info(
            "%s: %d missing, %d unused, %d incompatible",
            options.source_file, len(report.missing), len(report.unused), len(report.incompatible)
        )
        if options.dry_run or not options.target_file:
            logging.debug("Dry run, %s was not written", options.source_file)
            return report

        if not report.is_clean:
            apply_fixes(po_file, messages, report)
        po_file.save(options.target_file)
        logging.info("Wrote translation file %s", options.target_file)
        return report

    async def integrate_locale_file(self, messages: MessageCatalog, options: IntegrationOptions) -> CompatibilityReport:
        """Async wrapper running the file work on a worker thread."""
        return await anyio.to_thread.run_sync(self.integrate_locale_file_sync, messages, options)
