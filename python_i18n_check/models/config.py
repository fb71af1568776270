"""
Configuration classes for the i18n checker.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

FlagValue = Optional[Union[bool, str]]


@dataclass
class RawFlags:
    """Flag values exactly as they came off the command line.

    Each value is None when the flag was not given, a bool for a bare or
    negated switch, or a string when a value was attached.
    """
    ignore_incompatible: FlagValue = None
    ignore_missing: FlagValue = None
    ignore_unused: FlagValue = None
    include_config: FlagValue = None
    ignore_untracked: FlagValue = None
    fix: FlagValue = False
    path: FlagValue = None
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RunFlags:
    """Validated flags for a single check run."""
    fix: bool = False
    ignore_incompatible: Optional[bool] = None
    ignore_missing: Optional[bool] = None
    ignore_unused: Optional[bool] = None
    ignore_untracked: Optional[bool] = None
    include_config: Optional[str] = None
    path: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def tolerate_incompatible(self) -> bool:
        return self.fix or bool(self.ignore_incompatible)

    @property
    def tolerate_unused(self) -> bool:
        return self.fix or bool(self.ignore_unused)

    @property
    def tolerate_missing(self) -> bool:
        return self.fix or bool(self.ignore_missing)


@dataclass
class I18nConfig:
    """Merged configuration for one run. Treated as read-only once built."""
    paths: Dict[str, List[str]] = field(default_factory=dict)
    exclude: List[str] = field(default_factory=list)
    translations: List[str] = field(default_factory=list)
    # Translation file -> domain, from the table form of translations
    translation_domains: Dict[str, str] = field(default_factory=dict)
    scan_roots: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    extract_methods: Dict[str, str] = field(default_factory=dict)
    respect_gitignore: bool = True
    default_ignore_patterns: List[str] = field(default_factory=list)
    config_files: List[str] = field(default_factory=list)

    @property
    def message_dirs(self) -> List[str]:
        """All configured message directories, across every domain."""
        dirs = []
        for domain_dirs in self.paths.values():
            for path in domain_dirs:
                if path not in dirs:
                    dirs.append(path)
        return dirs

    def domain_for(self, translations_path: str) -> Optional[str]:
        """
        Domain a translation file belongs to.

        An explicit entry wins. Otherwise a file named after a configured domain
        (locale/fr/LC_MESSAGES/admin.po for "admin") belongs to it. Any other file
        holds the messages of every domain and None is returned.
        """
        if translations_path in self.translation_domains:
            return self.translation_domains[translations_path]
        stem = os.path.splitext(os.path.basename(translations_path))[0]
        if stem in self.paths:
            return stem
        return None


@dataclass
class IntegrationOptions:
    """Options for checking one translation file against the catalog."""
    source_file: str
    config: I18nConfig
    target_file: Optional[str] = None
    dry_run: bool = True
    ignore_incompatible: bool = False
    ignore_unused: bool = False
    ignore_missing: bool = False
