"""
Gitignore pattern matching utilities.
Filters the files walked during message extraction using configured exclude
patterns and the root .gitignore file.
"""
import fnmatch
import logging
import os
import re
from pathlib import Path
from typing import Iterator, List, Optional

from ..models.config import I18nConfig


class GitignoreParser:
    """Parses and applies .gitignore style patterns."""

    def __init__(self, root_path: str, patterns: Optional[List[str]] = None, respect_gitignore: bool = True):
        """
        Initialize the parser for a root directory.

        Args:
            root_path: Root directory patterns are relative to
            patterns: Extra patterns (exclude list and default ignore patterns)
            respect_gitignore: Whether to also load <root>/.gitignore
        """
        self.root_path = Path(root_path).resolve()
        self.patterns: List[tuple] = []  # (regex, is_negation, is_directory_only, source)
        for pattern in patterns or []:
            self._add_pattern(pattern, is_negation=False, source="config")
        if respect_gitignore:
            self._load_gitignore_file()

    def _load_gitignore_file(self):
        """Load patterns from the root .gitignore, if there is one."""
        root_gitignore = self.root_path / '.gitignore'
        if not root_gitignore.exists():
            logging.debug("No .gitignore file found in root directory %s", self.root_path)
            return
        with open(root_gitignore, 'r', encoding='utf-8', errors='ignore') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                is_negation = line.startswith('!')
                if is_negation:
                    line = line[1:]
                if line:
                    self._add_pattern(line, is_negation, source=str(root_gitignore))
        logging.debug("Loaded patterns from %s", root_gitignore)

    def _add_pattern(self, pattern: str, is_negation: bool, source: str):
        """Add a pattern to the pattern list."""
        is_directory_only = pattern.endswith('/')
        if is_directory_only:
            pattern = pattern[:-1]
        pattern = pattern.lstrip('/')
        if not pattern:
            return
        self.patterns.append((self._gitignore_to_regex(pattern), is_negation, is_directory_only, source))

    @staticmethod
    def _gitignore_to_regex(pattern: str) -> str:
        """Convert a gitignore pattern to a regex pattern."""
        pattern = re.escape(pattern)
        pattern = pattern.replace(r'\*\*', '__DOUBLE_STAR__')
        pattern = pattern.replace(r'\*', '[^/]*')
        pattern = pattern.replace('__DOUBLE_STAR__', '.*')
        pattern = pattern.replace(r'\?', '[^/]')
        return pattern

    def should_ignore(self, file_path: str, is_directory: Optional[bool] = None) -> bool:
        """
        Check if a file or directory should be ignored.

        Args:
            file_path: Path to the file/directory
            is_directory: Whether the path is a directory (auto-detected if None)

        Returns:
            True if the path should be ignored
        """
        path = Path(file_path).resolve()
        if is_directory is None:
            is_directory = path.is_dir()
        try:
            rel_path = path.relative_to(self.root_path)
        except ValueError:
            return False
        rel_path_str = str(rel_path).replace(os.sep, '/')

        # Later patterns override earlier ones
        ignored = False
        for regex_pattern, is_negation, is_directory_only, _ in self.patterns:
            if is_directory_only and not is_directory:
                continue
            if self._matches_pattern(rel_path_str, regex_pattern):
                ignored = not is_negation
        return ignored

    @staticmethod
    def _matches_pattern(rel_path: str, regex_pattern: str) -> bool:
        """Check if a relative path matches a regex pattern."""
        if re.match(regex_pattern + '$', rel_path):
            return True
        if re.search('(^|/)' + regex_pattern + '$', rel_path):
            return True
        return False

    def walk(self, directory: str) -> Iterator[str]:
        """Yield every non-ignored file below directory, in a stable order."""
        for root, dirs, files in os.walk(directory):
            dirs[:] = sorted(
                d for d in dirs if not self.should_ignore(os.path.join(root, d), is_directory=True)
            )
            for filename in sorted(files):
                file_path = os.path.join(root, filename)
                if not self.should_ignore(file_path, is_directory=False):
                    yield file_path


def create_gitignore_parser(root_path: str, config: I18nConfig) -> GitignoreParser:
    """
    Create a parser for root_path using the exclude settings from config.

    Args:
        root_path: Root directory to create the parser for
        config: Run configuration

    Returns:
        GitignoreParser instance
    """
    patterns = list(config.default_ignore_patterns) + list(config.exclude)
    return GitignoreParser(root_path, patterns, config.respect_gitignore)


def match_extract_method(file_path: str, config: I18nConfig) -> Optional[str]:
    """Return the Babel extraction method configured for file_path, if any."""
    filename = os.path.basename(file_path)
    for pattern, method in config.extract_methods.items():
        if fnmatch.fnmatch(filename, pattern):
            return method
    return None


def is_within(path: str, directory: str) -> bool:
    """Check whether path equals directory or lies below it."""
    path = os.path.abspath(path)
    directory = os.path.abspath(directory)
    return path == directory or path.startswith(directory.rstrip(os.sep) + os.sep)
