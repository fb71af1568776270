"""
i18n-check - Keeps gettext translation files in line with the source code.
This package extracts the default messages of a project, looks for
translatable strings outside of the configured paths and checks .po files
for missing, unused and incompatible translations.
"""

import os
import subprocess
from typing import Optional


def _get_version_from_git() -> Optional[str]:
    """
    Try to get version from git.

    Returns:
        Optional[str]: Git version or None if not available
    """
    try:
        is_git_repo = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False
        ).returncode == 0
        if is_git_repo:
            return subprocess.check_output(
                ["git", "describe", "--tags"],
                stderr=subprocess.STDOUT,
                text=True
            ).strip()
    except (subprocess.SubprocessError, FileNotFoundError):
        pass
    return None


# Version priority:
# 1. Environment variable PACKAGE_VERSION (for CI environments)
# 2. Git describe (for development checkouts)
# 3. Fallback to "0.1.0"
if 'PACKAGE_VERSION' in os.environ:
    __version__ = os.environ.get('PACKAGE_VERSION')
else:
    __version__ = _get_version_from_git() or "0.1.0"
