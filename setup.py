"""
Setup script for the i18n-check package.
This script is used to install the package and its dependencies.
"""

import os
import subprocess
from typing import Optional

from setuptools import find_namespace_packages, setup

with open('README.md', encoding='utf-8') as f:
    long_description = f.read()

with open('requirements.txt', encoding='utf-8') as f:
    install_requires = [line.strip() for line in f if line.strip() and not line.startswith('#')]


def get_pep440_version() -> Optional[str]:
    """
    Get version from environment or git, ensuring it's PEP 440 compliant.

    Returns:
        Optional[str]: PEP 440 compliant version string or None to fall back to the default
    """

    # First check environment variable (highest priority for CI)
    if 'PACKAGE_VERSION' in os.environ:
        raw_version = os.environ.get('PACKAGE_VERSION')
        # Make version PEP 440 compliant
        if '-' in raw_version and '+' not in raw_version:
            version = raw_version.replace('-', '+', 1)
        else:
            version = raw_version
        print(f"Using version from environment: {version}")
        return version

    # Then try getting from git
    try:
        version = subprocess.check_output(
            ['git', 'describe', '--tags', '--always'],
            stderr=subprocess.STDOUT,
            text=True
        ).strip()

        # Format like v0.3.5-5-gd9775d7, convert to 0.3.5.dev5+gd9775d7
        if version.count('-') == 2:
            tag, commits, commit_hash = version.lstrip('v').split('-')
            version = f"{tag}.dev{commits}+{commit_hash}"
        elif version.startswith('v'):
            version = version[1:]
        else:
            # A bare commit hash is not a version
            return None

        print(f"Using git version: {version}")
        return version
    except (subprocess.SubprocessError, FileNotFoundError):
        print("No version from git, using default")
        return None


package_version = get_pep440_version() or "0.1.0"


setup(
    name='i18n-check',
    version=package_version,
    description='A CLI tool that keeps gettext .po files in line with the messages used in the source code.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    packages=find_namespace_packages(include=["python_i18n_check", "python_i18n_check.*"],
                                     exclude=["*.tests", "*.tests.*", "*.__pycache__", "*.__pycache__.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7.4'],
    },
    entry_points={
        'console_scripts': [
            'i18n-check=python_i18n_check.main:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Internationalization',
        'Topic :: Software Development :: Localization',
        'Topic :: Software Development :: Quality Assurance',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3 :: Only',
        'Environment :: Console',
        'Typing :: Typed'
    ],
    python_requires='>=3.8',
)
