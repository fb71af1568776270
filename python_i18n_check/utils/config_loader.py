"""
Configuration loader for i18n-check.
Loads the [tool.i18n-check] table from pyproject.toml files and merges it
with an optional include file given on the command line.
"""
import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..errors import ConfigError
from ..models.config import I18nConfig

try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None

TOOL_SECTION = "i18n-check"

# Keys holding paths relative to the file that declares them
PATH_LIST_KEYS = ('translations', 'scan_roots')
LIST_KEYS = ('exclude', 'translations', 'scan_roots', 'keywords', 'default_ignore_patterns')


class ConfigLoader:
    """Loads and merges i18n-check configuration from TOML files."""
    DEFAULT_CONFIG = {
        # Message sources, domain -> directories
        'paths': {},
        'exclude': [],
        # Translation files checked against the extracted messages, either a list
        # or a table of domain -> files
        'translations': [],
        'translation_domains': {},
        # Where untracked messages are looked for
        'scan_roots': ["."],
        # Extraction
        'keywords': [],
        'extract_methods': {
            "*.py": "python",
        },
        # File scanning
        'respect_gitignore': True,
        'default_ignore_patterns': [
            ".git/",
            ".venv/",
            "venv/",
            "env/",
            ".env/",
            "node_modules/",
            ".cache/",
            "build/",
            "dist/",
            "*.egg-info/",
            "__pycache__/",
            ".pytest_cache/",
            ".tox/",
            ".mypy_cache/",
        ],
    }

    @classmethod
    def find_project_config(cls, start_path: Optional[str] = None) -> Optional[Path]:
        """
        Find the closest pyproject.toml that carries a [tool.i18n-check] table.

        Args:
            start_path: Directory to start searching from (defaults to current directory)

        Returns:
            Path of the pyproject.toml or None if nothing was found
        """
        if tomllib is None:
            logging.debug("tomllib not available, using default configuration")
            return None
        current_path = Path(start_path or os.getcwd()).resolve()
        for path in [current_path] + list(current_path.parents):
            pyproject_path = path / "pyproject.toml"
            if not pyproject_path.exists():
                continue
            if cls._load_tool_config(pyproject_path):
                logging.debug("Found configuration in %s", pyproject_path)
                return pyproject_path
        return None

    @classmethod
    def _load_tool_config(cls, pyproject_path: Path) -> dict:
        """Load the i18n-check table from a pyproject.toml file."""
        try:
            with open(pyproject_path, "rb") as f:
                toml_data = tomllib.load(f)
            return toml_data.get("tool", {}).get(TOOL_SECTION, {})
        except Exception as e:
            logging.debug("Error reading %s: %s", pyproject_path, e)
            return {}

    @classmethod
    def load_include_config(cls, include_path: str) -> Tuple[dict, Path]:
        """
        Load an include file given with --include-config.

        The file may either be a pyproject.toml style document with a
        [tool.i18n-check] table or a plain TOML file with top-level keys.

        Raises:
            ConfigError: If the file does not exist or is not valid TOML
        """
        path = Path(include_path).resolve()
        if not path.is_file():
            raise ConfigError(f"Config file {include_path} does not exist")
        if tomllib is None:
            raise ConfigError("Reading TOML configuration requires Python 3.11+ or the tomli package")
        try:
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Unable to parse config file {include_path}: {e}") from e
        tool_config = toml_data.get("tool", {}).get(TOOL_SECTION)
        if tool_config is None:
            tool_config = toml_data
        return tool_config, path

    @staticmethod
    def _resolve(value: str, base_dir: Path) -> str:
        path = Path(value)
        if not path.is_absolute():
            path = base_dir / path
        return os.path.normpath(str(path))

    @classmethod
    def _resolve_paths(cls, tool_config: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
        """Make every path in a loaded table absolute relative to its file."""
        resolved = dict(tool_config)
        if 'paths' in resolved:
            paths = {}
            for domain, dirs in resolved['paths'].items():
                if isinstance(dirs, str):
                    dirs = [dirs]
                paths[domain] = [cls._resolve(d, base_dir) for d in dirs]
            resolved['paths'] = paths
        if isinstance(resolved.get('translations'), dict):
            files = []
            domains = {}
            for domain, domain_files in resolved['translations'].items():
                if isinstance(domain_files, str):
                    domain_files = [domain_files]
                for translations_path in domain_files:
                    translations_path = cls._resolve(translations_path, base_dir)
                    files.append(translations_path)
                    domains[translations_path] = domain
            resolved['translations'] = files
            resolved['translation_domains'] = domains
        for key in PATH_LIST_KEYS:
            if key in resolved:
                resolved[key] = [cls._resolve(p, base_dir) for p in resolved[key]]
        return resolved

    @staticmethod
    def _extend_unique(target: List[str], values: List[str]):
        for value in values:
            if value not in target:
                target.append(value)

    @classmethod
    def merge_into(cls, config: Dict[str, Any], tool_config: Dict[str, Any]):
        """
        Merge a loaded table into an existing configuration dictionary.

        Domains in 'paths' are merged per domain, list keys are extended
        without duplicates and every other key is overridden.
        """
        for key, value in tool_config.items():
            if key == 'paths':
                for domain, dirs in value.items():
                    cls._extend_unique(config['paths'].setdefault(domain, []), dirs)
            elif key in LIST_KEYS:
                cls._extend_unique(config.setdefault(key, []), list(value))
            elif key in ('extract_methods', 'translation_domains'):
                config[key].update(value)
            else:
                config[key] = value

    @classmethod
    def load_config(cls, include_config: Optional[str] = None, start_path: Optional[str] = None) -> I18nConfig:
        """
        Build the configuration for one run.

        Args:
            include_config: Optional extra config file to merge on top of the project config
            start_path: Directory to start the pyproject.toml search from

        Returns:
            The merged configuration
        """
        config = copy.deepcopy(cls.DEFAULT_CONFIG)
        base_dir = Path(start_path or os.getcwd()).resolve()
        config['scan_roots'] = [cls._resolve(p, base_dir) for p in config['scan_roots']]
        config_files = []

        project_config = cls.find_project_config(start_path)
        if project_config is not None:
            tool_config = cls._resolve_paths(cls._load_tool_config(project_config), project_config.parent)
            # Project roots replace the default scan root instead of extending it
            if 'scan_roots' in tool_config:
                config['scan_roots'] = []
            cls.merge_into(config, tool_config)
            config_files.append(str(project_config))

        if include_config:
            tool_config, include_path = cls.load_include_config(include_config)
            cls.merge_into(config, cls._resolve_paths(tool_config, include_path.parent))
            config_files.append(str(include_path))

        logging.debug("Final configuration: %s", config)
        try:
            return I18nConfig(config_files=config_files, **config)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def merge_configs(include_config: Optional[str] = None, start_path: Optional[str] = None) -> I18nConfig:
    """Load the project configuration and merge the include file into it."""
    return ConfigLoader.load_config(include_config, start_path)
