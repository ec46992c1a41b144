"""Configuration management for Assembly Definition Editor."""

import os
import configparser
from pathlib import Path

from asmdef_editor.constants import DEFAULT_JSON_INDENT


# Color scheme options
COLOR_SCHEMES = ["Match Windows Theme", "Light Mode", "Dark Mode"]
DEFAULT_COLOR_SCHEME = "Match Windows Theme"

# Allowed JSON indentation range
MAX_JSON_INDENT = 8


class _ConfigCache:
    """Internal class to hold config cache state without using globals."""
    config: configparser.ConfigParser | None = None
    mtime: float | None = None


_cache = _ConfigCache()


def get_appdata_dir() -> Path:
    r"""Get the application data directory in %APPDATA%\AsmdefEditor."""
    appdata = os.environ.get('APPDATA')
    if not appdata:
        appdata = Path.home() / 'AppData' / 'Roaming'
    app_dir = Path(appdata) / 'AsmdefEditor'
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_config_path() -> Path:
    """Get the path to the config.ini file."""
    return get_appdata_dir() / 'config.ini'


def config_exists() -> bool:
    """Check if the configuration file exists."""
    return get_config_path().exists()


def load_config() -> configparser.ConfigParser:
    """Load the configuration from config.ini with caching.

    The config is cached and only reloaded if the file has been modified.
    """
    config_path = get_config_path()

    if config_path.exists():
        current_mtime = config_path.stat().st_mtime
        if _cache.config is not None and _cache.mtime == current_mtime:
            return _cache.config

        config = configparser.ConfigParser()
        config.read(config_path, encoding='utf-8')
        _cache.config = config
        _cache.mtime = current_mtime
        return config
    else:
        _cache.config = None
        _cache.mtime = None
        return configparser.ConfigParser()


def save_config(
    project_root: str,
    json_indent: int = DEFAULT_JSON_INDENT,
    color_scheme: str = DEFAULT_COLOR_SCHEME
) -> None:
    """Save the configuration to config.ini.

    Args:
        project_root: Directory searched for assembly definitions and precompiled assemblies.
        json_indent: Indentation used when writing .asmdef files.
        color_scheme: The color scheme setting.
    """
    # Invalidate cache before saving
    _cache.config = None
    _cache.mtime = None

    config = configparser.ConfigParser()
    config['Project'] = {
        'root': project_root
    }
    config['Editor'] = {
        'json_indent': str(json_indent)
    }
    config['Appearance'] = {
        'color_scheme': color_scheme
    }

    config_path = get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        config.write(f)


def get_project_root() -> Path:
    """Get the project root from config, or the current directory."""
    config = load_config()
    if config.has_option('Project', 'root'):
        return Path(config.get('Project', 'root'))
    return Path.cwd()


def get_json_indent() -> int:
    """Get the JSON indentation from config, or default."""
    config = load_config()
    try:
        indent = config.getint('Editor', 'json_indent', fallback=DEFAULT_JSON_INDENT)
    except ValueError:
        return DEFAULT_JSON_INDENT
    if not 0 <= indent <= MAX_JSON_INDENT:
        return DEFAULT_JSON_INDENT
    return indent


def get_color_scheme() -> str:
    """Get the color scheme from config, or default."""
    config = load_config()
    if config.has_option('Appearance', 'color_scheme'):
        return config.get('Appearance', 'color_scheme')
    return DEFAULT_COLOR_SCHEME


def apply_color_scheme(scheme: str) -> None:
    """Apply the color scheme to CustomTkinter.

    Args:
        scheme: The color scheme to apply.
    """
    import customtkinter as ctk

    if scheme == "Light Mode":
        ctk.set_appearance_mode("light")
    elif scheme == "Dark Mode":
        ctk.set_appearance_mode("dark")
    else:  # Match Windows Theme
        ctk.set_appearance_mode("system")


def validate_config() -> list[str]:
    """Validate the current configuration and return a list of issues.

    Returns:
        List of validation issue messages. Empty if all valid.
    """
    issues = []

    project_root = get_project_root()
    if not project_root.exists():
        issues.append(f"Project root not found: {project_root}")
    elif not project_root.is_dir():
        issues.append(f"Project root is not a directory: {project_root}")

    config = load_config()
    if config.has_option('Editor', 'json_indent'):
        raw_indent = config.get('Editor', 'json_indent')
        try:
            indent = int(raw_indent)
        except ValueError:
            issues.append(f"JSON indent is not a number: {raw_indent}")
        else:
            if not 0 <= indent <= MAX_JSON_INDENT:
                issues.append(f"JSON indent must be between 0 and {MAX_JSON_INDENT}: {indent}")

    scheme = get_color_scheme()
    if scheme not in COLOR_SCHEMES:
        issues.append(f"Unknown color scheme: {scheme}")

    return issues


def is_config_valid() -> bool:
    """Check if the configuration is valid.

    Returns:
        True if configuration is valid, False otherwise.
    """
    return len(validate_config()) == 0
