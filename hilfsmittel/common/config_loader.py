"""
Configuration Loader

Loads YAML configuration files for category names, the questionnaire
and search tuning constants.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List

import yaml


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'categories.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_category_names() -> Dict[str, str]:
    """
    Load category code -> display name table.

    Returns:
        Dictionary mapping category-code prefixes to German names

    Example:
        {
            '13.20': 'Hörgeräte',
            '10.46.04': 'Rollatoren',
            ...
        }
    """
    config = load_config('categories.yaml')
    # YAML may parse keys like 13.20 as floats unless quoted; force strings
    return {str(code): str(name) for code, name in config.get('categories', {}).items()}


def load_question_flow() -> Dict[str, List[Dict[str, Any]]]:
    """
    Load the questionnaire table.

    Returns:
        Dictionary mapping questionnaire category (mobility, hearing, ...)
        to its ordered list of question definitions
    """
    config = load_config('questions.yaml')
    return config.get('questions', {})


def load_default_product_groups() -> Dict[str, str]:
    """
    Load the fallback category prefix per questionnaire category.

    Returns:
        Dictionary like {'mobility': '10.46', 'hearing': '13.20', ...}
    """
    config = load_config('questions.yaml')
    return {str(k): str(v) for k, v in config.get('default_product_groups', {}).items()}


@dataclass
class SearchSettings:
    """
    Tuning constants for retrieval, caching and ranking.

    These values were chosen empirically; they are not correctness
    requirements and can be overridden in config/search.yaml.
    """

    # Relevance pre-filter
    relevance_threshold: int = 1000
    relevance_cap: int = 200

    # Relevance points
    device_type_points: int = 20
    high_priority_points: int = 10
    medium_priority_points: int = 7
    low_priority_points: int = 5
    severity_points: int = 5
    feature_bonus_points: int = 5
    feature_bonus_min_count: int = 3

    # Caching
    catalog_ttl_hours: float = 24
    metadata_ttl_hours: float = 168

    # Network
    max_attempts: int = 3
    base_delay: float = 1.0
    request_timeout: int = 60
    detail_batch_size: int = 4
    detail_batch_delay: float = 0.2

    # Pagination
    default_page_size: int = 20


def load_search_settings() -> SearchSettings:
    """
    Load search settings, overlaying config/search.yaml on the defaults.

    Unknown keys in the YAML file are ignored. A missing file yields
    the built-in defaults.
    """
    try:
        config = load_config('search.yaml')
    except FileNotFoundError:
        return SearchSettings()

    overrides = config.get('search', {}) or {}
    known = {f.name for f in fields(SearchSettings)}
    return SearchSettings(**{k: v for k, v in overrides.items() if k in known})
