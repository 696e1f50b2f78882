# Common utilities
from .config_loader import (
    SearchSettings,
    load_category_names,
    load_config,
    load_default_product_groups,
    load_question_flow,
    load_search_settings,
)
from .constants import CACHE_SCHEMA_VERSION, UNSPECIFIED
from .log_config import setup_logging
from .text_utils import fold_diacritics, german_sort_key, normalize_key
