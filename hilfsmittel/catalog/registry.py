"""
Category Registry

Static lookup from category-code prefixes to human-readable names.
The table is loaded from config/categories.yaml.
"""

from typing import Dict, Optional

from ..common.config_loader import load_category_names


class CategoryRegistry:
    """
    Maps category codes to display names, longest matching prefix wins.

    Usage:
        registry = CategoryRegistry()
        registry.name_for("10.46.04.0002")   # "Rollatoren"
        registry.name_for("13.20")           # "Hörgeräte"
        registry.name_for("77.01")           # "Category 77.01"
    """

    def __init__(self, names: Optional[Dict[str, str]] = None):
        """
        Initialize the registry.

        Args:
            names: Optional prefix -> name table. If None, loads from config.
        """
        if names is None:
            names = load_category_names()
        self.names = dict(names)

    def lookup(self, code: str) -> Optional[str]:
        """
        Find the most specific registered name for a code.

        Tries the full code first, then drops one segment at a time.

        Returns:
            Display name or None if no prefix is registered
        """
        if not code:
            return None

        segments = code.split('.')
        for n in range(len(segments), 0, -1):
            prefix = '.'.join(segments[:n])
            if prefix in self.names:
                return self.names[prefix]
        return None

    def name_for(self, code: str) -> str:
        """Display name for a code, with a generic fallback."""
        return self.lookup(code) or f"Category {code}"

    def __contains__(self, code: str) -> bool:
        return code in self.names

    def __len__(self) -> int:
        return len(self.names)
