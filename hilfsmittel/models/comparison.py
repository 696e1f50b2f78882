"""
Comparison data models.

Fields and rows of a product comparison view. They live only for the
duration of one comparison and are never persisted.
"""

from dataclasses import dataclass, field
from typing import Dict, List

# Mapping of ComparisonField.key -> cleaned value (or the UNSPECIFIED sentinel)
ExtractedSpec = Dict[str, str]


@dataclass
class ComparisonField:
    """A de-duplicated, human-labeled technical attribute."""
    key: str
    label: str
    icon: str = "📋"
    # Every raw label merged into this field, in first-seen order
    aliases: List[str] = field(default_factory=list)


@dataclass
class ComparisonTable:
    """Merged field schema plus one extracted row per compared product."""
    category: str
    fields: List[ComparisonField]
    rows: List[ExtractedSpec]

    def column(self, key: str) -> List[str]:
        """All products' values for one field, in product order."""
        return [row.get(key, "") for row in self.rows]
