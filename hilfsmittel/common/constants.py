"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Cache schema version.
# Bump whenever record normalization or the cached payload shape changes:
# every persisted entry carrying another version is discarded on read.
CACHE_SCHEMA_VERSION = "catalog-v3"

# Sentinel shown for comparison fields without usable source data
UNSPECIFIED = "Nicht angegeben"

# Canonical values for boolean-style technical attributes
AFFIRMATIVE = "Ja"
NEGATIVE = "Nein"

SECONDS_PER_HOUR = 60 * 60
