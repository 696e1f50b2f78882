"""
Hilfsmittel Finder

Search and comparison engine for the GKV Hilfsmittelverzeichnis
(statutory health insurance medical-aid catalog).

Modules:
    models      - Data models (ProductRecord, SearchCriteria, SearchResult, ...)
    common      - Shared utilities (config loader, logging, text helpers)
    criteria    - Questionnaire answers -> structured search criteria
    catalog     - Catalog retrieval, normalization and persistent caching
    search      - Relevance ranking, feature filters, facets and pagination
    comparison  - Dynamic comparison-field discovery and value extraction
    enrichment  - Interface to the external text-generation service
"""

__version__ = "1.0.0"
