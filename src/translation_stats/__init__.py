"""Translation Stats: WordPress translation file sync.

This package provides tools for:
- Resolving WordPress locales to translate.wordpress.org metadata
- Downloading project translations as PO files
- Compiling them to MO and JSON files
- Showing debug information about settings and cached data
"""

__version__ = "1.0.0"
