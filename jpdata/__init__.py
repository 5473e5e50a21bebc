"""Japanese learning datasets and the Universal Export Schema toolkit.

Subpackages:
- schema: export document validation, migration and record conversion
- utils: logging and file helpers
"""

__version__ = "1.0.0"
