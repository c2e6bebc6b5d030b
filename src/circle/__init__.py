"""
circle-contacts: per-user contact management with JSON/CSV import and export.
"""

__version__ = "0.1.0"
