"""
Estatesite - Core Package

This package contains the back end of the real-estate marketing site,
including the REST API, persistence layer, and listing search.
"""

__version__ = "0.1.0"
