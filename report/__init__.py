"""
Report package: render repository bundles as text, Markdown, CSV, JSON or HTML.
"""

from .renderer import canonical_format, render

__all__ = ["canonical_format", "render"]
