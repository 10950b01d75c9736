"""
Top-level package for the social-media buzz browser.

This package exposes the filter-state engine and its collaborators.
Most code should import from submodules such as:
    buzz_browser.core
    buzz_browser.services
    buzz_browser.analysis
"""

__all__: list[str] = []
