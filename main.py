"""Cloud Function Entry Point - Root Module.

This is the root-level entry point for Google Cloud Functions.
It imports from the src package.
"""

from src.main import quake_atlas

__all__ = [
    "quake_atlas",
]
