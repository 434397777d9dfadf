"""
Javadoc Publisher - publish released Javadoc archives to a pages branch.

Downloads the latest documentation archives of a Maven group, lays them out
by major version line inside a git working copy, regenerates the listing
pages and pushes everything in a single commit.
"""

__version__ = "0.1.0"

__all__ = []
