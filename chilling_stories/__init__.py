"""
Chilling Stories API

Content-management backend for a story-reading platform.
"""

__version__ = "1.0.0"
