"""
Shared utility functions.

Formatting helpers for presenting peer traffic and timings live in
``formatting``; import them from there.
"""

from typing import List

__all__: List[str] = []
