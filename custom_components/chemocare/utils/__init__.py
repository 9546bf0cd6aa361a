# File: utils/__init__.py
"""Pure Python utilities for ChemoCare.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed in this module.

Submodules:
    - dt_utils: Calendar day arithmetic, ISO date and time-of-day parsing
    - math_utils: Progress calculations

Usage:
    from . import dt_utils
    from .math_utils import calculate_progress_percent
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
