"""\
Core
====

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, August 02 2025
Last updated on: Sunday, October 18 2026

This module acts as an entry point for combining the core objects of
this framework: levels, error metadata, classification, the default
level policy, channels, hooks and stores.
"""

from __future__ import annotations

from .channel import *
from .classify import *
from .config import *
from .data import *
from .exceptions import *
from .hooks import *
from .levels import *
from .policy import *
from .store import *


__all__: tuple[str, ...] = (
    channel.__all__
    + classify.__all__
    + config.__all__
    + data.__all__
    + exceptions.__all__
    + hooks.__all__
    + levels.__all__
    + policy.__all__
    + store.__all__
)
