"""\
Faultline
=========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

In-process error capture.

This package (faultline) lets application code attach a severity level
and custom data to the errors it raises, assigns a default level to the
errors nobody classified, and forwards captured errors to a pluggable
store for later retrieval.

A typical set-up looks like this::

    import faultline

    faultline.enable_default_level()
    store = faultline.MemoryErrorStore()
    faultline.observe_unhandled(store)

    try:
        sync_inventory()
    except ConnectionError as exc:
        faultline.add_log_data(exc, "Warehouse", "north")
        store.log(faultline.warning(exc))

Read complete documentation at: https://github.com/xames3/faultline.
"""

from __future__ import annotations

from .core import *
from .utils import *


__all__: tuple[str, ...] = ("__version__",)
__all__ += core.__all__
__all__ += utils.__all__

__version__: str = "18.10.2026"
