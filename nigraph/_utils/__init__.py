"""The :mod:`nigraph._utils` module provides utilities for developers."""

from .cache_mixin import CacheMixin
from .docs import fill_doc
from .logger import compose_err_msg, log
from .niimg import check_niimg, fspath, load_niimg, repr_niimg

__all__ = [
    "CacheMixin",
    "check_niimg",
    "compose_err_msg",
    "fill_doc",
    "fspath",
    "load_niimg",
    "log",
    "repr_niimg",
]
