"""Caching of estimator computations with joblib."""

from pathlib import Path

from joblib import Memory

import nigraph

from .niimg import fspath


def check_memory(memory, verbose=0):
    """Return a joblib.Memory for a cache location.

    Parameters
    ----------
    memory : None, instance of joblib.Memory, str or pathlib.Path
        Cache directory, or a Memory object which is returned as is.
        None gives a Memory which does not cache anything.

    verbose : int, default=0
        Verbosity of the created Memory.

    Returns
    -------
    memory : instance of joblib.Memory

    """
    if isinstance(memory, Memory):
        return memory
    if memory is None:
        return Memory(location=None, verbose=verbose)

    memory = fspath(memory)
    if not isinstance(memory, str):
        raise TypeError(
            "memory should be None, a path or a joblib.Memory object. "
            f"Got {memory!r} of type {type(memory).__name__}."
        )
    cache_dir = Path(memory)
    if nigraph.EXPAND_PATH_WILDCARDS:
        cache_dir = cache_dir.expanduser()
    # joblib creates the cache directory, but not its parents
    if not cache_dir.parent.exists():
        raise ValueError(
            "The parent directory of the cache does not exist: "
            f"'{cache_dir.parent}'."
        )
    return Memory(location=str(cache_dir), verbose=verbose)


class CacheMixin:
    """Mixin caching the calls made by an estimator.

    The estimator is expected to have ``memory``, ``memory_level`` and
    ``verbose`` parameters. Calls wrapped with :meth:`_cache` are cached
    when ``memory`` points to a cache and ``memory_level`` is at least the
    level of the call.
    """

    def _cache(self, func, func_memory_level=1):
        verbose = getattr(self, "verbose", 0)
        if getattr(self, "memory_level", 1) < func_memory_level:
            # checked first: joblib creates the cache directory
            memory = Memory(location=None, verbose=verbose)
        else:
            memory = check_memory(getattr(self, "memory", None), verbose)
        return memory.cache(func)
