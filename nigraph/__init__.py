"""
Graph signal utilities for NeuroImaging in python.
--------------------------------------------------

nigraph provides tools to work with brain images registered to a graph
domain: resampling NIfTI volumes to new voxel resolutions, reslicing them
onto a reference grid and extracting graph signals at the voxels of graph
nodes.

Submodules
---------

exceptions              --- Errors raised by nigraph
graph                   --- Extraction of graph signals from volumes
image                   --- Resampling and reslicing of volumes
"""

from .version import __version__, _check_module_dependencies

_check_module_dependencies()

# Boolean controlling the os.path.expanduser usage when loading images and
# in CacheMixin. Set it to False to completely deactivate this behavior.
EXPAND_PATH_WILDCARDS = True

# list all submodules available in nigraph and version
__all__ = [
    "__version__",
    "exceptions",
    "graph",
    "image",
]
