"""Parameter descriptions shared by the nigraph docstrings.

A docstring decorated with :func:`fill_doc` can include an entry with
``%(name)s``, on a line of its own, at the indentation of its parameters.
"""

import textwrap

# Entries in alphabetical order.
docdict = {}

# frames
docdict["frames"] = """
frames : array-like of :obj:`int` or None, default=None
    0-based indices of the frames (4th dimension) to extract signals from.
    Indices must be unique and within the number of frames of the image.
    By default all frames are used. For a 3D image, the single volume is
    frame 0.
"""

# graph_ref_img
docdict["graph_ref_img"] = """
graph_ref_img : :obj:`str`, :class:`pathlib.Path`, \
:class:`nibabel.nifti1.Nifti1Image` or None, default=None
    Image in register with the space in which the graph was defined,
    typically the mask the graph was built from. Its shape and affine
    define the reference grid.
"""

# img
docdict["img"] = """
img : :obj:`str`, :class:`pathlib.Path` or \
:class:`nibabel.nifti1.Nifti1Image`
    3D or 4D volume. If a path is given, it must point to a ``.nii`` or
    ``.nii.gz`` file.
"""

# indices
docdict["indices"] = """
indices : array-like of :obj:`int`
    Flat, 0-based voxel indices of the graph nodes, in Fortran
    (column-major) order, which is the order in which NIfTI files store
    voxels. Use ``np.ravel_multi_index(ijk, shape, order="F")`` to build
    them from voxel coordinates.
"""

# interp_order
interp_order = """
interp_order : :obj:`int`, default={}
    Order of the interpolation, in the range 0 to 5.
    `0` is nearest neighbour, `1` is (tri)linear and higher values are
    B-splines of that order.
"""
docdict["interp_order"] = interp_order.format(1)

# memory
docdict["memory"] = """
memory : None, instance of :class:`joblib.Memory`, :obj:`str`, or \
:class:`pathlib.Path`
    Used to cache the extraction process.
    By default, no caching is done.
    If a :obj:`str` is given, it is the path to the caching directory.
"""

# memory_level
docdict["memory_level1"] = """
memory_level : :obj:`int`, default=1
    Caching level. Signal extraction is cached when ``memory_level`` is
    at least 1 and ``memory`` is set. Zero means no caching.
"""

# memory_safe
docdict["memory_safe"] = """
memory_safe : :obj:`bool`, default=True
    Only used by the ``"full3D"`` strategy. If True, sampling coordinates
    are built for one output plane at a time, which bounds memory usage to
    a single slice. If False, the full coordinate grid is built at once,
    which is faster but uses more memory. Results are identical.
"""

# resolution
docdict["resolution"] = """
resolution : :obj:`float` or sequence of 3 :obj:`float`
    Target voxel size in millimetres. A scalar gives isotropic voxels,
    a sequence gives one value per axis.
    Must not be finer than the input voxel spacing on any axis.
"""

# strategy
docdict["strategy"] = """
strategy : {"full3D", "slice2D"}, default="full3D"
    How output voxels are computed. ``"full3D"`` samples the input volume
    at coordinates composed for whole planes (or the whole volume),
    ``"slice2D"`` samples one affine-mapped slice at a time.
    Both give numerically equivalent results. The aliases
    ``"approach1"`` and ``"approach2"`` are also accepted.
"""

# strict_affine
docdict["strict_affine"] = """
strict_affine : :obj:`bool`, default=True
    If True, the linear part of the input affine must be diagonal
    (no rotation nor shear), otherwise
    :class:`~nigraph.exceptions.UnsupportedAffineError` is raised.
    If False, any invertible affine is accepted and voxel spacings are
    taken as the norms of its columns.
"""

# verbose
verbose = """
verbose : :obj:`int`, default={}
    Verbosity level (`0` means no message).
"""
docdict["verbose"] = verbose.format(1)
docdict["verbose0"] = verbose.format(0)


def _indent_entries(indent):
    """Return docdict with every line but the first indented."""
    return {
        name: textwrap.indent(entry, indent).lstrip(" ")
        for name, entry in docdict.items()
    }


def fill_doc(f):
    """Replace the ``%(name)s`` entries of a docstring with docdict ones.

    Entries are indented like the second line of the docstring. Unknown
    entries raise a RuntimeError naming the decorated object.
    """
    docstring = f.__doc__
    if not docstring:
        return f
    body = docstring.splitlines()[1:]
    indents = [len(line) - len(line.lstrip()) for line in body if line.strip()]
    entries = _indent_entries(" " * min(indents, default=0))
    try:
        f.__doc__ = docstring % entries
    except (TypeError, ValueError, KeyError) as exc:
        raise RuntimeError(f"Error documenting {f.__name__}:\n{exc!s}")
    return f
