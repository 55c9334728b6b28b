"""Neuroimaging file input and output."""

import contextlib
import gzip
import os
import shutil
import tempfile
from pathlib import Path

import numpy as np
from nibabel import load, spatialimages
from nibabel.openers import Opener
from nibabel.volumeutils import array_to_file, seek_tell

import nigraph

from ..exceptions import UnknownFormatError
from .exceptions import DimensionError

NIFTI_EXTENSIONS = (".nii.gz", ".nii")


def fspath(obj):
    """Return the filename of path-like objects, other objects unchanged."""
    if isinstance(obj, os.PathLike):
        return os.fspath(obj)
    return obj


def split_nifti_extension(filename):
    """Split a NIfTI filename into its stem and extension.

    Parameters
    ----------
    filename : :obj:`str` or :class:`pathlib.Path`
        Path to a ``.nii`` or ``.nii.gz`` file.

    Returns
    -------
    stem : :obj:`str`
        Filename without the extension (directory included).

    extension : {".nii", ".nii.gz"}
        The NIfTI extension.

    Raises
    ------
    UnknownFormatError
        If the filename does not end with a NIfTI extension.

    """
    filename = str(fspath(filename))
    for extension in NIFTI_EXTENSIONS:
        if filename.endswith(extension):
            return filename[: -len(extension)], extension
    raise UnknownFormatError(
        f"Unknown input file format: '{filename}'. "
        f"Expected one of {NIFTI_EXTENSIONS}."
    )


def is_compressed(filename):
    """Return True if filename points to a gzip compressed NIfTI file."""
    return split_nifti_extension(filename)[1] == ".nii.gz"


def _short_repr(niimg_rep, truncate=20):
    """Give a shorter version of niimg representation."""
    path_to_niimg = Path(niimg_rep)
    if len(path_to_niimg.name) > truncate:
        return f"{path_to_niimg.name[: (truncate - 2)]}..."
    return path_to_niimg.name


def repr_niimg(niimg):
    """Pretty printing of a niimg, for error messages."""
    if isinstance(niimg, (str, Path)):
        return _short_repr(niimg)
    filename = getattr(niimg, "get_filename", lambda: None)()
    if filename is not None:
        return f"{niimg.__class__.__name__}('{_short_repr(filename)}')"
    if hasattr(niimg, "affine"):
        return (
            f"{niimg.__class__.__name__}"
            f"(\nshape={niimg.shape!r},"
            f"\naffine={niimg.affine!r}\n)"
        )
    return _short_repr(repr(niimg), truncate=40)


def load_niimg(niimg):
    """Load a niimg, check if it is a nibabel SpatialImage.

    Parameters
    ----------
    niimg : :obj:`str`, :class:`pathlib.Path` or SpatialImage
        Image to load.

    Returns
    -------
    img : image
        A loaded image object.

    """
    niimg = fspath(niimg)
    if isinstance(niimg, str):
        # data is a filename, we load it
        niimg = load(niimg)
    elif not isinstance(niimg, spatialimages.SpatialImage):
        raise TypeError(
            "Data given cannot be loaded because it is"
            " not compatible with nibabel format:\n" + repr_niimg(niimg)
        )
    return niimg


def check_niimg(niimg, ensure_ndim=None):
    """Check that niimg is a proper 3D/4D niimg and load it if needed.

    Parameters
    ----------
    niimg : :obj:`str`, :class:`pathlib.Path` or SpatialImage
        If niimg is a path, it is loaded with nibabel.
        The ``'~'`` symbol is expanded to the user home folder when
        ``nigraph.EXPAND_PATH_WILDCARDS`` is True.

    ensure_ndim : {3, 4, None}, default=None
        Required dimensionality. If None, 3D and 4D images are accepted.

    Returns
    -------
    img : SpatialImage
        The loaded image.

    """
    niimg = fspath(niimg)
    if isinstance(niimg, str):
        if nigraph.EXPAND_PATH_WILDCARDS:
            niimg = str(Path(niimg).expanduser())
        split_nifti_extension(niimg)
        if not Path(niimg).exists():
            raise FileNotFoundError(f"File not found: '{niimg}'")

    niimg = load_niimg(niimg)

    ndim = len(niimg.shape)
    if ensure_ndim is None:
        if ndim not in (3, 4):
            raise DimensionError(ndim, (3, 4))
    elif ndim != ensure_ndim:
        raise DimensionError(ndim, ensure_ndim)
    return niimg


def iter_frames(img):
    """Yield the 3D volumes of a 3D or 4D image as float arrays.

    Intensity scaling stored in the header is applied. Only one frame is
    read in memory at a time.
    """
    if len(img.shape) == 3:
        yield np.asarray(img.dataobj, dtype=np.float64)
        return
    for t in range(img.shape[3]):
        yield np.asarray(img.dataobj[..., t], dtype=np.float64)


@contextlib.contextmanager
def uncompressed_copy(filename, tmp_dir=None):
    """Provide an uncompressed working copy of a NIfTI file.

    If ``filename`` is a ``.nii.gz`` file, it is decompressed in a
    temporary directory which is removed when the context exits, whether
    an exception was raised or not. Uncompressed files are yielded as is
    and never removed.

    Parameters
    ----------
    filename : :obj:`str` or :class:`pathlib.Path`
        ``.nii`` or ``.nii.gz`` file.

    tmp_dir : :obj:`str`, :class:`pathlib.Path` or None, default=None
        Directory in which the temporary directory is created.
        Defaults to the system temporary directory.

    Yields
    ------
    working_file : :obj:`str`
        Path to an uncompressed NIfTI file.

    """
    filename = Path(fspath(filename))
    if not is_compressed(filename):
        yield str(filename)
        return

    if not filename.exists():
        raise FileNotFoundError(f"File not found: '{filename}'")
    tmp_dir = fspath(tmp_dir)
    with tempfile.TemporaryDirectory(prefix="nigraph_", dir=tmp_dir) as tmp:
        working_file = Path(tmp) / filename.name[: -len(".gz")]
        with gzip.open(filename) as gz, working_file.open("wb") as out:
            shutil.copyfileobj(gz, out, 8192)
        yield str(working_file)


class NiftiPlaneWriter:
    """Write a NIfTI-1 file plane by plane.

    The header is written when the writer is opened; voxel data are then
    written one plane (fixed third index) at a time, in increasing plane
    and frame order, which is the on-disk (Fortran) order of NIfTI data.
    Values are stored as ``(value - inter) / slope`` with the datatype and
    scaling of the header, which are never recomputed.

    Files ending with ``.gz`` are gzip compressed on the fly.

    Parameters
    ----------
    filename : :obj:`str` or :class:`pathlib.Path`
        Output ``.nii`` or ``.nii.gz`` file.

    header : :class:`nibabel.nifti1.Nifti1Header`
        Header of the output file. Its data shape, datatype and scaling
        are used to lay out the data.

    """

    def __init__(self, filename, header):
        split_nifti_extension(filename)
        self.filename = str(fspath(filename))
        self.header = header
        self.shape = tuple(int(s) for s in header.get_data_shape())
        if len(self.shape) not in (3, 4):
            raise DimensionError(len(self.shape), (3, 4))
        self.dtype = header.get_data_dtype()
        slope, inter = header.get_slope_inter()
        self.slope = 1.0 if slope is None else float(slope)
        self.inter = 0.0 if inter is None else float(inter)
        self.n_frames = self.shape[3] if len(self.shape) == 4 else 1
        self._opener = None
        self._offset = None
        self._next = 0

    @property
    def plane_nbytes(self):
        return self.shape[0] * self.shape[1] * self.dtype.itemsize

    def open(self):
        self._opener = Opener(self.filename, "wb")
        fileobj = self._opener.fobj
        # vox_offset is recomputed by nibabel from the extensions
        self.header["vox_offset"] = 0
        self.header.write_to(fileobj)
        self._offset = int(self.header.get_data_offset())
        seek_tell(fileobj, self._offset, write0=True)
        self._next = 0
        return self

    def close(self):
        if self._opener is not None:
            self._opener.close()
            self._opener = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def complete(self):
        """Whether every plane of every frame has been written."""
        return self._next == self.shape[2] * self.n_frames

    def write_plane(self, plane, k, frame=0):
        """Write plane ``k`` of ``frame``.

        Planes must be written strictly in order: plane ``k + 1`` of a
        frame after plane ``k``, and the first plane of frame ``t + 1``
        after the last plane of frame ``t``.
        """
        if self._opener is None:
            raise RuntimeError(f"{self.filename} is not open for writing.")
        index = frame * self.shape[2] + k
        if index != self._next:
            raise ValueError(
                f"Planes must be written in order: expected plane "
                f"{self._next % self.shape[2]} of frame "
                f"{self._next // self.shape[2]}, got plane {k} of "
                f"frame {frame}."
            )
        plane = np.asarray(plane)
        if plane.shape != self.shape[:2]:
            raise ValueError(
                f"Plane shape {plane.shape} does not match the "
                f"in-plane shape {self.shape[:2]} of the output."
            )
        array_to_file(
            plane,
            self._opener.fobj,
            out_dtype=self.dtype,
            offset=self._offset + index * self.plane_nbytes,
            intercept=self.inter,
            divslope=self.slope,
            order="F",
        )
        self._next += 1
