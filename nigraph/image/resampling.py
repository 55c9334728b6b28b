"""Utilities to resample NIfTI volumes to a new voxel resolution.

The output grid is derived from the input one by changing the voxel size
only. The orientation is kept, and output voxel ``m`` along an axis of scale
factor ``s`` samples input voxel ``(m + 1) * s - 1``. This is the grid SPM
gets by keeping the translation of its 1-based affine, and the last input
voxel is sampled when the scale factor divides the input dimension.
Each output voxel is filled by sampling the input volume at the position
``inv(input_affine) @ output_affine @ (i, j, k, 1)``.
"""

import itertools
import numbers
import warnings
from pathlib import Path

import numpy as np
from nibabel import Nifti1Header, Nifti1Image, is_proxy
from scipy import linalg
from scipy.ndimage import affine_transform, map_coordinates, spline_filter

from .._utils import fill_doc, fspath, log, repr_niimg
from .._utils.niimg import (
    NiftiPlaneWriter,
    check_niimg,
    is_compressed,
    iter_frames,
    split_nifti_extension,
    uncompressed_copy,
)
from ..exceptions import UnsupportedAffineError, UnsupportedOperationError

# Off-diagonal terms of a "diagonal" affine, and scale factors of a
# resolution-preserving request, are compared to this tolerance.
AFFINE_TOLERANCE = 1e-6

STRATEGIES = ("full3D", "slice2D")

STRATEGY_ALIASES = {"approach1": "full3D", "approach2": "slice2D"}

###############################################################################
# Affine utils


def to_matrix_vector(transform):
    """Split a homogeneous transform into its linear part and translation.

    For a (4, 4) affine, returns the (3, 3) matrix and the (3,) vector.
    The last row is not checked: :func:`from_matrix_vector` only inverts
    this for affines whose last row is ``(0, 0, 0, 1)``.
    """
    transform = np.asarray(transform)
    return transform[:-1, :-1], transform[:-1, -1]


def from_matrix_vector(matrix, vector):
    """Build the homogeneous transform of a linear part and a translation.

    See Also
    --------
    to_matrix_vector

    """
    matrix = np.asarray(matrix)
    n_rows, n_cols = matrix.shape
    transform = np.eye(n_rows + 1, n_cols + 1, dtype=matrix.dtype)
    transform[:n_rows, :n_cols] = matrix
    transform[:n_rows, n_cols] = vector
    return transform


def coord_transform(x, y, z, affine):
    """Apply an affine to x, y, z coordinates.

    The coordinates can be numbers, or arrays of any shape which are
    transformed point-wise.

    Parameters
    ----------
    x, y, z : number or numpy.ndarray
        Coordinates along each axis, e.g. voxel indices.

    affine : numpy.ndarray of shape (4, 4)
        Affine mapping the input space to the output one, e.g. an image
        affine mapping voxel indices to millimetres.

    Returns
    -------
    x, y, z : number or numpy.ndarray
        Transformed coordinates, of the same type and shape as the input.

    Examples
    --------
    Find the millimetre coordinates of the voxel (1, 2, 3) of an image with
    2mm voxels::

        >>> import numpy as np
        >>> from nigraph.image import coord_transform
        >>> affine = np.diag([2.0, 2.0, 2.0, 1.0])
        >>> coord_transform(1, 2, 3, affine)
        (2.0, 4.0, 6.0)

    """
    shape = np.shape(x)
    points = np.stack(
        [np.ravel(x), np.ravel(y), np.ravel(z), np.ones(np.size(x))]
    )
    x_, y_, z_, _ = np.dot(affine, points)
    if isinstance(x, numbers.Number):
        return x_.item(), y_.item(), z_.item()
    return x_.reshape(shape), y_.reshape(shape), z_.reshape(shape)


def get_bounds(shape, affine):
    """Return the extent of a grid along each axis of the output space.

    Parameters
    ----------
    shape : tuple of 3 :obj:`int`
        Shape of the grid.

    affine : numpy.ndarray of shape (4, 4)
        Affine of the grid.

    Returns
    -------
    bounds : :obj:`list` of 3 :obj:`tuple`
        ``(min, max)`` coordinates along each axis, of the centres of the
        corner voxels.

    """
    corners = np.array(list(itertools.product(*[(0, n - 1) for n in shape])))
    x, y, z = coord_transform(*corners.T.astype(np.float64), affine)
    return [(c.min(), c.max()) for c in (x, y, z)]


class BoundingBoxError(ValueError):
    """Raised when a target grid does not overlap the volume to reslice."""


###############################################################################
# Resampling geometry


def check_affine(affine, strict=True):
    """Check that an affine can be resampled and return its voxel spacing.

    Parameters
    ----------
    affine : array-like of shape (4, 4)
        Affine mapping voxel indices to millimetres.

    strict : :obj:`bool`, default=True
        If True, the linear part of the affine must be diagonal.
        Otherwise any invertible affine is accepted.

    Returns
    -------
    spacing : numpy.ndarray of shape (3,)
        Voxel size along each axis, in millimetres. In strict mode, this is
        the absolute value of the diagonal, otherwise the norm of each
        column of the linear part.

    Raises
    ------
    UnsupportedAffineError
        If the affine is not (4, 4), is singular, or, in strict mode,
        contains rotations or shears.

    """
    affine = np.asarray(affine, dtype=np.float64)
    if affine.shape != (4, 4):
        raise UnsupportedAffineError(
            f"The affine should be a (4, 4) matrix, got shape {affine.shape}."
        )
    matrix, _ = to_matrix_vector(affine)
    if strict:
        off_diagonal = matrix - np.diag(np.diag(matrix))
        if np.any(np.abs(off_diagonal) > AFFINE_TOLERANCE):
            raise UnsupportedAffineError(
                "The affine contains rotations or shears:\n"
                f"{affine}\n"
                "Only affines with a diagonal linear part can be "
                "resampled in strict mode. Reorient the image first, or "
                "use strict_affine=False."
            )
        spacing = np.abs(np.diag(matrix))
    else:
        spacing = np.sqrt(np.sum(matrix**2, axis=0))

    if np.any(spacing < AFFINE_TOLERANCE) or np.linalg.matrix_rank(matrix) < 3:
        raise UnsupportedAffineError(
            f"The affine is singular:\n{affine}\n"
            "Every axis needs a non-zero voxel size."
        )
    return spacing


def _check_resolution(resolution):
    """Broadcast a scalar resolution to 3 axes and validate it."""
    resolution = np.asarray(resolution, dtype=np.float64).ravel()
    if resolution.size == 1:
        resolution = np.repeat(resolution, 3)
    if resolution.size != 3:
        raise ValueError(
            "The resolution should be a scalar or have one value per "
            f"spatial axis (3 values). Got {resolution.size} values."
        )
    if not np.all(np.isfinite(resolution)) or np.any(resolution <= 0):
        raise ValueError(
            "The resolution should be strictly positive. "
            f"Got {resolution.tolist()}."
        )
    return resolution


def _check_interp_order(interp_order):
    if (
        not isinstance(interp_order, numbers.Integral)
        or isinstance(interp_order, bool)
        or not 0 <= interp_order <= 5
    ):
        raise ValueError(
            "interp_order should be an integer between 0 and 5. "
            f"Got {interp_order!r}."
        )


def _round_half_up(values):
    # numpy rounds half to even: 4.5 must give 5 voxels, not 4
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(int)


def compute_resampled_geometry(shape, affine, resolution, strict=True):
    """Compute the grid of a volume resampled to a new resolution.

    Parameters
    ----------
    shape : tuple of :obj:`int`
        Shape of the input volume. Only the first 3 values are used.

    affine : array-like of shape (4, 4)
        Affine of the input volume.

    resolution : :obj:`float` or sequence of 3 :obj:`float`
        Target voxel size in millimetres.

    strict : :obj:`bool`, default=True
        See :func:`check_affine`.

    Returns
    -------
    target_shape : :obj:`tuple` of 3 :obj:`int`
        ``round(shape / scale)``, at least 1 along each axis.

    target_affine : numpy.ndarray of shape (4, 4)
        Input affine with each column of its linear part multiplied by the
        scale factor of its axis. The translation is moved by
        ``(scale - 1)`` input voxels, so that voxel ``(-1, -1, -1)`` is
        at the same position in both grids.

    scale : numpy.ndarray of shape (3,)
        ``resolution / spacing`` along each axis. Values above 1 mean
        downsampling.

    """
    resolution = _check_resolution(resolution)
    affine = np.asarray(affine, dtype=np.float64)
    spacing = check_affine(affine, strict=strict)
    scale = resolution / spacing

    target_shape = _round_half_up(np.asarray(shape[:3]) / scale)
    target_shape = tuple(max(int(n), 1) for n in target_shape)

    matrix, vector = to_matrix_vector(affine)
    # voxel (-1, -1, -1), i.e. voxel 0 counted from 1, stays in place
    target_affine = from_matrix_vector(
        matrix * scale, vector + np.dot(matrix, scale - 1)
    )
    return target_shape, target_affine, scale


def voxel_transform(source_affine, target_affine):
    """Return the affine mapping target voxel indices to source indices.

    This is ``inv(source_affine) @ target_affine``: target voxel indices are
    first mapped to millimetres with the target affine, then to (generally
    non integer) source voxel indices.
    """
    source_affine = np.asarray(source_affine, dtype=np.float64)
    target_affine = np.asarray(target_affine, dtype=np.float64)
    if np.allclose(source_affine, target_affine):
        # Small trick to be more numerically stable
        return np.eye(4)
    transform = np.dot(linalg.inv(source_affine), target_affine)
    # Entries that are integers up to rounding errors are snapped, so that
    # points on the edge of the source grid stay inside it
    rounded = np.round(transform)
    snap = np.abs(transform - rounded) < 1e-10
    transform[snap] = rounded[snap]
    return transform


###############################################################################
# Sampling primitives


def _prefilter(data, interp_order):
    """Compute spline coefficients once for all the sampling calls."""
    if interp_order > 1:
        return spline_filter(
            data, order=interp_order, output=np.float64, mode="constant"
        )
    return np.asarray(data, dtype=np.float64)


def _sample_volume(coefficients, x, y, z, interp_order):
    """Sample a volume at arbitrary voxel coordinates.

    Points outside of the volume are set to 0.
    """
    return map_coordinates(
        coefficients,
        np.array([x, y, z]),
        output=np.float64,
        order=interp_order,
        mode="constant",
        cval=0.0,
        prefilter=False,
    )


def _sample_slice(coefficients, slice_affine, plane_shape, interp_order):
    """Sample a 2D plane of a volume.

    ``slice_affine`` maps the indices ``(i, j, 0)`` of the plane to voxel
    coordinates of the volume. Points outside of the volume are set to 0.
    """
    matrix, offset = to_matrix_vector(slice_affine)
    # Always a 3x3 matrix: a 1D one would go through scipy's zoom code,
    # whose edge handling differs from map_coordinates.
    plane = affine_transform(
        coefficients,
        matrix,
        offset=offset,
        output_shape=(*plane_shape, 1),
        output=np.float64,
        order=interp_order,
        mode="constant",
        cval=0.0,
        prefilter=False,
    )
    return plane[:, :, 0]


###############################################################################
# Strategies


class BaseResamplingStrategy:
    """Base class of the resampling strategies.

    A strategy computes the planes (fixed third index) of the output grid,
    in increasing order, from an input volume and the transform mapping
    output voxel indices to input voxel indices.
    """

    name = None
    supports_upsampling = False

    def check_scale(self, scale):
        """Raise if the strategy cannot handle these scale factors."""
        scale = np.asarray(scale, dtype=np.float64)
        upsampled = scale < 1 - AFFINE_TOLERANCE
        if np.any(upsampled) and not self.supports_upsampling:
            raise UnsupportedOperationError(
                f"The '{self.name}' strategy can only downsample, but the "
                "target resolution is finer than the input voxel size "
                f"along axes {np.flatnonzero(upsampled).tolist()} "
                f"(scale factors: {np.round(scale, 6).tolist()})."
            )

    def check_transform(self, transform):
        """Raise if the strategy cannot apply this transform."""

    def iter_planes(self, data, transform, target_shape, interp_order):
        """Yield ``(k, plane)`` for each output plane, in increasing ``k``.

        Parameters
        ----------
        data : numpy.ndarray
            3D input volume.

        transform : numpy.ndarray of shape (4, 4)
            Affine mapping output voxel indices to input voxel indices,
            see :func:`voxel_transform`.

        target_shape : tuple of 3 :obj:`int`
            Shape of the output grid.

        interp_order : :obj:`int`
            Order of the interpolation.

        """
        raise NotImplementedError

    def resample(self, data, transform, target_shape, interp_order):
        """Return the whole resampled volume."""
        resampled = np.zeros(target_shape, dtype=np.float64, order="F")
        for k, plane in self.iter_planes(
            data, transform, target_shape, interp_order
        ):
            resampled[:, :, k] = plane
        return resampled

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class Full3DStrategy(BaseResamplingStrategy):
    """Sample the input volume at coordinates composed in 3D.

    Parameters
    ----------
    memory_safe : :obj:`bool`, default=True
        If True, coordinates are composed and sampled one output plane at a
        time. If False, the coordinates of the whole output grid are composed
        and sampled at once before the planes are yielded.

    """

    name = "full3D"

    def __init__(self, memory_safe=True):
        self.memory_safe = memory_safe

    def iter_planes(self, data, transform, target_shape, interp_order):
        coefficients = _prefilter(data, interp_order)
        nx, ny, nz = target_shape
        if self.memory_safe:
            xx, yy = np.meshgrid(np.arange(nx), np.arange(ny), indexing="ij")
            for k in range(nz):
                x, y, z = coord_transform(
                    xx, yy, np.full_like(xx, k), transform
                )
                yield k, _sample_volume(coefficients, x, y, z, interp_order)
            return

        xx, yy, zz = np.meshgrid(
            np.arange(nx), np.arange(ny), np.arange(nz), indexing="ij"
        )
        x, y, z = coord_transform(xx, yy, zz, transform)
        resampled = _sample_volume(coefficients, x, y, z, interp_order)
        for k in range(nz):
            yield k, resampled[:, :, k]

    def __repr__(self):
        return f"{self.__class__.__name__}(memory_safe={self.memory_safe})"


class Slice2DStrategy(BaseResamplingStrategy):
    """Sample the input volume one output slice at a time.

    For output slice ``k``, the transform is composed with a translation of
    ``k`` along the third axis, giving the affine that maps the 2D indices
    of the slice to input voxel coordinates. This requires the transform
    not to mix the third axis with the first two.
    """

    name = "slice2D"

    def check_transform(self, transform):
        matrix, _ = to_matrix_vector(np.asarray(transform))
        if np.any(np.abs(matrix[2, :2]) > AFFINE_TOLERANCE) or np.any(
            np.abs(matrix[:2, 2]) > AFFINE_TOLERANCE
        ):
            raise UnsupportedOperationError(
                f"The '{self.name}' strategy needs a transform that maps "
                "output slices onto input slices, but the transform mixes "
                f"the third axis with the others:\n{transform}"
            )

    def iter_planes(self, data, transform, target_shape, interp_order):
        self.check_transform(transform)
        coefficients = _prefilter(data, interp_order)
        for k in range(target_shape[2]):
            shift = from_matrix_vector(np.eye(3), [0, 0, k])
            slice_affine = np.dot(transform, shift)
            yield k, _sample_slice(
                coefficients, slice_affine, target_shape[:2], interp_order
            )


def get_strategy(strategy, memory_safe=True):
    """Return the resampling strategy corresponding to a name.

    Parameters
    ----------
    strategy : {"full3D", "slice2D", "approach1", "approach2"} or \
               BaseResamplingStrategy
        Name of the strategy. Instances are returned as is.

    memory_safe : :obj:`bool`, default=True
        Passed to :class:`Full3DStrategy`.

    Returns
    -------
    strategy : BaseResamplingStrategy

    """
    if isinstance(strategy, BaseResamplingStrategy):
        return strategy
    name = STRATEGY_ALIASES.get(strategy, strategy)
    if name == "full3D":
        return Full3DStrategy(memory_safe=memory_safe)
    if name == "slice2D":
        return Slice2DStrategy()
    raise ValueError(
        f"strategy must be one of {STRATEGIES}.\n Got {strategy!r} instead."
    )


###############################################################################
# Resampling


def _check_frame(data, interp_order):
    """Warn about data which make resampling ill-defined."""
    if data.dtype.kind in ("i", "u"):
        return
    if not np.all(np.isfinite(data)):
        warnings.warn(
            "NaNs or infinite values are present in the data "
            "passed to resample. They spread to their neighbours "
            "in the resampled volume.",
            RuntimeWarning,
            stacklevel=3,
        )
    # If data is binary and interpolation is continuous or linear,
    # warn the user as this might be unintentional
    if interp_order != 0 and np.array_equal(np.unique(data), [0, 1]):
        warnings.warn(
            "Resampling binary images with continuous or "
            "linear interpolation. This might lead to "
            "unexpected results. You might consider using "
            "nearest interpolation (interp_order=0) instead.",
            stacklevel=3,
        )


def _get_slope_inter(img):
    """Return the intensity scaling of an image.

    nibabel moves the scaling of loaded images from the header to the
    array proxy.
    """
    if is_proxy(img.dataobj):
        return float(img.dataobj.slope), float(img.dataobj.inter)
    return img.header.get_slope_inter()


def _resampled_header(img, target_shape, target_affine, name):
    """Derive the header of a resampled volume.

    Datatype and intensity scaling are kept from the input image.
    """
    header = Nifti1Header.from_header(img.header)
    header.set_data_shape(tuple(target_shape) + tuple(img.shape[3:]))
    slope, inter = _get_slope_inter(img)
    if slope is not None and (slope, inter) != (1.0, 0.0):
        header.set_slope_inter(slope, inter)

    sform_code = int(header["sform_code"])
    qform_code = int(header["qform_code"])
    if sform_code == 0 and qform_code == 0:
        # without a code, the affine would not be read back
        sform_code = 2
    if qform_code:
        header.set_qform(target_affine, code=qform_code)
    if sform_code:
        header.set_sform(target_affine, code=sform_code)

    zooms = header.get_zooms()
    matrix, _ = to_matrix_vector(target_affine)
    header.set_zooms(
        tuple(np.sqrt(np.sum(matrix**2, axis=0))) + tuple(zooms[3:])
    )

    descrip = header["descrip"].item()
    if isinstance(descrip, bytes):
        descrip = descrip.decode("latin-1")
    descrip = f"{descrip} - resampled with nigraph {name}".lstrip(" -")
    header["descrip"] = descrip.encode("latin-1", errors="replace")[:80]
    return header


def _resampled_filename(input_file, resolution, compressed):
    """Derive the output filename from the input one and the resolution.

    Isotropic resolutions are encoded in micrometres on 4 digits, e.g.
    ``_res1250`` for 1.25mm, anisotropic ones with a generic tag.
    """
    stem, _ = split_nifti_extension(input_file)
    if np.all(resolution == resolution[0]):
        tag = f"_res{int(np.round(resolution[0] * 1000)):04d}"
    else:
        tag = "_resampled"
    extension = ".nii.gz" if compressed else ".nii"
    return f"{stem}{tag}{extension}"


@fill_doc
def resample_to_resolution(
    img,
    resolution,
    interp_order=1,
    strategy="full3D",
    memory_safe=True,
    strict_affine=True,
    verbose=0,
):
    """Resample an image to a new voxel resolution, in memory.

    The orientation of the image is kept and only the voxel size changes;
    see :func:`compute_resampled_geometry` for the position of the output
    grid. 4D images are resampled frame by frame.

    Parameters
    ----------
    %(img)s
    %(resolution)s
    %(interp_order)s
    %(strategy)s
    %(memory_safe)s
    %(strict_affine)s
    %(verbose0)s

    Returns
    -------
    resampled : :class:`nibabel.nifti1.Nifti1Image`
        Resampled image, with floating point data. Its header keeps the
        datatype of the input header.

    See Also
    --------
    nigraph.image.resample

    """
    resolution = _check_resolution(resolution)
    _check_interp_order(interp_order)
    strategy = get_strategy(strategy, memory_safe=memory_safe)

    img = check_niimg(img)
    target_shape, target_affine, scale = compute_resampled_geometry(
        img.shape, img.affine, resolution, strict=strict_affine
    )
    strategy.check_scale(scale)
    transform = voxel_transform(img.affine, target_affine)
    strategy.check_transform(transform)

    log(
        f"Resampling {repr_niimg(img)} to {resolution.tolist()} mm voxels "
        f"with {strategy!r}",
        verbose=verbose,
    )
    frames = []
    for frame in iter_frames(img):
        _check_frame(frame, interp_order)
        frames.append(
            strategy.resample(frame, transform, target_shape, interp_order)
        )
    resampled = frames[0] if len(img.shape) == 3 else np.stack(frames, -1)

    header = _resampled_header(
        img, target_shape, target_affine, strategy.name
    )
    return Nifti1Image(resampled, target_affine, header=header)


@fill_doc
def resample(
    input_file,
    resolution,
    interp_order=1,
    strategy="full3D",
    memory_safe=True,
    output_file=None,
    tmp_dir=None,
    strict_affine=True,
    verbose=0,
):
    """Resample a NIfTI file to a new voxel resolution.

    The resampled volume is written plane by plane, so that only one input
    frame and one output plane need to be held in memory (unless
    ``memory_safe=False``). The datatype and the intensity scaling
    (``scl_slope`` and ``scl_inter``) of the input header are kept.

    Parameters
    ----------
    input_file : :obj:`str` or :class:`pathlib.Path`
        Path to a 3D or 4D ``.nii`` or ``.nii.gz`` file.
        Compressed files are decompressed in a temporary directory which
        is removed before returning, even if an error occurs.
    %(resolution)s
    %(interp_order)s
    %(strategy)s
    %(memory_safe)s
    output_file : :obj:`str`, :class:`pathlib.Path` or None, default=None
        Output ``.nii`` or ``.nii.gz`` file. If None, the output is written
        next to the input file, with the same format, and named after it
        with a suffix giving the resolution in micrometres on 4 digits,
        e.g. ``img_res1250.nii`` for 1.25mm isotropic voxels, or
        ``_resampled`` for anisotropic resolutions.
    tmp_dir : :obj:`str`, :class:`pathlib.Path` or None, default=None
        Directory in which compressed inputs are decompressed.
        Defaults to the system temporary directory.
    %(strict_affine)s
    %(verbose0)s

    Returns
    -------
    output_file : :obj:`str`
        Absolute path of the resampled file.

    Raises
    ------
    UnknownFormatError
        If a filename is not a ``.nii`` or ``.nii.gz`` file.
    UnsupportedAffineError
        If the input affine cannot be resampled, see ``strict_affine``.
    UnsupportedOperationError
        If the resolution is finer than the input voxel size.

    Notes
    -----
    Output is not written atomically: if an error occurs while planes are
    written, an incomplete output file remains.

    See Also
    --------
    nigraph.image.resample_to_resolution

    """
    input_file = fspath(input_file)
    input_compressed = is_compressed(input_file)
    resolution = _check_resolution(resolution)
    _check_interp_order(interp_order)
    strategy = get_strategy(strategy, memory_safe=memory_safe)
    if output_file is None:
        output_file = _resampled_filename(
            input_file, resolution, compressed=input_compressed
        )
    else:
        output_file = str(fspath(output_file))
        split_nifti_extension(output_file)
    if not Path(input_file).exists():
        raise FileNotFoundError(f"File not found: '{input_file}'")

    with uncompressed_copy(input_file, tmp_dir=tmp_dir) as working_file:
        img = check_niimg(working_file)
        target_shape, target_affine, scale = compute_resampled_geometry(
            img.shape, img.affine, resolution, strict=strict_affine
        )
        strategy.check_scale(scale)
        transform = voxel_transform(img.affine, target_affine)
        strategy.check_transform(transform)
        header = _resampled_header(
            img, target_shape, target_affine, strategy.name
        )

        log(
            f"Resampling {repr_niimg(input_file)} "
            f"({img.shape[:3]} voxels) to {resolution.tolist()} mm "
            f"({target_shape} voxels) with {strategy!r}",
            verbose=verbose,
        )
        with NiftiPlaneWriter(output_file, header) as writer:
            for t, frame in enumerate(iter_frames(img)):
                _check_frame(frame, interp_order)
                for k, plane in strategy.iter_planes(
                    frame, transform, target_shape, interp_order
                ):
                    writer.write_plane(plane, k, frame=t)
                log(f"Frame {t} written", verbose=verbose, msg_level=2)
            if not writer.complete:
                raise RuntimeError(
                    f"The {strategy!r} strategy did not produce every plane "
                    f"of the {target_shape} output grid."
                )
        del img

    output_file = str(Path(output_file).resolve())
    log(f"Resampled volume written to {output_file}", verbose=verbose)
    return output_file


@fill_doc
def reslice_img(img, target_img, interp_order=1, fill_value=0.0):
    """Resample an image onto the grid of a target image.

    No registration is performed: the images should already be aligned in
    millimetre space.

    Parameters
    ----------
    %(img)s
    target_img : :obj:`str`, :class:`pathlib.Path` or \
                 :class:`nibabel.nifti1.Nifti1Image`
        Reference image whose shape (first 3 dimensions) and affine define
        the output grid.
    %(interp_order)s
    fill_value : :obj:`float`, default=0.0
        Value of the output voxels falling outside of the input volume.

    Returns
    -------
    resliced : :class:`nibabel.nifti1.Nifti1Image`
        ``img`` resampled onto the grid of ``target_img``.

    Raises
    ------
    BoundingBoxError
        If the target grid does not contain any of the input volume.

    """
    _check_interp_order(interp_order)
    img = check_niimg(img)
    target = check_niimg(target_img)
    target_shape = tuple(target.shape[:3])
    target_affine = target.affine

    (xmin, xmax), (ymin, ymax), (zmin, zmax) = get_bounds(
        img.shape[:3], np.dot(linalg.inv(target_affine), img.affine)
    )
    if (
        xmax < 0
        or ymax < 0
        or zmax < 0
        or xmin > target_shape[0] - 1
        or ymin > target_shape[1] - 1
        or zmin > target_shape[2] - 1
    ):
        raise BoundingBoxError(
            "The field of view given "
            "by the target image does "
            "not contain any of the data"
        )

    transform = voxel_transform(img.affine, target_affine)
    matrix, offset = to_matrix_vector(transform)
    # If matrix is diagonal, ndimage.affine_transform is clever enough to
    # use a better algorithm.
    if np.all(np.diag(np.diag(matrix)) == matrix):
        matrix = np.diag(matrix)
    frames = []
    for frame in iter_frames(img):
        _check_frame(frame, interp_order)
        frames.append(
            affine_transform(
                frame,
                matrix,
                offset=offset,
                output_shape=target_shape,
                output=np.float64,
                order=interp_order,
                mode="constant",
                cval=fill_value,
            )
        )
    resliced = frames[0] if len(img.shape) == 3 else np.stack(frames, -1)
    return Nifti1Image(resliced, target_affine)
