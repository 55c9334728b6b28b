"""Extraction of graph signals from NIfTI volumes.

A graph signal is the vector of values of a volume at the voxels associated
with the nodes of a graph. The graph is defined on a reference grid; volumes
must be in register with it, or be resliced onto it, before extraction.
"""

from pathlib import Path

import numpy as np

from .._utils import (
    check_niimg,
    compose_err_msg,
    fill_doc,
    fspath,
    log,
    repr_niimg,
)
from .._utils.niimg import split_nifti_extension
from ..image.resampling import reslice_img

# Largest absolute difference allowed between two affines in register.
REGISTRATION_TOLERANCE = 1e-6


def _load_img(img):
    """Load an image, falling back to the other NIfTI format if missing."""
    img = fspath(img)
    if not isinstance(img, str) or Path(img).exists():
        return check_niimg(img)
    stem, extension = split_nifti_extension(img)
    sibling = f"{stem}.nii" if extension == ".nii.gz" else f"{stem}.nii.gz"
    if Path(sibling).exists():
        return check_niimg(sibling)
    raise FileNotFoundError(f"File not found: '{img}'")


def check_registration(img, ref_shape, ref_affine, atol=REGISTRATION_TOLERANCE):
    """Check whether an image lies on a reference grid.

    Parameters
    ----------
    img : :obj:`str`, :class:`pathlib.Path` or \
          :class:`nibabel.nifti1.Nifti1Image`
        Image to check.

    ref_shape : tuple of :obj:`int`
        Shape of the reference grid. Only the first 3 values are compared.

    ref_affine : array-like of shape (4, 4)
        Affine of the reference grid.

    atol : :obj:`float`, default=1e-6
        Largest absolute difference allowed between affine elements.

    Returns
    -------
    registered : :obj:`bool`
        True if the spatial shapes are equal and the affines match.

    """
    img = check_niimg(img)
    ref_affine = np.asarray(ref_affine, dtype=np.float64)
    if tuple(img.shape[:3]) != tuple(ref_shape[:3]):
        return False
    if ref_affine.shape != img.affine.shape:
        return False
    return bool(np.all(np.abs(img.affine - ref_affine) <= atol))


def _check_indices(indices, shape):
    indices = np.asarray(indices)
    if indices.ndim != 1:
        indices = indices.ravel()
    if indices.size and indices.dtype.kind not in ("i", "u"):
        if not np.all(np.mod(indices, 1) == 0):
            raise ValueError(
                "Graph indices should be integers. "
                f"Got values of type {indices.dtype}."
            )
    indices = indices.astype(np.intp)
    n_voxels = int(np.prod(shape[:3]))
    out_of_bounds = (indices < 0) | (indices >= n_voxels)
    if np.any(out_of_bounds):
        raise ValueError(
            f"Graph indices should be within [0, {n_voxels - 1}] for a grid "
            f"of shape {tuple(shape[:3])}. "
            f"Got {indices[out_of_bounds][:5].tolist()}."
        )
    return indices


def _check_frames(frames, n_frames):
    if frames is None:
        return np.arange(n_frames)
    frames = np.atleast_1d(np.asarray(frames)).ravel().astype(np.intp)
    if frames.size > n_frames:
        raise ValueError(
            f"{frames.size} frames were requested from an image "
            f"with {n_frames} frames."
        )
    if np.unique(frames).size != frames.size:
        raise ValueError(f"Frame indices should be unique. Got {frames.tolist()}.")
    if np.any((frames < 0) | (frames >= n_frames)):
        raise ValueError(
            f"Frame indices should be within [0, {n_frames - 1}]. "
            f"Got {frames.tolist()}."
        )
    return frames


def _reference_geometry(graph_ref_img, graph_shape, graph_affine):
    if graph_ref_img is not None:
        ref_img = check_niimg(graph_ref_img)
        return tuple(ref_img.shape[:3]), ref_img.affine, ref_img
    if graph_shape is None or graph_affine is None:
        raise ValueError(
            "The space of the graph is unknown: provide graph_ref_img, or "
            "both graph_shape and graph_affine, or set "
            "bypass_registration_check=True."
        )
    return tuple(graph_shape[:3]), np.asarray(graph_affine), None


@fill_doc
def extract_graph_signals(
    img,
    indices,
    graph_ref_img=None,
    graph_shape=None,
    graph_affine=None,
    bypass_registration_check=False,
    reslice=False,
    reslice_interp_order=1,
    frames=None,
    verbose=0,
):
    """Extract graph signals from a 3D or 4D volume.

    Parameters
    ----------
    %(img)s
        If a ``.nii`` file does not exist but its ``.nii.gz`` counterpart
        does (or the other way around), the existing file is used.
    %(indices)s
    %(graph_ref_img)s
    graph_shape : tuple of 3 :obj:`int` or None, default=None
        Shape of the graph reference grid. Used with ``graph_affine`` when
        ``graph_ref_img`` is not given.
    graph_affine : array-like of shape (4, 4) or None, default=None
        Affine of the graph reference grid.
    bypass_registration_check : :obj:`bool`, default=False
        If True, the image is assumed to be in register with the graph and
        no check is done.
    reslice : :obj:`bool`, default=False
        If True, an image that is not in register with the graph is
        resliced onto ``graph_ref_img`` before extraction. Otherwise a
        :obj:`ValueError` is raised for such images.
    reslice_interp_order : :obj:`int`, default=1
        Interpolation order used for reslicing.
    %(frames)s
    %(verbose0)s

    Returns
    -------
    signals : :class:`numpy.ndarray` of shape (n_indices, n_frames)
        Graph signals, one per column.

    resliced_img : :class:`nibabel.nifti1.Nifti1Image` or None
        The resliced image, if reslicing was needed, None otherwise.

    """
    img = _load_img(img)
    resliced_img = None
    if not bypass_registration_check:
        ref_shape, ref_affine, ref_img = _reference_geometry(
            graph_ref_img, graph_shape, graph_affine
        )
        if not check_registration(img, ref_shape, ref_affine):
            if not reslice:
                raise ValueError(
                    compose_err_msg(
                        "Image not in register with the space of the graph.",
                        img=repr_niimg(img),
                    )
                )
            if ref_img is None:
                raise ValueError(
                    "Reslicing an image onto the space of the graph "
                    "requires graph_ref_img."
                )
            log("Reslicing input to match the graph space", verbose=verbose)
            resliced_img = reslice_img(
                img, ref_img, interp_order=reslice_interp_order
            )
            img = resliced_img

    shape = img.shape[:3]
    indices = _check_indices(indices, shape)
    n_frames = img.shape[3] if len(img.shape) == 4 else 1
    frames = _check_frames(frames, n_frames)
    coords = np.unravel_index(indices, shape, order="F")

    signals = np.zeros((indices.size, frames.size))
    if len(img.shape) == 3:
        signals[:, 0] = np.asarray(img.dataobj, dtype=np.float64)[coords]
        return signals, resliced_img

    for i, frame in enumerate(frames):
        log(
            f"Extracting graph signals {i + 1}/{frames.size}",
            verbose=verbose,
            msg_level=2,
        )
        volume = np.asarray(img.dataobj[..., frame], dtype=np.float64)
        signals[:, i] = volume[coords]
    return signals, resliced_img
