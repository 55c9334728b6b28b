"""Custom errors used across nigraph."""

__all__ = [
    "UnknownFormatError",
    "UnsupportedAffineError",
    "UnsupportedOperationError",
]


class UnsupportedAffineError(ValueError):
    """Raise error when an affine cannot be handled by the resampler.

    In strict mode the linear part of the affine must be diagonal, i.e.
    free of rotations and shears. Singular affines are always rejected.
    """


class UnsupportedOperationError(ValueError):
    """Raise error when a resampling strategy cannot perform a request.

    This happens for example when a target resolution finer than the input
    voxel spacing is requested from a strategy that only downsamples.
    """


class UnknownFormatError(ValueError):
    """Raise error when a file does not have a recognized volume extension.

    Only ``.nii`` and ``.nii.gz`` files are understood.
    """
