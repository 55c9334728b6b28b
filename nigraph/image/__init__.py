"""Resampling and reslicing of NIfTI volumes."""

from .resampling import (
    BaseResamplingStrategy,
    BoundingBoxError,
    Full3DStrategy,
    Slice2DStrategy,
    check_affine,
    compute_resampled_geometry,
    coord_transform,
    from_matrix_vector,
    get_bounds,
    get_strategy,
    resample,
    resample_to_resolution,
    reslice_img,
    to_matrix_vector,
    voxel_transform,
)

__all__ = [
    "BaseResamplingStrategy",
    "BoundingBoxError",
    "Full3DStrategy",
    "Slice2DStrategy",
    "check_affine",
    "compute_resampled_geometry",
    "coord_transform",
    "from_matrix_vector",
    "get_bounds",
    "get_strategy",
    "resample",
    "resample_to_resolution",
    "reslice_img",
    "to_matrix_vector",
    "voxel_transform",
]
