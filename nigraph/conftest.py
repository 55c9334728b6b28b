"""Fixtures shared by the nigraph tests."""

import nibabel
import numpy as np
import pytest
from nibabel import Nifti1Image

# Shapes with distinct values, so that swapped axes are detected.
SHAPE_3D = (7, 8, 9)
N_FRAMES = 5


@pytest.fixture(autouse=True)
def no_int64_nifti(monkeypatch):
    """Fail tests creating or saving NIfTI images with 64-bit integer data.

    numpy creates int64 arrays by default, and most neuroimaging tools
    cannot read such files. A test which needs them can disable the check
    with ``@pytest.mark.parametrize("no_int64_nifti", [None])``.
    """
    forbidden = (np.int64, np.uint64)
    error_msg = "NIfTI images with 64-bit integer data are not allowed."

    init = Nifti1Image.__init__
    to_filename = Nifti1Image.to_filename

    def checked_init(self, dataobj, *args, **kwargs):
        assert dataobj.dtype not in forbidden, error_msg
        return init(self, dataobj, *args, **kwargs)

    def checked_to_filename(img, filename):
        assert img.get_data_dtype() not in forbidden, error_msg
        return to_filename(img, filename)

    monkeypatch.setattr(nibabel.nifti1.Nifti1Image, "__init__", checked_init)
    monkeypatch.setattr(
        nibabel.nifti1.Nifti1Image, "to_filename", checked_to_filename
    )


def _rng(seed=42):
    return np.random.default_rng(seed)


@pytest.fixture()
def rng():
    """Return a seeded random number generator."""
    return _rng()


# Affines


def _affine_mni():
    """Return the affine of the 2mm MNI152 template grid."""
    return np.array(
        [
            [2.0, 0.0, 0.0, -98.0],
            [0.0, 2.0, 0.0, -134.0],
            [0.0, 0.0, 2.0, -72.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


@pytest.fixture()
def affine_mni():
    return _affine_mni()


@pytest.fixture()
def affine_eye():
    """Return the affine of a 1mm grid whose first voxel is at the origin."""
    return np.eye(4)


@pytest.fixture()
def affine_sheared():
    """Return an affine mixing the first two voxel axes.

    Such affines cannot be resampled with ``strict_affine=True``.
    """
    affine = np.eye(4)
    affine[0, 1] = 0.5
    return affine


@pytest.fixture()
def shape_3d_default():
    return SHAPE_3D


# Images


def _img_rand(shape, affine=None):
    """Return a Nifti1Image of uniform random floats."""
    affine = np.eye(4) if affine is None else affine
    return Nifti1Image(_rng().random(shape), affine)


@pytest.fixture()
def img_3d_rand_eye():
    return _img_rand(SHAPE_3D)


@pytest.fixture()
def img_3d_rand_mni():
    return _img_rand(SHAPE_3D, affine=_affine_mni())


@pytest.fixture()
def img_3d_ones_eye():
    return Nifti1Image(np.ones(SHAPE_3D), np.eye(4))


@pytest.fixture()
def img_3d_rand_as_file(tmp_path):
    """Return the path of ``img_3d_rand_eye`` saved as an uncompressed file."""
    filename = tmp_path / "img.nii"
    _img_rand(SHAPE_3D).to_filename(filename)
    return filename


@pytest.fixture()
def img_4d_rand_eye():
    """Return a random 4D image with 5 frames on the default 3D grid."""
    return _img_rand(SHAPE_3D + (N_FRAMES,))


@pytest.fixture()
def img_4d_rand_as_file(tmp_path):
    """Return the path of ``img_4d_rand_eye`` saved as a gzip file."""
    filename = tmp_path / "img_4d.nii.gz"
    _img_rand(SHAPE_3D + (N_FRAMES,)).to_filename(filename)
    return filename
