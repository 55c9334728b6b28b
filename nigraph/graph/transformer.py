"""Transformer for extracting graph signals from volumes."""

import numpy as np
from nibabel import Nifti1Image
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted

from .._utils import CacheMixin, check_niimg, fill_doc, log
from .extraction import _check_indices, extract_graph_signals


@fill_doc
class GraphSignalExtractor(CacheMixin, TransformerMixin, BaseEstimator):
    """Extract graph signals from 3D or 4D volumes.

    GraphSignalExtractor is useful when the nodes of a graph are voxels of
    a reference grid, and volumes defined on that grid (or resliced onto
    it) must be turned into signals on the graph.

    Parameters
    ----------
    %(indices)s
    %(graph_ref_img)s
        If None, the grid is taken from ``graph_shape`` and
        ``graph_affine``, or from the images given to :meth:`fit`.
    graph_shape : tuple of 3 :obj:`int` or None, default=None
        Shape of the graph reference grid.
    graph_affine : array-like of shape (4, 4) or None, default=None
        Affine of the graph reference grid.
    bypass_registration_check : :obj:`bool`, default=False
        If True, images are assumed to be in register with the graph.
    reslice : :obj:`bool`, default=False
        If True, images not in register with the graph are resliced onto
        ``graph_ref_img`` before extraction.
    reslice_interp_order : :obj:`int`, default=1
        Interpolation order used for reslicing.
    %(frames)s
    %(memory)s
    %(memory_level1)s
    %(verbose0)s

    Attributes
    ----------
    indices_ : :class:`numpy.ndarray` of shape (n_nodes,)
        Validated graph indices.

    shape_ : tuple of 3 :obj:`int`
        Shape of the graph reference grid.

    affine_ : :class:`numpy.ndarray` of shape (4, 4)
        Affine of the graph reference grid.

    n_nodes_ : :obj:`int`
        Number of nodes of the graph.

    See Also
    --------
    nigraph.graph.extract_graph_signals

    """

    def __init__(
        self,
        indices,
        graph_ref_img=None,
        graph_shape=None,
        graph_affine=None,
        bypass_registration_check=False,
        reslice=False,
        reslice_interp_order=1,
        frames=None,
        memory=None,
        memory_level=1,
        verbose=0,
    ):
        self.indices = indices
        self.graph_ref_img = graph_ref_img
        self.graph_shape = graph_shape
        self.graph_affine = graph_affine
        self.bypass_registration_check = bypass_registration_check
        self.reslice = reslice
        self.reslice_interp_order = reslice_interp_order
        self.frames = frames
        self.memory = memory
        self.memory_level = memory_level
        self.verbose = verbose

    def fit(self, imgs=None, y=None):
        """Set up the graph reference grid and check the indices.

        Parameters
        ----------
        imgs : 3D or 4D Niimg-like object or None, default=None
            Used to define the reference grid when neither
            ``graph_ref_img`` nor ``graph_shape`` and ``graph_affine``
            are given.

        y : None
            This parameter is unused. It is solely included for scikit-learn
            compatibility.

        """
        del y
        if self.graph_ref_img is not None:
            ref_img = check_niimg(self.graph_ref_img)
            self.shape_ = tuple(ref_img.shape[:3])
            self.affine_ = ref_img.affine
        elif self.graph_shape is not None and self.graph_affine is not None:
            self.shape_ = tuple(int(s) for s in self.graph_shape[:3])
            self.affine_ = np.asarray(self.graph_affine, dtype=np.float64)
        elif imgs is not None:
            log("Using the input image grid as graph space", self.verbose)
            img = check_niimg(imgs)
            self.shape_ = tuple(img.shape[:3])
            self.affine_ = img.affine
        else:
            raise ValueError(
                f"{self.__class__.__name__} needs graph_ref_img, or "
                "graph_shape and graph_affine, or an image to be fitted."
            )
        if self.affine_.shape != (4, 4):
            raise ValueError(
                f"graph_affine should be a 4x4 array. "
                f"Got shape {self.affine_.shape}."
            )
        self.indices_ = _check_indices(self.indices, self.shape_)
        self.n_nodes_ = self.indices_.size
        log(
            f"Graph with {self.n_nodes_} nodes on a grid of "
            f"shape {self.shape_}",
            verbose=self.verbose,
        )
        return self

    def transform(self, imgs):
        """Extract graph signals from a 3D or 4D volume.

        Parameters
        ----------
        imgs : 3D or 4D Niimg-like object
            Image to extract signals from.

        Returns
        -------
        signals : :class:`numpy.ndarray` of shape (n_frames, n_nodes)
            One graph signal per row.

        """
        check_is_fitted(self)
        signals, _ = self._cache(extract_graph_signals)(
            imgs,
            self.indices_,
            graph_ref_img=self.graph_ref_img,
            graph_shape=self.shape_,
            graph_affine=self.affine_,
            bypass_registration_check=self.bypass_registration_check,
            reslice=self.reslice,
            reslice_interp_order=self.reslice_interp_order,
            frames=self.frames,
            verbose=self.verbose,
        )
        return signals.T

    def inverse_transform(self, signals):
        """Project graph signals back onto the reference grid.

        Voxels that are not graph nodes are set to zero.

        Parameters
        ----------
        signals : :class:`numpy.ndarray` of shape (n_frames, n_nodes) \
                  or (n_nodes,)
            Graph signals.

        Returns
        -------
        img : :class:`nibabel.nifti1.Nifti1Image`
            3D image if ``signals`` is 1D, 4D image otherwise.

        """
        check_is_fitted(self)
        signals = np.asarray(signals, dtype=np.float64)
        one_frame = signals.ndim == 1
        signals = np.atleast_2d(signals)
        if signals.ndim != 2 or signals.shape[1] != self.n_nodes_:
            raise ValueError(
                f"Signals should have shape (n_frames, {self.n_nodes_}). "
                f"Got {signals.shape}."
            )
        log("Projecting graph signals on the reference grid", self.verbose)
        n_frames = signals.shape[0]
        flat = np.zeros((int(np.prod(self.shape_)), n_frames))
        flat[self.indices_] = signals.T
        data = flat.reshape(self.shape_ + (n_frames,), order="F")
        if one_frame:
            data = data[..., 0]
        return Nifti1Image(data, self.affine_)
