"""Test the logger module."""

import pytest
from sklearn.base import BaseEstimator

from nigraph._utils.logger import _has_rich, compose_err_msg, log

pytestmark = pytest.mark.skipif(
    _has_rich(), reason="Skip test when rich is installed."
)


def _write_frames(n_frames, verbose):
    log(f"Writing {n_frames} frames", verbose=verbose)
    for t in range(n_frames):
        log(f"Frame {t} written", verbose=verbose, msg_level=2)


class _Reader:
    def read(self, verbose):
        log("Reading", verbose=verbose)
        _write_frames(1, verbose)


class _Resampler(BaseEstimator):
    def __init__(self, verbose=1):
        self.verbose = verbose

    def fit(self):
        log("Fitting", verbose=self.verbose)
        _write_frames(2, self.verbose)
        return self


class _Pipeline(BaseEstimator):
    def run(self):
        log("Running")
        _Resampler().fit()


def test_log_function(capsys):
    _write_frames(2, verbose=2)

    assert capsys.readouterr().out == (
        "[_write_frames] Writing 2 frames\n"
        "[_write_frames] Frame 0 written\n"
        "[_write_frames] Frame 1 written\n"
    )


def test_log_msg_level(capsys):
    _write_frames(2, verbose=1)
    assert capsys.readouterr().out == "[_write_frames] Writing 2 frames\n"

    _write_frames(2, verbose=0)
    assert capsys.readouterr().out == ""


def test_log_estimator(capsys):
    _Resampler().fit()

    assert capsys.readouterr().out == (
        "[_Resampler.fit] Fitting\n[_Resampler.fit] Writing 2 frames\n"
    )


def test_log_outermost_estimator(capsys):
    _Pipeline().run()

    assert capsys.readouterr().out == (
        "[_Pipeline.run] Running\n"
        "[_Pipeline.run] Fitting\n"
        "[_Pipeline.run] Writing 2 frames\n"
    )


def test_log_other_objects(capsys):
    _Reader().read(verbose=1)

    # only estimators name the messages of the functions they call
    assert capsys.readouterr().out == (
        "[read] Reading\n[_write_frames] Writing 1 frames\n"
    )


def test_compose_err_msg():
    msg = compose_err_msg(
        "Image not in register with the space of the graph.",
        img="sub-01_bold.nii.gz",
        graph_ref_img="graph.nii",
        n_frames=12,
    )

    assert msg == (
        "Image not in register with the space of the graph.\n"
        "graph_ref_img: graph.nii\n"
        "img: sub-01_bold.nii.gz"
    )
    assert compose_err_msg("No arguments") == "No arguments"
