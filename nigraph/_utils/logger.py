"""Verbosity-gated messages for nigraph."""

import inspect

from sklearn.base import BaseEstimator


def _has_rich():
    """Check if rich is installed."""
    try:
        import rich  # noqa: F401

        return True

    except ImportError:
        return False


if _has_rich():
    from rich import print
    from rich.markup import escape


def _caller_name(stack):
    """Name the estimator method or function a message belongs to.

    The outermost estimator method of the call stack wins: it is the one
    called from user code, e.g. ``GraphSignalExtractor.transform`` rather
    than the ``extract_graph_signals`` call it makes. Without an estimator,
    the function calling :func:`log` is used.
    """
    for frame_info in reversed(stack):
        caller = frame_info.frame.f_locals.get("self")
        if isinstance(caller, BaseEstimator):
            return f"{caller.__class__.__name__}.{frame_info.function}"
    return stack[1].function if len(stack) > 1 else "<top_level>"


def log(msg, verbose=1, msg_level=1):
    """Print ``msg`` if ``verbose`` is at least ``msg_level``.

    The message is prefixed with the name of the estimator method or the
    function emitting it. Level 1 messages describe the steps of an
    operation; level 2 messages report progress inside a step, such as
    frames or planes being written.

    Parameters
    ----------
    msg : str
        Message to display.

    verbose : int, default=1
        Verbosity requested by the user.

    msg_level : int, default=1
        Verbosity from which the message is displayed.

    """
    if verbose < msg_level:
        return
    func_name = _caller_name(inspect.stack())
    if _has_rich():
        print(f"[blue]\\[{func_name}][/blue] {escape(msg)}")
    else:
        print(f"[{func_name}] {msg}")


def compose_err_msg(msg, **kwargs):
    """Append the string-valued keyword arguments to an error message.

    Each one is added on its own line as ``key: value``, in key order, so
    that error messages name the files involved. Values of other types are
    left out.

    Examples
    --------
    >>> compose_err_msg("Image not in register.", img="bold.nii", n=3)
    'Image not in register.\\nimg: bold.nii'

    """
    lines = [msg]
    lines.extend(
        f"{key}: {value}"
        for key, value in sorted(kwargs.items())
        if isinstance(value, str)
    )
    return "\n".join(lines)
