import pytest

from nigraph._utils.exceptions import DimensionError
from nigraph.exceptions import (
    UnknownFormatError,
    UnsupportedAffineError,
    UnsupportedOperationError,
)


@pytest.mark.parametrize(
    "error",
    [UnknownFormatError, UnsupportedAffineError, UnsupportedOperationError],
)
def test_public_errors_are_value_errors(error):
    with pytest.raises(ValueError, match="message"):
        raise error("message")


@pytest.mark.parametrize(
    "required, expected",
    [
        (3, "Expected dimension is 3D and you provided a 2D image."),
        ((3, 4), "Expected dimension is 3D or 4D and you provided a 2D image."),
    ],
)
def test_dimension_error_message(required, expected):
    error = DimensionError(2, required)

    assert isinstance(error, TypeError)
    assert error.message.endswith(expected)
    assert str(error) == error.message
