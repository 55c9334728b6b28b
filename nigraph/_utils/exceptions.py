class DimensionError(TypeError):
    """Custom error type for dimension checking.

    Raised when a volume does not have the dimensionality an operation
    requires, e.g. a 2D array given where a 3D or 4D grid is expected.

    Parameters
    ----------
    file_dimension : integer
        Indicates the dimensionality of the input volume.

    required_dimension : integer or tuple of integers
        The dimension(s) the volume should have.

    """

    def __init__(self, file_dimension, required_dimension):
        self.file_dimension = file_dimension
        self.required_dimension = required_dimension

        super().__init__()

    @property
    def message(self):
        """Format error message."""
        required = self.required_dimension
        if isinstance(required, tuple):
            required = " or ".join(f"{dim}D" for dim in required)
        else:
            required = f"{required}D"
        return (
            "Input data has incompatible dimensionality: "
            f"Expected dimension is {required} and you provided a "
            f"{self.file_dimension}D image."
        )

    def __str__(self):
        return self.message
