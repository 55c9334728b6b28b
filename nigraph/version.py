"""nigraph version, required package versions, and utilities for checking."""

# PEP 440 version
__version__ = "0.1.0"

_NIGRAPH_INSTALL_MSG = "See the README for installation information."

# Checked in this order at import. pypi_name is the distribution name used
# by setup.py, which can differ from the import name.
REQUIRED_MODULE_METADATA = (
    (
        "numpy",
        {
            "pypi_name": "numpy",
            "min_version": "1.19",
            "install_info": _NIGRAPH_INSTALL_MSG,
        },
    ),
    (
        "scipy",
        {
            "pypi_name": "scipy",
            "min_version": "1.6",
            "install_info": _NIGRAPH_INSTALL_MSG,
        },
    ),
    (
        "nibabel",
        {
            "pypi_name": "nibabel",
            "min_version": "3.2",
            "install_info": _NIGRAPH_INSTALL_MSG,
        },
    ),
    (
        "sklearn",
        {
            "pypi_name": "scikit-learn",
            "min_version": "1.0.0",
            "install_info": _NIGRAPH_INSTALL_MSG,
        },
    ),
    (
        "joblib",
        {
            "pypi_name": "joblib",
            "min_version": "1.0.0",
            "install_info": _NIGRAPH_INSTALL_MSG,
        },
    ),
    (
        "packaging",
        {
            "pypi_name": "packaging",
            "min_version": "20.0",
            "install_info": _NIGRAPH_INSTALL_MSG,
        },
    ),
)


def _import_module_with_version_check(module_name, minimum_version):
    """Import a module, raising ImportError if it is missing or too old."""
    from packaging.version import parse

    try:
        module = __import__(module_name)
    except ImportError as exc:
        exc.args += (
            f"nigraph requires {module_name}. {_NIGRAPH_INSTALL_MSG}",
        )
        raise

    found = getattr(module, "__version__", "0.0.0")
    if parse(found) < parse(minimum_version):
        raise ImportError(
            f"nigraph requires {module_name}>={minimum_version}, "
            f"but {module_name} {found} is installed."
        )
    return module


def _check_module_dependencies():
    """Raise ImportError unless every required module is recent enough."""
    for module_name, module_metadata in REQUIRED_MODULE_METADATA:
        _import_module_with_version_check(
            module_name=module_name,
            minimum_version=module_metadata["min_version"],
        )
