#! /usr/bin/env python

# noqa: D100

import os

from setuptools import find_packages, setup


def load_version():
    """Execute nigraph/version.py in a globals dictionary and return it.

    Note: importing nigraph is not an option because there may be
    dependencies like nibabel which are not installed and
    setup.py is supposed to install them.
    """
    # load all vars into globals, otherwise
    #   the later function call using global vars doesn't work.
    globals_dict = {}
    with open(os.path.join("nigraph", "version.py")) as fp:
        exec(fp.read(), globals_dict)

    return globals_dict


def get_requirements(version_globals):
    """Build install_requires from the dependencies checked at import."""
    return [
        f"{metadata['pypi_name']}>={metadata['min_version']}"
        for _, metadata in version_globals["REQUIRED_MODULE_METADATA"]
    ]


# Make sources available using relative paths from this file's directory.
os.chdir(os.path.dirname(os.path.abspath(__file__)))

_VERSION_GLOBALS = load_version()
DISTNAME = "nigraph"
DESCRIPTION = "Resampling of NIfTI volumes and extraction of graph signals"
with open("README.rst") as fp:
    LONG_DESCRIPTION = fp.read()
LICENSE = "new BSD"
VERSION = _VERSION_GLOBALS["__version__"]

if __name__ == "__main__":
    setup(
        name=DISTNAME,
        description=DESCRIPTION,
        license=LICENSE,
        version=VERSION,
        long_description=LONG_DESCRIPTION,
        long_description_content_type="text/x-rst",
        zip_safe=False,  # the package can run out of an .egg file
        classifiers=[
            "Intended Audience :: Science/Research",
            "Intended Audience :: Developers",
            "License :: OSI Approved",
            "Programming Language :: Python",
            "Topic :: Software Development",
            "Topic :: Scientific/Engineering",
            "Operating System :: Microsoft :: Windows",
            "Operating System :: POSIX",
            "Operating System :: Unix",
            "Operating System :: MacOS",
            "Programming Language :: Python :: 3.8",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
        ],
        packages=find_packages(),
        python_requires=">=3.8",
        install_requires=get_requirements(_VERSION_GLOBALS),
        extras_require={
            "test": ["pytest>=6.0.0"],
            "rich": ["rich"],
        },
    )
