#!/usr/bin/env python
"""Setup script to make datablog directly installable with pip."""

from pathlib import Path

from setuptools import find_packages, setup

readme_path = Path(__file__).parent / "README.rst"
long_description = readme_path.read_text()

setup(
    name="datablog",
    description="Fetch and reshape public energy and weather datasets.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    version="0.1.0",
    author="datablog contributors",
    license="MIT",
    keywords=[
        "electricity",
        "energy",
        "weather",
        "data",
        "eia",
        "coagmet",
        "degree days",
        "ev charging",
        "solar",
        "severe weather",
    ],
    python_requires=">=3.11",
    install_requires=[
        "click>=8.1,<9",
        "coloredlogs>=15.0,<15.1",
        "fsspec>=2023.1",
        "geopandas>=0.14",
        "numpy>=1.24",
        "pandas>=2.0,<3",
        "pyarrow>=14",
        "pydantic>=2.4,<3",
        "pydantic-settings>=2.0,<3",
        "pyyaml>=6,<7",
        "requests>=2.28,<3",
        "Shapely>=2.0,<3",
        "urllib3>=1.26",
    ],
    extras_require={
        "dev": [
            "black>=23",
            "isort>=5.0",
            "ruff>=0.1",
        ],
        "test": [
            "coverage>=7",
            "pytest>=7.4",
            "pytest-console-scripts>=1.4",
            "pytest-cov>=4",
            "pytest-mock>=3.11",
            "responses>=0.23",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering",
    ],
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    # This defines the interfaces to the command line scripts we're including:
    entry_points={
        "console_scripts": [
            "datablog_fetch = datablog.cli:main",
        ]
    },
)
