"""
Setup script for nullables

Pure-Python package in a src/ layout. The version is read from
src/nullables/__init__.py.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/nullables/__init__.py
def get_version():
    version_file = Path("src/nullables/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="nullables",
    version=get_version(),
    description="Nullable arrays: numpy buffers with an independent validity mask",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    zip_safe=True,
)
