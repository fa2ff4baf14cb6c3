"""
Setup configuration for kwindo.

xdotool-style window control for KDE Plasma via KWin scripting.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read long description from README if it exists
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="kwindo",
    version="0.2.0",
    description="xdotool-style window control for KDE Plasma through KWin scripts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.2,<8.4",
        "rich",
        "pydantic>=2.0",
        "pydbus",
    ],
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "kwindo=kwindo.cli:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications :: KDE",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
