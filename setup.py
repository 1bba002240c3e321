#!/usr/bin/env python
"""Setup script for the Roguelike Birth client."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="roguelike-birth",
    version="0.1.0",
    author="Roguelike Birth Project",
    description="Terminal character creation for a roguelike client: menus, stat rollers and quick-start",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where=".", include=["src*", "config*"]),
    package_dir={"": "."},
    python_requires=">=3.9",
    install_requires=[
        # Configuration
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",

        # Game data
        "pyyaml>=6.0.0",

        # Logging and terminal output
        "structlog>=23.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.4.0",
            "isort>=5.12.0",
        ],
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "roguelike-birth=src.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment :: Role-Playing",
    ],
    keywords="roguelike angband character birth terminal",
)
