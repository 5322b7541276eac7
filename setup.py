# File: setup.py

"""
Setup configuration for QOE: Quantum-Inspired Optimization Engine
"""

import os
from setuptools import setup, find_packages

# Read long description from README
def read_long_description():
    """Read the README file for long description."""
    here = os.path.abspath(os.path.dirname(__file__))
    readme_path = os.path.join(here, "README.md")

    if os.path.exists(readme_path):
        with open(readme_path, "r", encoding="utf-8") as fh:
            return fh.read()
    else:
        return "QOE: classical simulation of quantum optimization heuristics"

# Read requirements
def read_requirements():
    """Read requirements from requirements.txt."""
    here = os.path.abspath(os.path.dirname(__file__))
    requirements_path = os.path.join(here, "requirements.txt")

    requirements = []
    if os.path.exists(requirements_path):
        with open(requirements_path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line and not line.startswith("#"):
                    requirements.append(line)
    else:
        # Fallback to minimal requirements
        requirements = [
            "numpy>=1.21.0",
            "scipy>=1.7.0",
            "pandas>=1.3.0",
        ]

    return requirements

# Package metadata
PACKAGE_NAME = "qoe-engine"
VERSION = "1.0.0"
AUTHOR = "QOE Team"
DESCRIPTION = "Quantum-inspired annealing, QAOA and quantum walk optimization engine"
LICENSE = "MIT"

# Classifiers for PyPI
CLASSIFIERS = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "License :: OSI Approved :: MIT License",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.8",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

# Keywords for PyPI search
KEYWORDS = [
    "optimization", "quantum annealing", "qaoa", "quantum walk",
    "simulated annealing", "multi-objective optimization", "quantum-inspired",
]

# Development dependencies
DEV_REQUIREMENTS = [
    "pytest>=6.0.0",
    "pytest-cov>=2.0.0",
    "pytest-xdist>=2.0.0",
    "black>=22.0.0",
    "flake8>=4.0.0",
    "isort>=5.10.0",
    "mypy>=0.900",
]

setup(
    name=PACKAGE_NAME,
    version=VERSION,
    author=AUTHOR,
    description=DESCRIPTION,
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests*", "docs*", "examples*"]),
    include_package_data=True,
    classifiers=CLASSIFIERS,
    keywords=" ".join(KEYWORDS),
    license=LICENSE,
    python_requires=">=3.8",

    # Dependencies
    install_requires=read_requirements(),

    # Optional dependencies
    extras_require={
        "dev": DEV_REQUIREMENTS,
        "test": [
            "pytest>=6.0.0",
            "pytest-cov>=2.0.0",
            "pytest-xdist>=2.0.0"
        ],
    },

    # Console scripts
    entry_points={
        "console_scripts": [
            "qoe-optimize=qoe.scripts.optimize:main",
        ],
    },

    zip_safe=False,
    platforms=["any"],
)
