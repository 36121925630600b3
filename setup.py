#!/usr/bin/env python3
"""Setup script for mindtree."""

from setuptools import setup, find_packages


setup(
    name="mindtree",
    version="1.0.0",
    description="Tree model, undo history, layout and drag-and-drop core for mind map editors",
    author="mindtree Project",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "cairo": ["pycairo>=1.25.0"],
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "mindtree=mindtree.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business",
    ],
)
