#!/usr/bin/env python3
import setuptools

setuptools.setup(
    name="import-tidy",
    version="0.1.0",
    packages=["import_tidy"],
    python_requires=">=3.11",
    install_requires=[
        "click",
        "tree-sitter>=0.23",
        "tree-sitter-go>=0.23",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "import-tidy = import_tidy.cli:main",
        ],
    },
    author="",
    description="Command-line tool to check and fix the grouping of imports in Go source files",
    license="MIT",
)
