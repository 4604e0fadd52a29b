#!/usr/bin/python3
# Setup file for gitreplay
# Copyright (C) 2026 The gitreplay Authors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

import ast
import os

from setuptools import setup

with open(os.path.join(os.path.dirname(__file__), "gitreplay", "__init__.py")) as f:
    for line in f:
        if line.startswith("__version__"):
            version = ".".join(
                str(part) for part in ast.literal_eval(line.split("=", 1)[1].strip())
            )
            break

tests_require = ["pytest"]


setup(
    name="gitreplay",
    version=version,
    description="Replay the history of a git repository into a new repository",
    license="Apache-2.0 OR GPL-2.0-or-later",
    python_requires=">=3.10",
    packages=["gitreplay"],
    package_data={"": ["py.typed"]},
    install_requires=["dulwich>=0.24.0"],
    extras_require={"test": tests_require},
    entry_points={"console_scripts": ["gitreplay=gitreplay.cli:_main"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Version Control :: Git",
    ],
)
