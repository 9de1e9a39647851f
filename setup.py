#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="keyscope",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Normalize raw keyboard input and cross-reference it against SFML, raylib and GLFW key names",
    long_description="TODO",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    package_data={"keyscope": ["data/*.txt"]},
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Software Development :: Testing",
        "Topic :: System :: Hardware",
    ],
    keywords=["keyboard", "scancode", "raw input"],
    python_requires=">=3.11",
    install_requires=[
        # only loaded on Windows, to call MapVirtualKeyW
        "cffi>=1.0.0",
        "cattrs>=22.2.0",
        "msgspec",
        "trio>=0.20.0",
    ],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "keyscope-replay=keyscope.scripts:replay_cli",
            "keyscope-lookup=keyscope.scripts:lookup_cli",
        ],
    },
)
