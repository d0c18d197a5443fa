#! /usr/bin/env python3

from setuptools import setup, find_packages

import intlang

setup(
    name = "setup-int-lang",
    version = intlang.__version__,
    url = intlang.__url__,
    packages = find_packages(exclude=["tests", "tests.*"]),
    scripts = ["setup-int-lang.py"],
    python_requires = ">=3.11",
    install_requires = [
        "httpx",
        "truststore",
        "colorlog",
    ],
    extras_require = {
        "test": [
            "pytest",
            "pytest-httpx>=0.33",
            "pytest-mock",
        ],
    },
)
