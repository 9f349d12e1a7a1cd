#!/usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import setup

def get_README():
    content = ""
    with open("README.md") as f:
        content += f.read()
    return content

setup(
    name="netstring-stream",
    python_requires=">=3.7",
    version="0.1.0",
    license="BSD",
    description="Decoding of length-prefixed netstring records from byte streams.",
    long_description=get_README(),
    long_description_content_type="text/markdown",
    packages=["netstring_stream"],
    package_data={"netstring_stream": ["py.typed"]},
    zip_safe=False,
    install_requires=[
        "requests",
        "urllib3",
        "typing_extensions"
    ],
    extras_require={
        "test": ["pytest", "mypy"]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9"
    ],
)
