# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from setuptools import setup, find_packages

setup(
    name="composite-builds",
    version="0.1.0",
    description="Lifecycle coordination for builds included into a composite build",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["composite_builds", "composite_builds.*"]),
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "PyYAML>=6.0",
        "rich>=13.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Programming Language :: Python",
        "License :: OSI Approved :: MIT License",
    ],
    license="MIT",
    python_requires=">=3.10",
)
