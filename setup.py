#!/usr/bin/env python3
"""autogitpull - Setup"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="autogitpull",
    version="1.0.0",
    description="Pull new commits onto a server when a hosting provider pushes",
    author="autogitpull Team",
    packages=find_packages(include=["autogitpull", "autogitpull.*"]),
    package_data={"autogitpull": ["scripts/*.sh"]},
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "autogitpull=autogitpull.main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
