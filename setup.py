# -*- coding: utf-8 -*-
#!/usr/bin/env python

# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.

from setuptools import setup, find_packages
from emf_sas import package_version

# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

with open(path.join(here, "README.rst"), encoding="utf-8") as f:
    long_description = f.read()

excludes = ["tests", "tests.*"]

setup(
    name="emf-sas",
    version=package_version(),
    author="Whamcloud",
    author_email="emf@whamcloud.com",
    url="https://pypi.python.org/pypi/emf-sas",
    packages=find_packages(exclude=excludes),
    include_package_data=True,
    license="MIT",
    description="Attach and detach SAS volumes, raw or multipath, on EMF storage nodes",
    long_description=long_description,
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    keywords="EMF SAS multipath scsi",
    python_requires=">=3.6",
    install_requires=["simplejson", "toolz"],
    extras_require={
        "journal": ["systemd-python"],
        "test": ["pytest", "mock"],
    },
    entry_points={
        "console_scripts": [
            "emf-sas = emf_sas.cli:main",
        ]
    },
)
