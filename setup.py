# -*- coding: utf-8 -
import os
from setuptools import setup, find_packages


def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


setup(
    name="netemlib",
    version=read(os.path.join("netemlib", "version.txt")).strip(),
    description="Drive the netem qdisc of a device through tc",
    url="https://github.com/netemlib/netemlib",
    author="netemlib developers",
    license="GPL-3.0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
    ],
    keywords="Network emulation, netem, tc",
    long_description=read("README.rst"),
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "jsonschema>=3.2.0",
        "click>=7.0",
        "flask>=2.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "ddt",
        ],
    },
    entry_points={
        "console_scripts": [
            "netemlib=netemlib.cli:main",
        ],
    },
    package_data={"netemlib": ["version.txt"]},
    include_package_data=True,
)
