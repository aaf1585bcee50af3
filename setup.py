#!/usr/bin/env python

import glob
import os

from setuptools import find_packages, setup


def read(fname):
    """
    Read the contents of a file.

    Parameters
    ----------
    fname : str
        Path to file.

    Returns
    -------
    str
        File contents.
    """
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


install_requires = read("requirements.txt").splitlines()

# Dynamically determine extra dependencies
extras_require = {}
extra_req_files = glob.glob("requirements-*.txt")
for extra_req_file in extra_req_files:
    name = os.path.splitext(extra_req_file)[0].replace("requirements-", "", 1)
    extras_require[name] = read(extra_req_file).splitlines()

# If there are any extras, add a catch-all case that includes everything.
if extras_require:
    extras_require["all"] = sorted({x for v in extras_require.values() for x in v})


# Import meta data from __meta__.py
#
# We use exec for this because importing the package would require the
# dependencies to be installed already.
# https://packaging.python.org/guides/single-sourcing-package-version/
meta = {}
exec(read("vecinfo/__meta__.py"), meta)


# Import the README and use it as the long-description.
possible_readme_names = ["README.rst", "README.md", "README.txt", "README"]

long_description = meta["description"]
readme_fname = ""
for fname in possible_readme_names:
    try:
        long_description = read(fname)
    except IOError:
        # doesn't exist
        continue
    else:
        # exists
        readme_fname = fname
        break

readme_ext = os.path.splitext(readme_fname)[1]
if readme_ext.lower() == ".rst":
    long_description_content_type = "text/x-rst"
elif readme_ext.lower() == ".md":
    long_description_content_type = "text/markdown"
else:
    long_description_content_type = "text/plain"


setup(
    name=meta["name"],
    version=meta["version"],
    description=meta["description"],
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    author=meta["author"],
    author_email=meta["author_email"],
    install_requires=install_requires,
    extras_require=extras_require,
    url=meta["url"],
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "*.tests", "*.tests.*", "tests.*"]),
    include_package_data=True,
    license=meta["license"],
    entry_points={
        "console_scripts": ["vecinfo=vecinfo.cli:main"],
    },
    classifiers=[
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: GIS",
    ],
)
