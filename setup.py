# Copyright (c) 2017 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from setuptools import setup
from os import walk
from os.path import abspath, dirname, join
from Cython.Build import cythonize

class DevelopmentStatus:

    planning = "1 - Planning"
    pre_alpha = "2 - Pre-Alpha"
    alpha = "3 - Alpha"
    beta = "4 - Beta"
    stable = "5 - Production/Stable"
    mature = "6 - Mature"
    inactive = "7 - Inactive"

CURRENT_STATUS = DevelopmentStatus.alpha

def get_path_to_base_directory():
    return abspath(dirname(__file__))

def get_file_contents(*args):
    with open(join(*args)) as the_file:
        result = the_file.read()

    return result

def all_files_under (base_dir):
    for root, dirs, filenames in walk(base_dir):
        for filename in filenames:
            yield join(root, filename)

def all_cython_source_files (base_dir):
    for filename in all_files_under(base_dir):
        if filename.endswith(".pyx"):
            yield filename

def get_ext_modules(base_dir):
    cython_files = list(all_cython_source_files(base_dir))

    if cython_files:
        return cythonize(cython_files)

    return [ ]

base_dir = get_path_to_base_directory()
long_desc = get_file_contents(base_dir, "README.rst")

setup(
    name="Lamina",
    version="1.0.0.dev0",
    description="Read and rewrite Exif metadata in JPEG and TIFF files",
    long_description=long_desc,
    license="BSD-3-Clause",
    author="Matt LaChance",
    author_email="mattlach@umich.edu",

    classifiers=[
        " :: ".join(("Development Status", CURRENT_STATUS)),
        " :: ".join(("License", "OSI Approved", "BSD License")),
        " :: ".join(("Natural Language", "English")),
        " :: ".join(("Programming Language", "Cython")),
        " :: ".join(("Programming Language", "Python", "3", "Only")),
        " :: ".join(("Topic", "Multimedia", "Graphics")),
    ],

    packages=[
        "lamina",
        "lamina.internal",
        "lamina.jpeg",
        "lamina.tiff",
    ],
    install_requires=["numpy"],
    extras_require={
        "test": ["PyHamcrest", "pytest"],
    },
    ext_modules=get_ext_modules("lamina"),
)
