#!/usr/bin/env python
# -*- coding: utf-8 -*-

#
#  This file is part of the `lipmsn` python module
#
#  Copyright (c) 2015-2019 - EMBL
#
#  File author(s): Dénes Türei (turei.denes@gmail.com)
#
#  Distributed under the GPLv3 License.
#  See accompanying file LICENSE.txt or copy at
#      http://www.gnu.org/licenses/gpl-3.0.html
#
#  Website: http://denes.omnipathdb.org/
#

import os
from setuptools import setup

with open(os.path.join('src', 'lipmsn', '__version__')) as f:
    __version__ = f.read().strip()

with open('README.rst') as f:
    readme = f.read()

with open('HISTORY.rst') as f:
    history = f.read()

setup(
    name = 'lipmsn',
    version = __version__,
    maintainer = 'Dénes Türei',
    maintainer_email = 'turei.denes@gmail.com',
    author = 'Dénes Türei',
    author_email = 'turei.denes@gmail.com',
    long_description = readme + '\n\n' + history,
    keywords = [
        'lipidomics',
        'lipids',
        'mass spectrometry',
        'MS2',
        'MSn',
        'LC MS/MS',
        'fragmentation',
        'glycerophospholipids',
        'sphingolipids',
        'fatty acyl chains',
        'chain positions',
        'chemical formula',
    ],
    description = 'Identification of lipid molecular species '
                  'from MSn fragmentation',
    license = 'GPLv3',
    platforms = [
        'Linux',
        'Unix',
        'MacOSX',
        'Windows',
    ],
    classifiers = [
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Natural Language :: English',
        'Topic :: Scientific/Engineering :: Bio-Informatics',
        'Topic :: Scientific/Engineering :: Chemistry'
    ],
    package_dir = {'': 'src'},
    packages = [
        'lipmsn',
    ],
    package_data = {
        'lipmsn': ['__version__'],
    },
    include_package_data = True,
    install_requires = [
        'numpy',
    ],
    extras_require = {
        'tests': [
            'pytest',
        ],
        'docs': [
            'sphinx',
        ]
    }
)
