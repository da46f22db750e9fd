#!/usr/bin/env python
# -*- coding: utf-8 -*-

#
#  This file is part of the `lipmsn` python module
#
#  Copyright (c) 2015-2019 - EMBL
#
#  File author(s): Dénes Türei (turei.denes@gmail.com)
#
#  Distributed under the GNU GPLv3 License.
#  See accompanying file LICENSE.txt or copy at
#      http://www.gnu.org/licenses/gpl-3.0.html
#
#  Website: http://denes.omnipathdb.org/
#

import os

#: The version is kept in a plain text file so ``setup.py`` can read it
#: without importing the package.
VERSION_FILE = os.path.join(
    os.path.abspath(os.path.dirname(__file__)),
    '__version__',
)


def read_version(path = VERSION_FILE):
    """
    Reads the ``major.minor.micro`` version from a text file.

    Returns
    -------
    Tuple of three integers.
    """

    with open(path, 'r') as fp:

        return tuple(int(i) for i in fp.read().strip().split('.'))


_MAJOR, _MINOR, _MICRO = read_version()
__version__ = '%d.%d.%d' % (_MAJOR, _MINOR, _MICRO)
__release__ = '%d.%d' % (_MAJOR, _MINOR)
