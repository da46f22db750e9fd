#!/usr/bin/env python
# -*- coding: utf-8 -*-

#
#  This file is part of the `lipmsn` python module
#
#  Copyright (c) 2015-2019 - EMBL
#
#  File author(s):
#  Dénes Türei (turei.denes@gmail.com)
#
#  Distributed under the GNU GPLv3 License.
#  See accompanying file LICENSE.txt or copy at
#      http://www.gnu.org/licenses/gpl-3.0.html
#
#  Website: http://denes.omnipathdb.org/
#

"""
Lookup of fragment m/z values in sorted peak arrays.
"""


def ppm_tolerance(ppm, mz):
    """
    Converts a tolerance in ppm to an absolute m/z difference at ``mz``.
    """

    return mz * ppm * 1e-6


def window(a, mz, ppm = 20):
    """
    Bounds of the range of a sorted one dimensional numpy array which
    falls within a tolerance around ``mz``.

    Parameters
    ----------
    a : numpy.array
        Sorted array of m/z values.
    mz : float
        The m/z to look up.
    ppm : float
        Tolerance in ppm.

    Returns
    -------
    Tuple of the lower (inclusive) and upper (exclusive) indices.
    """

    t = ppm_tolerance(ppm, mz)

    return (
        a.searchsorted(mz - t, side = 'left'),
        a.searchsorted(mz + t, side = 'right'),
    )


def findall(a, mz, ppm = 20):
    """
    Indices of all values within the tolerance around ``mz``, in
    increasing order.
    """

    lower, upper = window(a, mz, ppm)

    return list(range(lower, upper))
