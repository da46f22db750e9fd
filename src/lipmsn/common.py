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
import itertools


ROOT = os.path.abspath(os.path.dirname(__file__))


class _const:
    """ """

    class ConstError(TypeError):
        """ """

        pass

    def __setattr__(self, name, value):

        if name in self.__dict__:

            raise self.ConstError("Can't rebind const(%s)" % name)

        self.__dict__[name] = value


def uniq_ord_list(seq, idfun = None):
    """
    Removes duplicates from a list preserving the order of first
    occurrence.

    Parameters
    ----------
    seq : iterable
        Items, any hashable or ``idfun`` must make them hashable.
    idfun : callable
        Function creating the key of identity for each item.
    """

    if idfun is None:
        def idfun(x): return x
    seen = set()
    result = []
    for item in seq:

        marker = idfun(item)
        if marker in seen: continue
        seen.add(marker)
        result.append(item)

    return result


def unique_permutations(seq):
    """
    Yields the distinct orderings of a sequence which may contain
    repeated elements, in the order of ``itertools.permutations``.
    """

    seen = set()

    for perm in itertools.permutations(seq):

        if perm in seen:

            continue

        seen.add(perm)

        yield perm


class CanonicalMultiset(object):
    """
    Filters sequences which are permutations of each other.

    Two sequences are equivalent if they consist of the same items
    with the same multiplicities, regardless of their order. The
    filter keeps the first seen member of each equivalence class,
    hence the order of generation decides which permutation survives.

    Parameters
    ----------
    key : callable
        Applied to each item before comparison, e.g. to compare chains
        by their names. Must return sortable values.
    """

    def __init__(self, key = None):

        self.key = key or (lambda x: x)
        self._seen = set()


    def canonical(self, seq):
        """
        Returns the canonical form of a sequence: the sorted tuple of
        its item keys. Applying it to its own output gives the same
        result.
        """

        return tuple(sorted(self.key(item) for item in seq))


    def add(self, seq):
        """
        Registers a sequence. Returns ``True`` if no permutation of it
        has been seen before, ``False`` otherwise.
        """

        canonical = self.canonical(seq)

        if canonical in self._seen:

            return False

        self._seen.add(canonical)

        return True


    def __contains__(self, seq):

        return self.canonical(seq) in self._seen


    def __len__(self):

        return len(self._seen)


    def filter(self, seqs):
        """
        Yields the sequences of an iterable skipping those equivalent
        to an earlier one.
        """

        for seq in seqs:

            if self.add(seq):

                yield seq
