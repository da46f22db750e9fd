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

"""
Enumeration of the chain combinations which can explain an analyte.
"""

import collections

import numpy as np

import lipmsn.common as common
import lipmsn.settings as settings
import lipmsn.chain as chain_mod
import lipmsn.chainlib as chainlib
import lipmsn.session as session


def partitions(total, slot_values, position_free = True):
    """
    Distributes a total over slots, each slot taking one of its
    candidate values.

    Parameters
    ----------
    total : int
        The sum the values of the slots must add up to.
    slot_values : list
        For each slot a sorted list of candidate values.
    position_free : bool
        If ``True`` the slots are interchangeable, and a slot never
        takes a candidate preceding the one of the previous slot, hence
        each value multiset is generated only once (requires the same
        candidates for each slot). If ``False`` each slot iterates over
        all of its candidates.

    Returns
    -------
    List of tuples.
    """

    result = []
    last = len(slot_values) - 1

    def _extend(prefix, acc, level, start):

        values = slot_values[level]

        for i in range(start if position_free else 0, len(values)):

            value = values[i]

            if acc + value > total:

                continue

            if level == last:

                if acc + value == total:

                    result.append(prefix + (value,))

            else:

                _extend(prefix + (value,), acc + value, level + 1, i)

    if slot_values:

        _extend((), 0, 0, 0)

    return result


def label_permutations(options):
    """
    Iterates over the full cartesian product of the options of each
    slot. The ``j``-th item takes, at slot ``i``, the option
    ``(j // divisor[i]) % len(options[i])`` where the divisor is the
    product of the option counts of the subsequent slots.

    Parameters
    ----------
    options : list
        List of lists of options for each slot.

    Yields
    ------
    Tuples with one option for each slot.
    """

    if not options:

        return

    counts = [len(opts) for opts in options]
    total = int(np.prod(counts))

    for j in range(total):

        idx = np.unravel_index(j, counts)

        yield tuple(opts[k] for opts, k in zip(options, idx))


class ChainCombinator(object):
    """
    Enumerates the chain combinations matching the carbon count, double
    bonds and hydroxylations of an analyte.

    Parameters
    ----------
    c : int
        Total carbon count of the chains.
    u : int
        Total number of double bonds of the chains.
    oh_distributions : list
        ``lipmsn.hydroxy.OhDistribution`` objects, all with the same
        number of chains.
    libraries : dict
        Chain types as keys, ``lipmsn.chainlib.ChainLibrary`` objects
        as values.
    labels : tuple
        The isotope labels the chains of the analyte carry together.
        ``None`` if not known, then any label combination is accepted.
    """

    def __init__(
            self,
            c,
            u,
            oh_distributions,
            libraries,
            labels = None,
            lclass = None,
        ):

        self.c = c
        self.u = u
        self.oh_distributions = list(oh_distributions)
        self.libraries = libraries
        self.labels = None if labels is None else tuple(sorted(labels))
        self.lclass = lclass
        self.nchains = (
            len(self.oh_distributions[0].slot_types())
                if self.oh_distributions else
            0
        )
        self.log = session.get_log()

        self.setup()


    def setup(self):

        self.potential_combinations = self.combinations()
        self.unique_chains = collections.OrderedDict(
            (ch.name, ch)
            for combis in self.potential_combinations.values()
            for combi in combis.values()
            for ch in combi
        )


    def library(self, typ):

        return self.libraries.get(typ) or chainlib.ChainLibrary(name = typ)


    def pooled_pairs(self):
        """
        The (carbon, double bond) pairs of all libraries used by the
        hydroxylation distributions.
        """

        types = {
            typ
            for dist in self.oh_distributions
            for typ, _ in dist.slot_types()
        }

        pairs = set()

        for typ in types:

            pairs.update(self.library(typ).carbon_db_pairs())

        return pairs


    def carbon_partitions(self, pairs = None):
        """
        Non-decreasing assignments of carbon counts to the chains
        summing up to the total carbon count.
        """

        pairs = self.pooled_pairs() if pairs is None else pairs
        carbons = sorted({c for c, u in pairs})

        return partitions(
            self.c,
            [carbons] * self.nchains,
            position_free = True,
        )


    def db_partitions(self, carbons, pairs = None):
        """
        Assignments of double bonds to chains with given carbon counts.
        Each chain takes one of the double bond values available for
        its carbon count. If the carbon counts come without double bond
        information, the only assignment is the sentinel value.
        """

        pairs = self.pooled_pairs() if pairs is None else pairs
        sentinel = settings.get('no_double_bond')

        options = [
            sorted({u for c, u in pairs if c == carbon})
            for carbon in carbons
        ]

        sentinel_only = [opts == [sentinel] for opts in options]

        if all(sentinel_only):

            return [(sentinel,) * len(carbons)]

        if any(sentinel_only):

            self.log.msg(
                'Carbon counts %s: chains with and without double bond '
                'information can not be combined.' % (carbons,),
                level = 1,
            )

            return []

        options = [[u for u in opts if u != sentinel] for opts in options]

        return partitions(self.u, options, position_free = False)


    def carbon_db_combinations(self):
        """
        All (carbon, double bond) assignments to the chains; from the
        assignments being permutations of each other only the first
        one is kept.
        """

        pairs = self.pooled_pairs()
        unique = common.CanonicalMultiset()
        result = []

        for carbons in self.carbon_partitions(pairs):

            for dbs in self.db_partitions(carbons, pairs):

                cu = tuple(zip(carbons, dbs))

                if unique.add(cu):

                    result.append(cu)

        return result


    def bind(self, cu, slot_types):
        """
        Finds the library chains for each chain position.

        Parameters
        ----------
        cu : tuple
            (carbon, double bond) pair for each position.
        slot_types : tuple
            (chain type, hydroxylation) pair for each position.

        Returns
        -------
        List with the candidate chains for each position, ``None`` if
        any position has no candidate.
        """

        options = []

        for (c, u), (typ, oh) in zip(cu, slot_types):

            variants = self.library(typ).variants(c, u, oh)

            if not variants:

                return None

            options.append(variants)

        return options


    def labels_match(self, chains):

        return (
            self.labels is None or
            tuple(sorted(ch.label for ch in chains if ch.label)) ==
            self.labels
        )


    def combinations(self):
        """
        Builds the chain combinations for each hydroxylation
        distribution.

        Returns
        -------
        Dict of dicts: hydroxylation distribution identifiers, chain
        combination identifiers and ``ChainCombination`` objects.
        """

        result = collections.OrderedDict()
        cu_combinations = self.carbon_db_combinations()

        for dist in self.oh_distributions:

            combis = collections.OrderedDict()
            unique = common.CanonicalMultiset(key = lambda ch: ch.name)

            for slot_types in common.unique_permutations(dist.slot_types()):

                for cu in cu_combinations:

                    options = self.bind(cu, slot_types)

                    if options is None:

                        continue

                    for chains in label_permutations(options):

                        if not self.labels_match(chains):

                            continue

                        if unique.add(chains):

                            combi = chain_mod.ChainCombination(chains)
                            combis[combi.id] = combi

            result[dist.id] = combis

            self.log.msg(
                'Chain combinations for %u:%u with hydroxylation `%s`: '
                '%u.' % (self.c, self.u, dist.id, len(combis)),
                level = 2,
            )

        return result


    def possible_chain_objects(self):
        """
        The distinct chains occurring in any combination.
        """

        return list(self.unique_chains.values())


    def all_combinations(self):
        """
        All combinations of all hydroxylation distributions in one dict.
        """

        return collections.OrderedDict(
            (combi_id, combi)
            for combis in self.potential_combinations.values()
            for combi_id, combi in combis.items()
        )
