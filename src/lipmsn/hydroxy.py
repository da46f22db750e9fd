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
Distribution of the hydroxylation sites of an analyte over its chains.
"""

import itertools
import collections

import lipmsn.common as common
import lipmsn.chain as chain_mod
import lipmsn.error as error
import lipmsn.session as session


OhSlot = collections.namedtuple('OhSlot', ['typ', 'oh', 'count'])


class OhDistribution(tuple):
    """
    Assignment of hydroxylations to chain types: a sorted tuple of
    ``OhSlot`` elements, each telling how many chains of a type carry
    a certain number of hydroxyl groups.
    """

    def __new__(cls, slots):

        merged = collections.Counter()

        for slot in slots:

            if slot.count:

                merged[(slot.typ, slot.oh)] += slot.count

        return super(OhDistribution, cls).__new__(
            cls,
            tuple(
                OhSlot(typ, oh, cnt)
                for (typ, oh), cnt in sorted(
                    merged.items(),
                    key = lambda i: (
                        chain_mod.CHAIN_TYPES.index(i[0][0]),
                        i[0][1],
                    ),
                )
            )
        )


    @property
    def id(self):

        return ';'.join(
            '%s:%ux%u' % (slot.typ, slot.oh, slot.count)
            for slot in self
        )


    def slot_types(self):
        """
        One ``(type, hydroxylation)`` tuple for each chain.
        """

        return [
            (slot.typ, slot.oh)
            for slot in self
            for _ in range(slot.count)
        ]


    def oh(self, typ = None):

        return sum(
            slot.oh * slot.count
            for slot in self
            if typ is None or slot.typ == typ
        )


    def __str__(self):

        return self.id


def distribute(total, n, lo, hi, start = None):
    """
    All non-decreasing sequences of ``n`` integers from ``[lo, hi]``
    summing up to ``total``. Each value multiset is returned once.

    Returns
    -------
    List of tuples.
    """

    start = lo if start is None else start

    if n == 0:

        return [()] if total == 0 else []

    result = []

    for value in range(start, hi + 1):

        rest = total - value

        # the remaining chains can not take less than `value` each
        if rest < value * (n - 1):

            break

        if rest > hi * (n - 1):

            continue

        for tail in distribute(rest, n - 1, lo, hi, start = value):

            result.append((value,) + tail)

    return result


class HydroxylationPartitioner(object):
    """
    Splits the hydroxylation count of an analyte between its fatty acid
    and long chain base chains, and the fatty acid part further between
    acyl, alkyl and alkenyl chains.

    Parameters
    ----------
    total : int
        Number of hydroxyl groups of the analyte.
    fa_chains : int
        Number of fatty acid derived chains (acyl, alkyl and alkenyl).
    lcb_chains : int
        Number of long chain bases.
    fa_range : tuple
        Lowest and highest number of hydroxylations per fatty acid chain.
    lcb_range : tuple
        Lowest and highest number of hydroxylations per long chain base.
    alkyl_chains : int
        How many of the fatty acid chains are alkyl chains.
    alkenyl_chains : int
        How many of the fatty acid chains are alkenyl chains.
    """

    def __init__(
            self,
            total,
            fa_chains,
            lcb_chains = 0,
            fa_range = (0, 0),
            lcb_range = (0, 0),
            alkyl_chains = 0,
            alkenyl_chains = 0,
            lclass = None,
        ):

        self.total = total
        self.fa_chains = fa_chains
        self.lcb_chains = lcb_chains
        self.fa_range = tuple(fa_range)
        self.lcb_range = tuple(lcb_range)
        self.alkyl_chains = alkyl_chains
        self.alkenyl_chains = alkenyl_chains
        self.acyl_chains = fa_chains - alkyl_chains - alkenyl_chains
        self.lclass = lclass

        if self.acyl_chains < 0:

            raise error.RuleViolation(
                'More ether linked chains (%u) than fatty acid '
                'chains (%u).' % (alkyl_chains + alkenyl_chains, fa_chains),
                lclass = lclass,
            )


    def pairs(self):
        """
        All ``(fa, lcb)`` splits of the total hydroxylation count which
        can be realized within the per chain bounds.

        Raises ``ConstraintUnsatisfiable`` if there is none.
        """

        fa_lo, fa_hi = self.fa_range
        lcb_lo, lcb_hi = self.lcb_range

        pairs = [
            (h_fa, self.total - h_fa)
            for h_fa in range(self.total + 1)
            if (
                self.fa_chains * fa_lo <= h_fa <= self.fa_chains * fa_hi and
                self.lcb_chains * lcb_lo <= self.total - h_fa <=
                self.lcb_chains * lcb_hi
            )
        ]

        if not pairs:

            raise error.ConstraintUnsatisfiable(
                'Can not distribute %u hydroxylation site(s): '
                '%u fatty acid chain(s) allow %u-%u each, '
                '%u long chain base(s) allow %u-%u each%s.' % (
                    self.total,
                    self.fa_chains,
                    fa_lo,
                    fa_hi,
                    self.lcb_chains,
                    lcb_lo,
                    lcb_hi,
                    (' (class `%s`)' % self.lclass) if self.lclass else '',
                )
            )

        return pairs


    def fa_distributions(self, h_fa):

        return distribute(h_fa, self.fa_chains, *self.fa_range)


    def lcb_distributions(self, h_lcb):

        return distribute(h_lcb, self.lcb_chains, *self.lcb_range)


    def subtype_distributions(self, fa_values):
        """
        Distributes the per chain hydroxylations of the fatty acid chains
        over the acyl, alkyl and alkenyl chains.

        Parameters
        ----------
        fa_values : tuple
            Hydroxylation of each fatty acid chain.

        Returns
        -------
        List of dicts with chain types as keys and tuples of
        hydroxylations as values.
        """

        counts = (
            (chain_mod.ACYL, self.acyl_chains),
            (chain_mod.ALKYL, self.alkyl_chains),
            (chain_mod.ALKENYL, self.alkenyl_chains),
        )
        values = sorted(set(fa_values))
        target = sorted(fa_values)

        per_type = [
            list(itertools.combinations_with_replacement(values, cnt))
            for _, cnt in counts
        ]

        result = []
        seen = set()

        for combo in itertools.product(*per_type):

            if sorted(itertools.chain(*combo)) != target:

                continue

            if combo in seen:

                continue

            seen.add(combo)
            result.append(
                dict(
                    (typ, oh_values)
                    for (typ, _), oh_values in zip(counts, combo)
                )
            )

        return result


    def distributions(self):
        """
        All assignments of hydroxylations to the chains.

        Returns
        -------
        List of ``OhDistribution`` objects.
        """

        result = []

        for h_fa, h_lcb in self.pairs():

            for fa_values in self.fa_distributions(h_fa):

                for by_type in self.subtype_distributions(fa_values):

                    for lcb_values in self.lcb_distributions(h_lcb):

                        slots = [
                            OhSlot(typ, oh, 1)
                            for typ, oh_values in by_type.items()
                            for oh in oh_values
                        ]
                        slots.extend(
                            OhSlot(chain_mod.LCB, oh, 1)
                            for oh in lcb_values
                        )

                        result.append(OhDistribution(slots))

        result = common.uniq_ord_list(result)

        session.get_log().msg(
            'Hydroxylation: %u site(s) distributed in %u way(s): %s.' % (
                self.total,
                len(result),
                ', '.join(d.id for d in result),
            ),
            level = 2,
        )

        return result
