#!/usr/bin/env python
# -*- coding: utf-8 -*-

#
#  This file is part of the `lipmsn` python module
#
#  Copyright (c) 2015-2019 - EMBL
#
#  File author(s):
#  Dénes Türei (turei.denes@gmail.com)
#  Igor Bulanov
#
#  Distributed under the GNU GPLv3 License.
#  See accompanying file LICENSE.txt or copy at
#      http://www.gnu.org/licenses/gpl-3.0.html
#
#  Website: http://denes.omnipathdb.org/
#

"""
Aliphatic chains and their combinations.
"""

import collections

import lipmsn.settings as settings
import lipmsn.mass as mass
import lipmsn.formula as formula_mod


ACYL = 'acyl'
ALKYL = 'alkyl'
ALKENYL = 'alkenyl'
LCB = 'lcb'

#: Chain types originating from fatty acids.
FA_TYPES = (ACYL, ALKYL, ALKENYL)
CHAIN_TYPES = FA_TYPES + (LCB,)
#: Type of rules involving fragments of chains of different type.
DIFF_CHAIN_TYPES = 'diff'


class ChainKey(collections.namedtuple(
        'ChainKeyBase',
        ['typ', 'c', 'u', 'oh', 'label', 'ox'],
    )):
    """
    Structural identity of a chain. Two chains with equal keys are the
    same chain even if their formula has been provided differently.
    """

    def __new__(cls, typ, c, u, oh = 0, label = None, ox = None):

        return super(ChainKey, cls).__new__(
            cls,
            typ = typ,
            c = c,
            u = u,
            oh = oh,
            label = label or None,
            ox = ox or None,
        )


class Chain(collections.namedtuple(
        'ChainBase',
        ['c', 'u', 'typ', 'oh', 'label', 'ox', 'formula', 'mass'],
    )):
    """
    Represents an aliphatic chain.

    Parameters
    ----------
    c : int
        Number of carbon atoms.
    u : int
        Number of double bonds (``-1`` if not applicable).
    typ : str
        Chain type: ``acyl``, ``alkyl``, ``alkenyl`` or ``lcb``.
    oh : int
        Number of hydroxyl groups.
    label : str
        Isotope label prefix, e.g. ``D5``.
    ox : str
        Oxidation state, e.g. ``OOH``.
    formula : str
        Chemical formula of the chain as it is used in fragment
        calculations.
    mass : float
        Monoisotopic mass of the chain, calculated from the formula
        if not provided.
    """

    def __new__(
            cls,
            c,
            u,
            typ = ACYL,
            oh = 0,
            label = None,
            ox = None,
            formula = None,
            mass = None,
        ):

        if isinstance(formula, formula_mod.Formula):

            formula = formula.formula

        if mass is None and formula is not None:

            mass = _mass_of(formula)

        return super(Chain, cls).__new__(
            cls,
            c = c,
            u = u,
            typ = typ,
            oh = oh,
            label = label or None,
            ox = ox or None,
            formula = formula,
            mass = mass,
        )


    @property
    def key(self):

        return ChainKey(
            typ = self.typ,
            c = self.c,
            u = self.u,
            oh = self.oh,
            label = self.label,
            ox = self.ox,
        )


    @property
    def name(self):

        return chain_name(
            self.c,
            self.u,
            typ = self.typ,
            oh = self.oh,
            label = self.label,
            ox = self.ox,
        )


    def __str__(self):

        return self.name


    def get_formula(self):

        return formula_mod.Formula(self.formula)


    def as_type(self, typ):
        """
        Derives an ether linked chain from a fatty acyl chain.
        An alkyl chain has two hydrogens in place of the carbonyl oxygen,
        an alkenyl chain lacks the oxygen and has the corresponding
        double bond in the vinyl ether group.
        """

        if typ == self.typ:

            return self

        if self.typ != ACYL or typ not in (ALKYL, ALKENYL):

            raise ValueError(
                'Can not convert %s chain to %s chain.' % (self.typ, typ)
            )

        new_formula = None

        if self.formula is not None:

            new_formula = self.get_formula() - 'O'

            if typ == ALKYL:

                new_formula += 'H2'

        return Chain(
            c = self.c,
            u = self.u,
            typ = typ,
            oh = self.oh,
            label = self.label,
            ox = self.ox,
            formula = new_formula,
        )


def _mass_of(formula):

    return mass.calculate(formula)


def chain_name(c, u, typ = ACYL, oh = 0, label = None, ox = None):
    """
    Creates the name of a chain, e.g. ``18:1``, ``O-16:0``, ``d18:1``
    or ``D516:0;O``.
    """

    core = (
        '%u' % c
            if u is None or u < 0 else
        '%u%s%u' % (c, settings.get('db_separator'), u)
    )

    prefix = ''
    suffix = ''

    if typ == LCB:

        prefix = settings.get('lcb_hydroxy_encoding').get(oh)

        if prefix is None:

            prefix = ''
            suffix = ';O%u' % oh

    else:

        if typ == ALKYL:

            prefix = settings.get('alkyl_prefix')

        elif typ == ALKENYL:

            prefix = settings.get('alkenyl_prefix')

        suffix = settings.get('fa_hydroxy_encoding').get(oh, ';O%u' % oh)

    return '%s%s%s%s%s' % (
        prefix,
        label or '',
        core,
        suffix,
        (';%s' % ox) if ox else '',
    )


def combination_id(chains):
    """
    Identifier of a chain combination: the names of the chains in
    their order joined by the chain separator.
    """

    return settings.get('chain_separator').join(
        chain if isinstance(chain, str) else chain.name
        for chain in chains
    )


def canonical_combination_id(combination):
    """
    Order independent identifier of a chain combination: the sorted
    chain names joined. Accepts a combination identifier or a sequence
    of chains; applying it to its own output gives the same string.
    """

    sep = settings.get('chain_separator')

    names = (
        combination.split(sep)
            if isinstance(combination, str) else
        [chain if isinstance(chain, str) else chain.name
        for chain in combination]
    )

    return sep.join(sorted(names))


class ChainCombination(tuple):
    """
    Ordered multiset of chains explaining an analyte.
    """

    def __new__(cls, chains):

        return super(ChainCombination, cls).__new__(cls, tuple(chains))


    @property
    def id(self):

        return combination_id(self)


    @property
    def canonical_id(self):

        return canonical_combination_id(self)


    @property
    def c(self):

        return sum(chain.c for chain in self)


    @property
    def u(self):

        return sum(chain.u for chain in self if chain.u > 0)


    @property
    def oh(self):

        return sum(chain.oh for chain in self)


    @property
    def labels(self):

        return tuple(sorted(chain.label for chain in self if chain.label))


    def names(self):

        return [chain.name for chain in self]


    def occurrences(self):
        """
        Number of occurrences of each chain by name, in order of
        first appearance.
        """

        counts = collections.OrderedDict()

        for chain in self:

            counts[chain.name] = counts.get(chain.name, 0) + 1

        return counts


    def distinct(self):
        """
        The distinct chains in order of first appearance.
        """

        seen = collections.OrderedDict()

        for chain in self:

            seen.setdefault(chain.name, chain)

        return list(seen.values())


    def __str__(self):

        return self.id
