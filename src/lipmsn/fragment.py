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
Prediction of the fragment ions of an analyte from the fragmentation
rules of its class.
"""

import collections

import lipmsn.rules as rules
import lipmsn.formula as formula_mod

#: predicted fragment; defined together with the rules calculating it
Fragment = rules.Fragment

MANDATORY = (rules.Mandatory.TRUE, rules.Mandatory.QUANT)


def is_mandatory(frag):

    return frag.mandatory in MANDATORY


def is_class_fragment(frag):

    return frag.mandatory == rules.Mandatory.CLASS


def from_other_species(frag):

    return frag.mandatory == rules.Mandatory.OTHER


class FragmentPredictor(object):
    """
    Calculates the theoretical fragments of the head group and of each
    chain of an analyte.

    Parameters
    ----------
    head_rules : dict
        Fragment names and ``lipmsn.rules.FragmentRule`` objects of the
        head group.
    chain_rules : dict
        Fragment names and ``FragmentRule`` objects of the chains.
    precursor : str,lipmsn.formula.Formula
        Formula of the precursor ion.
    oh : int
        Hydroxylation count of the analyte.
    charge : int
        Charge of the precursor, its sign gives the ion mode.
    """

    def __init__(
            self,
            head_rules,
            chain_rules,
            precursor,
            oh = 0,
            charge = 1,
        ):

        self.head_rules = head_rules
        self.chain_rules = chain_rules
        self.precursor = formula_mod.Formula(precursor, charge = charge)
        self.oh = oh
        self.polarity = 1 if charge >= 0 else -1
        self._chain_cache = {}


    def _predict(self, rule, oh, chain = None):

        frag = rule.calculate(
            precursor = self.precursor,
            chain = chain,
            polarity = self.polarity,
        )

        return frag._replace(mandatory = rule.mandatory_for(oh))


    def head_fragments(self):
        """
        Fragments of the head group valid at the hydroxylation of the
        analyte.

        Returns
        -------
        Tuple of two ordered dicts of fragment names and ``Fragment``
        objects: the mandatory and the optional ones.
        """

        mandatory = collections.OrderedDict()
        optional = collections.OrderedDict()

        for name, rule in self.head_rules.items():

            if not rule.hydroxylation_valid(self.oh):

                continue

            frag = self._predict(rule, self.oh)

            (mandatory if is_mandatory(frag) else optional)[name] = frag

        return mandatory, optional


    def chain_fragments(self, chain):
        """
        Fragments of one chain: all rules of the chain's type valid at
        its hydroxylation.

        Returns
        -------
        Ordered dict of fragment names and ``Fragment`` objects.
        """

        if chain.name not in self._chain_cache:

            self._chain_cache[chain.name] = collections.OrderedDict(
                (name, self._predict(rule, chain.oh, chain))
                for name, rule in self.chain_rules.items()
                if (
                    rule.chain_type == chain.typ and
                    rule.hydroxylation_valid(chain.oh)
                )
            )

        return self._chain_cache[chain.name]
