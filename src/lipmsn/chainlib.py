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
Libraries of candidate chains.
"""

import collections

import lipmsn.chain as chain_mod
import lipmsn.formula as formula_mod
import lipmsn.error as error
import lipmsn.session as session


class ChainLibrary(object):
    """
    A collection of chains looked up by their structural key.

    Parameters
    ----------
    chains : iterable
        ``lipmsn.chain.Chain`` objects. A chain with a key already
        present replaces the earlier one.
    name : str
        Name of the library, e.g. ``fa`` or ``lcb``.
    """

    def __init__(self, chains = (), name = None):

        self.name = name
        self._chains = collections.OrderedDict()

        for ch in chains:

            self.add(ch)


    def add(self, ch):

        self._chains[ch.key] = ch


    def __iter__(self):

        return iter(self._chains.values())


    def __len__(self):

        return len(self._chains)


    def __contains__(self, key):

        return key in self._chains


    def __getitem__(self, key):

        return self._chains[key]


    def get(self, key, default = None):

        return self._chains.get(key, default)


    @classmethod
    def from_nested(cls, nested, typ = chain_mod.ACYL, name = None):
        """
        Builds a library from a nested dict keyed by hydroxylation,
        carbon count, double bonds, label and oxidation state, with
        chains or formula strings as values.

        Parameters
        ----------
        nested : dict
            ``{oh: {c: {u: {label: {ox: chain}}}}}``
        typ : str
            Type of the chains created from formula strings.
        """

        chains = []

        for oh, by_c in nested.items():
            for c, by_u in by_c.items():
                for u, by_label in by_u.items():
                    for label, by_ox in by_label.items():
                        for ox, value in by_ox.items():

                            chains.append(
                                value
                                    if isinstance(value, chain_mod.Chain) else
                                chain_mod.Chain(
                                    c = c,
                                    u = u,
                                    typ = typ,
                                    oh = oh,
                                    label = label,
                                    ox = ox,
                                    formula = value,
                                )
                            )

        return cls(chains, name = name)


    def as_type(self, typ):
        """
        Returns a new library with all chains converted to an ether
        linked chain type (see ``Chain.as_type``).
        """

        return ChainLibrary(
            (ch.as_type(typ) for ch in self),
            name = self.name,
        )


    def hydroxylations(self):

        return sorted({ch.oh for ch in self})


    def by_oh(self, oh):

        return [ch for ch in self if ch.oh == oh]


    def carbon_db_pairs(self):
        """
        The set of (carbon count, double bonds) pairs present in the
        library regardless of hydroxylation, label and oxidation.
        """

        return {(ch.c, ch.u) for ch in self}


    def variants(self, c, u, oh = 0):
        """
        All chains with the given carbon count, double bonds and
        hydroxylation; these differ in label or oxidation state.
        """

        return [
            ch for ch in self
            if ch.c == c and ch.u == u and ch.oh == oh
        ]


    def plausible_for(self, analyte_formula, lclass = None):
        """
        Removes the chains which could not be part of the analyte
        because they contain more atoms of any element than the
        analyte formula.

        Parameters
        ----------
        analyte_formula : str,lipmsn.formula.Formula
            The formula of the analyte.

        Returns
        -------
        New ``ChainLibrary``.
        """

        try:

            analyte = formula_mod.Formula(analyte_formula)
            kept = []

            for ch in self:

                if ch.formula is None:

                    kept.append(ch)
                    continue

                if ch.get_formula().fits_into(analyte):

                    kept.append(ch)

        except error.ChemicalFormulaError as e:

            raise error.RuleViolation(
                'Chain library `%s` is inconsistent with the analyte '
                'formula `%s`: %s' % (self.name, analyte_formula, e),
                lclass = lclass,
            ) from e

        session.get_log().msg(
            'Chain library `%s`: %u of %u chains plausible for `%s`.' % (
                self.name,
                len(kept),
                len(self),
                analyte.formula,
            ),
            level = 2,
        )

        return ChainLibrary(kept, name = self.name)


class ChainLibraryProvider(object):
    """
    Source of chain libraries. Subclasses retrieve the libraries from
    any storage, this base class serves libraries from a dict.

    Parameters
    ----------
    libraries : dict
        Library names as keys and ``ChainLibrary`` objects or nested
        dicts (see ``ChainLibrary.from_nested``) as values.
    """

    def __init__(self, libraries = None):

        self.libraries = {}

        for name, lib in (libraries or {}).items():

            if not isinstance(lib, ChainLibrary):

                lib = ChainLibrary.from_nested(
                    lib,
                    typ = chain_mod.LCB if name == 'lcb' else chain_mod.ACYL,
                    name = name,
                )

            lib.name = lib.name or name
            self.libraries[name] = lib


    def chains_by_type(self, library_name):
        """
        Returns the ``ChainLibrary`` of a name.

        Raises ``KeyError`` if the library is not available.
        """

        if library_name not in self.libraries:

            raise KeyError('No chain library `%s`.' % library_name)

        return self.libraries[library_name]
