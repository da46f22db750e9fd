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

import re
import collections

import lipmsn.error as error


#: Mass of a proton
proton = 1.00727646677
#: Mass of an electron
electron = 0.00054857990924
#: Mass of a neutron
neutron = 1.00866491588

#: Mass of a proton
p = proton
#: Mass of an electron
e = electron
#: Mass of a neutron
n = neutron

_re_form  = re.compile(r'([A-Z][a-z]*)(-?[0-9]*)')
_re_valid = re.compile(r'^(?:[A-Z][a-z]*-?[0-9]*)*$')

#: Monoisotopic masses of the most abundant isotopes (CIAAW).
#: Isotope labels are represented as pseudo-elements: ``D`` for
#: deuterium, ``Cx``, ``Nx`` and ``Ox`` for 13C, 15N and 18O.
monoisotopic = {
    'H':  1.00782503223,
    'D':  2.01410177812,
    'C':  12.0,
    'Cx': 13.00335483507,
    'N':  14.00307400443,
    'Nx': 15.00010889888,
    'O':  15.99491461957,
    'Ox': 17.99915961286,
    'F':  18.99840316273,
    'Na': 22.9897692820,
    'Mg': 23.985041697,
    'Si': 27.97692653465,
    'P':  30.97376199842,
    'S':  31.9720711744,
    'Cl': 34.968852682,
    'K':  38.9637064864,
    'Ca': 39.962590863,
    'Fe': 55.93493633,
    'Cu': 62.92959772,
    'Zn': 63.92914201,
    'Br': 78.9183376,
    'I':  126.9044719,
    'Li': 7.0160034366,
    'B':  11.00930536,
    'Se': 79.9165218,
    'Mn': 54.93804391,
}


def formula_to_atoms(formula):
    """
    Converts chemical formula string to dict of atom counts.

    Parameters
    ----------
    formula : str
        Chemical formula, e.g. ``C2H5OH``. Counts may be negative,
        e.g. ``H-1``, which is used for fragments representing losses.

    Returns
    -------
    ``dict`` with elements as keys and counts as values.
    """

    formula = re.sub(r'\s+', '', formula or '')

    if not _re_valid.match(formula):

        raise error.ChemicalFormulaError(
            'Could not parse chemical formula `%s`.' % formula
        )

    atoms = collections.defaultdict(int)

    for elem, cnt in _re_form.findall(formula):

        if elem not in monoisotopic:

            raise error.ChemicalFormulaError(
                'Unknown element `%s` in formula `%s`.' % (elem, formula)
            )

        atoms[elem] += int(cnt or '1')

    return atoms


def _hill_key(elem):

    return (
        0 if elem in ('C', 'Cx') else
        1 if elem in ('H', 'D') else
        2,
        elem,
    )


def atoms_to_formula(atoms):
    """
    Creates a formula string from a dict of atom counts in Hill order
    (carbon and hydrogen first, then alphabetical). Elements with zero
    count are omitted.
    """

    return ''.join(
        '%s%s' % (elem, '' if atoms[elem] == 1 else atoms[elem])
        for elem in sorted(atoms.keys(), key = _hill_key)
        if atoms[elem] != 0
    )


def atoms_mass(atoms):
    """
    Monoisotopic mass of a composition given as atom counts.
    """

    return sum(monoisotopic[elem] * cnt for elem, cnt in atoms.items())


def calculate(formula, charge = 0):
    """
    Monoisotopic mass of a chemical formula.

    Parameters
    ----------
    formula : str
        Chemical formula.
    charge : int
        Charge of the ion: the mass of the missing (positive charge)
        or extra (negative charge) electrons is accounted for.

    Returns
    -------
    Mass as float.
    """

    return atoms_mass(formula_to_atoms(formula)) - charge * electron


def mz(mass, charge):
    """
    Converts an ion mass to m/z.
    """

    return mass / abs(charge) if charge else mass
