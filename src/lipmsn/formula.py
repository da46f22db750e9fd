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

import copy
import collections

import lipmsn.mass as mass
import lipmsn.error as error


class Formula(object):
    """
    Chemical formula with a charge.

    Adding or subtracting two formulas adds or subtracts their atom
    counts and charges. Subtraction fails with ``ChemicalFormulaError``
    if any element would end up with a negative count. Use
    ``difference`` to get a composition which is allowed to be
    negative (e.g. for losses in fragment definitions).

    Parameters
    ----------
    formula : str,Formula,dict
        Formula string, another ``Formula`` or a dict of atom counts.
    charge : int
        Charge of the ion.
    """

    def __init__(self, formula = None, charge = 0, **kwargs):

        if isinstance(formula, Formula):

            charge = formula.charge
            atoms = copy.copy(formula.atoms)

        elif isinstance(formula, dict):

            atoms = collections.defaultdict(int, formula)

        else:

            atoms = mass.formula_to_atoms(formula or '')

        for elem, cnt in kwargs.items():

            atoms[elem.capitalize()] += cnt

        self.atoms = atoms
        self.charge = charge


    @property
    def formula(self):

        return mass.atoms_to_formula(self.atoms)


    @property
    def mass(self):
        """
        Monoisotopic mass corrected by the electrons of the charge.
        """

        return mass.atoms_mass(self.atoms) - self.charge * mass.electron


    @property
    def mz(self):

        return mass.mz(self.mass, self.charge)


    def __str__(self):

        return self.formula


    def __repr__(self):

        return '<Formula %s%s>' % (
            self.formula,
            (' %+d' % self.charge) if self.charge else '',
        )


    def __eq__(self, other):

        other = other if isinstance(other, Formula) else Formula(other)

        return (
            self.formula == other.formula and
            self.charge == other.charge
        )


    def __hash__(self):

        return hash((self.formula, self.charge))


    def __add__(self, other):

        new = Formula(self)
        new += other

        return new


    def __iadd__(self, other):

        other = other if isinstance(other, Formula) else Formula(other)

        self.add(other.atoms)
        self.charge += other.charge

        return self


    def __sub__(self, other):

        new = Formula(self)
        new -= other

        return new


    def __isub__(self, other):

        other = other if isinstance(other, Formula) else Formula(other)

        self.sub(other.atoms)
        self.charge -= other.charge

        return self


    def __mul__(self, other):

        if not isinstance(other, int):

            return NotImplemented

        return Formula(
            dict((elem, cnt * other) for elem, cnt in self.atoms.items()),
            charge = self.charge,
        )

    __rmul__ = __mul__


    def add(self, atoms):

        for elem, cnt in atoms.items():

            self.atoms[elem] += cnt


    def sub(self, atoms):

        for elem, cnt in atoms.items():

            if self.atoms[elem] < cnt:

                raise error.ChemicalFormulaError(
                    'Can not remove %s from %s: too few %s atoms!' % (
                        mass.atoms_to_formula(atoms),
                        self.formula,
                        elem,
                    )
                )

        for elem, cnt in atoms.items():

            self.atoms[elem] -= cnt


    def difference(self, other):
        """
        Returns the atom counts of this formula minus another one
        without checking for negative counts.
        """

        other = other if isinstance(other, Formula) else Formula(other)

        atoms = collections.defaultdict(int, self.atoms)

        for elem, cnt in other.atoms.items():

            atoms[elem] -= cnt

        return atoms


    def fits_into(self, other):
        """
        Tells if this composition can be removed from another one,
        i.e. none of its element counts is higher.
        """

        other = other if isinstance(other, Formula) else Formula(other)

        return all(
            cnt <= other.atoms.get(elem, 0)
            for elem, cnt in self.atoms.items()
        )


    def count(self, elem):

        return self.atoms.get(elem, 0)
