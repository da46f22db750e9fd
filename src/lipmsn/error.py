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
Exceptions raised during the identification of an analyte.

Missing evidence is not an exception: it is expressed by the status of
the identification result.
"""


class MSnError(Exception):
    """
    Base class of all errors aborting the analysis of one analyte.
    """

    pass


class RuleViolation(MSnError):
    """
    Structural problem in the fragmentation rules of a lipid class:
    unparsable values, inconsistent formulas or invalid charges.
    """

    def __init__(self, msg, rule = None, lclass = None):

        self.rule = rule
        self.lclass = lclass

        details = ', '.join(
            '%s `%s`' % (label, value)
            for label, value in (('rule', rule), ('class', lclass))
            if value is not None
        )

        MSnError.__init__(
            self,
            '%s (%s)' % (msg, details) if details else msg,
        )


class RuleAbsent(MSnError):
    """
    No MSn rules exist for a lipid class. Callers treat this as the
    regular case of no MSn evidence.
    """

    def __init__(self, lclass):

        self.lclass = lclass

        MSnError.__init__(
            self,
            'No MSn fragmentation rules for class `%s`.' % lclass,
        )


class ConstraintUnsatisfiable(MSnError):
    """
    The totals of the analyte can not be distributed over the chains
    with the bounds allowed by the rules.
    """

    pass


class ChemicalFormulaError(MSnError, ValueError):
    """
    A formula can not be subtracted from another one, or a formula
    string can not be parsed.
    """

    pass
