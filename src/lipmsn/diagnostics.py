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
Collects the reasons why an analyte, its chains or combinations have
been rejected.
"""

import collections


NO_PEAK_THERE = 'no_peak_there'
BELOW_BASE_PEAK_CUTOFF = 'below_base_peak_cutoff'
NEGATIVE_FORMULA = 'negative_formula'
MISSING_CLASS_FRAGMENT = 'missing_class_fragment'
INTENSITY_RULE_VIOLATED = 'intensity_rule_violated'

MISSING_CHAIN = 'missing_chain'
DIFF_RULE_VIOLATED = 'diff_rule_violated'
COMBINATION_LOWER_CHAIN_CUTOFF = 'combination_lower_chain_cutoff'


class Diagnostics(object):
    """
    Diagnostics sink of one analysis. If disabled all recording
    methods do nothing.
    """

    def __init__(self, enabled = True):

        self.enabled = enabled
        self.head_fragment_failures = collections.OrderedDict()
        self.head_rule_violations = []
        self.discarded_chains = collections.OrderedDict()
        self.chain_rule_violations = collections.defaultdict(list)
        self.combination_violations = collections.OrderedDict()
        self.unfulfilled_position_rules = collections.defaultdict(list)
        self.contradicting_position_rules = collections.defaultdict(list)
        self.coverage_failure = None
        self.status = None


    def head_fragment_failed(self, name, reason):

        if self.enabled:

            self.head_fragment_failures[name] = reason


    def head_rule_violated(self, rule):

        if self.enabled:

            self.head_rule_violations.append(str(rule))


    def chain_discarded(self, chain, reason, fragment = None):

        if self.enabled:

            self.discarded_chains[chain] = (reason, fragment)


    def chain_rule_violated(self, chain, rule):

        if self.enabled:

            self.chain_rule_violations[chain].append(str(rule))


    def combination_discarded(self, combination, reason, detail = None):

        if self.enabled:

            self.combination_violations[combination] = (reason, detail)


    def position_rule_unfulfilled(self, combination, rule):

        if self.enabled:

            self.unfulfilled_position_rules[combination].append(str(rule))


    def position_rule_contradicting(self, combination, rule):

        if self.enabled:

            self.contradicting_position_rules[combination].append(str(rule))


    def coverage_failed(self, ms_level, coverage, minimum):

        if self.enabled:

            self.coverage_failure = (ms_level, coverage, minimum)


    def final_status(self, status):

        if self.enabled:

            self.status = status


    def summary(self):

        return {
            'head_fragment_failures': dict(self.head_fragment_failures),
            'head_rule_violations': list(self.head_rule_violations),
            'discarded_chains': dict(self.discarded_chains),
            'chain_rule_violations': dict(self.chain_rule_violations),
            'combination_violations': dict(self.combination_violations),
            'unfulfilled_position_rules': dict(
                self.unfulfilled_position_rules
            ),
            'contradicting_position_rules': dict(
                self.contradicting_position_rules
            ),
            'coverage_failure': self.coverage_failure,
            'status': self.status,
        }
