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

import collections

import lipmsn.chain as chain
import lipmsn.rules as rules
import lipmsn.fragment as fragment


def rule_dict(*rule_list):

    return collections.OrderedDict((r.name, r) for r in rule_list)


class TestFragmentPredictor(object):

    def setup_method(self, method):

        self.head = rule_dict(
            rules.FragmentRule('HG', 'C5H15NO4P', mandatory = 'true'),
            rules.FragmentRule(
                'HG_H2O',
                'C5H13NO3P',
                mandatory = {0: 'false', 1: 'quant'},
            ),
            rules.FragmentRule('NL_HG', '$PRECURSOR-C5H14NO4P', allowed_oh = (1,)),
        )
        self.chains = rule_dict(
            rules.FragmentRule('NL', '$PRECURSOR-$CHAIN', mandatory = 'class'),
            rules.FragmentRule('NL_H2O', '$PRECURSOR-$CHAIN-H2O'),
            rules.FragmentRule(
                'NL_OH',
                '$PRECURSOR-$CHAIN-H2O-H2O',
                allowed_oh = (1,),
                mandatory = 'true',
            ),
            rules.FragmentRule('LCB_W', '$LCB-H2O', mandatory = 'other'),
        )


    def predictor(self, oh = 0):

        return fragment.FragmentPredictor(
            self.head,
            self.chains,
            'C42H83NO8P',
            oh = oh,
            charge = 1,
        )


    def test_head_partition(self):

        mandatory, optional = self.predictor().head_fragments()

        assert list(mandatory.keys()) == ['HG']
        assert list(optional.keys()) == ['HG_H2O']
        assert fragment.is_mandatory(mandatory['HG'])


    def test_head_hydroxylated(self):

        mandatory, optional = self.predictor(oh = 1).head_fragments()

        assert list(mandatory.keys()) == ['HG', 'HG_H2O']
        assert list(optional.keys()) == ['NL_HG']
        assert optional['NL_HG'].formula == 'C37H69O4'


    def test_chain_fragments(self):

        predictor = self.predictor()
        palmitoyl = chain.Chain(16, 0, formula = 'C16H30O')
        frags = predictor.chain_fragments(palmitoyl)

        assert list(frags.keys()) == ['NL', 'NL_H2O']
        assert frags['NL'].formula == 'C26H53NO7P'
        assert frags['NL_H2O'].formula == 'C26H51NO6P'
        assert fragment.is_class_fragment(frags['NL'])
        assert not fragment.is_mandatory(frags['NL_H2O'])
        assert predictor.chain_fragments(palmitoyl) is frags


    def test_chain_hydroxylation(self):

        hydroxy = chain.Chain(16, 0, oh = 1, formula = 'C16H30O2')
        frags = self.predictor(oh = 1).chain_fragments(hydroxy)

        assert list(frags.keys()) == ['NL', 'NL_H2O', 'NL_OH']
        assert fragment.is_mandatory(frags['NL_OH'])


    def test_lcb_fragments(self):

        sphingosine = chain.Chain(
            18,
            1,
            typ = chain.LCB,
            oh = 2,
            formula = 'C18H37NO2',
        )
        frags = self.predictor().chain_fragments(sphingosine)

        assert list(frags.keys()) == ['LCB_W']
        assert fragment.from_other_species(frags['LCB_W'])
        assert frags['LCB_W'].formula == 'C18H35NO'
