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

import lipmsn.chain as chain
import lipmsn.rules as rules
import lipmsn.position as position
import lipmsn.diagnostics as diagnostics


TYPES = {'NL': chain.ACYL, 'X': chain.ACYL, 'Y': chain.ACYL}


def acyl(c, u):

    return chain.Chain(c, u, formula = 'C%uH%uO' % (c, 2 * c - 2 - 2 * u))


def combination(*chains):

    return chain.ChainCombination(chains)


def parse(text, mandatory = False):

    return rules.IntensityRule.parse(text, TYPES, mandatory = mandatory)


class TestPositionResolver(object):

    def test_pairwise(self):

        resolver = position.PositionResolver(
            combination(acyl(18, 1), acyl(16, 0)),
            [parse('NL[1]>NL[2]')],
            {'16:0': {'NL': 500.0}, '18:1': {'NL': 300.0}},
            allowed_positions = 2,
        )
        result = resolver.resolve()

        assert result.definition == [1, 0]
        assert result.evidence == {'1,2': ['NL[1]>NL[2]']}


    def test_equal_evidence(self):

        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1)),
            [parse('NL[1]>NL[2]')],
            {'16:0': {'NL': 400.0}, '18:1': {'NL': 400.0}},
            allowed_positions = 2,
        )

        assert resolver.resolve().definition == [-1, -1]


    def test_tie_leaves_position_unresolved(self):

        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1)),
            [parse('X[1]>Y[1]'), parse('Y[1]>X[1]')],
            {
                '16:0': {'X': 10.0, 'Y': 1.0},
                '18:1': {'X': 1.0, 'Y': 10.0},
            },
            allowed_positions = 2,
        )
        result = resolver.resolve()

        assert result.definition == [-1, -1]
        assert result.evidence == {}


    def test_majority_and_remaining(self):

        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1)),
            [parse('X[1]>Y[1]'), parse('X[1]>Y[1]'), parse('Y[1]>X[1]')],
            {
                '16:0': {'X': 10.0, 'Y': 1.0},
                '18:1': {'X': 1.0, 'Y': 10.0},
            },
            allowed_positions = 2,
        )
        result = resolver.resolve()

        assert result.definition == [0, 1]
        assert result.evidence['1'] == ['X[1]>Y[1]', 'X[1]>Y[1]']
        assert result.evidence['2'] == [position.REMAINING]


    def test_mandatory_disagreement(self):

        diag = diagnostics.Diagnostics()
        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1)),
            [
                parse('X[1]>Y[1]', mandatory = True),
                parse('Y[1]>X[1]', mandatory = True),
                parse('X[1]>Y[1]'),
            ],
            {
                '16:0': {'X': 10.0, 'Y': 1.0},
                '18:1': {'X': 1.0, 'Y': 10.0},
            },
            allowed_positions = 2,
            diagnostics = diag,
        )

        assert resolver.resolve().definition == [-1, -1]
        assert len(diag.contradicting_position_rules['16:0_18:1']) == 2


    def test_mandatory_binding(self):

        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1)),
            [
                parse('Y[1]>X[1]', mandatory = True),
                parse('X[1]>Y[1]'),
                parse('X[1]>Y[1]'),
            ],
            {
                '16:0': {'X': 10.0, 'Y': 1.0},
                '18:1': {'X': 1.0, 'Y': 10.0},
            },
            allowed_positions = 2,
        )

        assert resolver.resolve().definition == [1, 0]


    def test_assignment_not_retracted(self):

        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1)),
            [],
            {},
            allowed_positions = 2,
        )

        assert resolver.assign(0, 1)
        assert not resolver.assign(0, 2)
        assert not resolver.assign(1, 1)
        assert resolver.definition == [0, -1]
        assert resolver.free_positions() == [2]


    def test_identical_chains(self):

        resolver = position.PositionResolver(
            combination(acyl(18, 1), acyl(18, 1)),
            [parse('NL[1]>NL[2]')],
            {'18:1': {'NL': 300.0}},
            allowed_positions = 2,
        )

        assert resolver.resolve().definition == [0, 1]


    def test_scaled_by_occurrence(self):

        resolver = position.PositionResolver(
            combination(acyl(18, 1), acyl(18, 1), acyl(16, 0)),
            [],
            {'18:1': {'NL': 300.0}, '16:0': {'NL': 200.0}},
            allowed_positions = 3,
        )

        assert resolver.areas['18:1'] == {'NL': 150.0}
        assert resolver.areas['16:0'] == {'NL': 200.0}
        assert resolver.resolve().definition == [-1, -1, -1]


    def test_recommendation(self):

        rule = parse('NL[1]>NL[2]')

        assert position.position_recommendation(
            rule,
            ('16:0', {'NL': 1.0}),
            ('18:1', {'NL': 2.0}),
        ) == {'18:1': 1, '16:0': 2}
        assert position.position_recommendation(
            rule,
            ('16:0', {'NL': 1.0}),
            ('18:1', {'NL': 1.0}),
        ) is None


    def test_equally_supported_position(self):

        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1), acyl(18, 0)),
            [parse('NL[1]>NL[2]')],
            {
                '16:0': {'NL': 500.0},
                '18:1': {'NL': 100.0},
                '18:0': {'NL': 500.0},
            },
            allowed_positions = 3,
        )
        result = resolver.resolve()

        assert result.definition == [-1, 1, -1]
        assert position.REMAINING not in [
            ev for evs in result.evidence.values() for ev in evs
        ]


    def test_plurality_of_optional_rules(self):

        resolver = position.PositionResolver(
            combination(acyl(16, 0), acyl(18, 1), acyl(18, 0)),
            [
                parse('X[1]>Y[1]'),
                parse('X[1]>Y[1]'),
                parse('Y[1]>X[1]'),
                parse('X[1]>NL[1]'),
            ],
            {
                '16:0': {'X': 10.0, 'Y': 1.0, 'NL': 20.0},
                '18:1': {'X': 1.0, 'Y': 10.0, 'NL': 20.0},
                '18:0': {'X': 5.0, 'Y': 5.0, 'NL': 1.0},
            },
            allowed_positions = 3,
        )
        result = resolver.resolve()

        assert result.definition == [0, -1, -1]
        assert result.evidence['1'] == ['X[1]>Y[1]', 'X[1]>Y[1]']
