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

import pytest

import lipmsn.chain as chain
import lipmsn.error as error
import lipmsn.hydroxy as hydroxy


class TestDistribute(object):

    @pytest.mark.parametrize(
        'total, n, lo, hi, expected',
        [
            (4, 2, 0, 3, [(1, 3), (2, 2)]),
            (2, 2, 0, 2, [(0, 2), (1, 1)]),
            (0, 3, 0, 2, [(0, 0, 0)]),
            (0, 0, 0, 2, [()]),
            (7, 2, 0, 3, []),
        ]
    )
    def test_distribute(self, total, n, lo, hi, expected):

        assert hydroxy.distribute(total, n, lo, hi) == expected


class TestHydroxylationPartitioner(object):

    def test_satisfiable(self):

        part = hydroxy.HydroxylationPartitioner(
            total = 3,
            fa_chains = 1,
            lcb_chains = 1,
            fa_range = (0, 2),
            lcb_range = (0, 2),
        )

        pairs = part.pairs()

        assert pairs == [(1, 2), (2, 1)]
        assert all(h_fa + h_lcb == 3 for h_fa, h_lcb in pairs)

        ids = [dist.id for dist in part.distributions()]

        assert ids == ['acyl:1x1;lcb:2x1', 'acyl:2x1;lcb:1x1']


    def test_unsatisfiable(self):

        part = hydroxy.HydroxylationPartitioner(
            total = 5,
            fa_chains = 1,
            lcb_chains = 1,
            fa_range = (0, 2),
            lcb_range = (0, 2),
            lclass = 'Cer',
        )

        with pytest.raises(error.ConstraintUnsatisfiable) as e:

            part.pairs()

        assert '5 hydroxylation' in str(e.value)
        assert '0-2' in str(e.value)


    @pytest.mark.parametrize('total', [1, 2, 3, 4, 5])
    def test_pairs_within_bounds(self, total):

        part = hydroxy.HydroxylationPartitioner(
            total = total,
            fa_chains = 2,
            lcb_chains = 1,
            fa_range = (0, 1),
            lcb_range = (1, 3),
        )

        for h_fa, h_lcb in part.pairs():

            assert h_fa + h_lcb == total
            assert 0 <= h_fa <= 2
            assert 1 <= h_lcb <= 3


    def test_subtypes(self):

        part = hydroxy.HydroxylationPartitioner(
            total = 1,
            fa_chains = 2,
            alkyl_chains = 1,
            fa_range = (0, 1),
        )

        dists = part.distributions()

        assert [d.id for d in dists] == [
            'acyl:0x1;alkyl:1x1',
            'acyl:1x1;alkyl:0x1',
        ]

        for dist in dists:

            assert dist.oh() == 1
            assert len(dist.slot_types()) == 2


    def test_unordered(self):

        part = hydroxy.HydroxylationPartitioner(
            total = 2,
            fa_chains = 2,
            fa_range = (0, 2),
        )

        dists = part.distributions()

        assert [d.id for d in dists] == ['acyl:0x1;acyl:2x1', 'acyl:1x2']


    def test_too_many_ether_chains(self):

        with pytest.raises(error.RuleViolation):

            hydroxy.HydroxylationPartitioner(
                total = 0,
                fa_chains = 1,
                alkyl_chains = 1,
                alkenyl_chains = 1,
            )


class TestOhDistribution(object):

    def test_merge(self):

        dist = hydroxy.OhDistribution([
            hydroxy.OhSlot(chain.LCB, 2, 1),
            hydroxy.OhSlot(chain.ACYL, 0, 1),
            hydroxy.OhSlot(chain.ACYL, 0, 1),
        ])

        assert dist.id == 'acyl:0x2;lcb:2x1'
        assert dist.slot_types() == [
            (chain.ACYL, 0),
            (chain.ACYL, 0),
            (chain.LCB, 2),
        ]
        assert dist.oh(chain.LCB) == 2
