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

import pytest

import lipmsn.msn as msn
import lipmsn.chain as chain
import lipmsn.chainlib as chainlib
import lipmsn.rules as rules
import lipmsn.peaks as peaks
import lipmsn.fragment as fragment
import lipmsn.settings as settings
import lipmsn.error as error
import lipmsn.diagnostics as diagnostics


PRECURSOR = 'C42H83NO8P'
HEAD = 'C5H15NO4P'
HEAD_H2O = 'C5H13NO3P'

#: precursor minus the acyl chain
LOSS = {
    '16:0': 'C26H53NO7P',
    '16:1': 'C26H55NO7P',
    '17:0': 'C25H51NO7P',
    '17:1': 'C25H53NO7P',
    '18:0': 'C24H49NO7P',
    '18:1': 'C24H51NO7P',
}
#: precursor minus the acyl chain and water
LOSS_H2O = {
    '16:0': 'C26H51NO6P',
    '18:1': 'C24H49NO6P',
}


def acyl(c, u):

    return chain.Chain(c, u, formula = 'C%uH%uO' % (c, 2 * c - 2 - 2 * u))


def fa_library():

    return chainlib.ChainLibraryProvider({
        'fa': chainlib.ChainLibrary(
            [acyl(c, u) for c in (16, 17, 18) for u in (0, 1)],
        ),
    })


def rule_provider(
        head_mandatory = 'true',
        head_rules = (),
        chain_rules = (),
        position_rules = ('NL[1]>NL[2]',),
        extra_head = (),
        **kwargs
    ):

    types = {
        'HG': rules.HEAD,
        'HG3': rules.HEAD,
        'HG_H2O': rules.HEAD,
        'NL': chain.ACYL,
        'NL_H2O': chain.ACYL,
    }

    return rules.RuleProvider([
        rules.ClassRules(
            'PC',
            head_fragments = [
                rules.FragmentRule('HG', HEAD, mandatory = head_mandatory),
                rules.FragmentRule('HG_H2O', HEAD_H2O),
            ] + list(extra_head),
            chain_fragments = [
                rules.FragmentRule('NL', '$PRECURSOR-$CHAIN'),
                rules.FragmentRule('NL_H2O', '$PRECURSOR-$CHAIN-H2O'),
            ],
            head_intensities = [
                rules.IntensityRule.parse(text, types, mandatory = True)
                for text in head_rules
            ],
            chain_intensities = [
                rules.IntensityRule.parse(text, types, mandatory = True)
                for text in chain_rules
            ],
            position_intensities = [
                rules.IntensityRule.parse(text, types)
                for text in position_rules
            ],
            chains = 2,
            **kwargs
        ),
    ])


class ScriptedPeaks(peaks.PeakAreaService):
    """
    Returns preset areas by fragment formula.
    """

    def __init__(self, areas, total = None, msn_spectra = True):

        self.areas = areas
        self.total = total
        self.msn_spectra = msn_spectra
        self.queries = []


    def calculate_area(
            self,
            mass,
            formula,
            ms_level,
            charge,
            from_other_species = False,
        ):

        self.queries.append(formula)
        area = self.areas.get(formula, 0.0)

        return peaks.Probe(
            area = area,
            status = (
                peaks.AreaStatus.OK
                    if area > 0 else
                peaks.AreaStatus.NOTHING_THERE
            ),
            mz = mass,
            ms_level = ms_level,
            charge = charge,
        )


    def spectrum_intensity(self, ms_level, base_peak_cutoff = 0.0):

        return sum(self.areas.values()) if self.total is None else self.total


    def ms_levels(self):

        return [2] if self.msn_spectra else []


def pc_areas(**kwargs):

    areas = {HEAD: 1000.0, LOSS['16:0']: 500.0, LOSS['18:1']: 300.0}
    areas.update(kwargs)

    return areas


def analyzer(
        areas,
        provider = None,
        debug = False,
        analyte = None,
        **kwargs
    ):

    return msn.MSnAnalyzer(
        analyte or msn.Analyte('PC', PRECURSOR, 34, 1),
        provider or rule_provider(),
        fa_library(),
        ScriptedPeaks(areas, **kwargs),
        debug = debug,
    )


class TestMSnAnalyzer(object):

    def test_identification(self):

        a = analyzer(pc_areas())
        result = a.run()

        assert result.status == msn.Status.POSITION_DETECTED
        assert a.history == [
            msn.Status.NO_MSN_PRESENT,
            msn.Status.HEAD_GROUP_DETECTED,
            msn.Status.FRAGMENTS_DETECTED,
            msn.Status.POSITION_DETECTED,
        ]
        assert result.head_fragments == {'HG': 1000.0}
        assert result.chain_fragments == {
            '16:0': {'NL': 500.0},
            '18:1': {'NL': 300.0},
        }
        assert list(result.valid_combinations.keys()) == ['16:0_18:1']
        assert result.relative_intensities == {'16:0_18:1': 1.0}
        assert result.position_assignment == {'16:0_18:1': [0, 1]}
        assert result.position_evidence['16:0_18:1'] == {
            '1,2': ['NL[1]>NL[2]'],
        }
        assert result.base_peak_values == {2: 1000.0}
        assert result.coverage == {2: 1.0}
        assert result.debug_info is None
        assert str(result) == 'PC 16:0/18:1'


    def test_possible_chains(self):

        result = analyzer(pc_areas()).run()

        assert {ch.name for ch in result.possible_chain_objects()} == {
            '16:0', '18:1', '16:1', '18:0', '17:0', '17:1',
        }


    def test_missing_head_fragment(self):

        areas = pc_areas()
        del areas[HEAD]
        result = analyzer(areas).run()

        assert result.status == msn.Status.DISCARD_HIT
        assert result.head_fragments == {}
        assert result.valid_combinations == {}


    def test_debug_keeps_status(self):

        areas = pc_areas()
        del areas[HEAD]

        plain = analyzer(areas).run()
        debug = analyzer(areas, debug = True).run()

        assert plain.status == debug.status == msn.Status.DISCARD_HIT
        assert debug.head_fragments == {}
        assert debug.debug_info['head_fragment_failures'] == {
            'HG': diagnostics.NO_PEAK_THERE,
        }
        assert debug.debug_info['status'] == msn.Status.DISCARD_HIT
        assert plain.debug_info is None


    def test_head_below_base_peak_cutoff(self):

        areas = pc_areas(**{HEAD: 300.0, HEAD_H2O: 1000.0})
        result = analyzer(
            areas,
            provider = rule_provider(base_peak_cutoff = 0.4),
            debug = True,
        ).run()

        assert result.status == msn.Status.DISCARD_HIT
        assert result.debug_info['head_fragment_failures'] == {
            'HG': diagnostics.BELOW_BASE_PEAK_CUTOFF,
        }


    def test_head_rule_violated(self):

        areas = pc_areas(**{HEAD_H2O: 2000.0})
        a = analyzer(areas, provider = rule_provider(head_rules = ('HG>HG_H2O',)))
        result = a.run()

        assert result.status == msn.Status.DISCARD_HIT
        assert a.history == [msn.Status.NO_MSN_PRESENT, msn.Status.DISCARD_HIT]


    def test_head_rule_fulfilled(self):

        areas = pc_areas(**{HEAD_H2O: 200.0})
        result = analyzer(
            areas,
            provider = rule_provider(head_rules = ('HG>HG_H2O',)),
        ).run()

        assert result.status == msn.Status.POSITION_DETECTED
        assert [str(r) for r in result.fulfilled_intensity_rules['head']] == [
            'HG>HG_H2O',
        ]


    def test_chain_rule_discards_chain(self):

        areas = pc_areas(**{
            LOSS_H2O['16:0']: 100.0,
            LOSS_H2O['18:1']: 600.0,
        })
        result = analyzer(
            areas,
            provider = rule_provider(chain_rules = ('NL>NL_H2O',)),
            debug = True,
        ).run()

        assert result.status == msn.Status.HEAD_GROUP_DETECTED
        assert list(result.chain_fragments.keys()) == ['16:0']
        assert result.debug_info['discarded_chains']['18:1'] == (
            diagnostics.INTENSITY_RULE_VIOLATED,
            'NL>NL_H2O',
        )
        assert result.debug_info['combination_violations']['16:0_18:1'] == (
            diagnostics.MISSING_CHAIN,
            ['18:1'],
        )


    def test_chain_cutoff(self):

        areas = pc_areas(**{LOSS['16:1']: 3.0, LOSS['18:0']: 3.0})
        result = analyzer(areas, debug = True).run()

        assert list(result.valid_combinations.keys()) == ['16:0_18:1']
        assert result.debug_info['combination_violations']['16:1_18:0'] == (
            diagnostics.COMBINATION_LOWER_CHAIN_CUTOFF,
            None,
        )
        assert result.status == msn.Status.POSITION_DETECTED


    def test_relative_intensities(self):

        areas = pc_areas(**{LOSS['16:1']: 100.0, LOSS['18:0']: 100.0})
        result = analyzer(areas).run()

        assert list(result.relative_intensities.keys()) == [
            '16:0_18:1',
            '16:1_18:0',
        ]
        assert abs(result.relative_intensities['16:0_18:1'] - 0.8) < 1e-9
        assert abs(sum(result.relative_intensities.values()) - 1.0) < 1e-9


    def test_coverage_failure(self):

        a = analyzer(
            pc_areas(),
            provider = rule_provider(spectrum_coverage_min = 0.9),
            total = 10000.0,
        )
        result = a.run()

        assert result.status == msn.Status.DISCARD_HIT
        assert a.history[-1] == msn.Status.DISCARD_HIT
        assert a.history[:-1] == sorted(a.history[:-1])
        assert abs(result.coverage[2] - 0.18) < 1e-9


    def test_equal_evidence(self):

        areas = pc_areas(**{LOSS['16:0']: 400.0, LOSS['18:1']: 400.0})
        result = analyzer(areas).run()

        assert result.status == msn.Status.FRAGMENTS_DETECTED
        assert result.position_assignment == {'16:0_18:1': [-1, -1]}
        assert str(result) == 'PC 16:0_18:1'


    def test_rules_absent(self):

        a = analyzer(pc_areas(), analyte = msn.Analyte('PE', PRECURSOR, 34, 1))
        result = a.run()

        assert result.status == msn.Status.NO_MSN_PRESENT
        assert a.peaks.queries == []


    def test_no_msn_spectra(self):

        result = analyzer(pc_areas(), msn_spectra = False).run()

        assert result.status == msn.Status.NO_MSN_PRESENT


    def test_unsatisfiable_hydroxylation(self):

        with pytest.raises(error.ConstraintUnsatisfiable):

            analyzer(
                pc_areas(),
                analyte = msn.Analyte('PC', PRECURSOR, 34, 1, oh = 1),
            ).run()


    @pytest.mark.parametrize(
        'areas, kwargs',
        [
            (pc_areas(), {}),
            ({LOSS['16:0']: 500.0}, {}),
            (pc_areas(), {'total': 10000.0}),
            (pc_areas(**{LOSS['16:0']: 400.0, LOSS['18:1']: 400.0}), {}),
        ]
    )
    def test_status_monotonic(self, areas, kwargs):

        a = analyzer(
            areas,
            provider = rule_provider(spectrum_coverage_min = 0.5),
            **kwargs
        )
        a.run()

        history = a.history

        if history[-1] == msn.Status.DISCARD_HIT:

            history = history[:-1]

        assert history == sorted(history)
        assert msn.Status.DISCARD_HIT not in history


class TestChainCutoff(object):

    def test_fixed_point(self):

        combis = collections.OrderedDict(
            (combi.id, combi)
            for combi in (
                chain.ChainCombination([acyl(16, 0), acyl(18, 1)]),
                chain.ChainCombination([acyl(16, 0), acyl(18, 0)]),
            )
        )
        chain_areas = {'16:0': 100.0, '18:1': 100.0, '18:0': 2.0}

        kept, areas, removed = msn.chain_cutoff(combis, chain_areas, 0.5)

        assert list(kept.keys()) == ['16:0_18:1']
        assert removed == ['16:0_18:0']
        assert areas == {'16:0_18:1': 200.0}


    def test_idempotent(self):

        combis = collections.OrderedDict(
            (combi.id, combi)
            for combi in (
                chain.ChainCombination([acyl(16, 0), acyl(18, 1)]),
                chain.ChainCombination([acyl(16, 1), acyl(18, 0)]),
                chain.ChainCombination([acyl(17, 0), acyl(17, 1)]),
            )
        )
        chain_areas = {
            '16:0': 100.0,
            '18:1': 100.0,
            '16:1': 30.0,
            '18:0': 30.0,
            '17:0': 1.0,
            '17:1': 1.0,
        }

        kept, areas, removed = msn.chain_cutoff(combis, chain_areas, 0.1)
        kept2, areas2, removed2 = msn.chain_cutoff(kept, chain_areas, 0.1)

        assert list(kept.keys()) == ['16:0_18:1', '16:1_18:0']
        assert kept2 == kept
        assert areas2 == areas
        assert removed2 == []


    def test_relative_intensities(self):

        rel = msn.relative_intensities({'a': 1.0, 'b': 3.0})

        assert list(rel.items()) == [('b', 0.75), ('a', 0.25)]
        assert msn.relative_intensities({}) == {}


class TestAnalyze(object):

    def test_analyze(self):

        result = msn.analyze(
            msn.Analyte('PC', PRECURSOR, 34, 1),
            rule_provider(),
            fa_library(),
            ScriptedPeaks(pc_areas()),
        )

        assert result.status_name == 'POSITION_DETECTED'
        assert result.best_combination == '16:0_18:1'


def ms3_head_rule():

    return rules.FragmentRule(
        'HG3',
        'C5H11NO2P',
        ms_level = 3,
        mandatory = 'true',
    )


class TestMsLevels(object):

    def spectrum(self, provider, ms_level = 2):

        predictor = fragment.FragmentPredictor(
            provider.head_fragment_rules('PC'),
            provider.chain_fragment_rules('PC'),
            PRECURSOR,
        )
        mandatory, optional = predictor.head_fragments()

        return peaks.Spectrum(
            mz = [
                mandatory['HG'].mz,
                predictor.chain_fragments(acyl(16, 0))['NL'].mz,
                predictor.chain_fragments(acyl(18, 1))['NL'].mz,
            ],
            intensity = [1000.0, 500.0, 300.0],
            ms_level = ms_level,
        )


    def test_rule_without_spectra_ignored(self):

        provider = rule_provider(extra_head = [ms3_head_rule()])
        a = msn.MSnAnalyzer(
            msn.Analyte('PC', PRECURSOR, 34, 1),
            provider,
            fa_library(),
            peaks.PeakListService([self.spectrum(provider)]),
        )
        result = a.run()

        assert a.ms_levels == [2]
        assert ('HG3', None) not in a.probes
        assert result.status == msn.Status.POSITION_DETECTED
        assert result.head_fragments == {'HG': 1000.0}
        assert result.base_peak_values == {2: 1000.0}
        assert str(result) == 'PC 16:0/18:1'


    def test_scripted_rule_without_spectra(self):

        a = analyzer(
            pc_areas(),
            provider = rule_provider(extra_head = [ms3_head_rule()]),
        )
        result = a.run()

        assert result.status == msn.Status.POSITION_DETECTED
        assert 'C5H11NO2P' not in a.peaks.queries


    def test_head_rule_at_unusable_level(self):

        provider = rule_provider(
            extra_head = [ms3_head_rule()],
            head_rules = ('HG3>HG',),
        )
        result = analyzer(pc_areas(), provider = provider).run()

        assert result.status == msn.Status.POSITION_DETECTED


    def test_no_spectra_at_rule_levels(self):

        provider = rule_provider()
        a = msn.MSnAnalyzer(
            msn.Analyte('PC', PRECURSOR, 34, 1),
            provider,
            fa_library(),
            peaks.PeakListService([self.spectrum(provider, ms_level = 3)]),
        )
        result = a.run()

        assert result.status == msn.Status.NO_MSN_PRESENT
        assert a.probes == {}


class TestIgnoreAbsolute(object):

    def teardown_method(self, method):

        settings.reset('ignore_absolute')


    def test_class_minimum_ignored(self):

        settings.setup(ignore_absolute = True)

        result = analyzer(
            pc_areas(),
            provider = rule_provider(spectrum_coverage_min = 0.9),
            total = 10000.0,
        ).run()

        assert result.status == msn.Status.POSITION_DETECTED
        assert abs(result.coverage[2] - 0.18) < 1e-9


    @pytest.mark.parametrize(
        'ignore_absolute, status',
        [
            (False, msn.Status.POSITION_DETECTED),
            (True, msn.Status.DISCARD_HIT),
        ]
    )
    def test_zero_coverage(self, ignore_absolute, status):

        settings.setup(ignore_absolute = ignore_absolute)

        result = analyzer(pc_areas(), total = 0.0).run()

        assert result.status == status
        assert result.coverage == {2: 0.0}
