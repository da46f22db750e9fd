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
Identification of lipid species from MSn spectra: the head group,
the chain combinations and the positions of the chains are confirmed
stage by stage by the fragments found in the spectra.
"""

import itertools
import collections

import lipmsn.chain as chain_mod
import lipmsn.error as error
import lipmsn.rules as rules
import lipmsn.peaks as peaks
import lipmsn.hydroxy as hydroxy
import lipmsn.fragment as fragment
import lipmsn.position as position
import lipmsn.session as session
import lipmsn.settings as settings
import lipmsn.combinatorics as combinatorics
import lipmsn.diagnostics as diagnostics_mod


class Status(object):
    """
    Stages of an identification. Later stages are higher; an analysis
    never moves backwards except to ``DISCARD_HIT``, which is final.
    """

    NO_MSN_PRESENT = 0
    DISCARD_HIT = 1
    HEAD_GROUP_DETECTED = 2
    FRAGMENTS_DETECTED = 3
    POSITION_DETECTED = 4

    names = {
        0: 'NO_MSN_PRESENT',
        1: 'DISCARD_HIT',
        2: 'HEAD_GROUP_DETECTED',
        3: 'FRAGMENTS_DETECTED',
        4: 'POSITION_DETECTED',
    }


    @classmethod
    def name(cls, status):

        return cls.names[status]


class Analyte(collections.namedtuple(
        'AnalyteBase',
        ['lclass', 'formula', 'c', 'u', 'oh', 'charge', 'labels', 'name'],
    )):
    """
    A lipid species identified at MS1 level.

    Parameters
    ----------
    lclass : str
        Lipid class, the rules of this class are applied.
    formula : str
        Formula of the precursor ion.
    c : int
        Total carbon count of the chains.
    u : int
        Total double bonds of the chains.
    oh : int
        Total hydroxylation of the chains.
    charge : int
        Charge of the precursor ion.
    labels : tuple
        Isotope labels carried by the chains; ``None`` if not known.
    """

    def __new__(
            cls,
            lclass,
            formula,
            c,
            u,
            oh = 0,
            charge = 1,
            labels = None,
            name = None,
        ):

        return super(Analyte, cls).__new__(
            cls,
            lclass = lclass,
            formula = formula,
            c = c,
            u = u,
            oh = oh,
            charge = charge,
            labels = labels,
            name = name or '%s %u:%u%s' % (
                lclass,
                c,
                u,
                (';O%u' % oh) if oh else '',
            ),
        )


def chain_cutoff(combinations, chain_areas, cutoff):
    """
    Removes the combinations with an aggregate area below ``cutoff``
    times the area of the strongest combination, repeatedly until no
    more combination is removed. The aggregate area is the sum of the
    chain areas, each divided by the number of occurrences of the chain
    in the combinations still present.

    Parameters
    ----------
    combinations : dict
        Combination identifiers and ``ChainCombination`` objects.
    chain_areas : dict
        Chain names and their areas.
    cutoff : float
        Relative cutoff.

    Returns
    -------
    Tuple of the kept combinations, their aggregate areas and the list
    of the removed combination identifiers.
    """

    kept = collections.OrderedDict(combinations)
    removed = []
    areas = collections.OrderedDict()
    changed = True

    while changed:

        changed = False
        occurrences = collections.Counter(
            ch.name for combi in kept.values() for ch in combi
        )
        areas = collections.OrderedDict(
            (
                combi_id,
                sum(
                    chain_areas.get(ch.name, 0.0) / occurrences[ch.name]
                    for ch in combi
                ),
            )
            for combi_id, combi in kept.items()
        )

        if not areas:

            break

        threshold = cutoff * max(areas.values())

        for combi_id, area in areas.items():

            if area < threshold:

                del kept[combi_id]
                removed.append(combi_id)
                changed = True

    return kept, areas, removed


def relative_intensities(areas):
    """
    The share of each combination from the total area in decreasing
    order.
    """

    total = sum(areas.values())

    if total <= 0:

        return collections.OrderedDict()

    return collections.OrderedDict(
        sorted(
            ((combi_id, area / total) for combi_id, area in areas.items()),
            key = lambda i: i[1],
            reverse = True,
        )
    )


class IdentificationResult(object):
    """
    Outcome of the MSn analysis of an analyte.
    """

    def __init__(
            self,
            analyte,
            status,
            head_fragments = None,
            chain_fragments = None,
            fulfilled_intensity_rules = None,
            valid_combinations = None,
            position_assignment = None,
            base_peak_values = None,
            relative_intensities = None,
            position_evidence = None,
            coverage = None,
            debug_info = None,
            chains = None,
        ):

        self.analyte = analyte
        self.status = status
        self.head_fragments = head_fragments or collections.OrderedDict()
        self.chain_fragments = chain_fragments or collections.OrderedDict()
        self.fulfilled_intensity_rules = (
            fulfilled_intensity_rules or collections.OrderedDict()
        )
        self.valid_combinations = (
            valid_combinations or collections.OrderedDict()
        )
        self.position_assignment = (
            position_assignment or collections.OrderedDict()
        )
        self.base_peak_values = base_peak_values or {}
        self.relative_intensities = (
            relative_intensities or collections.OrderedDict()
        )
        self.position_evidence = position_evidence or collections.OrderedDict()
        self.coverage = coverage or {}
        self.debug_info = debug_info
        self._chains = chains or []


    def possible_chain_objects(self):

        return list(self._chains)


    @property
    def status_name(self):

        return Status.name(self.status)


    @property
    def best_combination(self):

        for combi_id in self.relative_intensities:

            return combi_id


    def combination_name(self, combi_id):
        """
        Name of a combination; chains with resolved positions are
        ordered by position and separated by ``/``.
        """

        combi = self.valid_combinations[combi_id]
        definition = self.position_assignment.get(combi_id)

        if definition and all(pos >= 0 for pos in definition):

            return '/'.join(
                ch.name
                for _, ch in sorted(zip(definition, combi), key = lambda i: i[0])
            )

        return combi.id


    def __str__(self):

        best = self.best_combination

        return (
            '%s %s' % (self.analyte.lclass, self.combination_name(best))
                if best is not None and self.status != Status.DISCARD_HIT else
            self.analyte.name
        )


    def __repr__(self):

        return '<IdentificationResult %s: %s>' % (self, self.status_name)


class MSnAnalyzer(object):
    """
    Evaluates the MSn evidence of one analyte.

    Parameters
    ----------
    analyte : Analyte
        The species to identify.
    rule_provider : lipmsn.rules.RuleProvider
        Source of the fragmentation rules.
    chain_library_provider : lipmsn.chainlib.ChainLibraryProvider
        Source of the chain libraries.
    peak_area_service : lipmsn.peaks.PeakAreaService
        Quantifies fragments in the spectra.
    base_peak_service : lipmsn.peaks.BasePeakService
        Determines the base peaks; by default the peak area service if
        it is able to, otherwise the strongest fragment of each level.
    debug : bool
        Continue evaluation after a discard to collect diagnostics.
    """

    def __init__(
            self,
            analyte,
            rule_provider,
            chain_library_provider,
            peak_area_service,
            base_peak_service = None,
            debug = None,
        ):

        self.analyte = analyte
        self.lclass = analyte.lclass
        self.rule_provider = rule_provider
        self.chain_library_provider = chain_library_provider
        self.peaks = peak_area_service
        self.base_peak_service = (
            base_peak_service or (
                peak_area_service
                    if isinstance(peak_area_service, peaks.BasePeakService) else
                peaks.BasePeakService()
            )
        )
        self.debug = settings.get('msn_debug') if debug is None else debug
        self.diagnostics = diagnostics_mod.Diagnostics(enabled = self.debug)
        self.log = session.get_analyte_log(analyte.name)

        self.status = Status.NO_MSN_PRESENT
        self.history = [self.status]
        self.combinator = None
        self.ms_levels = []
        self.probes = collections.OrderedDict()
        self.base_peak_values = {}
        self.head_fragments = collections.OrderedDict()
        self.chain_fragments = collections.OrderedDict()
        self.fulfilled_rules = collections.OrderedDict()
        self.valid_combinations = collections.OrderedDict()
        self.combination_areas = collections.OrderedDict()
        self.position_assignment = collections.OrderedDict()
        self.position_evidence = collections.OrderedDict()
        self.coverage = {}


    def set_status(self, status):
        """
        Records a status. Only forward steps are recorded, and nothing
        after a discard.
        """

        if self.status == Status.DISCARD_HIT:

            return

        if status == Status.DISCARD_HIT or status > self.status:

            self.log.msg(
                'Status %s -> %s.' % (
                    Status.name(self.status),
                    Status.name(status),
                ),
                level = 1,
            )
            self.status = status
            self.history.append(status)


    def discard(self, reason):

        self.log.msg(
            'Discarded: %s.' % reason,
            level = 1,
        )
        self.set_status(Status.DISCARD_HIT)


    @property
    def discarded(self):

        return self.status == Status.DISCARD_HIT


    @property
    def proceed(self):

        return not self.discarded or self.debug


    def run(self):

        try:

            self.setup()

        except error.RuleAbsent as e:

            self.log.msg('%s' % e, level = 1)
            self.finish()

            return self.result()

        self.ms_levels = self.usable_ms_levels()

        if not self.ms_levels:

            self.log.msg(
                'No MSn spectra at the MS levels of the fragment rules.',
                level = 1,
            )
            self.finish()

            return self.result()

        self.measure()
        self.check_head_group()

        for stage in (
            self.check_chains,
            self.check_combinations,
            self.check_coverage,
            self.check_positions,
        ):

            if not self.proceed:

                break

            stage()

        self.finish()

        return self.result()


    def setup(self):
        """
        Retrieves the rules, enumerates the chain combinations and
        predicts the fragments.
        """

        rp = self.rule_provider
        lclass = self.lclass

        self.head_rules = rp.head_fragment_rules(lclass)
        self.chain_rules = rp.chain_fragment_rules(lclass)
        self.head_intensity_rules = rp.head_intensity_rules(lclass)
        chain_intensity_rules = rp.chain_intensity_rules(lclass)
        self.same_chain_rules = [
            rule for rule in chain_intensity_rules
            if rule.chain_type != chain_mod.DIFF_CHAIN_TYPES
        ]
        self.diff_chain_rules = [
            rule for rule in chain_intensity_rules
            if rule.chain_type == chain_mod.DIFF_CHAIN_TYPES
        ]
        self.base_peak_cutoff = rp.base_peak_cutoff(lclass)

        nchains = rp.amount_of_chains(lclass)
        nlcb = rp.amount_of_lcbs(lclass)

        self.predictor = fragment.FragmentPredictor(
            self.head_rules,
            self.chain_rules,
            self.analyte.formula,
            oh = self.analyte.oh,
            charge = self.analyte.charge,
        )

        if not nchains:

            return

        partitioner = hydroxy.HydroxylationPartitioner(
            total = self.analyte.oh,
            fa_chains = nchains - nlcb,
            lcb_chains = nlcb,
            fa_range = rp.hydroxylation_range(lclass, chain_mod.ACYL),
            lcb_range = rp.hydroxylation_range(lclass, chain_mod.LCB),
            alkyl_chains = rp.amount_of_alkyl_chains(lclass),
            alkenyl_chains = rp.amount_of_alkenyl_chains(lclass),
            lclass = lclass,
        )
        distributions = partitioner.distributions()

        self.combinator = combinatorics.ChainCombinator(
            c = self.analyte.c,
            u = self.analyte.u,
            oh_distributions = distributions,
            libraries = self.libraries(distributions),
            labels = self.analyte.labels,
            lclass = lclass,
        )


    def libraries(self, distributions):
        """
        The chain libraries of the chain types occurring in the
        hydroxylation distributions, restricted to the chains which
        fit into the analyte.
        """

        types = {
            typ
            for dist in distributions
            for typ, _ in dist.slot_types()
        }
        result = {}

        for typ in types:

            name = self.rule_provider.chain_library_name(self.lclass, typ)
            lib = self.chain_library_provider.chains_by_type(name)

            if typ in (chain_mod.ALKYL, chain_mod.ALKENYL):

                lib = lib.as_type(typ)

            result[typ] = lib.plausible_for(self.analyte.formula, self.lclass)

        return result


    def possible_chain_objects(self):

        return (
            self.combinator.possible_chain_objects()
                if self.combinator else
            []
        )


    def usable_ms_levels(self):
        """
        MS levels having spectra and at least one fragment rule.
        """

        rule_levels = {
            rule.ms_level
            for rules_dict in (self.head_rules, self.chain_rules)
            for rule in rules_dict.values()
        }

        return sorted(set(self.peaks.ms_levels()) & rule_levels)


    def usable(self, frag):

        return frag.ms_level in self.ms_levels


    def rule_usable(self, rule):
        """
        Tells if all fragments of an intensity rule are at usable
        MS levels.
        """

        for name in rule.bigger.names() + rule.smaller.names():

            for rules_dict in (self.head_rules, self.chain_rules):

                if (
                    name in rules_dict and
                    rules_dict[name].ms_level not in self.ms_levels
                ):

                    return False

        return True


    def measure(self):
        """
        Queries the areas of the predicted fragments at the usable MS
        levels and determines the base peaks once for these levels.
        """

        mandatory, optional = self.predictor.head_fragments()
        self.head_predicted = collections.OrderedDict(
            (name, frag)
            for name, frag in itertools.chain(
                mandatory.items(),
                optional.items(),
            )
            if self.usable(frag)
        )
        self.head_mandatory = set(mandatory.keys()) & set(self.head_predicted)

        for name, frag in self.head_predicted.items():

            self.probes[(name, None)] = self.probe(frag)

        for ch in self.possible_chain_objects():

            for name, frag in self.predictor.chain_fragments(ch).items():

                if not frag.negative and self.usable(frag):

                    self.probes[(name, ch.name)] = self.probe(frag)

        self.base_peak_values = (
            self.base_peak_service.extract_base_peak_values(
                self.ms_levels,
                list(self.probes.values()),
            )
        )


    def probe(self, frag):

        probe = self.peaks.calculate_area(
            frag.mz,
            frag.formula,
            frag.ms_level,
            frag.charge,
            from_other_species = fragment.from_other_species(frag),
        )

        if probe.status == peaks.AreaStatus.FAILED:

            self.log.msg(
                'Failed to quantify fragment `%s` (%.04f).' % (
                    frag.name,
                    frag.mz,
                ),
                level = 1,
            )

        return probe._replace(
            ms_level = frag.ms_level,
            from_other_species = fragment.from_other_species(frag),
        )


    def check_probe(self, probe):
        """
        Tells why a probe does not count as a fragment found.

        Returns
        -------
        ``None`` if the fragment is found, otherwise the reason.
        """

        if probe.status != peaks.AreaStatus.OK or probe.area <= 0:

            return diagnostics_mod.NO_PEAK_THERE

        if (
            self.base_peak_cutoff > 0 and
            probe.area <= (
                self.base_peak_values.get(probe.ms_level, 0.0) *
                self.base_peak_cutoff
            )
        ):

            return diagnostics_mod.BELOW_BASE_PEAK_CUTOFF

        threshold = settings.get('absolute_threshold')

        if threshold > 0 and probe.area <= threshold:

            return diagnostics_mod.BELOW_BASE_PEAK_CUTOFF


    def base_peak(self, ms_level = 2):

        return self.base_peak_values.get(ms_level, 0.0)


    def rule_base_peak(self, rule):
        """
        Base peak at the MS level of the first fragment of a rule.
        """

        for name in rule.bigger.names() + rule.smaller.names():

            for rules_dict in (self.head_rules, self.chain_rules):

                if name in rules_dict:

                    return self.base_peak(rules_dict[name].ms_level)

        return self.base_peak()


    def skip_rule(self, rule):

        return (
            (rule.is_absolute and settings.get('ignore_absolute')) or
            not self.rule_usable(rule)
        )


    def add_fulfilled(self, key, rule):

        self.fulfilled_rules.setdefault(key, []).append(rule)


    def check_head_group(self):
        """
        All mandatory head group fragments must be found and the
        mandatory head group intensity rules fulfilled.
        """

        found = collections.OrderedDict()

        for name in self.head_predicted:

            probe = self.probes[(name, None)]
            reason = self.check_probe(probe)

            if reason is None:

                found[name] = probe.area

            elif name in self.head_mandatory:

                self.diagnostics.head_fragment_failed(name, reason)
                self.discard(
                    'mandatory head group fragment `%s` %s' % (
                        name,
                        reason.replace('_', ' '),
                    )
                )

                if not self.debug:

                    return

        for rule in self.head_intensity_rules:

            if (
                not rule.hydroxylation_valid(self.analyte.oh) or
                self.skip_rule(rule)
            ):

                continue

            if (
                rule.enough_fragments(found) and
                rule.is_fulfilled(found, base_peak = self.rule_base_peak(rule))
            ):

                self.add_fulfilled(rules.HEAD, rule)

            elif rule.mandatory:

                self.diagnostics.head_rule_violated(rule)
                self.discard('head group rule `%s` violated' % rule)

        if self.discarded:

            return

        self.head_fragments = found

        if found or not self.head_predicted:

            self.set_status(Status.HEAD_GROUP_DETECTED)


    def check_chains(self):
        """
        Checks the fragments and intensity rules of each chain; chains
        failing any mandatory criterion are left out.
        """

        for ch in self.possible_chain_objects():

            found, reason, failed = self.chain_evidence(ch)

            if reason is not None:

                self.diagnostics.chain_discarded(ch.name, reason, failed)
                self.log.msg(
                    'Chain `%s` discarded: %s%s.' % (
                        ch.name,
                        reason.replace('_', ' '),
                        (' (`%s`)' % failed) if failed else '',
                    ),
                    level = 2,
                )

                continue

            self.chain_fragments[ch.name] = found


    def chain_evidence(self, ch):
        """
        Returns
        -------
        Tuple of the fragments found, the reason of discarding the
        chain (``None`` if the chain is confirmed) and the name of the
        fragment or rule failed.
        """

        found = collections.OrderedDict()
        predicted = self.predictor.chain_fragments(ch)

        for name, frag in predicted.items():

            required = (
                fragment.is_mandatory(frag) or
                fragment.is_class_fragment(frag)
            )

            if not self.usable(frag):

                continue

            if frag.negative:

                if required:

                    return found, diagnostics_mod.NEGATIVE_FORMULA, name

                continue

            probe = self.probes[(name, ch.name)]
            reason = self.check_probe(probe)

            if reason is None:

                found[name] = probe.area

            elif fragment.is_class_fragment(frag):

                return found, diagnostics_mod.MISSING_CLASS_FRAGMENT, name

            elif fragment.is_mandatory(frag):

                return found, reason, name

        if not found:

            return found, diagnostics_mod.NO_PEAK_THERE, None

        for rule in self.same_chain_rules:

            if (
                rule.chain_type != ch.typ or
                not rule.hydroxylation_valid(ch.oh) or
                rule.is_absolute or
                not self.rule_usable(rule)
            ):

                continue

            if (
                rule.enough_fragments(found) and
                rule.is_fulfilled(found, base_peak = self.rule_base_peak(rule))
            ):

                self.add_fulfilled(ch.name, rule)

            elif rule.mandatory:

                self.diagnostics.chain_rule_violated(ch.name, rule)

                return (
                    found,
                    diagnostics_mod.INTENSITY_RULE_VIOLATED,
                    str(rule),
                )

        return found, None, None


    def diff_rule_violations(self, combi):
        """
        Evaluates the rules comparing fragments of chains of different
        types on each pair of chains of a combination. A rule without
        enough fragments is not violated.
        """

        violated = []

        for rule in self.diff_chain_rules:

            if self.skip_rule(rule):

                continue

            for ch1, ch2 in itertools.permutations(combi.distinct(), 2):

                if (
                    ch1.typ != rule.bigger_type or
                    ch2.typ != rule.smaller_type or
                    not rule.hydroxylation_valid(ch1.oh) or
                    not rule.hydroxylation_valid(ch2.oh)
                ):

                    continue

                areas1 = self.chain_fragments[ch1.name]
                areas2 = self.chain_fragments[ch2.name]

                if not rule.enough_fragments(areas1, areas2):

                    continue

                if rule.is_fulfilled(
                    areas1,
                    areas2,
                    base_peak = self.rule_base_peak(rule),
                ):

                    self.add_fulfilled(combi.id, rule)

                elif rule.mandatory:

                    violated.append(rule)

        return violated


    def chain_area(self, name):

        return sum(self.chain_fragments.get(name, {}).values())


    def check_combinations(self):
        """
        Keeps the combinations with all chains confirmed and no
        violated rule, then applies the relative chain cutoff.
        """

        if not self.combinator:

            return

        valid = collections.OrderedDict()

        for combi_id, combi in self.combinator.all_combinations().items():

            missing = [
                ch.name for ch in combi.distinct()
                if ch.name not in self.chain_fragments
            ]

            if missing:

                self.diagnostics.combination_discarded(
                    combi_id,
                    diagnostics_mod.MISSING_CHAIN,
                    missing,
                )
                continue

            violated = self.diff_rule_violations(combi)

            if violated:

                self.diagnostics.combination_discarded(
                    combi_id,
                    diagnostics_mod.DIFF_RULE_VIOLATED,
                    [str(rule) for rule in violated],
                )
                continue

            valid[combi_id] = combi

        chain_areas = dict(
            (name, self.chain_area(name)) for name in self.chain_fragments
        )
        valid, areas, removed = chain_cutoff(
            valid,
            chain_areas,
            self.rule_provider.chain_cutoff(self.lclass),
        )

        for combi_id in removed:

            self.diagnostics.combination_discarded(
                combi_id,
                diagnostics_mod.COMBINATION_LOWER_CHAIN_CUTOFF,
            )

        self.valid_combinations = valid
        self.combination_areas = areas

        self.log.msg(
            '%u valid chain combination(s)%s.' % (
                len(valid),
                (': %s' % ', '.join(valid.keys())) if valid else '',
            ),
            level = 1,
        )

        if valid:

            self.set_status(Status.FRAGMENTS_DETECTED)


    def counted_area(self, ms_level):
        """
        Sum of the areas of the retained fragments at an MS level,
        except those possibly originating from other species.
        """

        retained = {
            ch.name
            for combi in self.valid_combinations.values()
            for ch in combi
        }
        total = 0.0

        for (name, chain), probe in self.probes.items():

            if probe.ms_level != ms_level or probe.from_other_species:

                continue

            if chain is None:

                if name in self.head_fragments:

                    total += probe.area

            elif chain in retained and name in self.chain_fragments[chain]:

                total += probe.area

        return total


    def check_coverage(self):
        """
        The fragments found must explain a minimum fraction of the
        spectrum intensity.
        """

        if self.status == Status.NO_MSN_PRESENT:

            return

        ignore_absolute = settings.get('ignore_absolute')
        minimum = (
            0.0
                if ignore_absolute else
            self.rule_provider.spectrum_coverage_min(self.lclass)
        )

        for level in settings.get('coverage_ms_levels'):

            if level not in self.ms_levels:

                continue

            total = self.peaks.spectrum_intensity(level, self.base_peak_cutoff)
            coverage = self.counted_area(level) / total if total > 0 else 0.0
            self.coverage[level] = coverage

            if not (
                coverage > minimum or
                (minimum == 0 and not ignore_absolute)
            ):

                self.diagnostics.coverage_failed(level, coverage, minimum)
                self.discard(
                    'spectrum coverage %.03f at MS%u below %.03f' % (
                        coverage,
                        level,
                        minimum,
                    )
                )


    def check_positions(self):
        """
        Resolves the chain positions of each valid combination.
        """

        allowed = self.rule_provider.allowed_chain_positions(self.lclass)

        if allowed < 2 or not self.valid_combinations:

            return

        position_rules = [
            rule
            for rule in self.rule_provider.position_intensity_rules(self.lclass)
            if self.rule_usable(rule)
        ]

        for combi_id, combi in self.valid_combinations.items():

            resolver = position.PositionResolver(
                combi,
                position_rules,
                self.chain_fragments,
                allowed,
                base_peak = self.base_peak(),
                diagnostics = self.diagnostics,
            )
            result = resolver.resolve()
            self.position_assignment[combi_id] = result.definition
            self.position_evidence[combi_id] = result.evidence

        if any(
            pos != position.UNASSIGNED
            for definition in self.position_assignment.values()
            for pos in definition
        ):

            self.set_status(Status.POSITION_DETECTED)


    def finish(self):

        self.diagnostics.final_status(self.status)
        self.log.msg(
            'Final status %s.' % Status.name(self.status),
            level = 1,
        )


    def result(self):

        discarded = self.discarded

        return IdentificationResult(
            analyte = self.analyte,
            status = self.status,
            head_fragments = self.head_fragments,
            chain_fragments = self.chain_fragments,
            fulfilled_intensity_rules = self.fulfilled_rules,
            valid_combinations = (
                collections.OrderedDict()
                    if discarded else
                self.valid_combinations
            ),
            position_assignment = self.position_assignment,
            base_peak_values = self.base_peak_values,
            relative_intensities = (
                collections.OrderedDict()
                    if discarded else
                relative_intensities(self.combination_areas)
            ),
            position_evidence = self.position_evidence,
            coverage = self.coverage,
            debug_info = self.diagnostics.summary() if self.debug else None,
            chains = self.possible_chain_objects(),
        )


def analyze(
        analyte,
        rule_provider,
        chain_library_provider,
        peak_area_service,
        base_peak_service = None,
        debug = None,
    ):
    """
    Identifies an analyte from its MSn spectra.

    Returns
    -------
    ``IdentificationResult`` object.
    """

    analyzer = MSnAnalyzer(
        analyte,
        rule_provider,
        chain_library_provider,
        peak_area_service,
        base_peak_service = base_peak_service,
        debug = debug,
    )

    return analyzer.run()
