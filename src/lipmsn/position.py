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
Assignment of the chains of a combination to backbone positions based
on positional intensity rules.
"""

import collections
import itertools

import lipmsn.settings as settings
import lipmsn.session as session
import lipmsn.diagnostics as diagnostics_mod


UNASSIGNED = -1
#: evidence of a chain placed at the only position left
REMAINING = 'remaining'


PositionResult = collections.namedtuple(
    'PositionResult',
    ['definition', 'evidence'],
)


def scaled_areas(areas, occurrences):
    """
    Areas of the fragments of a chain divided by the number of times
    the chain occurs in the combination.
    """

    return dict(
        (name, area / occurrences)
        for name, area in (areas or {}).items()
    )


def position_recommendation(rule, first, second, base_peak = None):
    """
    Evaluates a rule comparing two positions on a pair of chains.

    Parameters
    ----------
    rule : lipmsn.rules.IntensityRule
        Rule with the ``bigger`` side at one position and the
        ``smaller`` at another.
    first, second : tuple
        Chain name and scaled fragment areas of the two chains.

    Returns
    -------
    Dict of chain names and 1-based positions, ``None`` if the rule
    does not discriminate between the chains.
    """

    name1, areas1 = first
    name2, areas2 = second

    if rule.bigger_area(areas1, base_peak) > rule.smaller_area(areas2, base_peak):

        return {name1: rule.bigger_position, name2: rule.smaller_position}

    if rule.bigger_area(areas2, base_peak) > rule.smaller_area(areas1, base_peak):

        return {name2: rule.bigger_position, name1: rule.smaller_position}


class PositionResolver(object):
    """
    Resolves the positions of the chains of one combination.

    Parameters
    ----------
    combination : lipmsn.chain.ChainCombination
        The chains in the order of the combination.
    rules : list
        Positional ``lipmsn.rules.IntensityRule`` objects.
    chain_areas : dict
        Chain names as keys and dicts of fragment names and areas
        as values.
    allowed_positions : int
        Number of backbone positions.
    base_peak : float
        Base peak area for rules referring to it.
    diagnostics : lipmsn.diagnostics.Diagnostics
        Optional diagnostics sink.
    """

    def __init__(
            self,
            combination,
            rules,
            chain_areas,
            allowed_positions,
            base_peak = None,
            diagnostics = None,
        ):

        self.combination = combination
        self.rules = rules
        self.allowed_positions = allowed_positions
        self.base_peak = base_peak
        self.diagnostics = diagnostics or diagnostics_mod.Diagnostics(False)
        self.occurrences = combination.occurrences()
        self.chains = combination.distinct()
        self.areas = dict(
            (
                ch.name,
                scaled_areas(chain_areas.get(ch.name), self.occurrences[ch.name]),
            )
            for ch in self.chains
        )
        self.definition = [UNASSIGNED] * len(combination)
        self.evidence = collections.OrderedDict()
        self.log = session.get_log()


    def resolve(self):
        """
        Returns
        -------
        ``PositionResult`` with the 0-based position of each chain
        (``-1`` if unresolved) and the rules supporting the assignments
        by position identifier.
        """

        if (
            len(self.chains) == 1 and
            self.allowed_positions == len(self.combination)
        ):

            self.definition = list(range(len(self.combination)))

        else:

            self.greedy(self.candidates())

        self.log.msg(
            'Positions of `%s`: %s.' % (
                self.combination.id,
                ', '.join(
                    '%s@%s' % (ch.name, pos + 1 if pos >= 0 else '?')
                    for ch, pos in zip(self.combination, self.definition)
                ),
            ),
            level = 2,
        )

        return PositionResult(
            definition = list(self.definition),
            evidence = self.evidence,
        )


    def applicable(self, rule, *chains):

        if rule.is_absolute and settings.get('ignore_absolute'):

            return False

        types = rule.bigger.types | rule.smaller.types

        return all(
            rule.hydroxylation_valid(ch.oh) and (not types or ch.typ in types)
            for ch in chains
        )


    def votes(self):
        """
        Evaluates all positional rules.

        Returns
        -------
        Dict with (position identifier, chain names) keys and lists of
        (rule, recommendation) tuples as values.
        """

        votes = collections.OrderedDict()

        for rule in self.rules:

            if rule.is_single_position:

                pos = rule.bigger_position or rule.smaller_position

                if not 0 < pos <= self.allowed_positions:

                    continue

                fulfilling = [
                    ch.name for ch in self.chains
                    if (
                        self.applicable(rule, ch) and
                        rule.enough_fragments(self.areas[ch.name]) and
                        rule.is_fulfilled(
                            self.areas[ch.name],
                            base_peak = self.base_peak,
                        )
                    )
                ]

                rec = {fulfilling[0]: pos} if len(fulfilling) == 1 else None
                key = (rule.position_id, ())

                self._vote(votes, key, rule, rec)

            else:

                if (
                    rule.bigger_position > self.allowed_positions or
                    rule.smaller_position > self.allowed_positions
                ):

                    continue

                for ch1, ch2 in itertools.combinations(self.chains, 2):

                    if not self.applicable(rule, ch1, ch2):

                        continue

                    rec = None

                    if (
                        rule.bigger.any_found(self.areas[ch1.name]) or
                        rule.bigger.any_found(self.areas[ch2.name])
                    ):

                        rec = position_recommendation(
                            rule,
                            (ch1.name, self.areas[ch1.name]),
                            (ch2.name, self.areas[ch2.name]),
                            base_peak = self.base_peak,
                        )

                    key = (rule.position_id, (ch1.name, ch2.name))

                    self._vote(votes, key, rule, rec)

        return votes


    def _vote(self, votes, key, rule, rec):

        if rec is None:

            self.diagnostics.position_rule_unfulfilled(
                self.combination.id,
                rule,
            )

            return

        votes.setdefault(key, []).append((rule, rec))


    def candidates(self):
        """
        Resolves the votes of each position identifier: mandatory rules
        are binding unless they disagree; among optional rules the
        outcome fulfilled by more rules than any other outcome wins.

        Returns
        -------
        Dict of chain names and counters of their candidate positions.
        """

        candidates = collections.defaultdict(collections.Counter)

        for (position_id, _), recs in self.votes().items():

            mandatory = [(r, rec) for r, rec in recs if r.mandatory]
            resolved = None
            supporting = []

            if mandatory:

                outcomes = {_freeze(rec) for _, rec in mandatory}

                if len(outcomes) == 1:

                    resolved = outcomes.pop()
                    supporting = [r for r, _ in mandatory]

                else:

                    for r, _ in mandatory:

                        self.diagnostics.position_rule_contradicting(
                            self.combination.id,
                            r,
                        )

            else:

                counts = collections.Counter(_freeze(rec) for _, rec in recs)
                ranked = counts.most_common(2) + [(None, 0)]
                (outcome, cnt), (_, runner_up) = ranked[:2]

                if cnt > runner_up:

                    resolved = outcome
                    supporting = [r for r, rec in recs if _freeze(rec) == outcome]

            if resolved is None:

                continue

            self.evidence.setdefault(position_id, []).extend(
                str(r) for r in supporting
            )

            for name, pos in resolved:

                candidates[name][pos] += 1

        return candidates


    def assign(self, index, pos):
        """
        Assigns a chain to a 1-based position. A chain already assigned
        keeps its position and a position is given only once.

        Returns
        -------
        ``True`` if the assignment has been made.
        """

        if (
            self.definition[index] != UNASSIGNED or
            pos - 1 in self.definition
        ):

            return False

        self.definition[index] = pos - 1

        return True


    def unassigned(self, name = None):

        return [
            i for i, ch in enumerate(self.combination)
            if (
                self.definition[i] == UNASSIGNED and
                (name is None or ch.name == name)
            )
        ]


    def free_positions(self):

        return [
            pos for pos in range(1, self.allowed_positions + 1)
            if pos - 1 not in self.definition
        ]


    def remove_wrong_evidence(self, candidates):
        """
        Removes taken positions from the candidates, and the candidates
        of chains with no unassigned occurrence.
        """

        free = set(self.free_positions())

        for name in list(candidates.keys()):

            if not self.unassigned(name):

                del candidates[name]
                continue

            for pos in list(candidates[name].keys()):

                if pos not in free:

                    del candidates[name][pos]


    def supporters(self, candidates):
        """
        Inverts the candidates: positions with the counters of the
        chains supported at them.
        """

        result = collections.OrderedDict()

        for name, votes in candidates.items():

            for pos, cnt in votes.items():

                result.setdefault(pos, collections.Counter())[name] = cnt

        return collections.OrderedDict(sorted(result.items()))


    @staticmethod
    def prefers(votes, pos):
        """
        Tells if a chain has more votes for ``pos`` than for any other
        position.
        """

        return all(cnt < votes[pos] for p, cnt in votes.items() if p != pos)


    def greedy(self, candidates):
        """
        Assigns first the positions supported by one single chain, then
        the position and chain pairs corroborated by more rules than
        any other chain at the same position. Chains tied at a position
        lose their votes for it. Stops when nothing more can be
        assigned.
        """

        changed = True

        while changed:

            changed = False
            self.remove_wrong_evidence(candidates)
            by_position = self.supporters(candidates)

            # positions with one single supporting chain
            for pos, chains in by_position.items():

                if len(chains) != 1:

                    continue

                name = next(iter(chains))

                if self.prefers(candidates[name], pos):

                    changed = self.assign(self.unassigned(name)[0], pos)

                    if changed:

                        break

            if changed:

                continue

            for pos, chains in by_position.items():

                ranked = chains.most_common(2) + [(None, 0)]
                (name, top), (_, runner_up) = ranked[:2]

                if top > runner_up:

                    if self.prefers(candidates[name], pos):

                        changed = self.assign(self.unassigned(name)[0], pos)

                else:

                    for tied, cnt in chains.items():

                        if cnt == top:

                            del candidates[tied][pos]

                    changed = True

                if changed:

                    break

        unassigned = self.unassigned()
        free = self.free_positions()

        if (
            len(unassigned) == 1 and
            len(free) == 1 and
            len(unassigned) < len(self.combination)
        ):

            self.assign(unassigned[0], free[0])
            self.evidence.setdefault('%u' % free[0], []).append(REMAINING)


def _freeze(rec):

    return tuple(sorted(rec.items()))
