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
Fragmentation rules of lipid classes: fragment definitions, intensity
comparisons and the providers serving them.
"""

import re
import collections

import lipmsn.chain as chain_mod
import lipmsn.mass as mass
import lipmsn.error as error
import lipmsn.settings as settings


HEAD = 'head'

PRECURSOR = '$PRECURSOR'
BASEPEAK = '$BASEPEAK'

#: Formula placeholders for chains and the chain type they stand for.
CHAIN_PLACEHOLDERS = {
    '$CHAIN': chain_mod.ACYL,
    '$ALKYLCHAIN': chain_mod.ALKYL,
    '$ALKENYLCHAIN': chain_mod.ALKENYL,
    '$LCB': chain_mod.LCB,
}

_re_sign = re.compile(r'\s*([+-])\s*')
_re_int = re.compile(r'^\s*(-?[0-9]+)\s*$')
_re_term = re.compile(
    r'^(?:([0-9]*\.?[0-9]+)\s*\*\s*)?'  # factor
    r'(\$?[A-Za-z0-9_:;\-\.]+?)'        # fragment name
    r'(?:\[([^\]]*)\])?$'               # position
)
_re_multiplier = re.compile(r'^([0-9]*\.?[0-9]+)\s*\*\s*\((.*)\)$')


class Mandatory(object):
    """
    Policies of fragment rules.
    """

    UNDEFINED = -1
    FALSE = 0
    TRUE = 1
    #: the fragment may originate from another, co-eluting species
    OTHER = 2
    #: mandatory and used for quantification
    QUANT = 3
    #: must be present to assign a chain to the class
    CLASS = 4

    names = {
        'false': FALSE,
        'true': TRUE,
        'other': OTHER,
        'quant': QUANT,
        'class': CLASS,
    }


    @classmethod
    def from_string(cls, value, rule = None, lclass = None):

        if isinstance(value, int):

            return value

        key = str(value).strip().lower()

        if key not in cls.names:

            raise error.RuleViolation(
                'Unknown mandatory value `%s`' % value,
                rule = rule,
                lclass = lclass,
            )

        return cls.names[key]


def int_from_rule(rule, analyte = None, lclass = None, key = None):
    """
    Parses an integer from the text of a rule.

    Raises ``RuleViolation`` if the text is not an integer.
    """

    if isinstance(rule, int):

        return rule

    match = _re_int.match(str(rule))

    if not match:

        raise error.RuleViolation(
            'The value `%s` of %s%s is not an integer' % (
                rule,
                key or 'the rule',
                (' for `%s`' % analyte) if analyte else '',
            ),
            rule = key,
            lclass = lclass,
        )

    return int(match.group(1))


Fragment = collections.namedtuple(
    'Fragment',
    [
        'name',
        'formula',
        'mz',
        'charge',
        'ms_level',
        'mandatory',
        'chain',
        'negative',
    ],
)
Fragment.__new__.__defaults__ = (2, Mandatory.FALSE, None, False)


class FragmentRule(object):
    """
    Definition of a fragment of a lipid class.

    The formula of the fragment is an expression of terms joined by
    ``+`` and ``-``. A term is ``$PRECURSOR`` (it can only be added),
    a chain placeholder (``$CHAIN``, ``$ALKYLCHAIN``, ``$ALKENYLCHAIN``
    or ``$LCB``), the name of a fragment defined earlier in the same
    rule set, or a chemical formula. E.g. ``$PRECURSOR-$CHAIN-H2O``.

    Parameters
    ----------
    name : str
        Name of the fragment.
    formula : str
        Formula expression.
    charge : int
        Charge of the fragment, at least 1.
    ms_level : int
        MS level where the fragment is observed.
    mandatory : int,str,dict
        ``Mandatory`` policy, or a dict with hydroxylation counts as
        keys and policies as values.
    allowed_oh : set
        The rule applies only to these hydroxylation counts;
        ``None`` means all.
    fragments : dict
        Rules defined earlier, these can be referred by name.
    """

    def __init__(
            self,
            name,
            formula,
            charge = 1,
            ms_level = 2,
            mandatory = Mandatory.FALSE,
            allowed_oh = None,
            fragments = None,
            lclass = None,
        ):

        self.name = name
        self.formula = formula
        self.lclass = lclass
        self.ms_level = int_from_rule(
            ms_level, lclass = lclass, key = 'MS level of %s' % name
        )
        self.charge = int_from_rule(
            charge, lclass = lclass, key = 'charge of %s' % name
        )

        if self.charge < 1:

            raise error.RuleViolation(
                'The charge of a fragment must be at least 1, got %u' % (
                    self.charge
                ),
                rule = name,
                lclass = lclass,
            )

        self.mandatory = (
            dict(
                (oh, Mandatory.from_string(value, name, lclass))
                for oh, value in mandatory.items()
            )
                if isinstance(mandatory, dict) else
            Mandatory.from_string(mandatory, name, lclass)
        )
        self.allowed_oh = None if allowed_oh is None else set(allowed_oh)
        self.fragments = fragments or {}
        self.parse()


    def parse(self):
        """
        Splits the formula expression into signed terms.
        """

        self.terms = []
        self.chain_type = HEAD
        tokens = _re_sign.split(self.formula.strip())

        # the expression may start with a sign
        if tokens and tokens[0] == '':

            tokens = tokens[1:]

        else:

            tokens = ['+'] + tokens

        if len(tokens) % 2:

            raise error.RuleViolation(
                'Incomplete formula `%s`' % self.formula,
                rule = self.name,
                lclass = self.lclass,
            )

        for sign, token in zip(tokens[0::2], tokens[1::2]):

            positive = sign == '+'

            if not token:

                raise error.RuleViolation(
                    'Empty term in formula `%s`' % self.formula,
                    rule = self.name,
                    lclass = self.lclass,
                )

            if token == PRECURSOR:

                if not positive:

                    raise error.RuleViolation(
                        '%s can only be added' % PRECURSOR,
                        rule = self.name,
                        lclass = self.lclass,
                    )

                self.terms.append((positive, 'precursor', None))

            elif token in CHAIN_PLACEHOLDERS:

                if self.chain_type != HEAD:

                    raise error.RuleViolation(
                        'More than one chain in formula `%s`' % (
                            self.formula
                        ),
                        rule = self.name,
                        lclass = self.lclass,
                    )

                self.chain_type = CHAIN_PLACEHOLDERS[token]
                self.terms.append((positive, 'chain', None))

            elif token in self.fragments:

                ref = self.fragments[token]

                if ref.chain_type != HEAD:

                    self._set_chain_type(ref.chain_type)

                self.terms.append((positive, 'fragment', ref))

            else:

                try:

                    atoms = mass.formula_to_atoms(token)

                except error.ChemicalFormulaError as e:

                    raise error.RuleViolation(
                        'Term `%s` is neither a formula nor a fragment '
                        'defined earlier' % token,
                        rule = self.name,
                        lclass = self.lclass,
                    ) from e

                self.terms.append((positive, 'atoms', atoms))


    def _set_chain_type(self, typ):

        if self.chain_type not in (HEAD, typ):

            raise error.RuleViolation(
                'Fragments of different chain types in formula `%s`' % (
                    self.formula
                ),
                rule = self.name,
                lclass = self.lclass,
            )

        self.chain_type = typ


    def mandatory_for(self, oh = 0):

        if isinstance(self.mandatory, dict):

            return self.mandatory.get(oh, Mandatory.FALSE)

        return self.mandatory


    def is_mandatory(self, oh = 0):

        return self.mandatory_for(oh) in (Mandatory.TRUE, Mandatory.QUANT)


    def hydroxylation_valid(self, oh = 0):

        return self.allowed_oh is None or oh in self.allowed_oh


    def composition(self, precursor = None, chain = None):
        """
        Atom counts of the fragment; counts may be negative if the rule
        subtracts more than the precursor or chain contains.

        Parameters
        ----------
        precursor : lipmsn.formula.Formula
            Formula of the precursor ion.
        chain : lipmsn.chain.Chain
            The chain for chain fragments.
        """

        atoms = collections.defaultdict(int)

        for positive, kind, value in self.terms:

            if kind == 'precursor':

                if precursor is None:

                    raise error.RuleViolation(
                        'No precursor formula available',
                        rule = self.name,
                        lclass = self.lclass,
                    )

                add = precursor.atoms

            elif kind == 'chain':

                if chain is None or chain.formula is None:

                    raise error.RuleViolation(
                        'A chain with formula is required',
                        rule = self.name,
                        lclass = self.lclass,
                    )

                add = mass.formula_to_atoms(chain.formula)

            elif kind == 'fragment':

                add = value.composition(precursor, chain)

            else:

                add = value

            for elem, cnt in add.items():

                atoms[elem] += cnt if positive else -cnt

        return atoms


    def calculate(self, precursor = None, chain = None, polarity = 1):
        """
        Calculates the fragment for a precursor and optionally a chain.

        Parameters
        ----------
        polarity : int
            ``1`` in positive and ``-1`` in negative ion mode.

        Returns
        -------
        ``Fragment`` object.
        """

        atoms = self.composition(precursor, chain)
        sign = 1 if polarity >= 0 else -1
        mz = (
            mass.atoms_mass(atoms) - sign * self.charge * mass.electron
        ) / self.charge

        return Fragment(
            name = self.name,
            formula = mass.atoms_to_formula(atoms),
            mz = mz,
            charge = sign * self.charge,
            ms_level = self.ms_level,
            mandatory = None,
            chain = chain.name if chain is not None else None,
            negative = any(cnt < 0 for cnt in atoms.values()),
        )


    def __str__(self):

        return '%s: %s' % (self.name, self.formula)


FragmentMult = collections.namedtuple(
    'FragmentMult',
    ['name', 'typ', 'factor', 'positive', 'position'],
)
FragmentMult.__new__.__defaults__ = (HEAD, 1.0, True, 0)


class Expression(object):
    """
    One side of an intensity comparison: a weighted sum of fragment
    areas, multiplied by a global factor.
    """

    def __init__(self, terms, multiplier = 1.0):

        self.terms = list(terms)
        self.multiplier = multiplier


    def value(self, areas, base_peak = None):
        """
        Parameters
        ----------
        areas : dict
            Fragment names as keys and their areas as values. Missing
            fragments count as zero.
        base_peak : float
            Area of the base peak.
        """

        total = 0.0

        for term in self.terms:

            if term.name == BASEPEAK:

                area = base_peak or 0.0

            else:

                area = areas.get(term.name, 0.0) if areas else 0.0

            total += area * term.factor * (1 if term.positive else -1)

        return total * self.multiplier


    def found(self, areas):
        """
        Tells if the expression refers to the base peak or any of its
        added fragments has been found.
        """

        return any(
            term.positive and (
                term.name == BASEPEAK or
                (areas is not None and term.name in areas)
            )
            for term in self.terms
        )


    def any_found(self, areas):

        return any(
            areas is not None and term.name in areas
            for term in self.terms
        )


    @property
    def contains_base_peak(self):

        return any(term.name == BASEPEAK for term in self.terms)


    @property
    def types(self):

        return {term.typ for term in self.terms if term.name != BASEPEAK}


    @property
    def position(self):

        for term in self.terms:

            if term.name != BASEPEAK:

                return term.position

        return 0


    def names(self):

        return [term.name for term in self.terms if term.name != BASEPEAK]


    def __str__(self):

        terms = ''.join(
            '%s%s%s%s' % (
                '+' if term.positive else '-',
                ('%g*' % term.factor) if term.factor != 1 else '',
                term.name,
                ('[%u]' % term.position) if term.position else '',
            )
            for term in self.terms
        ).lstrip('+')

        return (
            '%g*(%s)' % (self.multiplier, terms)
                if self.multiplier != 1 else
            terms
        )


class IntensityRule(object):
    """
    Comparison of fragment intensities: the ``bigger`` expression must
    exceed the ``smaller`` one.

    Parameters
    ----------
    bigger : Expression
    smaller : Expression
    mandatory : bool
        Failing a mandatory rule discards the head group, chain or
        combination the rule is evaluated on.
    or_rule : bool
        The rule is fulfilled if any fragment of the ``bigger`` side
        is found.
    allowed_oh : set
        The rule applies only to these hydroxylation counts.
    """

    def __init__(
            self,
            bigger,
            smaller,
            mandatory = False,
            or_rule = False,
            allowed_oh = None,
            text = None,
        ):

        self.bigger = bigger
        self.smaller = smaller
        self.mandatory = mandatory
        self.or_rule = or_rule
        self.allowed_oh = None if allowed_oh is None else set(allowed_oh)
        self.text = text or '%s>%s' % (bigger, smaller)


    @classmethod
    def parse(
            cls,
            text,
            fragment_types = None,
            mandatory = False,
            allowed_oh = None,
            lclass = None,
        ):
        """
        Creates a rule from its text form, e.g. ``NL_PC>2*NL_PE``,
        ``FA[1]>FA[2]``, ``0.5*(A+B)>$BASEPEAK`` or ``A|B>C`` (an or
        rule).

        Parameters
        ----------
        fragment_types : dict
            Fragment names as keys, ``head`` or chain types as values.
        """

        fragment_types = fragment_types or {}

        if '>' in text:

            bigger, smaller = text.split('>', 1)

        elif '<' in text:

            smaller, bigger = text.split('<', 1)

        else:

            raise error.RuleViolation(
                'No comparison operator in `%s`' % text,
                rule = text,
                lclass = lclass,
            )

        or_rule = '|' in bigger

        return cls(
            bigger = cls._parse_side(
                bigger, fragment_types, text, lclass, or_rule = or_rule
            ),
            smaller = cls._parse_side(smaller, fragment_types, text, lclass),
            mandatory = mandatory,
            or_rule = or_rule,
            allowed_oh = allowed_oh,
            text = text,
        )


    @staticmethod
    def _parse_side(side, fragment_types, text, lclass, or_rule = False):

        side = side.strip()
        multiplier = 1.0
        match = _re_multiplier.match(side)

        if match:

            multiplier = float(match.group(1))
            side = match.group(2).strip()

        if or_rule:

            tokens = []

            for token in side.split('|'):

                tokens.extend(['+', token.strip()])

        else:

            tokens = _re_sign.split(side)
            tokens = tokens[1:] if tokens and tokens[0] == '' else (
                ['+'] + tokens
            )

        terms = []

        for sign, token in zip(tokens[0::2], tokens[1::2]):

            match = _re_term.match(token.strip())

            if not match:

                raise error.RuleViolation(
                    'Could not parse term `%s`' % token,
                    rule = text,
                    lclass = lclass,
                )

            factor, name, position = match.groups()

            if name != BASEPEAK and name not in fragment_types:

                raise error.RuleViolation(
                    'Unknown fragment `%s`' % name,
                    rule = text,
                    lclass = lclass,
                )

            terms.append(
                FragmentMult(
                    name = name,
                    typ = fragment_types.get(name),
                    factor = float(factor) if factor else 1.0,
                    positive = sign == '+',
                    position = (
                        int_from_rule(
                            position,
                            lclass = lclass,
                            key = 'position in %s' % text,
                        )
                            if position else
                        0
                    ),
                )
            )

        if not terms:

            raise error.RuleViolation(
                'Empty side of comparison',
                rule = text,
                lclass = lclass,
            )

        return Expression(terms, multiplier)


    @property
    def chain_type(self):
        """
        The chain type of the fragments in the rule, ``head`` for head
        group rules and ``diff`` if fragments of different chain types
        are compared.
        """

        types = self.bigger.types | self.smaller.types

        if not types:

            return HEAD

        if len(types) > 1:

            return chain_mod.DIFF_CHAIN_TYPES

        return types.pop()


    @property
    def bigger_type(self):

        types = self.bigger.types

        return types.pop() if len(types) == 1 else None


    @property
    def smaller_type(self):

        types = self.smaller.types

        return types.pop() if len(types) == 1 else None


    @property
    def contains_base_peak(self):

        return self.bigger.contains_base_peak or self.smaller.contains_base_peak


    @property
    def is_absolute(self):
        """
        A rule comparing fragments to the base peak, i.e. to an
        absolute level of the spectrum rather than to each other.
        """

        return any(
            expr.multiplier > 0 and any(
                term.name == BASEPEAK and term.factor > 0
                for term in expr.terms
            )
            for expr in (self.bigger, self.smaller)
        )


    @property
    def bigger_position(self):

        return self.bigger.position


    @property
    def smaller_position(self):

        return self.smaller.position


    @property
    def is_single_position(self):

        return (
            self.bigger_position == self.smaller_position or
            self.bigger_position == 0 or
            self.smaller_position == 0
        )


    @property
    def position_id(self):
        """
        Identifier of the positions involved, e.g. ``1,2``.
        """

        positions = {self.bigger_position, self.smaller_position}

        return ','.join('%u' % pos for pos in sorted(positions))


    def hydroxylation_valid(self, oh = 0):

        return self.allowed_oh is None or oh in self.allowed_oh


    def bigger_area(self, areas, base_peak = None):

        return self.bigger.value(areas, base_peak)


    def smaller_area(self, areas, base_peak = None):

        return self.smaller.value(areas, base_peak)


    def is_fulfilled(self, areas, smaller_areas = None, base_peak = None):
        """
        Evaluates the rule.

        Parameters
        ----------
        areas : dict
            Areas of the fragments of the ``bigger`` side, and also of
            the ``smaller`` side if ``smaller_areas`` is ``None``.
        smaller_areas : dict
            Areas for the ``smaller`` side if those come from another
            chain.
        """

        smaller_areas = areas if smaller_areas is None else smaller_areas

        if self.or_rule:

            return self.bigger.any_found(areas)

        return (
            self.bigger.value(areas, base_peak) >
            self.smaller.value(smaller_areas, base_peak)
        )


    def enough_fragments(self, areas, smaller_areas = None):
        """
        Tells if enough fragments have been found to evaluate the rule:
        on both sides either the base peak or an added fragment must be
        available.
        """

        smaller_areas = areas if smaller_areas is None else smaller_areas

        return self.bigger.found(areas) and self.smaller.found(smaller_areas)


    def __str__(self):

        return self.text


    def __repr__(self):

        return '<IntensityRule %s%s>' % (
            self.text,
            ' (mandatory)' if self.mandatory else '',
        )


class ClassRules(object):
    """
    All rules of one lipid class.

    Parameters
    ----------
    head_fragments : list
        ``FragmentRule`` objects of the head group.
    chain_fragments : list
        ``FragmentRule`` objects of the chains.
    head_intensities, chain_intensities, position_intensities : list
        ``IntensityRule`` objects.
    chains : int
        Total number of chains.
    lcbs, alkyl_chains, alkenyl_chains : int
        Number of the chains of these types, the rest are acyl chains.
    allowed_positions : int
        Number of backbone positions chains can be assigned to.
    fa_oh_range, lcb_oh_range : tuple
        Lowest and highest number of hydroxylations per chain.
    """

    def __init__(
            self,
            name,
            head_fragments = (),
            chain_fragments = (),
            head_intensities = (),
            chain_intensities = (),
            position_intensities = (),
            chains = 1,
            lcbs = 0,
            alkyl_chains = 0,
            alkenyl_chains = 0,
            allowed_positions = None,
            chain_cutoff = None,
            base_peak_cutoff = None,
            spectrum_coverage_min = None,
            fa_oh_range = (0, 0),
            lcb_oh_range = (0, 0),
            fa_library = 'fa',
            lcb_library = 'lcb',
        ):

        self.name = name
        self.head_fragments = collections.OrderedDict(
            (rule.name, rule) for rule in head_fragments
        )
        self.chain_fragments = collections.OrderedDict(
            (rule.name, rule) for rule in chain_fragments
        )
        self.head_intensities = list(head_intensities)
        self.chain_intensities = list(chain_intensities)
        self.position_intensities = list(position_intensities)
        self.chains = int_from_rule(chains, lclass = name, key = 'chains')
        self.lcbs = int_from_rule(lcbs, lclass = name, key = 'lcbs')
        self.alkyl_chains = int_from_rule(
            alkyl_chains, lclass = name, key = 'alkylChains'
        )
        self.alkenyl_chains = int_from_rule(
            alkenyl_chains, lclass = name, key = 'alkenylChains'
        )
        self.allowed_positions = (
            self.chains
                if allowed_positions is None else
            int_from_rule(
                allowed_positions,
                lclass = name,
                key = 'allowedChainPositions',
            )
        )
        self.chain_cutoff = chain_cutoff
        self.base_peak_cutoff = base_peak_cutoff
        self.spectrum_coverage_min = spectrum_coverage_min
        self.fa_oh_range = tuple(fa_oh_range)
        self.lcb_oh_range = tuple(lcb_oh_range)
        self.fa_library = fa_library
        self.lcb_library = lcb_library


class RuleProvider(object):
    """
    Serves the fragmentation rules of lipid classes.

    Subclasses may load the rules from any source; this implementation
    keeps ``ClassRules`` objects in a dict. All methods raise
    ``RuleAbsent`` for classes without rules.

    Parameters
    ----------
    classes : iterable
        ``ClassRules`` objects.
    """

    def __init__(self, classes = ()):

        self.classes = dict((rules.name, rules) for rules in classes)


    def rules(self, lclass):

        if lclass not in self.classes:

            raise error.RuleAbsent(lclass)

        return self.classes[lclass]


    def has_rules(self, lclass):

        return lclass in self.classes


    def head_fragment_rules(self, lclass):

        return self.rules(lclass).head_fragments


    def chain_fragment_rules(self, lclass):

        return self.rules(lclass).chain_fragments


    def head_intensity_rules(self, lclass):

        return self.rules(lclass).head_intensities


    def chain_intensity_rules(self, lclass):

        return self.rules(lclass).chain_intensities


    def position_intensity_rules(self, lclass):

        return self.rules(lclass).position_intensities


    def chain_cutoff(self, lclass):

        value = self.rules(lclass).chain_cutoff

        return settings.get('relative_chain_cutoff') if value is None else value


    def base_peak_cutoff(self, lclass):

        value = self.rules(lclass).base_peak_cutoff

        return settings.get('base_peak_cutoff') if value is None else value


    def spectrum_coverage_min(self, lclass):

        value = self.rules(lclass).spectrum_coverage_min

        return (
            settings.get('spectrum_coverage_min')
                if value is None else
            value
        )


    def amount_of_chains(self, lclass):

        return self.rules(lclass).chains


    def amount_of_lcbs(self, lclass):

        return self.rules(lclass).lcbs


    def amount_of_alkyl_chains(self, lclass):

        return self.rules(lclass).alkyl_chains


    def amount_of_alkenyl_chains(self, lclass):

        return self.rules(lclass).alkenyl_chains


    def allowed_chain_positions(self, lclass):

        return self.rules(lclass).allowed_positions


    def hydroxylation_range(self, lclass, typ):
        """
        Lowest and highest hydroxylation of one chain of a type.
        """

        rules = self.rules(lclass)

        return rules.lcb_oh_range if typ == chain_mod.LCB else rules.fa_oh_range


    def chain_library_name(self, lclass, typ):

        rules = self.rules(lclass)

        return rules.lcb_library if typ == chain_mod.LCB else rules.fa_library
