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

import lipmsn.common as common

_defaults = {
    # Log files are written into this directory.
    'logdir': 'lipmsn_log',
    # Messages at and below this level are written into the logfile.
    'log_verbosity': 0,
    # Messages below this level are printed also to the console,
    # -1 means nothing goes to the console.
    'console_verbosity': -1,
    # Relative intensity cutoff for chain combinations, used when the
    # rules of a lipid class do not define one. Combinations with
    # an aggregate chain area below this fraction of the strongest
    # combination are removed.
    'relative_chain_cutoff': 0.01,
    # Fragments below this fraction of the base peak are considered
    # absent, used when the rules of a class do not define it.
    'base_peak_cutoff': 0.0,
    # Fragments must have an area above this absolute value.
    'absolute_threshold': 0.0,
    # Minimum fraction of the total spectrum intensity explained by
    # the identified fragments, used when the rules of a class do
    # not define it.
    'spectrum_coverage_min': 0.0,
    # Spectrum coverage is evaluated only at these MS levels.
    'coverage_ms_levels': (2,),
    # In debug mode evaluation continues after a discard to collect
    # the reasons of the failure.
    'msn_debug': False,
    # Ignore rules comparing to absolute values (base peak) and the
    # spectrum coverage minimum.
    'ignore_absolute': False,
    # Separator of chain names in a chain combination identifier.
    'chain_separator': '_',
    # Separator between carbon count and double bonds in chain names.
    'db_separator': ':',
    # Name prefixes of chain types. Long chain bases are prefixed by
    # their hydroxylation code (see ``lcb_hydroxy_encoding``).
    'alkyl_prefix': 'O-',
    'alkenyl_prefix': 'P-',
    # Hydroxylation codes of fatty acyl, alkyl and alkenyl chains,
    # these are appended to the chain name.
    'fa_hydroxy_encoding': {
        0: '',
        1: ';O',
        2: ';O2',
        3: ';O3',
        4: ';O4',
    },
    # Hydroxylation codes of long chain bases, these are prepended
    # to the chain name.
    'lcb_hydroxy_encoding': {
        0: 'n',
        1: 'm',
        2: 'd',
        3: 't',
        4: 'q',
    },
    # Double bond value of chains without double bond information.
    'no_double_bond': -1,
    # Elements considered isotope labels, these do not occur
    # in unlabelled chains.
    'label_elements': ('D', 'Cx', 'Nx', 'Ox'),
    # Tolerance of m/z lookups in peak lists in ppm.
    'mz_tolerance': 20,
}


def reset_all():
    """
    Sets all parameters to their default values.
    """

    settings = collections.namedtuple('Settings', list(_defaults.keys()))

    for k in _defaults.keys():

        val = getattr(defaults, k)

        setattr(settings, k, val)

    globals()['settings'] = settings


def setup(**kwargs):
    """
    Sets one or more parameters.

    Parameters
    ----------
    **kwargs :
        Parameter names and values.
    """

    for param, value in kwargs.items():

        setattr(settings, param, value)


def get(param):
    """
    Returns the current value of a parameter.
    """

    if hasattr(settings, param):

        return getattr(settings, param)


def get_default(param):

    if hasattr(defaults, param):

        return getattr(defaults, param)


def reset(param):
    """
    Sets one parameter back to its default value.
    """

    setup(**{param: get_default(param)})


defaults = common._const()

for k, v in _defaults.items():

    setattr(defaults, k, v)

reset_all()
