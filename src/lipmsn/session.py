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

import random
import sys

import numpy as np

import lipmsn.log as log


class Session(object):

    def __init__(self, label = None, log_verbosity = None):

        self.label = label or self.gen_session_id()
        self.log_verbosity = log_verbosity
        self.start_logger()

    @staticmethod
    def gen_session_id(length = 5):

        abc = '0123456789abcdefghijklmnopqrstuvwxyz'
        return ''.join(random.choice(abc) for i in range(length))

    def start_logger(self):

        self.logfile = 'lipmsn-%s.log' % self.label
        self.log = log.Logger(self.logfile, verbosity = self.log_verbosity)
        self.log.msg(
            'Session `%s` started, numpy version %s.' % (
                self.label,
                np.__version__,
            )
        )


def get_session():

    mod = sys.modules[__name__]

    if not hasattr(mod, 'session'):

        new_session()

    return sys.modules[__name__].session


def get_log():

    return get_session().log


def get_analyte_log(name):
    """
    The session log with messages prefixed by the name of an analyte.
    """

    return get_log().labelled(name)


def new_session(label = None, log_verbosity = None):

    mod = sys.modules[__name__]

    if hasattr(mod, 'session'):

        delattr(mod, 'session')

    setattr(mod, 'session', Session(label, log_verbosity))
