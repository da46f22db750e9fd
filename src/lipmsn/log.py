#!/usr/bin/env python
# -*- coding: utf-8 -*-

#
#  This file is part of the `lipmsn` python module
#
#  Copyright (c) 2015-2019 - EMBL
#
#  File author(s):
#  Dénes Türei (turei.denes@gmail.com)
#
#  Distributed under the GNU GPLv3 License.
#  See accompanying file LICENSE.txt or copy at
#      http://www.gnu.org/licenses/gpl-3.0.html
#
#  Website: http://denes.omnipathdb.org/
#

"""
Log files of the identification sessions.
"""

import os
import sys
import time
import textwrap

import lipmsn.settings as settings


class Logger(object):
    """
    Writes timestamped messages into a log file.

    Parameters
    ----------
    fname : str
        Log file name.
    logdir : str
        Directory of the log files, by default the ``logdir`` setting.
    verbosity : int
        Messages at and below this level are written into the file,
        by default the ``log_verbosity`` setting.
    console_level : int
        Messages at and below this level are printed also to the
        console, by default the ``console_verbosity`` setting.
    flush_every : int
        Flush the file after this many messages.
    """

    def __init__(
            self,
            fname,
            logdir = None,
            verbosity = None,
            console_level = None,
            flush_every = 20,
            max_width = 79,
        ):

        self.logdir = logdir or settings.get('logdir')
        os.makedirs(self.logdir, exist_ok = True)
        self.fname = os.path.join(self.logdir, fname)
        self.verbosity = (
            settings.get('log_verbosity')
                if verbosity is None else
            verbosity
        )
        self.console_level = (
            settings.get('console_verbosity')
                if console_level is None else
            console_level
        )
        self.flush_every = flush_every
        self.unflushed = 0
        self.wrapper = textwrap.TextWrapper(
            width = max_width,
            subsequent_indent = ' ' * 25,
            break_long_words = False,
        )
        self.fp = open(self.fname, 'w')
        self.msg('Logging into `%s`.' % self.fname)


    def msg(self, msg = '', level = 0, label = None):
        """
        Writes a message into the log file.

        Parameters
        ----------
        msg : str
            Text of the message.
        level : int
            Messages above the verbosity are dropped.
        label : str
            Prefix in brackets, e.g. the name of the analyte the
            message is about.
        """

        if label:

            msg = '[%s] %s' % (label, msg)

        line = '[%s] [%u] %s\n' % (
            time.strftime('%Y-%m-%d %H:%M:%S'),
            level,
            msg,
        )

        if level <= self.verbosity and not self.fp.closed:

            self.fp.write(self.wrapper.fill(line.rstrip()) + '\n')
            self.unflushed += 1

            if self.unflushed >= self.flush_every:

                self.flush()

        if level <= self.console_level:

            sys.stdout.write(line)
            sys.stdout.flush()


    def labelled(self, label):
        """
        Returns a log which prefixes all messages by ``label``.
        """

        return LabelledLog(self, label)


    def flush(self):

        if not self.fp.closed:

            self.fp.flush()
            self.unflushed = 0


    def close(self):

        if not self.fp.closed:

            self.msg('Closing log.')
            self.fp.close()


    def __del__(self):

        if hasattr(self, 'fp'):

            self.close()


class LabelledLog(object):

    def __init__(self, log, label):

        self.log = log
        self.label = label


    def msg(self, msg = '', level = 0):

        self.log.msg(msg, level = level, label = self.label)
