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
Services providing the areas of fragment peaks and the base peaks of
MSn spectra.
"""

import collections

import numpy as np

import lipmsn.lookup as lookup
import lipmsn.settings as settings


class AreaStatus(object):

    OK = 'ok'
    NOTHING_THERE = 'nothing_there'
    FAILED = 'failed'


Probe = collections.namedtuple(
    'Probe',
    ['area', 'status', 'mz', 'ms_level', 'charge', 'from_other_species'],
)
Probe.__new__.__defaults__ = (None, 2, 1, False)


def nothing_there(mz = None, ms_level = 2, charge = 1):

    return Probe(
        area = 0.0,
        status = AreaStatus.NOTHING_THERE,
        mz = mz,
        ms_level = ms_level,
        charge = charge,
    )


class PeakAreaService(object):
    """
    Quantifies fragment peaks in the MSn spectra of one analyte.
    Subclasses implement the area calculation on their data source.
    """

    def calculate_area(
            self,
            mass,
            formula,
            ms_level,
            charge,
            from_other_species = False,
        ):
        """
        Parameters
        ----------
        mass : float
            The m/z of the fragment.
        formula : str
            Formula of the fragment.
        ms_level : int
            MS level of the spectra to look into.
        charge : int
            Charge of the fragment.
        from_other_species : bool
            The fragment might originate from a co-eluting species.

        Returns
        -------
        ``Probe`` object.
        """

        raise NotImplementedError


    def spectrum_intensity(self, ms_level, base_peak_cutoff = 0.0):
        """
        Total intensity of the spectra at an MS level counting only
        the peaks above ``base_peak_cutoff`` times the base peak.
        """

        raise NotImplementedError


    def ms_levels(self):
        """
        The MS levels (2 or higher) with spectra available for the
        analyte.
        """

        raise NotImplementedError


    def has_msn_spectra(self):

        return bool(self.ms_levels())


class BasePeakService(object):
    """
    Determines the base peak of each MS level. This implementation
    takes the largest area among the probes measured at a level.
    """

    def extract_base_peak_values(self, levels, probes):
        """
        Parameters
        ----------
        levels : iterable
            MS levels.
        probes : iterable
            ``Probe`` objects.

        Returns
        -------
        Dict with MS levels as keys and base peak areas as values.
        """

        result = dict((level, 0.0) for level in levels)

        for probe in probes:

            if probe.status == AreaStatus.OK and probe.ms_level in result:

                result[probe.ms_level] = max(
                    result[probe.ms_level],
                    probe.area,
                )

        return result


class Spectrum(object):
    """
    Centroided peaks of an MSn spectrum.

    Parameters
    ----------
    mz : array-like
        m/z values.
    intensity : array-like
        Intensities in the same order as ``mz``.
    ms_level : int
        MS level of the spectrum.
    """

    def __init__(self, mz, intensity, ms_level = 2):

        mz = np.array(mz, dtype = np.float64)
        intensity = np.array(intensity, dtype = np.float64)

        if mz.shape != intensity.shape:

            raise ValueError(
                'Number of m/z values (%u) and intensities (%u) differ.' % (
                    mz.shape[0],
                    intensity.shape[0],
                )
            )

        order = mz.argsort()
        self.mz = mz[order]
        self.intensity = intensity[order]
        self.ms_level = ms_level


    def __len__(self):

        return self.mz.shape[0]


    def area(self, mz, tolerance = None):
        """
        Sum of the intensities of the peaks within the tolerance
        around ``mz``.
        """

        tolerance = (
            settings.get('mz_tolerance') if tolerance is None else tolerance
        )
        lower, upper = lookup.window(self.mz, mz, tolerance)

        return float(self.intensity[lower:upper].sum())


    def base_peak(self):

        return float(self.intensity.max()) if len(self) else 0.0


    def total_intensity(self, cutoff = 0.0):

        if not len(self):

            return 0.0

        threshold = self.base_peak() * cutoff

        return float(self.intensity[self.intensity > threshold].sum())


class PeakListService(PeakAreaService, BasePeakService):
    """
    Peak area and base peak service on centroided peak lists.

    Parameters
    ----------
    spectra : iterable
        ``Spectrum`` objects, one for each MS level.
    tolerance : float
        Tolerance of m/z lookups in ppm.
    """

    def __init__(self, spectra = (), tolerance = None):

        self.spectra = dict((sp.ms_level, sp) for sp in spectra)
        self.tolerance = (
            settings.get('mz_tolerance') if tolerance is None else tolerance
        )


    def calculate_area(
            self,
            mass,
            formula,
            ms_level,
            charge,
            from_other_species = False,
        ):

        if ms_level not in self.spectra:

            return nothing_there(mass, ms_level, charge)

        area = self.spectra[ms_level].area(mass, self.tolerance)

        return Probe(
            area = area,
            status = AreaStatus.OK if area > 0 else AreaStatus.NOTHING_THERE,
            mz = mass,
            ms_level = ms_level,
            charge = charge,
            from_other_species = from_other_species,
        )


    def spectrum_intensity(self, ms_level, base_peak_cutoff = 0.0):

        if ms_level not in self.spectra:

            return 0.0

        return self.spectra[ms_level].total_intensity(base_peak_cutoff)


    def ms_levels(self):

        return sorted(
            level for level, sp in self.spectra.items()
            if level >= 2 and len(sp)
        )


    def extract_base_peak_values(self, levels, probes = ()):

        return dict(
            (
                level,
                self.spectra[level].base_peak()
                    if level in self.spectra else
                0.0,
            )
            for level in levels
        )
