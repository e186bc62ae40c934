import os

import numpy as np
import segyio

from seisgeom.logger import debug
from seisgeom.parameters import configuration
from seisgeom.segy.headers import DEFAULT_FIELDS, header_byte, resolve_header
from seisgeom.tools import as_tuple, filter_ordered

__all__ = ['SeisBlock', 'segy_read', 'open_segy', 'sample_interval']


def open_segy(path):
    """
    Open a SEG-Y file for reading, ignoring any inline/crossline structure.
    """
    return segyio.open(os.fspath(path), 'r', ignore_geometry=True,
                       endian=configuration['segy-endian'])


def sample_interval(f):
    """
    The sample interval of an open SEG-Y file, in ms. Taken from the binary
    header, or from the first trace header if the former is unset.
    """
    dt = int(f.bin[segyio.BinField.Interval])
    if dt <= 0 and f.tracecount > 0:
        dt = int(f.header[0][segyio.TraceField.TRACE_SAMPLE_INTERVAL])
    return np.float32(dt / 1000.)


class SeisBlock:

    """
    A block of traces fully loaded in memory.

    Parameters
    ----------
    headers : dict
        Maps trace header names onto per-trace arrays of raw header values.
    data : ndarray
        The trace samples, of shape ``(ns, ntraces)``.
    dt : float
        The file-level sample interval, in ms.
    path : str, optional
        The file the traces were read from.
    """

    def __init__(self, headers, data, dt, path=None):
        self.headers = dict(headers)
        self.data = np.asarray(data, dtype=np.float32)
        self.dt = np.float32(dt)
        self.path = path

        for k, v in self.headers.items():
            if len(v) != self.ntraces:
                raise ValueError("Header `%s` has %d values for %d traces"
                                 % (k, len(v), self.ntraces))

    def __repr__(self):
        return "SeisBlock(ntraces=%d, ns=%d, dt=%g)" % (self.ntraces, self.ns, self.dt)

    @property
    def ns(self):
        return self.data.shape[0]

    @property
    def ntraces(self):
        return self.data.shape[1]

    @classmethod
    def from_file(cls, f, start=0, stop=None, keys=None, path=None):
        """
        Load the traces ``[start, stop)`` of the open SEG-Y file ``f``, along
        with the default header fields plus ``keys``.
        """
        stop = f.tracecount if stop is None else stop
        names = filter_ordered(DEFAULT_FIELDS +
                               tuple(resolve_header(k) for k in as_tuple(keys)))

        headers = {k: np.asarray(f.attributes(header_byte(k))[start:stop])
                   for k in names}
        data = np.asarray(f.trace.raw[start:stop], dtype=np.float32)
        data = data.reshape(stop - start, len(f.samples)).T

        debug("Loaded traces [%d, %d) from `%s`" % (start, stop, path))

        return cls(headers, data, sample_interval(f), path=path)


def segy_read(path, keys=None):
    """
    Read a whole SEG-Y file into memory.

    Parameters
    ----------
    path : str or PathLike
        The SEG-Y file.
    keys : list of str, optional
        Extra trace headers to load on top of the default ones (all
        coordinate and elevation/depth fields, scalars, sample count and
        interval).

    Returns
    -------
    A SeisBlock.
    """
    with open_segy(path) as f:
        return SeisBlock.from_file(f, keys=keys, path=os.fspath(path))
