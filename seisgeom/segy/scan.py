import os
from collections import namedtuple
from pathlib import Path

import numpy as np

from seisgeom.logger import perf
from seisgeom.segy.block import SeisBlock, open_segy, sample_interval
from seisgeom.segy.headers import header_byte, resolve_header, scale_factor, \
    COORDINATE_FIELDS, ELEVATION_FIELDS
from seisgeom.tools import as_tuple, filter_ordered, is_integer

__all__ = ['ScanBlock', 'SeisCon', 'segy_scan', 'split', 'source_runs']


ScanBlock = namedtuple('ScanBlock', 'path start stop ns dt source summary')
ScanBlock.__doc__ = """
Header-only description of the traces of one shot: the file they live in,
the trace range ``[start, stop)``, the number of samples per trace, the
sample interval (ms), the (scaled) source position, and the
``(name, (min, max))`` pairs of every scanned header.
"""


def source_runs(sx, sy):
    """
    Split a sequence of traces into runs of consecutive traces sharing the
    same source position. Returns a list of ``(start, stop)`` trace ranges.
    """
    sx = np.asarray(sx)
    sy = np.asarray(sy)
    if sx.size == 0:
        return []
    changes = np.flatnonzero((sx[1:] != sx[:-1]) | (sy[1:] != sy[:-1])) + 1
    bounds = [0] + changes.tolist() + [sx.size]
    return list(zip(bounds[:-1], bounds[1:]))


class SeisCon:

    """
    A lazy handle onto one or more SEG-Y files, split into blocks of traces
    with a common source position (one block per shot).

    Only the trace headers are read when a SeisCon is created; the trace
    payload of block ``i`` is read upon ``con[i]``.

    Parameters
    ----------
    blocks : list of ScanBlock
        The shots.
    keys : list of str, optional
        Extra trace headers to load along with the trace data.
    """

    def __init__(self, blocks, keys=None):
        self.blocks = tuple(blocks)
        self.keys = tuple(as_tuple(keys))

    def __repr__(self):
        return "SeisCon(nblocks=%d, ntraces=%d)" % (len(self), sum(self.ntraces))

    def __len__(self):
        return len(self.blocks)

    def __getitem__(self, index):
        return self.read(index)

    def read(self, index, keys=None):
        """
        Read the traces of block ``index`` in memory, loading ``keys`` on top
        of the headers this SeisCon was scanned with.
        """
        block = self.blocks[index]
        keys = self.keys + tuple(as_tuple(keys))
        with open_segy(block.path) as f:
            return SeisBlock.from_file(f, block.start, block.stop, keys=keys,
                                       path=block.path)

    @property
    def ntraces(self):
        return tuple(b.stop - b.start for b in self.blocks)

    @property
    def ns(self):
        return tuple(b.ns for b in self.blocks)

    @property
    def dt(self):
        return tuple(b.dt for b in self.blocks)

    @property
    def source(self):
        """The (scaled) source position of every block."""
        return tuple(b.source for b in self.blocks)

    @property
    def summary(self):
        return tuple(dict(b.summary) for b in self.blocks)

    def split(self, indices):
        """
        A new SeisCon restricted to the blocks ``indices``.
        """
        if is_integer(indices):
            indices = [indices]
        elif isinstance(indices, slice):
            indices = range(len(self))[indices]
        return SeisCon([self.blocks[i] for i in indices], keys=self.keys)

    def __eq__(self, other):
        return isinstance(other, SeisCon) and \
            (self.blocks, self.keys) == (other.blocks, other.keys)

    def __hash__(self):
        return hash((self.blocks, self.keys))


def split(con, indices):
    """
    A new SeisCon restricted to the blocks ``indices`` of ``con``.
    """
    return con.split(indices)


def _scan_file(path, keys):
    with open_segy(path) as f:
        dt = sample_interval(f)
        ns = len(f.samples)

        def read(name):
            return np.asarray(f.attributes(header_byte(name))[:])

        sx, sy = read('SourceX'), read('SourceY')
        coord_factor = scale_factor(read('SourceGroupScalar'))
        elev_factor = scale_factor(read('ElevationScalar'))
        interval = read('TRACE_SAMPLE_INTERVAL')

        values = {}
        for k in keys:
            v = read(k)
            if k in COORDINATE_FIELDS:
                v = (v * coord_factor).astype(np.float32)
            elif k in ELEVATION_FIELDS:
                v = (v * elev_factor).astype(np.float32)
            values[k] = v

        blocks = []
        for start, stop in source_runs(sx, sy):
            summary = tuple((k, (v[start:stop].min(), v[start:stop].max()))
                            for k, v in values.items())
            source = (np.float32(sx[start]*coord_factor[start]),
                      np.float32(sy[start]*coord_factor[start]))
            dti = np.float32(interval[start] / 1000.) if interval[start] > 0 else dt
            blocks.append(ScanBlock(os.fspath(path), start, stop, ns, dti, source,
                                    summary))

    return blocks


def segy_scan(path, filt=None, keys=None):
    """
    Scan the trace headers of one or more SEG-Y files, without loading the
    trace payload.

    Parameters
    ----------
    path : str or PathLike
        A SEG-Y file, or a directory.
    filt : str, optional
        If ``path`` is a directory, only the files whose name contains
        ``filt`` are scanned (all files otherwise), in lexicographic order.
    keys : list of str, optional
        The headers to summarize, and to load along with the trace data.

    Returns
    -------
    A SeisCon with one block per run of traces sharing a source position.
    """
    path = Path(path)
    if path.is_dir():
        files = sorted(i for i in path.iterdir()
                       if i.is_file() and (filt is None or filt in i.name))
        if not files:
            raise FileNotFoundError("No SEG-Y file matching `%s` in `%s`" % (filt, path))
    else:
        files = [path]

    keys = filter_ordered([resolve_header(k) for k in as_tuple(keys)])

    blocks = []
    for i in files:
        blocks.extend(_scan_file(i, keys))

    perf("Scanned %d file(s), found %d shot(s)" % (len(files), len(blocks)))

    return SeisCon(blocks, keys=keys)
