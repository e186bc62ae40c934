from abc import ABC, abstractmethod
from functools import singledispatch

import numpy as np

from seisgeom.coordinates import normalize_coords
from seisgeom.exceptions import GeometryConfigurationError, InvalidArgument
from seisgeom.logger import debug, perf
from seisgeom.segy import SeisBlock, SeisCon, get_header, source_runs
from seisgeom.timeaxis import TimeAxis, build_time_axis
from seisgeom.tools import Pickable, as_tuple, is_integer

__all__ = ['Geometry', 'GeometryIC', 'GeometryOOC', 'build_geometry',
           'shot_indices']


DEPTH_KEYS = {'source': 'SourceSurfaceElevation',
              'receiver': 'RecGroupElevation'}


def shot_indices(indices, nsrc):
    """
    Turn a shot selection (an int, a slice, a range or a sequence of ints)
    into a list of non-negative shot indices, in selection order.
    """
    if is_integer(indices):
        indices = [indices]
    elif isinstance(indices, slice):
        indices = range(nsrc)[indices]

    ret = []
    for i in as_tuple(indices):
        if not is_integer(i):
            raise TypeError("Shot indices must be integers, got `%s`" % (i,))
        if not -nsrc <= i < nsrc:
            raise IndexError("Shot index %d out of range for %d shots" % (i, nsrc))
        ret.append(int(i) % nsrc)
    if not ret:
        raise InvalidArgument("Empty shot selection")
    return ret


def _check_key(key):
    if key not in DEPTH_KEYS:
        raise GeometryConfigurationError("Illegal key `%s`, accepted values are %s"
                                         % (key, sorted(DEPTH_KEYS)))


class Geometry(Pickable, ABC):

    """
    Abstract base class for the acquisition geometry of a set of shots.

    A shot is either a single source firing or the receiver spread recording
    it. For each shot a Geometry provides the number of elements ``nrec``,
    the number of time samples ``nt``, the sampling interval ``dt``, the
    recording length ``t`` and the recording start time ``t0`` (times in ms).
    Every per-shot attribute is a tuple of length ``nsrc``.

    The two concrete implementations are GeometryIC, which holds all of the
    coordinates in memory, and GeometryOOC, which only holds a summary and
    reads the coordinates from the underlying SEG-Y files upon request.
    """

    dtype = np.float32

    def _setup_time_axis(self, nsrc, nt=None, dt=None, t=None, t0=None):
        self._nt, self._dt, self._t, self._t0 = build_time_axis(dt=dt, t=t, nt=nt,
                                                                nsrc=nsrc, t0=t0)

    def __repr__(self):
        try:
            return "%s(nsrc=%d, nrec=%s)" % (self.__class__.__name__, self.nsrc,
                                             self.nrec)
        except AttributeError:
            # Construction failed before the summary was set
            return "%s(<uninitialized>)" % self.__class__.__name__

    def __len__(self):
        return self.nsrc

    def __getitem__(self, indices):
        return self.subsample(indices)

    def __eq__(self, other):
        from seisgeom.operations import compare_geometry
        if not isinstance(other, Geometry):
            return NotImplemented
        return compare_geometry(self, other)

    __hash__ = None

    @property
    def nsrc(self):
        return len(self._nt)

    @property
    def nt(self):
        return self._nt

    @property
    def dt(self):
        return self._dt

    @property
    def t(self):
        return self._t

    @property
    def t0(self):
        return self._t0

    @property
    @abstractmethod
    def nrec(self):
        """The number of elements (sources or receivers) of each shot."""
        return

    def time_axis(self, index):
        """
        The TimeAxis of shot ``index``, from ``t0`` to ``t0 + t``.
        """
        return TimeAxis(start=self.t0[index], step=self.dt[index], num=self.nt[index])

    @property
    def taxis(self):
        return tuple(self.time_axis(i) for i in range(self.nsrc))

    def copy(self):
        return self._rebuild()

    @abstractmethod
    def subsample(self, indices):
        """
        A new Geometry of the same type, restricted to the shots ``indices``.
        """
        return


class GeometryIC(Geometry):

    """
    In-core acquisition geometry: all of the coordinates are held in memory.

    Parameters
    ----------
    xloc, yloc, zloc : sequence of array_like
        The per-shot coordinates. Any input accepted by `normalize_coords`
        is valid. Within a shot ``xloc`` and ``zloc`` have one value per
        element, while ``yloc`` may hold a single value (2D acquisition).
    nt : int or sequence of ints, optional
        Number of time samples.
    dt : float or sequence of floats, optional
        Sampling interval, in ms.
    t : float or sequence of floats, optional
        Recording length, in ms.
    t0 : float or sequence of floats, optional
        Recording start time, in ms. Defaults to 0.
    nsrc : int, optional
        Number of shots, inferred from the coordinates if not given.

    Notes
    -----
    At least two of ``nt``, ``dt`` and ``t`` must be provided. The coordinates
    are copied and made read-only, so a GeometryIC never shares mutable
    storage with the caller or with other geometries.
    """

    __rargs__ = ('xloc', 'yloc', 'zloc')
    __rkwargs__ = ('nt', 'dt', 't', 't0')

    def __init__(self, xloc, yloc, zloc, nt=None, dt=None, t=None, t0=None, nsrc=None):
        self._xloc, self._yloc, self._zloc = normalize_coords(xloc, yloc, zloc,
                                                              nsrc=nsrc)

        for i, (x, y, z) in enumerate(zip(self._xloc, self._yloc, self._zloc)):
            if len(z) != len(x) or len(y) not in (1, len(x)):
                raise GeometryConfigurationError("Shot %d has %d x, %d y and %d z "
                                                 "coordinates" % (i, len(x), len(y),
                                                                  len(z)))

        self._setup_time_axis(len(self._xloc), nt=nt, dt=dt, t=t, t0=t0)

    @classmethod
    def from_coordinates(cls, x, y, z, dt=None, t=None, nt=None, nsrc=None, t0=None):
        """
        Build a GeometryIC from explicit coordinates and timing parameters.
        See `normalize_coords` and `build_time_axis` for the accepted inputs.
        """
        return cls(x, y, z, nt=nt, dt=dt, t=t, t0=t0, nsrc=nsrc)

    @classmethod
    def from_block(cls, block, key='source', segy_depth_key=None):
        """
        Build a GeometryIC from the headers of a fully loaded block of traces.

        Traces are grouped into shots by common source position. With
        ``key='source'`` each shot is the source location of its first trace,
        with ``key='receiver'`` each shot is the receiver spread of its traces.

        Parameters
        ----------
        block : SeisBlock
            The traces.
        key : str, optional
            Either ``'source'`` (default) or ``'receiver'``.
        segy_depth_key : str, optional
            The header holding the vertical coordinate. Defaults to
            ``SourceSurfaceElevation`` for sources and ``RecGroupElevation``
            for receivers.
        """
        _check_key(key)
        segy_depth_key = segy_depth_key or DEPTH_KEYS[key]

        runs = source_runs(get_header(block, 'SourceX', scale=False),
                           get_header(block, 'SourceY', scale=False))
        if not runs:
            raise GeometryConfigurationError("Cannot build a Geometry from an empty "
                                             "block of traces")

        if key == 'source':
            x, y = get_header(block, 'SourceX'), get_header(block, 'SourceY')
            runs_coords = [(start, start + 1) for start, _ in runs]
        else:
            x, y = get_header(block, 'GroupX'), get_header(block, 'GroupY')
            runs_coords = runs
        z = get_header(block, segy_depth_key)

        interval = get_header(block, 'TRACE_SAMPLE_INTERVAL', scale=False)
        dt = [np.float32(interval[start] / 1000.) if interval[start] > 0 else block.dt
              for start, _ in runs]

        xloc = [x[start:stop] for start, stop in runs_coords]
        yloc = [y[start:stop] for start, stop in runs_coords]
        zloc = [z[start:stop] for start, stop in runs_coords]

        debug("Extracted %d %s shot(s) from %r" % (len(runs), key, block))

        return cls(xloc, yloc, zloc, nt=block.ns, dt=dt, nsrc=len(runs))

    @classmethod
    def from_ooc(cls, geometry):
        """
        Materialize all shots of a GeometryOOC in memory.
        """
        shots = [geometry.materialize(i) for i in range(geometry.nsrc)]

        perf("Materialized %d %s shot(s)" % (len(shots), geometry.key))

        return cls.concatenate(shots)

    @classmethod
    def concatenate(cls, geometries):
        geometries = as_tuple(geometries)
        kwargs = {k: sum((getattr(g, k) for g in geometries), ())
                  for k in cls.__rargs__ + cls.__rkwargs__}
        return cls(**kwargs)

    @property
    def xloc(self):
        return self._xloc

    @property
    def yloc(self):
        return self._yloc

    @property
    def zloc(self):
        return self._zloc

    @property
    def nrec(self):
        return tuple(len(i) for i in self._xloc)

    def coordinates(self, index):
        """
        The ``(nrec, 3)`` array of (x, y, z) positions of shot ``index``; a
        single ``y`` is broadcast to every element.
        """
        x, y, z = self.xloc[index], self.yloc[index], self.zloc[index]
        return np.stack([x, np.broadcast_to(y, x.shape), z], axis=1)

    def subsample(self, indices):
        indices = shot_indices(indices, self.nsrc)
        return self._rebuild(*[tuple(getattr(self, k)[i] for i in indices)
                               for k in self.__rargs__],
                             **{k: tuple(getattr(self, k)[i] for i in indices)
                                for k in self.__rkwargs__})


class GeometryOOC(Geometry):

    """
    Out-of-core acquisition geometry: a header-only summary of the shots of
    one or more SEG-Y files. The coordinates of a shot are only read upon
    `materialize`.

    Parameters
    ----------
    container : sequence of SeisCon
        One single-shot scan handle per shot.
    nt : int or sequence of ints
        Number of time samples.
    dt : float or sequence of floats
        Sampling interval, in ms.
    nrec : int or sequence of ints
        Number of elements per shot.
    key : str
        Either ``'source'`` or ``'receiver'``.
    segy_depth_key : str
        The header holding the vertical coordinate.
    t : float or sequence of floats, optional
        Recording length, in ms. Derived from ``nt`` and ``dt`` if not given.
    t0 : float or sequence of floats, optional
        Recording start time, in ms. Defaults to 0.
    """

    __rargs__ = ('container',)
    __rkwargs__ = ('nt', 'dt', 't', 't0', 'nrec', 'key', 'segy_depth_key')

    def __init__(self, container, nt=None, dt=None, t=None, t0=None, nrec=None,
                 key='source', segy_depth_key=None):
        _check_key(key)
        self._key = key
        self._segy_depth_key = segy_depth_key or DEPTH_KEYS[key]

        self._container = tuple(as_tuple(container))
        if not self._container:
            raise GeometryConfigurationError("Cannot build a Geometry with no shots")
        if any(not isinstance(c, SeisCon) or len(c) != 1 for c in self._container):
            raise GeometryConfigurationError("`container` must hold one single-shot "
                                             "SeisCon per shot")
        nsrc = len(self._container)

        self._setup_time_axis(nsrc, nt=nt, dt=dt, t=t, t0=t0)

        nrec = as_tuple(nrec)
        if len(nrec) == 1:
            nrec = nrec*nsrc
        if len(nrec) != nsrc or not all(is_integer(i) and i > 0 for i in nrec):
            raise GeometryConfigurationError("`nrec` must hold one positive integer "
                                             "per shot, got `%s`" % (nrec,))
        self._nrec = tuple(int(i) for i in nrec)

    @classmethod
    def from_scan(cls, scan, key='source', segy_depth_key=None):
        """
        Build a GeometryOOC from a SEG-Y scan, reading no trace payload.

        Parameters
        ----------
        scan : SeisCon or sequence of SeisCon
            A scan of all shots, or one scan per shot.
        key : str, optional
            Either ``'source'`` (default) or ``'receiver'``.
        segy_depth_key : str, optional
            The header holding the vertical coordinate.
        """
        _check_key(key)
        if isinstance(scan, SeisCon):
            scans = [scan]
        else:
            scans = list(scan)
        container = [c.split(i) for c in scans for i in range(len(c))]

        nt = [c.ns[0] for c in container]
        dt = [c.dt[0] for c in container]
        if key == 'receiver':
            nrec = [c.ntraces[0] for c in container]
        else:
            nrec = [1]*len(container)

        return cls(container, nt=nt, dt=dt, nrec=nrec, key=key,
                   segy_depth_key=segy_depth_key)

    @property
    def container(self):
        return self._container

    @property
    def key(self):
        return self._key

    @property
    def segy_depth_key(self):
        return self._segy_depth_key

    @property
    def nrec(self):
        return self._nrec

    def materialize(self, index):
        """
        Read shot ``index`` from its SEG-Y file and return it as a single-shot
        GeometryIC.
        """
        index = shot_indices(index, self.nsrc)[0]
        block = self.container[index].read(0, keys=self.segy_depth_key)
        shot = GeometryIC.from_block(block, key=self.key,
                                     segy_depth_key=self.segy_depth_key)
        debug("Materialized shot %d (%d traces)" % (index, block.ntraces))
        return shot._rebuild(t0=(self.t0[index],))

    def subsample(self, indices):
        indices = shot_indices(indices, self.nsrc)
        per_shot = ('container', 'nt', 'dt', 't', 't0', 'nrec')
        return self._rebuild(**{k: tuple(getattr(self, k)[i] for i in indices)
                                for k in per_shot})


@singledispatch
def build_geometry(x, y=None, z=None, **kwargs):
    """
    Build a Geometry from any of the supported inputs:

    * coordinates and timing parameters -> GeometryIC (`GeometryIC.from_coordinates`);
    * a SeisBlock -> GeometryIC (`GeometryIC.from_block`);
    * a SeisCon, or a list of SeisCon -> GeometryOOC (`GeometryOOC.from_scan`);
    * a GeometryOOC -> GeometryIC (`GeometryIC.from_ooc`);
    * a GeometryIC -> a copy.
    """
    if isinstance(x, (list, tuple)) and x and all(isinstance(i, SeisCon) for i in x):
        return GeometryOOC.from_scan(x, **kwargs)
    return GeometryIC.from_coordinates(x, y, z, **kwargs)


@build_geometry.register(SeisBlock)
def _(block, key='source', segy_depth_key=None):
    return GeometryIC.from_block(block, key=key, segy_depth_key=segy_depth_key)


@build_geometry.register(SeisCon)
def _(scan, key='source', segy_depth_key=None):
    return GeometryOOC.from_scan(scan, key=key, segy_depth_key=segy_depth_key)


@build_geometry.register(GeometryOOC)
def _(geometry):
    return GeometryIC.from_ooc(geometry)


@build_geometry.register(GeometryIC)
def _(geometry):
    return geometry.copy()
