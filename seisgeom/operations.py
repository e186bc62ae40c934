from functools import singledispatch

import numpy as np

from seisgeom.exceptions import InvalidArgument
from seisgeom.geometry import GeometryIC, GeometryOOC
from seisgeom.logger import warning
from seisgeom.tools import all_equal

__all__ = ['get_nsrc', 'n_samples', 'compare_geometry', 'subsample', 'to_incore',
           'super_shot_geometry', 'concatenate']


def get_nsrc(geometry):
    """The number of shots of ``geometry``."""
    return geometry.nsrc


def n_samples(geometry):
    """The total number of trace samples described by ``geometry``."""
    return sum(nrec * nt for nrec, nt in zip(geometry.nrec, geometry.nt))


def _compare_timing(a, b):
    return all(getattr(a, k) == getattr(b, k) for k in ('nt', 'dt', 't', 't0'))


def _compare_coordinates(a, b):
    for k in ('xloc', 'yloc', 'zloc'):
        if not all(np.array_equal(i, j) for i, j in zip(getattr(a, k), getattr(b, k))):
            return False
    return True


def compare_geometry(a, b):
    """
    True if ``a`` and ``b`` describe the same acquisition, False otherwise.

    Both must have the same number of shots and, shot by shot, the same
    ``nt``, ``dt``, ``t`` and ``t0``. Two GeometryIC must also have identical
    coordinates; two GeometryOOC must also have the same ``nrec``, ``key``
    and ``segy_depth_key`` (nothing is read from disk). A GeometryIC and a
    GeometryOOC are compared over their common summary (timing and ``nrec``).
    """
    if a is b:
        return True
    if a.nsrc != b.nsrc or not _compare_timing(a, b) or a.nrec != b.nrec:
        return False

    if isinstance(a, GeometryIC) and isinstance(b, GeometryIC):
        return _compare_coordinates(a, b)
    elif isinstance(a, GeometryOOC) and isinstance(b, GeometryOOC):
        return (a.key, a.segy_depth_key) == (b.key, b.segy_depth_key)
    else:
        return True


def subsample(geometry, indices):
    """
    A new Geometry of the same type as ``geometry``, restricted to the shots
    ``indices`` (an int, a slice, a range or a sequence of ints).
    """
    return geometry.subsample(indices)


@singledispatch
def to_incore(geometry):
    """
    Turn ``geometry`` into a GeometryIC, reading the coordinates from disk
    if ``geometry`` is out-of-core.
    """
    raise TypeError("Cannot convert `%s` into an in-core Geometry" % type(geometry))


@to_incore.register(GeometryIC)
def _(geometry):
    return geometry


@to_incore.register(GeometryOOC)
def _(geometry):
    return GeometryIC.from_ooc(geometry)


def super_shot_geometry(geometry):
    """
    Merge all shots of ``geometry`` into a single simultaneous-source shot.

    The x positions of all shots are merged, deduplicated and sorted, and the
    z positions follow the retained x positions. If ``y`` carries one value
    per element in every shot it is merged like ``z``, otherwise the first
    shot's first ``y`` is used. The time axis is the one of the first shot.

    Returns
    -------
    A single-shot GeometryIC.
    """
    geometry = to_incore(geometry)
    if geometry.nsrc == 1:
        return geometry.copy()

    if not all(all_equal(getattr(geometry, k)) for k in ('nt', 'dt', 't', 't0')):
        warning("Merging shots with different time axes, using the first one")

    xall = np.concatenate(geometry.xloc)
    xloc, index = np.unique(xall, return_index=True)
    zloc = np.concatenate(geometry.zloc)[index]
    if all(len(x) == len(y) for x, y in zip(geometry.xloc, geometry.yloc)):
        yloc = np.concatenate(geometry.yloc)[index]
    else:
        yloc = geometry.yloc[0][:1]

    return GeometryIC([xloc], [yloc], [zloc], nt=geometry.nt[0], dt=geometry.dt[0],
                      t=geometry.t[0], t0=geometry.t0[0])


def concatenate(*geometries):
    """
    Concatenate the shots of several geometries.

    Out-of-core geometries sharing ``key`` and ``segy_depth_key`` are
    concatenated into a GeometryOOC; any other mix is materialized and
    concatenated into a GeometryIC.
    """
    if not geometries:
        raise InvalidArgument("Nothing to concatenate")

    if all(isinstance(g, GeometryOOC) for g in geometries):
        keys = {(g.key, g.segy_depth_key) for g in geometries}
        if len(keys) > 1:
            raise InvalidArgument("Cannot concatenate out-of-core geometries with "
                                  "different (key, segy_depth_key): %s" % sorted(keys))
        per_shot = ('container', 'nt', 'dt', 't', 't0', 'nrec')
        key, segy_depth_key = keys.pop()
        return GeometryOOC(key=key, segy_depth_key=segy_depth_key,
                           **{k: sum((getattr(g, k) for g in geometries), ())
                              for k in per_shot})

    return GeometryIC.concatenate([to_incore(g) for g in geometries])
