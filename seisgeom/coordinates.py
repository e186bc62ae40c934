import numpy as np

from seisgeom.exceptions import GeometryConfigurationError
from seisgeom.tools import is_number, is_sequence

__all__ = ['normalize_coords', 'as_coordinate_array']


def as_coordinate_array(values):
    """
    Return a read-only, contiguous 1-D float32 copy of ``values``.
    """
    array = np.array(values, dtype=np.float32, copy=True).ravel()
    array.flags.writeable = False
    return array


def _is_grouped(values):
    if isinstance(values, np.ndarray):
        return values.ndim > 1 or values.dtype == object
    return is_sequence(values) and any(is_sequence(i) for i in values)


def _group(name, values):
    """
    Turn a single coordinate input into a list of per-shot arrays.
    """
    if values is None:
        raise GeometryConfigurationError("Missing `%s` coordinates" % name)
    if is_number(values) or (isinstance(values, np.ndarray) and values.ndim == 0):
        return [as_coordinate_array([values])]
    if not is_sequence(values):
        raise GeometryConfigurationError("`%s` must be a number or a sequence, "
                                         "not `%s`" % (name, type(values)))
    if _is_grouped(values):
        return [as_coordinate_array(i) for i in values]
    return [as_coordinate_array([i]) for i in values]


def normalize_coords(x, y, z, nsrc=None):
    """
    Normalize heterogeneous coordinate inputs into per-shot coordinate lists.

    Each of ``x``, ``y`` and ``z`` may be:

    * grouped by shot, i.e. a sequence whose items are sequences (one per
      shot), a 2-D array (one row per shot) or an object array;
    * flat, i.e. a sequence of scalars, one coordinate per shot, as in the
      common single-source-per-shot case;
    * a scalar, i.e. a single shot with a single element.

    Parameters
    ----------
    x, y, z : array_like
        The coordinates along each axis.
    nsrc : int, optional
        Expected number of shots. If not given, it is inferred from the inputs.

    Returns
    -------
    A 3-tuple ``(xloc, yloc, zloc)``, each a tuple of read-only float32 1-D
    arrays, one per shot.

    Raises
    ------
    GeometryConfigurationError
        If a coordinate is missing or the shot counts implied by ``x``, ``y``,
        ``z`` and ``nsrc`` disagree.
    """
    locs = {}
    for name, values in (('x', x), ('y', y), ('z', z)):
        locs[name] = _group(name, values)

    counts = {k: len(v) for k, v in locs.items()}
    if nsrc is not None:
        counts['nsrc'] = nsrc
    if len(set(counts.values())) != 1:
        raise GeometryConfigurationError("Inconsistent number of shots: %s" %
                                         ', '.join('%s -> %s' % i for i in counts.items()))
    if not counts['x']:
        raise GeometryConfigurationError("Cannot build a Geometry with no shots")

    return tuple(locs['x']), tuple(locs['y']), tuple(locs['z'])
