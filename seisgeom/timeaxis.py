from functools import cached_property

import numpy as np

from seisgeom.exceptions import GeometryConfigurationError
from seisgeom.parameters import configuration
from seisgeom.tools import is_integer, is_number, is_sequence

__all__ = ['TimeAxis', 'build_time_axis']


class TimeAxis:
    """
    Data object to store the TimeAxis of a shot. Exactly three of the four key
    arguments must be prescribed.

    The four possible cases are:
    start is None: start = step*(1 - num) + stop
    step is None: step = (stop - start)/(num - 1)
    num is None: num = round((stop - start)/step) + 1;
                 stop is then reset to step*(num - 1) + start
    stop is None: stop = step*(num - 1) + start

    Parameters
    ----------
    start : float, optional
        Start of time axis, in ms.
    step : float, optional
        Time interval, in ms.
    num : int, optional
        Number of values (Note: this is the number of intervals + 1).
    stop : float, optional
        End time, in ms.
    """

    def __init__(self, start=None, step=None, num=None, stop=None):
        nargs = sum(i is not None for i in (start, step, num, stop))
        if nargs != 3:
            raise ValueError("Exactly three of start, step, num and stop must be set")

        if start is None:
            start = step*(1 - num) + stop
        elif step is None:
            if num < 2:
                raise ValueError("Cannot derive step from a single-sample axis")
            step = (stop - start)/(num - 1)
        elif num is None:
            num = int(round((stop - start)/step)) + 1
            stop = step*(num - 1) + start
        else:
            stop = step*(num - 1) + start

        if not is_integer(num):
            raise TypeError("input argument must be of type int")

        self.start = np.float32(start)
        self.stop = np.float32(stop)
        self.step = np.float32(step)
        self.num = int(num)

    def __str__(self):
        return "TimeAxis: start=%g, stop=%g, step=%g, num=%g" % \
               (self.start, self.stop, self.step, self.num)

    __repr__ = __str__

    def __eq__(self, other):
        if not isinstance(other, TimeAxis):
            return False
        return (self.start, self.step, self.num) == (other.start, other.step, other.num)

    def __hash__(self):
        return hash((self.start, self.step, self.num))

    def __len__(self):
        return self.num

    @cached_property
    def time_values(self):
        return np.linspace(self.start, self.stop, self.num, dtype=np.float32)


def _per_shot(name, value, nsrc):
    """
    Broadcast a scalar timing parameter to `nsrc` shots, or check that a
    per-shot sequence has exactly `nsrc` entries.
    """
    if value is None:
        return None
    if is_sequence(value):
        values = list(np.asarray(value).ravel())
        if len(values) == 1:
            values = values*nsrc
        elif len(values) != nsrc:
            raise GeometryConfigurationError("`%s` has %d entries but there are %d "
                                             "shots" % (name, len(values), nsrc))
    elif is_number(value):
        values = [value]*nsrc
    else:
        raise GeometryConfigurationError("`%s` must be a number or a sequence of "
                                         "numbers, not `%s`" % (name, type(value)))
    return values


def _is_multiple(t, dt, rtol):
    """
    True if `t` lies within `rtol*dt` of a multiple of `dt`, allowing for the
    rounding of both to 32-bit floats.
    """
    ratio = float(t)/float(dt)
    tol = rtol + 2*np.finfo(np.float32).eps*abs(ratio)
    return abs(ratio - round(ratio)) <= tol


def build_time_axis(dt=None, t=None, nt=None, nsrc=1, t0=None):
    """
    Validate the timing parameters of `nsrc` shots and derive the missing one.

    At least two of ``dt``, ``t`` and ``nt`` must be provided, either as
    scalars (shared by all shots) or as per-shot sequences. The third is
    derived through ``nt = round(t/dt) + 1``, and if all three are given
    they must agree. ``nt`` is never derived from a ``(dt, t)`` pair where
    ``t`` is not an integer multiple of ``dt``.

    Parameters
    ----------
    dt : float or sequence of floats, optional
        Sampling interval, in ms.
    t : float or sequence of floats, optional
        Recording length, in ms.
    nt : int or sequence of ints, optional
        Number of time samples.
    nsrc : int, optional
        Number of shots. Defaults to 1.
    t0 : float or sequence of floats, optional
        Recording start time, in ms. Defaults to 0.

    Returns
    -------
    A 4-tuple ``(nt, dt, t, t0)`` of per-shot tuples; ``nt`` holds Python
    ints, the others 32-bit floats.

    Raises
    ------
    GeometryConfigurationError
        If the parameters are under-specified or inconsistent.
    """
    if not is_integer(nsrc) or nsrc < 1:
        raise GeometryConfigurationError("`nsrc` must be a positive integer, "
                                         "got `%s`" % nsrc)

    missing = [k for k, v in (('dt', dt), ('t', t), ('nt', nt)) if v is None]
    if len(missing) > 1:
        raise GeometryConfigurationError("At least two of (dt, t, nt) are required "
                                         "to set up the time axis, missing `%s`"
                                         % ', '.join(missing))

    dt = _per_shot('dt', dt, nsrc)
    t = _per_shot('t', t, nsrc)
    nt = _per_shot('nt', nt, nsrc)
    t0 = _per_shot('t0', 0 if t0 is None else t0, nsrc)

    rtol = configuration['timing-rtol']
    ret_nt, ret_dt, ret_t = [], [], []
    for i in range(nsrc):
        dti = None if dt is None else np.float32(dt[i])
        ti = None if t is None else np.float32(t[i])
        nti = None
        if nt is not None:
            if not is_integer(nt[i]) and not float(nt[i]).is_integer():
                raise GeometryConfigurationError("`nt` must be integer, got `%s` "
                                                 "for shot %d" % (nt[i], i))
            nti = int(nt[i])
            if nti < 1:
                raise GeometryConfigurationError("`nt` must be positive, got `%d` "
                                                 "for shot %d" % (nti, i))
        if dti is not None and not dti > 0:
            raise GeometryConfigurationError("`dt` must be positive, got `%s` "
                                             "for shot %d" % (dti, i))
        if ti is not None and ti < 0:
            raise GeometryConfigurationError("`t` must be non-negative, got `%s` "
                                             "for shot %d" % (ti, i))

        if nti is None:
            if not _is_multiple(ti, dti, rtol):
                raise GeometryConfigurationError("Recording length t=%g is not a "
                                                 "multiple of dt=%g (shot %d); provide "
                                                 "`nt` or a compatible (dt, t) pair"
                                                 % (ti, dti, i))
            nti = int(round(float(ti)/float(dti))) + 1
        elif ti is None:
            ti = np.float32(dti*(nti - 1))
        elif dti is None:
            if nti < 2:
                raise GeometryConfigurationError("Cannot derive dt from t=%g with a "
                                                 "single time sample (shot %d)"
                                                 % (ti, i))
            dti = np.float32(ti/(nti - 1))
        elif not _is_multiple(ti, dti, rtol) or \
                nti != int(round(float(ti)/float(dti))) + 1:
            raise GeometryConfigurationError("Inconsistent time axis for shot %d: "
                                             "nt=%d does not match dt=%g and t=%g"
                                             % (i, nti, dti, ti))

        if not _is_multiple(ti, dti, 0.):
            # Within `timing-rtol` but off the grid, snap `t` onto it
            ti = np.float32(dti*(nti - 1))

        ret_nt.append(nti)
        ret_dt.append(dti)
        ret_t.append(ti)

    ret_t0 = tuple(np.float32(i) for i in t0)

    return tuple(ret_nt), tuple(ret_dt), tuple(ret_t), ret_t0
