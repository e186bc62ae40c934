import numpy as np
import segyio

__all__ = ['resolve_header', 'header_byte', 'scale_factor', 'get_header',
           'COORDINATE_FIELDS', 'ELEVATION_FIELDS', 'DEFAULT_FIELDS']


ALIASES = {
    'RecGroupElevation': 'ReceiverGroupElevation',
    'RecDatumElevation': 'ReceiverDatumElevation',
    'ns': 'TRACE_SAMPLE_COUNT',
    'dt': 'TRACE_SAMPLE_INTERVAL',
}

# Scaled by `SourceGroupScalar`
COORDINATE_FIELDS = ('SourceX', 'SourceY', 'GroupX', 'GroupY', 'CDP_X', 'CDP_Y')

# Scaled by `ElevationScalar`
ELEVATION_FIELDS = ('ReceiverGroupElevation', 'SourceSurfaceElevation', 'SourceDepth',
                    'ReceiverDatumElevation', 'SourceDatumElevation',
                    'SourceWaterDepth', 'GroupWaterDepth')

# Fields always loaded along with trace data
DEFAULT_FIELDS = COORDINATE_FIELDS + ELEVATION_FIELDS + (
    'SourceGroupScalar', 'ElevationScalar', 'FieldRecord', 'TRACE_SEQUENCE_FILE',
    'offset', 'TRACE_SAMPLE_COUNT', 'TRACE_SAMPLE_INTERVAL')


def resolve_header(name):
    """
    Map a header name, or one of its aliases, onto the corresponding segyio
    trace field name.
    """
    name = ALIASES.get(name, name)
    if name not in segyio.tracefield.keys:
        raise KeyError("Unknown SEG-Y trace header `%s`" % name)
    return name


def header_byte(name):
    return segyio.tracefield.keys[resolve_header(name)]


def scale_factor(scalars):
    """
    Convert SEG-Y scalars (`SourceGroupScalar`, `ElevationScalar`) into
    multiplicative factors: negative values divide, positive values multiply,
    zero means no scaling.
    """
    scalars = np.asarray(scalars, dtype=np.float64)
    factor = np.ones_like(scalars)
    factor[scalars > 0] = scalars[scalars > 0]
    factor[scalars < 0] = 1. / np.abs(scalars[scalars < 0])
    return factor


def get_header(block, name, scale=True):
    """
    Per-trace values of the header field ``name``.

    Parameters
    ----------
    block : SeisBlock
        A fully loaded block of traces.
    name : str
        The header name (segyio naming, or an alias such as
        ``RecGroupElevation``).
    scale : bool, optional
        Apply the SEG-Y coordinate/elevation scalars to the fields that carry
        one. Scaled values are returned as float32, raw values as stored.
        Defaults to True.
    """
    name = resolve_header(name)
    try:
        values = block.headers[name]
    except KeyError:
        raise KeyError("Header `%s` was not loaded for this block" % name) from None

    if not scale:
        return values
    if name in COORDINATE_FIELDS:
        factor = scale_factor(block.headers['SourceGroupScalar'])
    elif name in ELEVATION_FIELDS:
        factor = scale_factor(block.headers['ElevationScalar'])
    else:
        return values
    return (values * factor).astype(np.float32)
