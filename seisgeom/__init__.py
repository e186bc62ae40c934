from importlib.metadata import version, PackageNotFoundError

# Import the global `configuration` dict
from seisgeom.parameters import *  # noqa
from seisgeom.logger import error, warning, info, set_log_level  # noqa
from seisgeom.logger import logger_registry, _set_log_level  # noqa
from seisgeom.exceptions import *  # noqa

from seisgeom.timeaxis import *  # noqa
from seisgeom.coordinates import *  # noqa
from seisgeom.segy import SeisBlock, SeisCon, segy_read, segy_scan, split, get_header  # noqa
from seisgeom.geometry import *  # noqa
from seisgeom.operations import *  # noqa

try:
    __version__ = version("seisgeom")
except PackageNotFoundError:
    # seisgeom is not installed
    __version__ = '0+untagged'


def _preprocess_endian(v):
    return {'msb': 'big', 'lsb': 'little'}.get(v, v)


# Setup log level
configuration.add('log-level', 'INFO', list(logger_registry),
                  callback=_set_log_level)

# Relative tolerance when checking that `t` is a multiple of `dt`
configuration.add('timing-rtol', 1e-5, preprocessor=float)

# Byte order of the SEG-Y files
configuration.add('segy-endian', 'big', ['big', 'little'],
                  preprocessor=_preprocess_endian)

init_configuration()
