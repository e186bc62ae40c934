"""
A thin SEG-Y layer on top of segyio: in-memory blocks of traces, lazy
header-only scans and header lookup.
"""

from seisgeom.segy.headers import *  # noqa
from seisgeom.segy.block import *  # noqa
from seisgeom.segy.scan import *  # noqa
