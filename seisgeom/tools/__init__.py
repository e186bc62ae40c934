from seisgeom.tools.abc import *  # noqa
from seisgeom.tools.utils import *  # noqa
