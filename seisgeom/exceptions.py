__all__ = ['SeisGeomError', 'GeometryConfigurationError', 'InvalidArgument']


class SeisGeomError(Exception):
    """
    Base class for all seisgeom-related exceptions.
    """


class GeometryConfigurationError(ValueError, SeisGeomError):
    """
    Raised when a Geometry cannot be constructed from the supplied parameters.

    These are user-level errors, typically one of the following:

    * The timing parameters are under-specified (fewer than two of ``dt``,
      ``t`` and ``nt``) or mutually inconsistent (e.g., ``t`` is not an
      integer multiple of ``dt``);
    * The shot counts implied by the coordinates and ``nsrc`` disagree;
    * An unknown trace grouping ``key`` was requested.
    """


class InvalidArgument(ValueError, SeisGeomError):
    """
    Raised by the Geometry operations when an argument is not valid, such as
    an empty shot selection or the concatenation of incompatible geometries.
    """
