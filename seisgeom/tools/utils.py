from collections.abc import Iterable

import numpy as np

__all__ = ['as_tuple', 'is_integer', 'is_number', 'is_sequence', 'filter_ordered',
           'all_equal']


def as_tuple(item, type=None, length=None):
    """
    Force item to a tuple. Passes tuple subclasses through also.

    Strings and NumPy scalars are treated as single items, not as iterables.
    """
    # Empty list if we get passed None
    if item is None:
        t = ()
    elif isinstance(item, (str, bytes, np.generic)):
        t = (item,)
    elif isinstance(item, tuple):
        # this makes tuple subclasses pass through
        t = item
    else:
        # Convert iterable to list...
        try:
            t = tuple(item)
        # ... or create a list of a single item
        except (TypeError, NotImplementedError):
            t = (item,) * (length or 1)

    if length and not len(t) == length:
        raise ValueError("Tuple needs to be of length %d" % length)
    if type and not all(isinstance(i, type) for i in t):
        raise TypeError("Items need to be of type %s" % type)
    return t


def is_integer(value):
    """
    A thorough instance comparison for all integer types.
    """
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def is_number(value):
    """
    True if ``value`` is a real scalar (Python or NumPy), False otherwise.
    """
    return isinstance(value, (int, float, np.integer, np.floating)) and \
        not isinstance(value, bool)


def is_sequence(value):
    """
    True if ``value`` is a non-string iterable, including NumPy arrays of
    dimension at least one.
    """
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes))


def filter_ordered(elements, key=None):
    """
    Filter elements in a list while preserving order.

    Parameters
    ----------
    key : callable, optional
        Conversion key used during equality comparison.
    """
    if isinstance(elements, (str, bytes)) or not isinstance(elements, Iterable):
        elements = [elements]

    seen = set()
    ret = []
    key = key or (lambda i: i)
    for e in elements:
        k = key(e)
        if k not in seen:
            seen.add(k)
            ret.append(e)
    return ret


def all_equal(iterable):
    "Returns True if all the elements are equal to each other"
    iterable = list(iterable)
    return all(i == iterable[0] for i in iterable[1:])
