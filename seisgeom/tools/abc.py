__all__ = ['Reconstructable', 'Pickable']


class Reconstructable:

    __rargs__ = ()
    """
    The positional arguments to reconstruct the object.
    """

    __rkwargs__ = ()
    """
    The keyword arguments to reconstruct the object.
    """

    def _rebuild(self, *args, **kwargs):
        """
        Reconstruct `self` via `self.__class__(*args, **kwargs)` using
        `self`'s `__rargs__` and `__rkwargs__` if and where `*args` and
        `**kwargs` lack entries.

        Examples
        --------
        Given

            class Foo(Reconstructable):
                __rargs__ = ('a', 'b')
                __rkwargs__ = ('c',)
                def __init__(self, a, b, c=4):
                    self.a = a
                    self.b = b
                    self.c = c

            a = Foo(3, 5)

        Then:

            * `a._rebuild() -> Foo(3, 5, 4)` (i.e., copy of `a`).
            * `a._rebuild(4) -> Foo(4, 5, 4)`
            * `a._rebuild(c=5) -> Foo(3, 5, 5)`
        """
        for i in self.__rargs__[len(args):]:
            args += (getattr(self, i),)

        args = list(args)
        for k in list(kwargs):
            if k in self.__rargs__:
                args[self.__rargs__.index(k)] = kwargs.pop(k)

        kwargs.update({i: getattr(self, i) for i in self.__rkwargs__ if i not in kwargs})

        return self.__class__(*args, **kwargs)


class Pickable(Reconstructable):

    """
    A base class for types that require pickling. Unpickling goes through the
    constructor, fed with the `__rargs__` and `__rkwargs__` of the pickled
    object, so that any validation performed at construction time is also
    applied to the unpickled object.
    """

    def __reduce__(self):
        args = tuple(getattr(self, i) for i in self.__rargs__)
        kwargs = {i: getattr(self, i) for i in self.__rkwargs__}
        return (Pickable._pickle_wrapper, (self.__class__, args, kwargs))

    @staticmethod
    def _pickle_wrapper(cls, args, kwargs):
        return cls(*args, **kwargs)
