"""The parameters dictionary contains global parameter settings."""

from collections import OrderedDict
from os import environ
from functools import wraps

from seisgeom.logger import warning

__all__ = ['configuration', 'init_configuration', 'switchconfig']

# The configuration is meant to be written at application startup (typically
# through environment variables) and only temporarily altered via `switchconfig`


class Parameters(OrderedDict):

    """
    A dictionary-like class to hold global configuration parameters for seisgeom.
    On top of a normal dict, this provides the option to provide callback functions
    so that any interested module can be informed when the configuration changes.
    """

    def __init__(self, name=None, **kwargs):
        super().__init__(**kwargs)
        self._name = name

        self._accepted = {}
        self._defaults = {}

        self._preprocess_functions = {}
        self._update_functions = {}

    def _check_key_value(func):
        def wrapper(self, key, value):
            accepted = self._accepted[key]
            if accepted is not None and value not in accepted:
                raise ValueError(f"Illegal configuration parameter ({key}, {value}). "
                                 f"Accepted: {str(accepted)}")
            return func(self, key, value)
        return wrapper

    def _preprocess(self, key, value):
        """
        Execute the preprocesser associated to ``key``, if any. This will
        return a new value.
        """
        if key in self._preprocess_functions:
            return self._preprocess_functions[key](value)
        else:
            return value

    def __setitem__(self, key, value):
        if key not in self._accepted:
            raise KeyError(f"Unknown configuration parameter `{key}`")
        value = self._preprocess(key, value)
        self._set_checked(key, value)

    @_check_key_value
    def _set_checked(self, key, value):
        if key in self._update_functions:
            value = self._update_functions[key](value)
        if value is not None:
            super().__setitem__(key, value)

    def add(self, key, value, accepted=None, preprocessor=None, callback=None):
        """
        Add a new parameter ``key`` with default value ``value``.

        Associate ``key`` with a list of ``accepted`` values.

        If provided, ``preprocessor`` is applied to every incoming value (e.g.,
        to cast strings read from the environment), and ``callback`` is
        executed whenever the value of ``key`` changes.
        """
        super().__setitem__(key, value)
        self._accepted[key] = accepted
        self._defaults[key] = value
        if callable(preprocessor):
            self._preprocess_functions[key] = preprocessor
        if callable(callback):
            self._update_functions[key] = callback

    def initialize(self):
        """
        Execute all preprocessors and callbacks, thus completing the
        initialization.
        """
        for k, v in list(self.items()):
            # Will trigger preprocessor and callback, if any
            self[k] = v

    @property
    def name(self):
        return self._name


env_vars_mapper = {
    'SEISGEOM_LOGGING': 'log-level',
    'SEISGEOM_TIMING_RTOL': 'timing-rtol',
    'SEISGEOM_SEGY_ENDIAN': 'segy-endian',
}


configuration = Parameters("SeisGeom-Configuration")
"""The seisgeom configuration parameters."""


def init_configuration(configuration=configuration, env_vars_mapper=env_vars_mapper):
    # Populate `configuration` with user-provided options
    for k, v in env_vars_mapper.items():
        value = environ.get(k)
        if value is None:
            continue
        try:
            configuration[v] = value
        except ValueError:
            warning(f"Ignoring `{k}={value}`, accepted values are "
                    f"{configuration._accepted[v]}")

    configuration.initialize()


class switchconfig:

    """
    Decorator or context manager to temporarily change `configuration` parameters.
    """

    def __init__(self, condition=True, **params):
        if condition:
            self.params = {k.replace('_', '-'): v for k, v in params.items()}
        else:
            self.params = {}
        self.previous = {}

    def __enter__(self):
        self.previous = {}
        for k, v in self.params.items():
            self.previous[k] = configuration[k]
            configuration[k] = v

    def __exit__(self, exc_type, exc_val, exc_tb):
        for k in self.params:
            configuration[k] = self.previous[k]

    def __call__(self, func, *args, **kwargs):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with self:
                result = func(*args, **kwargs)
            return result
        return wrapper
