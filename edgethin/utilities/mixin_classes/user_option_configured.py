"""
This module provides the :class:`UserOptionConfigured` mixin class that enables classes to be
configured using :class:`.UserOptions`-derived classes while maintaining the ability to reset
to the original configuration state.

Example:
    Configuring a class from a dataclass of options::

        from dataclasses import dataclass

        from edgethin.utilities.options import UserOptions
        from edgethin.utilities.mixin_classes import UserOptionConfigured

        @dataclass
        class ThinnerOptions(UserOptions):
            radius: float = 1.35
            theta: float = 0.0174

        class Thinner(UserOptionConfigured[ThinnerOptions], ThinnerOptions):
            def __init__(self, options: ThinnerOptions | None = None):
                super().__init__(ThinnerOptions, options=options)

        thinner = Thinner()
        thinner.radius = 1.5  # make a change
        thinner.reset_settings()  # back to 1.35

.. Note::
    The :class:`UserOptionConfigured` class should come first in the inheritance order
    due to Method Resolution Order (MRO) requirements.
"""

from typing import Generic, TypeVar

from edgethin.utilities.options import UserOptions


OptionsT = TypeVar("OptionsT", bound=UserOptions)
"""
Type variable bound to UserOptions for type safety
"""


class UserOptionConfigured(Generic[OptionsT]):
    """
    Mixin class providing UserOptions-based configuration with reset capability.

    The options are validated and copied onto the instance as attributes when the class is initialized.  The options
    object itself is kept so that :meth:`reset_settings` can restore the initial configuration after the attributes
    have been changed by hand.

    To use this mixin, subclass it with the :class:`UserOptions` subclass as the type parameter and also inherit from
    the options class itself so the attributes are documented on the configured class::

        class NonMaxSuppressor(UserOptionConfigured[NonMaxSuppressorOptions], NonMaxSuppressorOptions):
            def __init__(self, options: NonMaxSuppressorOptions | None = None):
                super().__init__(NonMaxSuppressorOptions, options=options)

    .. Warning::
        If options are not provided during initialization, default initialization of the
        options_type class will be used.
    """

    def __init__(self, options_type: type[OptionsT], *args, options: OptionsT | None = None, **kwargs) -> None:
        """
        :param options_type: The type of the :class:`.UserOptions` to use
        :param options: An optional instance of `options_type` preconfigured.
        :raises ConfigurationError: If the options fail validation
        """

        super().__init__(*args, **kwargs)

        if options is None:
            options = options_type()

        options.apply_options(self)

        self._original_options: OptionsT = options
        """
        The original configuration for this class
        """

    def reset_settings(self) -> None:
        """
        Resets the class to the state it was originally initialized with.
        """

        self._original_options.apply_options(self)

    @property
    def original_options(self) -> OptionsT:
        """
        The options used to initialize the class.

        .. Warning::
            Modifying the returned object will affect reset behavior.
        """
        return self._original_options
