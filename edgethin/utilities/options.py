from dataclasses import dataclass, fields

from typing import Any

from abc import ABCMeta


@dataclass
class UserOptions(metaclass=ABCMeta):
    """
    This is an abstract class used to create a dataclass of user options.

    These options are used to set defaults for parameters set inside the associated class for the options.

    Example:
        :class:`.NonMaxSuppressorOptions` contains the default options for the :class:`.NonMaxSuppressor` class.

    Custom objects built from this abstract class must follow the naming scheme <callable_name>Options and be loaded
    into the options keyword argument for callable_name.__init__().

    To apply options to your class, the :meth:`apply_options` method should be invoked.  It checks the options with
    :meth:`validate` first, so an invalid configuration never reaches the target.

    for example:
        >>> @dataclass
        >>> class ExampleOptions(UserOptions):
        >>>     radius: float = 1.35
        >>>     def validate(self):
        >>>         if self.radius < 1:
        >>>             raise ConfigurationError('radius must be >= 1')

        >>> class Example:
        >>>     def __init__(self, options=None):
        >>>         if options is None:
        >>>             options = ExampleOptions()
        >>>         options.apply_options(self)  # apply the options as attributes of self
        >>> my_example = Example()
        >>> print(my_example.radius)
        ...     1.35
    """

    def validate(self) -> None:
        """
        Check that the options describe a usable configuration.

        The base implementation accepts everything.  Subclasses should override this and raise
        :class:`.ConfigurationError` for invalid values.
        """
        pass

    def apply_options(self, target: object) -> None:
        """
        Validate the options and then copy them onto the target as attributes

        :param target: the instance that we are to update
        :raises ConfigurationError: if :meth:`validate` rejects the options
        """
        self.validate()
        target.__dict__.update(self.options_dict)

    @property
    def options_dict(self) -> dict[str, Any]:
        """
        The options stored in the dataclass as a dictionary mapping field name to value.

        Only dataclass fields are included, so internal attributes and methods are ignored.
        """

        return {field.name: getattr(self, field.name) for field in fields(self)}
