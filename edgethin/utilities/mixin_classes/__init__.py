"""
This package contains the mixin classes used to configure the edgethin processing classes.
"""

from edgethin.utilities.mixin_classes.user_option_configured import UserOptionConfigured

__all__ = ["UserOptionConfigured"]
