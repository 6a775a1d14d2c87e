"""
Exception types raised by the rules engine.

Nothing raised here is fatal to a combat: the resolver catches
ConfigurationError per card effect and reports it in the EffectResult.
"""

__all__ = ["RulesError", "ConfigurationError"]


class RulesError(Exception):
    """Base class for rules engine errors."""


class ConfigurationError(RulesError, ValueError):
    """
    Raised when authored data cannot be resolved.

    Examples: an unknown condition/scaling/effect tag, an alternative flagged
    but absent, or a stance effect that names no stance.
    """
