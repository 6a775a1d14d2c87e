"""
Card effect resolution.
"""

from .executor import AppliedEffect, EffectResult, EffectResolver
