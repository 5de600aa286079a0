from .base import DecayService, DecayServicePluginBase, DecaySettings, EXT_DECAY_SERVICE
from .default import DefaultDecayService

from scitrera_app_framework import Variables, get_extension


def get_decay_service(v: Variables = None) -> DecayService:
    """Get the decay service instance."""
    return get_extension(EXT_DECAY_SERVICE, v)


__all__ = (
    'DecayService',
    'DecayServicePluginBase',
    'DecaySettings',
    'DefaultDecayService',
    'get_decay_service',
    'EXT_DECAY_SERVICE',
)
