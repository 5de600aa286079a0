"""Default decay service: exponential per-day attenuation."""
from datetime import datetime
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables, get_logger

from ...config import (
    MNEMOFLOW_DECAY_FACTOR, DEFAULT_MNEMOFLOW_DECAY_FACTOR,
)
from ...models.memory import MemoryRecord
from ...utils import age_in_days
from .base import DecayService, DecayServicePluginBase, DecaySettings


class DefaultDecayService(DecayService):
    """relevance = decay_factor ** age_in_days."""

    def __init__(self, settings: Optional[DecaySettings] = None, v: Variables = None):
        self.settings = settings or DecaySettings()
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.logger.info("Initialized DefaultDecayService with decay_factor=%s", self.settings.decay_factor)

    def relevance(self, record: MemoryRecord, now: datetime) -> float:
        return self.settings.decay_factor ** age_in_days(record.created_at, now)


class DefaultDecayServicePlugin(DecayServicePluginBase):
    """Default decay service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultDecayService:
        factor = v.environ(MNEMOFLOW_DECAY_FACTOR, default=DEFAULT_MNEMOFLOW_DECAY_FACTOR, type_fn=float)
        return DefaultDecayService(settings=DecaySettings(decay_factor=factor), v=v)
