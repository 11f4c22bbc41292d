"""
Saved-scenario persistence. The engine never touches this; the API gets a
store injected and callers may swap in a durable implementation.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

import config
from services.exceptions import ScenarioLimitError, ScenarioNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class SavedScenario:
    name: str
    params: dict
    result: dict
    saved_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self):
        return {
            'name': self.name,
            'params': self.params,
            'result': self.result,
            'savedAt': self.saved_at,
        }


class ScenarioStore(ABC):
    """Abstract base class for scenario persistence"""

    @abstractmethod
    def save(self, scenario: SavedScenario) -> SavedScenario:
        pass

    @abstractmethod
    def get(self, name: str) -> SavedScenario:
        pass

    @abstractmethod
    def list(self) -> list:
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        pass


class InMemoryScenarioStore(ScenarioStore):
    """
    Name-keyed, process-local store. Saving under an existing name replaces
    that scenario and never counts against the limit.
    """

    def __init__(self, max_scenarios=config.MAX_SAVED_SCENARIOS):
        self.max_scenarios = max_scenarios
        self._scenarios = {}
        self._lock = threading.Lock()

    def save(self, scenario):
        with self._lock:
            if scenario.name not in self._scenarios and len(self._scenarios) >= self.max_scenarios:
                raise ScenarioLimitError(self.max_scenarios)
            self._scenarios[scenario.name] = scenario
        logger.info("Saved scenario '%s'", scenario.name)
        return scenario

    def get(self, name):
        with self._lock:
            try:
                return self._scenarios[name]
            except KeyError:
                raise ScenarioNotFoundError(name) from None

    def list(self):
        with self._lock:
            return list(self._scenarios.values())

    def delete(self, name):
        with self._lock:
            if name not in self._scenarios:
                raise ScenarioNotFoundError(name)
            del self._scenarios[name]
        logger.info("Deleted scenario '%s'", name)
