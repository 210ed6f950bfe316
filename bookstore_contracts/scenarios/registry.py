# bookstore_contracts/scenarios/registry.py
"""
Named scenarios and the registry that groups them.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .context import ScenarioContext

ScenarioFunc = Callable[[ScenarioContext], None]


@dataclass(frozen=True)
class Scenario:
    """
    One named check.

    `func` receives a fresh ScenarioContext, provisioned with an account and
    token when `provision` is set, and fails by raising.
    """
    name: str
    group: str
    func: ScenarioFunc
    provision: bool = True
    description: str = ""

    @property
    def key(self) -> str:
        return f"{self.group}::{self.name}"


class ScenarioRegistry:
    def __init__(self):
        self._scenarios: Dict[str, Scenario] = {}

    def register(self, scenario: Scenario) -> Scenario:
        if scenario.key in self._scenarios:
            raise ValueError(f"Scenario already registered: {scenario.key}")
        self._scenarios[scenario.key] = scenario
        return scenario

    def scenario(self, group: str, name: Optional[str] = None, provision: bool = True):
        """Decorator registering a scenario function under `group`"""
        def decorator(func: ScenarioFunc) -> ScenarioFunc:
            self.register(Scenario(
                name=name or func.__name__,
                group=group,
                func=func,
                provision=provision,
                description=(func.__doc__ or "").strip(),
            ))
            return func
        return decorator

    def get(self, key: str) -> Scenario:
        return self._scenarios[key]

    def all(self, group: Optional[str] = None) -> List[Scenario]:
        return [s for s in self._scenarios.values() if group is None or s.group == group]

    def groups(self) -> List[str]:
        seen: List[str] = []
        for s in self._scenarios.values():
            if s.group not in seen:
                seen.append(s.group)
        return seen

    def __len__(self) -> int:
        return len(self._scenarios)


DEFAULT_REGISTRY = ScenarioRegistry()
scenario = DEFAULT_REGISTRY.scenario
