# bookstore_contracts/scenarios/runner.py
"""
Scenario runner: executes registered scenarios and reports pass/fail.
"""

import asyncio
import json
import logging
import os
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from ..clients import DemoqaClient
from ..config import Settings
from ..exceptions import ClientError
from ..payloads import PayloadGenerator
from .assertions import ExpectationFailed
from .context import CleanupLedger, ScenarioContext
from .registry import DEFAULT_REGISTRY, Scenario, ScenarioRegistry


@dataclass
class ScenarioResult:
    """Standardized outcome of one scenario run"""
    name: str
    group: str
    passed: bool
    duration: float
    status_code: Optional[int] = None
    body_snippet: str = ""
    error_type: Optional[str] = None
    message: str = ""


class ScenarioRunner:
    """
    Runs scenarios, each against a fresh ScenarioContext.

    `run` executes sequentially. `run_parallel` runs whole groups
    concurrently on a bounded pool while keeping the scenarios of one group
    in order.
    """

    def __init__(
        self,
        client_factory: Callable[[], DemoqaClient],
        registry: ScenarioRegistry = DEFAULT_REGISTRY,
        generator_factory: Callable[[], PayloadGenerator] = PayloadGenerator,
        max_workers: int = 4,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.client_factory = client_factory
        self.max_workers = max_workers
        self.registry = registry
        self.generator_factory = generator_factory
        self.ledger = CleanupLedger()
        self.results: List[ScenarioResult] = []
        self._lock = threading.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: Settings, registry: ScenarioRegistry = DEFAULT_REGISTRY) -> "ScenarioRunner":
        return cls(
            lambda: DemoqaClient.from_settings(settings),
            registry=registry,
            max_workers=settings.max_concurrent,
        )

    def run_scenario(self, scenario: Scenario, client: Optional[DemoqaClient] = None) -> ScenarioResult:
        """Run one scenario with its own context and record the outcome"""
        client = client or self.client_factory()
        start_time = time.time()
        self.logger.info(f"Running {scenario.key}")

        with ScenarioContext(client, self.generator_factory(), self.ledger) as ctx:
            try:
                if scenario.provision:
                    ctx.provision()
                scenario.func(ctx)
                result = ScenarioResult(scenario.name, scenario.group, True, 0.0)
            except ExpectationFailed as e:
                result = ScenarioResult(
                    scenario.name, scenario.group, False, 0.0,
                    status_code=e.status_code,
                    body_snippet=e.body_snippet,
                    error_type=e.__class__.__name__,
                    message=str(e),
                )
            except ClientError as e:
                result = ScenarioResult(
                    scenario.name, scenario.group, False, 0.0,
                    status_code=e.status_code,
                    body_snippet=e.snippet(),
                    error_type=e.__class__.__name__,
                    message=str(e),
                )
            except Exception as e:
                self.logger.error(f"{scenario.key} raised unexpectedly: {e}")
                result = ScenarioResult(
                    scenario.name, scenario.group, False, 0.0,
                    error_type=e.__class__.__name__,
                    message=str(e),
                )

        result.duration = time.time() - start_time
        status = "PASSED" if result.passed else "FAILED"
        self.logger.info(f"{scenario.key}: {status} ({result.duration:.2f}s) {result.message}")

        with self._lock:
            self.results.append(result)
        return result

    def run(self, group: Optional[str] = None) -> pd.DataFrame:
        scenarios = self.registry.all(group)
        self.logger.info(f"Running {len(scenarios)} scenarios sequentially")
        client = self.client_factory()
        for scenario in scenarios:
            self.run_scenario(scenario, client)
        return self.results_frame()

    def run_parallel(self, max_workers: Optional[int] = None) -> pd.DataFrame:
        """Run every group concurrently, at most `max_workers` at a time"""
        max_workers = self.max_workers if max_workers is None else max_workers
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        asyncio.run(self._run_groups(max_workers))
        return self.results_frame()

    async def _run_groups(self, max_workers: int) -> None:
        semaphore = asyncio.Semaphore(max_workers)
        groups = self.registry.groups()
        self.logger.info(f"Running {len(groups)} groups, concurrency {max_workers}")

        async def run_group(group: str) -> None:
            async with semaphore:
                await asyncio.to_thread(self.run, group)

        await asyncio.gather(*(run_group(group) for group in groups))

    # ===== Reporting =====

    def results_frame(self) -> pd.DataFrame:
        columns = list(ScenarioResult.__dataclass_fields__)
        return pd.DataFrame([asdict(result) for result in self.results], columns=columns)

    def generate_report(self) -> Dict[str, Any]:
        """Per-group summary of the recorded results"""
        if not self.results:
            return {"error": "No results to analyze"}

        df = self.results_frame()
        report: Dict[str, Any] = {}

        for group in df["group"].unique():
            group_data = df[df["group"] == group]
            passed = group_data[group_data["passed"] == True]  # noqa: E712

            report[group] = {
                "total": len(group_data),
                "passed": len(passed),
                "failed": len(group_data) - len(passed),
                "pass_rate": len(passed) / len(group_data) * 100,
                "avg_duration": float(group_data["duration"].mean()),
                "max_duration": float(group_data["duration"].max()),
                "failed_scenarios": group_data[group_data["passed"] == False]["name"].tolist(),  # noqa: E712
            }

        report["cleanup"] = {
            "attempted": self.ledger.attempted,
            "failed": self.ledger.failed,
            "skipped": self.ledger.skipped,
        }
        return report

    def save_results(
        self,
        csv_file: str = "results/scenario_results.csv",
        json_file: str = "results/scenario_report.json",
    ) -> None:
        """Save results to files"""
        os.makedirs(os.path.dirname(csv_file) or ".", exist_ok=True)
        os.makedirs(os.path.dirname(json_file) or ".", exist_ok=True)

        if self.results:
            self.results_frame().to_csv(csv_file, index=False)
            self.logger.info(f"Detailed results saved to '{csv_file}'")

        report = self.generate_report()
        if "error" not in report:
            with open(json_file, "w") as f:
                json.dump(report, f, indent=2)
            self.logger.info(f"Scenario report saved to '{json_file}'")
