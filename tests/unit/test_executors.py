from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from config import Settings
from models import Base, RunStatus, ScenarioRun, SuiteRunStatus
from scenarios.context import ScenarioContext
from scenarios.run_data import CartAccessRoute, OrderData
from scenarios.scenario_executor import ScenarioExecutor
from scenarios.suite_executor import SuiteExecutor


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


def fake_executor(statuses: dict):
    """ScenarioExecutor zwracajacy z gory ustalony status dla kazdego flow."""
    def build(flow_name, **kwargs):
        executor = MagicMock()
        executor.run = AsyncMock(return_value=SimpleNamespace(status=statuses[flow_name]))
        return executor
    return build


class TestSuiteExecutor:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("statuses, expected", [
        ({"a": RunStatus.SUCCESS, "b": RunStatus.SUCCESS}, SuiteRunStatus.SUCCESS),
        ({"a": RunStatus.SUCCESS, "b": RunStatus.FAILED}, SuiteRunStatus.PARTIAL),
        ({"a": RunStatus.FAILED, "b": RunStatus.FAILED}, SuiteRunStatus.FAILED),
    ])
    async def test_suite_status_from_scenarios(self, db, tmp_path, statuses, expected):
        with patch("scenarios.suite_executor.ScenarioExecutor", side_effect=fake_executor(statuses)):
            suite = SuiteExecutor(list(statuses), Settings(), db, workers=2, log_dir=str(tmp_path))
            suite_run = await suite.run()

        assert suite_run.status is expected
        assert suite_run.total_scenarios == 2
        assert suite_run.success_scenarios + suite_run.failed_scenarios == 2
        assert (tmp_path / f"suite_run_{suite_run.id}.log").exists()

    @pytest.mark.asyncio
    async def test_crashing_scenario_is_isolated(self, db, tmp_path):
        def build(flow_name, **kwargs):
            executor = MagicMock()
            if flow_name == "broken":
                executor.run = AsyncMock(side_effect=RuntimeError("browser died"))
            else:
                executor.run = AsyncMock(return_value=SimpleNamespace(status=RunStatus.SUCCESS))
            return executor

        with patch("scenarios.suite_executor.ScenarioExecutor", side_effect=build):
            suite_run = await SuiteExecutor(["ok", "broken"], Settings(), db, log_dir=str(tmp_path)).run()

        assert suite_run.status is SuiteRunStatus.PARTIAL
        assert "browser died" in (tmp_path / f"suite_run_{suite_run.id}.log").read_text(encoding="utf-8")


class TestScenarioExecutor:
    def context(self):
        return ScenarioContext(scenario_name="unit", base_url="https://shop.test", screenshot_dir=None)

    def test_unknown_flow(self, db):
        with pytest.raises(ValueError):
            ScenarioExecutor("checkout_everything", self.context(), db)

    @pytest.mark.asyncio
    async def test_successful_flow_is_recorded(self, db):
        executor = ScenarioExecutor("order_single_product", self.context(), db)
        order = OrderData(order_number="000000042", cart_route=CartAccessRoute.FULL_CART_PAGE, item_count=1)

        with patch.object(ScenarioExecutor, "_execute", AsyncMock(return_value=order)):
            run = await executor.run()

        stored = db.get(ScenarioRun, run.id)
        assert stored.status is RunStatus.SUCCESS
        assert stored.order_number == "000000042"
        assert stored.cart_route == "full_cart_page"
        assert stored.finished_at is not None

    @pytest.mark.asyncio
    async def test_failed_flow_is_recorded_not_raised(self, db):
        executor = ScenarioExecutor("remove_only_item", self.context(), db)

        with patch.object(ScenarioExecutor, "_execute", AsyncMock(side_effect=TimeoutError("cart"))):
            run = await executor.run()

        assert run.status is RunStatus.FAILED
        assert run.error == "TimeoutError: cart"
