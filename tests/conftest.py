import pytest

from config import Timeouts
from scenarios.context import ScenarioContext
from scenarios.pages.navigator import PageNavigator
from tests.fakes import FakePage


def pytest_addoption(parser):
    parser.addoption(
        "--run-e2e", action="store_true", default=False,
        help="uruchom scenariusze e2e na prawdziwej przegladarce i zywym sklepie",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="e2e wymaga --run-e2e")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture
def fake_page():
    return FakePage(url="https://shop.test/")


@pytest.fixture
def scenario_context():
    return ScenarioContext(scenario_name="unit", base_url="https://shop.test", timeouts=Timeouts())


@pytest.fixture
def nav(fake_page, scenario_context):
    return PageNavigator(fake_page, scenario_context, clock=fake_page.clock.monotonic)
