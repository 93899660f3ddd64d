# Wszystkie modele w jednym miejscu — create_all musi je widziec
from models.base import Base
from models.suite_run import SuiteRun, SuiteRunStatus
from models.run import ScenarioRun, RunStatus
from models.run_step import RunStep
from models.api_error import ApiError
