import pytest

from pipeflow.network.records import Pipeline, Tank
from pipeflow.testing import make_pipeline, make_tank


@pytest.fixture
def straight_pipeline() -> Pipeline:
    return make_pipeline()


@pytest.fixture
def source_tank() -> Tank:
    return make_tank(id="t1", name="North OHSR")
