import pytest

from pipeflow.network import Pipeline, Tank
from pipeflow.testing import make_pipeline, make_tank


@pytest.fixture
def tank() -> Tank:
    return make_tank(id="t1")


@pytest.fixture
def trunk() -> Pipeline:
    # 625 * 0.8 = 500 flow units at the default utilization
    return make_pipeline(id="trunk", points=[(0, 0), (200, 0), (400, 0)], capacity=625.0)
