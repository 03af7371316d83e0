import numpy as np
import pytest

from observatory.data_source import generate_mock_series


@pytest.fixture
def path_matrix():
    # 0 - 1 - 2, no direct 0-2 edge
    return np.array([
        [1.0, 0.8, 0.0],
        [0.8, 1.0, 0.5],
        [0.0, 0.5, 1.0],
    ])


@pytest.fixture
def mock_series():
    return generate_mock_series(seed=7)


@pytest.fixture(autouse=True)
def no_env_overrides(monkeypatch):
    for name in ("OBSERVATORY_API_URL", "OBSERVATORY_DATA_PATH",
                 "OBSERVATORY_FETCH_TIMEOUT", "OBSERVATORY_FPS", "OBSERVATORY_LOG_LEVEL",
                 "OBSERVATORY_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
