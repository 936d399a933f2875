"""Shared fixtures for the save editor tests."""

import pytest

SAMPLE_SAVE = (
    b'{"playerData":{"geo":1234,"health":4,"maxHealth":5,"soul":66,'
    b'"maxSoul":99,"dreamOrbs":150,"permadeathMode":0,"bossRushMode":0,'
    b'"completionPercentage":57.5,"geography":7}}'
)


@pytest.fixture
def sample_save() -> bytes:
    return SAMPLE_SAVE


@pytest.fixture
def save_path(tmp_path, sample_save):
    path = tmp_path / "user1.dat"
    path.write_bytes(sample_save)
    return path
