import logging

import pytest


@pytest.fixture(autouse=True)
def _propagate_repo_dump_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    # caplog listens on the root logger.
    monkeypatch.setattr(logging.getLogger("repo_dump"), "propagate", True)
