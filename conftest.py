import pytest

from propname import PropertyNames
from propname.test_utils import ProjectFactory


@pytest.fixture
def names(monkeypatch) -> PropertyNames:
    # A fresh builder per test, so caches and pending paths never leak
    monkeypatch.delenv("PROPNAME_STALE_CHAIN", raising=False)
    return PropertyNames()


@pytest.fixture
def project_factory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return ProjectFactory(tmp_path)
