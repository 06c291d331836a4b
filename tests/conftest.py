from __future__ import annotations

import pytest

from selfheal.config.schema import StorageConfig
from selfheal.core.locator import Locator
from selfheal.storage.path_storage import FileSystemPathStorage
from tests.helpers import chain, node


@pytest.fixture()
def storage_config(tmp_path):
    return StorageConfig(base_path=tmp_path / "paths", report_path=tmp_path / "reports")


@pytest.fixture()
def storage(storage_config):
    return FileSystemPathStorage(storage_config)


@pytest.fixture()
def login_locator():
    return Locator("id", "login-button")


@pytest.fixture()
def button_path():
    return chain(
        node("layout"),
        node("div", 1, class_="panel wide"),
        node("button", 2, "Submit", id="submit-btn", class_="btn primary", type="submit", data_testid="go"),
    )
