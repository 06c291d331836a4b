from __future__ import annotations

import pytest
from selenium.webdriver.common.by import By

from selfheal.core.exceptions import LocatorFormatError
from selfheal.core.locator import Locator
from selfheal.core.metadata import CallerInfo, Scored
from selfheal.mapper.assembler import (
    build_request,
    build_result,
    build_results,
    locators_to_dto,
    to_locator,
)


class ByLike:
    """Stands in for a driver locator whose string form is '<type>: <value>'."""

    def __init__(self, text: str) -> None:
        self.text = text

    def __str__(self) -> str:
        return self.text


def test_to_locator_accepts_native_representations():
    assert to_locator((By.CSS_SELECTOR, "#login")) == Locator("css selector", "#login")
    assert to_locator(ByLike("xpath: //div[@class='x']")) == Locator("xpath", "//div[@class='x']")
    same = Locator("id", "x")
    assert to_locator(same) is same


def test_malformed_locator_is_rejected():
    with pytest.raises(LocatorFormatError):
        build_request(ByLike("no-colon-here"))


def test_minimal_request_only_has_type_and_value():
    dto = build_request(ByLike("id: login-button"))
    assert dto.type == "id"
    assert dto.locator == "login-button"
    assert dto.class_name is None
    assert dto.node_path is None
    assert dto.results is None
    assert dto.used_result is None
    assert dto.screenshot is None


def test_full_request_carries_every_part(button_path):
    results = [Scored(Locator("xpath", "//button[@id = 'submit-btn']"), 0.91), Scored((By.ID, "other"), 0.4)]
    dto = build_request(
        Locator("id", "submit"),
        CallerInfo(class_name="LoginTest", method_name="test_submit"),
        node_path=button_path,
        page_content="<html></html>",
        results=results,
        selected=results[0],
        screenshot=b"\x89PNG",
    )
    assert dto.class_name == "LoginTest"
    assert dto.method_name == "test_submit"
    assert [item["tag"] for item in dto.node_path] == ["layout", "div", "button"]
    assert dto.node_path[0]["type"] == "node"
    assert dto.page_content == "<html></html>"
    assert [item.score for item in dto.results] == [0.91, 0.4]
    assert dto.results[1].locator.type == "id"
    assert dto.used_result.locator.value == "//button[@id = 'submit-btn']"
    assert dto.screenshot == b"\x89PNG"

    payload = dto.model_dump(by_alias=True)
    assert payload["className"] == "LoginTest"
    assert payload["usedResult"]["score"] == 0.91


def test_result_dto_carries_score_unchanged():
    result = build_result(Scored(ByLike("name: q"), 0.123456))
    assert result.locator.value == "q"
    assert result.locator.type == "name"
    assert result.score == 0.123456
    assert build_results([]) == []


def test_locators_to_dto_keeps_order():
    dtos = locators_to_dto([Locator("id", "a"), (By.NAME, "b")])
    assert [(item.type, item.value) for item in dtos] == [("id", "a"), ("name", "b")]


class LoginTest:
    def test_submit(self):
        return CallerInfo.from_stack(skip=0)


def test_caller_info_reads_calling_frame():
    caller = LoginTest().test_submit()
    assert caller == CallerInfo(class_name="LoginTest", method_name="test_submit")
