from __future__ import annotations

from dataclasses import dataclass

from selenium.webdriver.common.by import By

from selfheal.core.exceptions import LocatorFormatError

_BY_STRATEGIES = {
    value
    for name, value in vars(By).items()
    if name.isupper() and isinstance(value, str)
}


def parse_locator(text: str) -> tuple[str, str]:
    """Splits ``"<type>: <value>"`` on the first colon."""

    locator_type, separator, value = text.partition(":")
    if not separator:
        raise LocatorFormatError(f"Locator '{text}' has no '<type>: <value>' separator")
    return locator_type.strip(), value.strip()


def stable_hash(text: str) -> int:
    """32-bit signed string hash that does not change between interpreter runs."""

    result = 0
    for char in text:
        result = (31 * result + ord(char)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result


@dataclass(frozen=True, slots=True)
class Locator:
    type: str
    value: str

    @classmethod
    def parse(cls, text: str) -> Locator:
        locator_type, value = parse_locator(text)
        return cls(type=locator_type, value=value)

    @classmethod
    def from_by(cls, by: tuple[str, str]) -> Locator:
        strategy, value = by
        return cls(type=strategy, value=value)

    def to_by(self) -> tuple[str, str]:
        if self.type not in _BY_STRATEGIES:
            raise LocatorFormatError(f"Unsupported locator strategy: {self.type}")
        return self.type, self.value

    def __str__(self) -> str:
        return f"{self.type}: {self.value}"

    def __hash__(self) -> int:
        return stable_hash(str(self))


def locator_hash(locator: object) -> int:
    """Hash used to address stored paths.

    ``Locator`` hashes are already stable. Other objects, such as Selenium
    ``(by, value)`` tuples, are hashed through their locator string so the
    result survives interpreter restarts.
    """

    if isinstance(locator, tuple) and len(locator) == 2:
        locator = Locator.from_by(locator)
    return stable_hash(str(locator))
