from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from selfheal.config.schema import HealingConfig
from selfheal.core.exceptions import HealingError, StorageError
from selfheal.core.locator import Locator
from selfheal.core.metadata import CallerInfo, HealOutcome, Scored
from selfheal.core.node import Node, Snapshot
from selfheal.core.selector import create_xpath
from selfheal.mapper.assembler import build_request, to_locator
from selfheal.storage.path_storage import FileSystemPathStorage

log = logging.getLogger(__name__)


class CandidateScorer(Protocol):
    """Ranks nodes of the current page against a stored path, best first."""

    def rank(self, path: Sequence[Node], snapshot: Snapshot) -> list[Scored[Node]]:
        ...


class Healer:
    """Coordinates stored history, candidate ranking, selector rebuilding and reporting."""

    def __init__(
        self,
        storage: FileSystemPathStorage,
        scorer: CandidateScorer,
        config: HealingConfig | None = None,
    ) -> None:
        self.storage = storage
        self.scorer = scorer
        self.config = config or HealingConfig()

    def remember(self, locator: Any, context: str, node: Node) -> bool:
        """Stores the path of an element the original locator still finds."""

        return self.storage.persist_last_valid_path(to_locator(locator), context, node.path())

    def heal(
        self,
        locator: Any,
        context: str,
        snapshot: Snapshot,
        *,
        page_content: str = "",
        screenshot: bytes = b"",
        caller: CallerInfo | None = None,
    ) -> HealOutcome:
        original = to_locator(locator)
        if not self.config.heal_enabled:
            raise HealingError(f"Healing is disabled; cannot recover {original}")

        path = self.storage.get_last_valid_path(original, context)
        if not path:
            raise HealingError(f"No stored path for {original} in context '{context}'")

        ranked = [
            item
            for item in self.scorer.rank(path, snapshot)
            if item.score >= self.config.score_cap
        ][: self.config.recovery_tries]
        if not ranked:
            raise HealingError(
                f"No candidate for {original} reached the score cap {self.config.score_cap}"
            )

        candidates = [
            Scored(value=Locator("xpath", create_xpath(item.value)), score=item.score)
            for item in ranked
        ]
        selected = candidates[0]
        node = ranked[0].value
        persisted = self.storage.persist_last_valid_path(original, context, node.path())
        report = build_request(
            original,
            caller,
            node_path=path,
            page_content=page_content,
            results=candidates,
            selected=selected,
            screenshot=screenshot,
        )
        report_saved = True
        try:
            self.storage.save_report(report)
        except StorageError:
            log.exception("Could not save the healing report for %s", original)
            report_saved = False
        log.info("Healed %s -> %s (score %.3f)", original, selected.value, selected.score)
        return HealOutcome(
            original=original,
            healed=selected.value,
            score=selected.score,
            node=node,
            candidates=candidates,
            path_persisted=persisted,
            report_saved=report_saved,
        )
