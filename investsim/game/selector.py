"""Pick the optional asset categories for one run."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from investsim.game import catalog
from investsim.game.categories import CATEGORY_SPECS

logger = logging.getLogger(__name__)

SELECTION_SIZE = 5


@dataclass(frozen=True)
class CategorySelection:
    key: str
    name: str


def _selection(key: str) -> CategorySelection:
    return CategorySelection(key=key, name=CATEGORY_SPECS[key].name)


def select_categories(rng: random.Random | None = None,
                      size: int = SELECTION_SIZE) -> list[CategorySelection]:
    """Choose the run's optional unlockable categories.

    Mutual funds and index funds are mutually exclusive (fair coin). Stocks
    are always in; the remaining candidates are shuffled and the first ones
    fill the selection up to ``size``. Savings and fixed deposits are not
    part of the draw, they unlock unconditionally.

    Stocks are pinned rather than shuffled in with the other six candidates,
    so every run has an equity roster whatever the draw.
    """
    rng = rng or random.Random()

    fund = catalog.MUTUAL_FUNDS if rng.random() < 0.5 else catalog.INDEX_FUNDS
    others = [fund, catalog.GOLD, catalog.COMMODITIES, catalog.CRYPTO,
              catalog.REIT, catalog.FOREX]
    rng.shuffle(others)

    keys = [catalog.STOCKS] + others[:max(0, size - 1)]
    selection = [_selection(k) for k in keys]
    logger.info("Selected categories: %s", ", ".join(s.key for s in selection))
    return selection
