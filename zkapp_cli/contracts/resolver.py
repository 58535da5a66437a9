"""
Decide which contract a deploy alias ships, and remember the decision.

Policy, first match wins:

1. the alias already names a `smartContract` in config.json -> use it as is;
2. the build holds exactly one contract -> use it;
3. the build holds two or more -> ask the operator to pick one;
4. the build holds none -> NoContractsFound.

The choice is written back to config.json the first time it is made, so the
same alias never asks twice.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import ProjectConfig
from ..errors import NoContractsFound
from ..prompts import Prompter, select
from .discovery import DiscoveredContract

log = logging.getLogger(__name__)

__all__ = ["ResolutionSource", "Resolution", "resolve_contract", "persist_choice"]


class ResolutionSource(str, Enum):
    CONFIG = "config"
    SINGLE = "single"
    SELECTED = "selected"


@dataclass(frozen=True)
class Resolution:
    name: str
    source: ResolutionSource
    # file that declares the contract; None when only config.json names it
    path: Optional[Path] = None


def _choice_labels(contracts: Sequence[DiscoveredContract], root: Path) -> List[str]:
    counts = Counter(c.name for c in contracts)
    labels: List[str] = []
    for c in contracts:
        if counts[c.name] > 1:
            try:
                where = c.path.relative_to(root)
            except ValueError:
                where = c.path
            labels.append(f"{c.name} ({where})")
        else:
            labels.append(c.name)
    return labels


def resolve_contract(
    config: ProjectConfig,
    alias: str,
    contracts: Sequence[DiscoveredContract],
    prompter: Prompter,
    *,
    pattern: str = "build/**/*.py",
) -> Resolution:
    """
    Resolve exactly one contract name for `alias`. Raises NoContractsFound or
    SelectionCancelled; never touches config.json (see `persist_choice`).
    """
    target = config.get_alias(alias)
    if target.smart_contract:
        return Resolution(target.smart_contract, ResolutionSource.CONFIG)
    if len(contracts) == 1:
        return Resolution(contracts[0].name, ResolutionSource.SINGLE, contracts[0].path)
    if not contracts:
        raise NoContractsFound(pattern)

    idx = select(
        prompter,
        "Choose smart contract to deploy",
        _choice_labels(contracts, config.root),
    )
    return Resolution(contracts[idx].name, ResolutionSource.SELECTED, contracts[idx].path)


def persist_choice(config: ProjectConfig, alias: str, name: str) -> bool:
    """Store `name` for `alias` in config.json; no-op when already stored."""
    changed = config.set_smart_contract(alias, name)
    if changed:
        log.info("config.json: alias %r now deploys %r", alias, name)
    return changed
