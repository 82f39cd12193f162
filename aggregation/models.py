# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Core data model: tagged rules and the corpus they are collected into."""

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Dict, Iterable, Iterator, List, Tuple

import pandas as pd

logger = logging.getLogger(__name__)


class RuleFormat(str, Enum):
    """Source format of the rule files being analyzed."""

    SIGMA = "sigma"
    YARA = "yara"
    CSIEM = "csiem"


@dataclass(frozen=True)
class TaggedEntity:
    """A detection rule reduced to its name and tags."""

    name: str
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, object]:
        """Return the record in the JSON shape used by the list output."""
        return {"Name": self.name, "Tags": list(self.tags)}


class TagCorpus:
    """Mapping of rule name to tag list for one invocation.

    Rules are keyed by name. Adding a rule whose name is already present
    replaces its tags (last write wins) while the rule keeps the position
    where it was first seen, so traversal order stays stable.
    """

    def __init__(self, entities: Iterable[TaggedEntity] = ()):
        self._tags: Dict[str, List[str]] = {}
        for entity in entities:
            self.add(entity)

    def add(self, entity: TaggedEntity) -> None:
        if entity.name in self._tags:
            logger.debug("Rule '%s' seen again, replacing its tags", entity.name)
        self._tags[entity.name] = list(entity.tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __getitem__(self, name: str) -> List[str]:
        return list(self._tags[name])

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for name, tags in self._tags.items():
            yield name, list(tags)

    def entities(self) -> List[TaggedEntity]:
        return [TaggedEntity(name, tuple(tags)) for name, tags in self._tags.items()]

    @property
    def total_tags(self) -> int:
        """Number of tag occurrences across all rules."""
        return sum(len(tags) for tags in self._tags.values())

    def pairs(self) -> Iterator[Tuple[str, str]]:
        """Yield one (rule, tag) pair per tag occurrence, in corpus order."""
        for name, tags in self._tags.items():
            for tag in tags:
                yield name, tag

    def to_dataframe(self) -> pd.DataFrame:
        """Return the corpus in long form with columns: rule, tag."""
        return pd.DataFrame(list(self.pairs()), columns=["rule", "tag"])

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(tags) for name, tags in self._tags.items()}
