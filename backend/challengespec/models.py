"""
Challenge models.

Pydantic models for a decoded challenge document: per-language string
tables, typed mission objectives and score tables. The builders at the
bottom of this module are the only place where the raw document is read;
everything downstream works on these models.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, Field, model_validator


def normalize_value(value: Any) -> Any:
    """
    Normalize a decoded scalar to the string form used by the score tables.

    YAML 1.1 turns bare yes/no into booleans and numeric ranges decode as
    integers, while score tables compare plain strings.
    """
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value.strip()
    return value


ValueStr = Annotated[str, BeforeValidator(normalize_value)]


class ObjectiveType(str, Enum):
    """Kinds of mission objectives."""

    NUMBER = "number"
    YESNO = "yesno"
    ENUM = "enum"


class StringEntry(BaseModel):
    """One display string in a language table."""

    value: str
    definition_count: int = 1
    used: bool = False


class StringTable(BaseModel):
    """All display strings declared for one language."""

    language: ValueStr
    entries: Dict[str, StringEntry] = Field(default_factory=dict)

    def define(self, string_id: str, text: str) -> None:
        """Declare a string; repeated ids only bump the definition count."""
        entry = self.entries.get(string_id)
        if entry is None:
            self.entries[string_id] = StringEntry(value=text.strip())
        else:
            entry.definition_count += 1

    def has(self, string_id: str) -> bool:
        return string_id in self.entries

    def mark_used(self, string_id: str) -> None:
        self.entries[string_id].used = True

    @classmethod
    def from_document(cls, block: Dict[str, Any]) -> "StringTable":
        """Build a table from a ``{language, strings: [{id, text}]}`` block."""
        table = cls(language=block["language"])
        for item in block.get("strings") or []:
            table.define(normalize_value(item["id"]), str(item.get("text") or ""))
        return table


class EnumOption(BaseModel):
    """A named choice of an enum objective."""

    name: ValueStr
    description: ValueStr


class ObjectiveBase(BaseModel):
    """Fields shared by every objective kind."""

    id: ValueStr
    description: ValueStr
    default: Optional[ValueStr] = None
    used: bool = False


class NumberObjective(ObjectiveBase):
    """Integer objective with an inclusive range."""

    type: Literal["number"] = "number"
    min: int
    max: int


class YesNoObjective(ObjectiveBase):
    """Objective answered with yes or no."""

    type: Literal["yesno"] = "yesno"


class EnumObjective(ObjectiveBase):
    """Objective with a fixed list of named options."""

    type: Literal["enum"] = "enum"
    options: List[EnumOption] = Field(min_length=1)


AnyObjective = Union[NumberObjective, YesNoObjective, EnumObjective]
Objective = Annotated[AnyObjective, Field(discriminator="type")]


class ScoreCase(BaseModel):
    """One row of a score table: a value tuple and its outcome."""

    index_refs: List[ValueStr]
    points: Optional[float] = None
    percentage: Optional[float] = None
    error: Optional[ValueStr] = None

    @property
    def has_outcome(self) -> bool:
        return (
            self.points is not None
            or self.percentage is not None
            or self.error is not None
        )


class ScoreTable(BaseModel):
    """Maps every combination of index values to exactly one case."""

    indexes: List[ValueStr]
    cases: List[ScoreCase] = Field(min_length=1)
    has_percentage: bool = False

    @model_validator(mode="after")
    def detect_percentage(self) -> "ScoreTable":
        if any(case.percentage is not None for case in self.cases):
            self.has_percentage = True
        return self


class Mission(BaseModel):
    """A mission with its objectives and score tables."""

    name: ValueStr
    description: ValueStr
    objectives: List[Objective] = Field(default_factory=list)
    scores: List[ScoreTable] = Field(min_length=1)

    @property
    def has_percentage(self) -> bool:
        return any(score.has_percentage for score in self.scores)

    def objectives_by_id(self) -> Dict[str, AnyObjective]:
        """Objective lookup by id; the first declaration of an id wins."""
        mapping: Dict[str, AnyObjective] = {}
        for objective in self.objectives:
            mapping.setdefault(objective.id, objective)
        return mapping


def build_string_tables(document: Dict[str, Any]) -> List[StringTable]:
    """
    Build the string tables of a decoded challenge document.

    Raises:
        KeyError: If a block lacks its language or a string lacks its id.
        ValueError: If the document declares no string tables.
    """
    blocks = document.get("strings") or []
    if not blocks:
        raise ValueError("challenge declares no string tables")
    return [StringTable.from_document(block) for block in blocks]


def build_mission(block: Dict[str, Any]) -> Mission:
    """Build one mission model; raises pydantic.ValidationError if malformed."""
    return Mission.model_validate(block)



def mission_string_ids(block: Any) -> List[str]:
    """
    Best-effort list of string ids a raw mission block references.

    Used for missions that fail to build, so the strings they point at are
    not reported as unused. Anything that is not shaped as expected is
    skipped silently.
    """
    if not isinstance(block, dict):
        return []

    ids = [block.get("name"), block.get("description")]
    for objective in _dicts(block.get("objectives")):
        ids.append(objective.get("description"))
        for option in _dicts(objective.get("options")):
            ids.append(option.get("description"))
    for score in _dicts(block.get("scores")):
        for case in _dicts(score.get("cases")):
            ids.append(case.get("error"))

    normalized = (normalize_value(i) for i in ids)
    return [i for i in normalized if isinstance(i, str) and i]


def _dicts(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
