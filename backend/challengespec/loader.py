"""
Challenge file loading.

Reads a challenge file and decodes it into the plain document shape the
model builders expect:

    strings:
      - language: en
        strings: [{id: ..., text: ...}, ...]
    missions:
      - name: ...
        description: ...
        objectives: [{type: number|yesno|enum, id: ..., ...}, ...]
        scores:
          - indexes: [objective ids]
            cases: [{index_refs: [...], points|percentage|error: ...}, ...]

YAML and JSON files are expected to already have this shape. XML files use
the challenge XML format and are translated element by element.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from lxml import etree

LOGGER = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}
XML_SUFFIXES = {".xml"}

OBJECTIVE_ELEMENTS = {
    "objective-number": "number",
    "objective-yesno": "yesno",
    "objective-enum": "enum",
}


class ChallengeLoadError(Exception):
    """Raised when a challenge file cannot be read or decoded."""


def load_challenge(path: Path, schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a challenge file into a decoded document.

    Args:
        path: Path to a .yaml, .yml, .json or .xml challenge file.
        schema_path: Optional local XSD to validate XML files against.

    Returns:
        The decoded document.

    Raises:
        ChallengeLoadError: If the file is missing, unparsable, empty or
            does not match the schema.
    """
    path = Path(path)
    if not path.exists():
        raise ChallengeLoadError(f"File not found: {path}")

    suffix = path.suffix.lower()
    LOGGER.info("Reading %s...", path)

    if suffix in YAML_SUFFIXES:
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ChallengeLoadError(f"YAML parse error: {e}") from e
    elif suffix in JSON_SUFFIXES:
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise ChallengeLoadError(f"JSON parse error: {e}") from e
    elif suffix in XML_SUFFIXES:
        document = load_challenge_xml(path, schema_path)
    else:
        raise ChallengeLoadError(f"Unsupported challenge file type: {path.suffix or path.name}")

    if document is None:
        raise ChallengeLoadError("File is empty")
    if not isinstance(document, dict):
        raise ChallengeLoadError("Challenge document must be a mapping")

    return document


def load_challenge_xml(path: Path, schema_path: Optional[Path] = None) -> Dict[str, Any]:
    """Parse a challenge XML file, optionally validating it first."""
    try:
        tree = etree.parse(str(path))
    except etree.XMLSyntaxError as e:
        raise ChallengeLoadError(f"XML parse error: {e}") from e

    if schema_path is not None:
        validate_xml(tree, Path(schema_path))

    return decode_challenge_element(tree.getroot())


def validate_xml(tree: Any, schema_path: Path) -> None:
    """Validate a parsed XML tree against a local XSD."""
    try:
        schema = etree.XMLSchema(etree.parse(str(schema_path)))
    except (OSError, etree.XMLSyntaxError, etree.XMLSchemaParseError) as e:
        raise ChallengeLoadError(f"Can not load schema {schema_path}: {e}") from e

    if not schema.validate(tree):
        problems = "; ".join(
            f"line {entry.line}: {entry.message}" for entry in schema.error_log
        )
        raise ChallengeLoadError(f"Challenge XML does not validate: {problems}")


def _local(element: Any) -> str:
    return etree.QName(element).localname


def _children(element: Any, name: str) -> List[Any]:
    return [
        child for child in element
        if isinstance(child.tag, str) and _local(child) == name
    ]


def _child(element: Any, name: str) -> Optional[Any]:
    children = _children(element, name)
    return children[0] if children else None


def decode_challenge_element(root: Any) -> Dict[str, Any]:
    """Translate a challenge XML root element into a decoded document."""
    return {
        "strings": [_decode_strings(block) for block in _children(root, "strings")],
        "missions": [_decode_mission(block) for block in _children(root, "mission")],
    }


def _decode_strings(block: Any) -> Dict[str, Any]:
    return {
        "language": block.get("language"),
        "strings": [
            {"id": string.get("id"), "text": string.text or ""}
            for string in _children(block, "string")
        ],
    }


def _decode_mission(block: Any) -> Dict[str, Any]:
    objectives = []
    for child in block:
        if not isinstance(child.tag, str):
            continue
        kind = OBJECTIVE_ELEMENTS.get(_local(child))
        if kind is not None:
            objectives.append(_decode_objective(kind, child))

    return {
        "name": block.get("name"),
        "description": block.get("description"),
        "objectives": objectives,
        "scores": [_decode_score(score) for score in _children(block, "score")],
    }


def _decode_objective(kind: str, element: Any) -> Dict[str, Any]:
    objective: Dict[str, Any] = {
        "type": kind,
        "id": element.get("id"),
        "description": element.get("description"),
    }
    if kind == "number":
        objective["min"] = element.get("min")
        objective["max"] = element.get("max")
    elif kind == "enum":
        objective["options"] = [
            {"name": option.get("name"), "description": option.get("description")}
            for option in _children(element, "option")
        ]
    if element.get("default") is not None:
        objective["default"] = element.get("default")
    return objective


def _decode_score(element: Any) -> Dict[str, Any]:
    indexes = _child(element, "indexes")
    cases = _child(element, "cases")
    return {
        "indexes": [
            index.get("objective") for index in _children(indexes, "index")
        ] if indexes is not None else [],
        "cases": [
            _decode_case(case) for case in _children(cases, "case")
        ] if cases is not None else [],
    }


def _decode_case(element: Any) -> Dict[str, Any]:
    case: Dict[str, Any] = {
        "index_refs": [ref.get("value") for ref in _children(element, "index-ref")],
    }
    points = _child(element, "points")
    if points is not None:
        case["points"] = points.get("amount")
    percentage = _child(element, "percentage")
    if percentage is not None:
        case["percentage"] = percentage.get("amount")
    error = _child(element, "error")
    if error is not None:
        case["error"] = error.get("message")
    return case
