"""Reading and writing .NET .resx resource files."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from .logging_config import get_logger
from .rows import CsvRow, MetadataObjectContainer, TranslationRow

logger = get_logger(__name__)

_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

_RESHEADERS = {
    "resmimetype": "text/microsoft-resx",
    "version": "2.0",
    "reader": "System.Resources.ResXResourceReader, System.Windows.Forms, Version=4.0.0.0, "
    "Culture=neutral, PublicKeyToken=b77a5c561934e089",
    "writer": "System.Resources.ResXResourceWriter, System.Windows.Forms, Version=4.0.0.0, "
    "Culture=neutral, PublicKeyToken=b77a5c561934e089",
}


def resource_key(prefix: str, container: MetadataObjectContainer) -> str:
    key = f"{container.property.value}.{container.path}"
    return f"{prefix}.{key}" if prefix else key


def write_resx(path: str | Path, rows: Iterable[TranslationRow], culture: str, key_prefix: str = "") -> int:
    """Write one string resource per row; returns how many were written."""
    root = ET.Element("root")
    for name, value in _RESHEADERS.items():
        header = ET.SubElement(root, "resheader", name=name)
        ET.SubElement(header, "value").text = value

    seen: set[str] = set()
    for row in rows:
        key = resource_key(key_prefix, row.container)
        if key in seen:
            logger.warning("Duplicate resource key '%s' in %s, keeping the first.", key, path)
            continue
        seen.add(key)
        data = ET.SubElement(root, "data", name=key)
        data.set(_XML_SPACE, "preserve")
        ET.SubElement(data, "value").text = row.get(culture)

    tree = ET.ElementTree(root)
    ET.indent(tree)
    tree.write(path, encoding="utf-8", xml_declaration=True)
    return len(seen)


def read_resx(path: str | Path) -> dict[str, str]:
    """Return the string resources of a .resx file in document order."""
    root = ET.parse(path).getroot()
    entries: dict[str, str] = {}
    for data in root.findall("data"):
        name = data.get("name")
        if not name or data.get("type"):
            continue
        value = data.find("value")
        entries[name] = (value.text or "") if value is not None else ""
    return entries


def pair_resx(
    translated: dict[str, str],
    reference: dict[str, str],
    fallback_to_default: bool = False,
) -> list[CsvRow]:
    """Join reference (default culture) and translated resources by key."""
    pairs: list[CsvRow] = []
    for key, original in reference.items():
        translation = translated.get(key, "")
        if fallback_to_default and not translation:
            translation = original
        if original and translation:
            pairs.append(CsvRow("", original, translation))
    return pairs
