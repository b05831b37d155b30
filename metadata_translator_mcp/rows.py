"""Row types for the flattened translation grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TranslatedProperty(str, Enum):
    CAPTION = "Caption"
    DESCRIPTION = "Description"
    DISPLAY_FOLDER = "DisplayFolder"


class ObjectType(str, Enum):
    MODEL = "Model"
    TABLE = "Table"
    COLUMN = "Column"
    MEASURE = "Measure"
    HIERARCHY = "Hierarchy"
    LEVEL = "Level"


@dataclass(frozen=True)
class ObjectRef:
    """Handle to a metadata object in the live model.

    The row never holds the TOM object itself; ``tom.resolve_object`` turns
    the handle back into one when translations are written.
    """

    object_type: ObjectType
    table: str = ""
    name: str = ""
    hierarchy: str = ""

    @property
    def path(self) -> str:
        if self.object_type == ObjectType.MODEL:
            return "Model"
        parts = [self.object_type.value, self.table]
        if self.object_type == ObjectType.LEVEL:
            parts.append(self.hierarchy)
        if self.object_type != ObjectType.TABLE:
            parts.append(self.name)
        return ".".join(parts)


@dataclass(frozen=True)
class MetadataObjectContainer:
    refs: tuple[ObjectRef, ...]
    property: TranslatedProperty

    @property
    def path(self) -> str:
        return self.refs[0].path


@dataclass
class TranslationRow:
    """One grid row: the object/property pair plus a value per culture."""

    container: MetadataObjectContainer
    values: dict[str, str] = field(default_factory=dict)

    @property
    def property(self) -> TranslatedProperty:
        return self.container.property

    def get(self, culture: str) -> str:
        return self.values.get(culture) or ""

    def set(self, culture: str, value: str, overwrite: bool = True) -> bool:
        """Write ``value`` unless a translation exists and overwrite is off."""
        if self.get(culture) and not overwrite:
            return False
        self.values[culture] = value or ""
        return True

    def to_dict(self, cultures: list[str]) -> dict:
        return {
            "object": self.container.path,
            "property": self.property.value,
            **{c: self.get(c) for c in cultures},
        }


@dataclass(frozen=True)
class CsvRow:
    type: str
    original: str
    translation: str
