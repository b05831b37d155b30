"""Walk a TOM model into flat caption/description/display-folder rows."""

from __future__ import annotations

from dataclasses import dataclass, field

from .rows import MetadataObjectContainer, ObjectRef, ObjectType, TranslatedProperty, TranslationRow
from .tom import get_translation, to_tom_property


@dataclass
class FlattenedRows:
    captions: list[TranslationRow] = field(default_factory=list)
    descriptions: list[TranslationRow] = field(default_factory=list)
    display_folders: list[TranslationRow] = field(default_factory=list)

    def all_rows(self) -> list[TranslationRow]:
        return [*self.captions, *self.descriptions, *self.display_folders]

    def for_property(self, prop: TranslatedProperty) -> list[TranslationRow]:
        return {
            TranslatedProperty.CAPTION: self.captions,
            TranslatedProperty.DESCRIPTION: self.descriptions,
            TranslatedProperty.DISPLAY_FOLDER: self.display_folders,
        }[prop]


class _Flattener:
    def __init__(self, model, default_culture: str):
        self.default_culture = default_culture
        self.cultures = [c for c in model.Cultures if c.Name != default_culture]
        self.props = {p: to_tom_property(p) for p in TranslatedProperty}
        self.result = FlattenedRows()
        self._folders: dict[str, int] = {}

    def _row(self, tom_obj, ref: ObjectRef, prop: TranslatedProperty, source: str) -> TranslationRow:
        values = {self.default_culture: source}
        for culture in self.cultures:
            values[culture.Name] = get_translation(culture, tom_obj, self.props[prop])
        return TranslationRow(MetadataObjectContainer((ref,), prop), values)

    def add(self, tom_obj, ref: ObjectRef, with_folder: bool = False) -> None:
        self.result.captions.append(self._row(tom_obj, ref, TranslatedProperty.CAPTION, tom_obj.Name))

        if tom_obj.Description:
            self.result.descriptions.append(
                self._row(tom_obj, ref, TranslatedProperty.DESCRIPTION, tom_obj.Description)
            )

        if with_folder and tom_obj.DisplayFolder:
            self._add_display_folder(tom_obj, ref, tom_obj.DisplayFolder)

    def _add_display_folder(self, tom_obj, ref: ObjectRef, folder: str) -> None:
        # Objects sharing a folder string share one row.
        rows = self.result.display_folders
        index = self._folders.get(folder)
        if index is None:
            self._folders[folder] = len(rows)
            rows.append(self._row(tom_obj, ref, TranslatedProperty.DISPLAY_FOLDER, folder))
            return

        row = rows[index]
        row.container = MetadataObjectContainer(row.container.refs + (ref,), row.container.property)
        for culture in self.cultures:
            if not row.get(culture.Name):
                row.values[culture.Name] = get_translation(culture, tom_obj, self.props[TranslatedProperty.DISPLAY_FOLDER])


def flatten(model, default_culture: str) -> FlattenedRows:
    """Flatten ``model`` in tree order.

    Model, then per table: columns (RowNumber skipped), measures,
    hierarchies each followed by their levels. Later imports rely on this
    order staying stable for an unchanged model.
    """
    walker = _Flattener(model, default_culture)
    walker.add(model, ObjectRef(ObjectType.MODEL))

    for table in model.Tables:
        t = table.Name
        walker.add(table, ObjectRef(ObjectType.TABLE, t, t))

        for column in table.Columns:
            if str(column.Type) == "RowNumber":
                continue
            walker.add(column, ObjectRef(ObjectType.COLUMN, t, column.Name), with_folder=True)

        for measure in table.Measures:
            walker.add(measure, ObjectRef(ObjectType.MEASURE, t, measure.Name), with_folder=True)

        for hierarchy in table.Hierarchies:
            walker.add(hierarchy, ObjectRef(ObjectType.HIERARCHY, t, hierarchy.Name), with_folder=True)
            for level in hierarchy.Levels:
                walker.add(level, ObjectRef(ObjectType.LEVEL, t, level.Name, hierarchy.Name))

    return walker.result
