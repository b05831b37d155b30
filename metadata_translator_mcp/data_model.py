"""A connected model's translation grid: load, import, export, commit."""

from __future__ import annotations

import re
from pathlib import Path

from . import csv_io, resx_io
from .exceptions import NoResxMatchesError, UnsupportedLanguageError
from .flattener import FlattenedRows, flatten
from .languages import LanguageRegistry
from .logging_config import get_logger
from .merge import apply_translations
from .rows import TranslatedProperty, TranslationRow
from .tom import resolve_object, set_translation, to_tom_property

logger = get_logger(__name__)

APP_TAG = "__MT"

_CONN_PAIR_RE = re.compile(r"([^=;]*)=([^=;]*)")


def parse_connection_string(connection_string: str) -> tuple[str, str]:
    """Return (data source, initial catalog) from a connection string."""
    server = database = ""
    for match in _CONN_PAIR_RE.finditer(connection_string):
        key = match.group(1).strip().lower()
        if key == "data source":
            server = match.group(2).strip()
        elif key == "initial catalog":
            database = match.group(2).strip()
    return server, database


class DataModel:
    def __init__(
        self,
        model,
        server_name: str = "",
        database_name: str = "",
        languages: LanguageRegistry | None = None,
        server=None,
    ):
        self.model = model
        self.server = server
        self.server_name = server_name
        self.database_name = database_name
        self.languages = languages if languages is not None else LanguageRegistry.load()
        self.default_culture: str = model.Culture
        self.rows: FlattenedRows = flatten(model, self.default_culture)
        self.languages.initialize(self.culture_names)

    @classmethod
    def connect(cls, server_name: str, database_name: str, languages: LanguageRegistry | None = None) -> "DataModel":
        """Connect by server and database name, the way external tools reach Power BI Desktop."""
        return cls._open(f"Data Source={server_name}", server_name, database_name, languages)

    @classmethod
    def connect_with_connection_string(
        cls, connection_string: str, languages: LanguageRegistry | None = None
    ) -> "DataModel":
        """Connect with a full connection string (credentials and all) for online datasets."""
        server_name, database_name = parse_connection_string(connection_string)
        if not database_name:
            raise ValueError("Connection string has no 'Initial Catalog'.")
        return cls._open(connection_string, server_name, database_name, languages)

    @classmethod
    def _open(cls, connection_string, server_name, database_name, languages) -> "DataModel":
        from Microsoft.AnalysisServices.Tabular import Server  # type: ignore

        server = Server()
        server.Connect(connection_string)

        db = server.Databases.FindByName(database_name)
        if db is None:
            server.Disconnect()
            raise RuntimeError(f"Dataset '{database_name}' not found on '{server_name}'.")

        logger.info("Connected to %s / %s", server_name, database_name)
        return cls(db.Model, server_name, db.Name, languages, server=server)

    def disconnect(self) -> None:
        if self.server is not None:
            self.server.Disconnect()
            self.server = None

    # ------------------------------------------------------------------
    # Grid
    # ------------------------------------------------------------------

    @property
    def culture_names(self) -> list[str]:
        """Model cultures with the default culture first."""
        names = [self.default_culture]
        names.extend(c.Name for c in self.model.Cultures if c.Name != self.default_culture)
        return names

    @property
    def captions(self) -> list[TranslationRow]:
        return self.rows.captions

    @property
    def descriptions(self) -> list[TranslationRow]:
        return self.rows.descriptions

    @property
    def display_folders(self) -> list[TranslationRow]:
        return self.rows.display_folders

    def all_rows(self) -> list[TranslationRow]:
        return self.rows.all_rows()

    def reload(self) -> None:
        """Re-read the grid and language flags from the model, discarding unsaved edits."""
        self.default_culture = self.model.Culture
        self.rows = flatten(self.model, self.default_culture)
        self.languages.initialize(self.culture_names)

    @property
    def target_cultures(self) -> list[str]:
        return [lang.language_tag for lang in self.languages.selected() if not lang.is_model_default]

    @property
    def grid_cultures(self) -> list[str]:
        return [self.default_culture, *self.target_cultures]

    def set_translation(self, prop: TranslatedProperty, index: int, culture: str, value: str) -> TranslationRow:
        """Edit a single grid cell; the default culture is read-only."""
        if culture.lower() == self.default_culture.lower():
            raise ValueError("The model default culture cannot be edited here.")
        language = self._language_tag(culture)
        rows = self.rows.for_property(prop)
        if not 0 <= index < len(rows):
            raise IndexError(f"No {prop.value} row at index {index} (have {len(rows)}).")
        self.languages.set_flags(language, True)
        rows[index].set(language, value)
        return rows[index]

    def _language_tag(self, culture: str) -> str:
        language = self.languages.get(culture)
        if language is None:
            raise UnsupportedLanguageError(culture)
        return language.language_tag

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_csv(self, folder: str | Path) -> list[Path]:
        """Write ``<culture>.csv`` for each selected non-default language."""
        rows = self.all_rows()
        if not rows:
            return []

        out_dir = Path(folder)
        out_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for culture in self.target_cultures:
            path = out_dir / f"{culture}.csv"
            count = csv_io.write_csv(path, rows, self.default_culture, culture)
            logger.info("Exported %d row(s) to %s", count, path)
            written.append(path)
        return written

    def export_resx(self, folder: str | Path, key_prefix: str = "") -> list[Path]:
        """Write ``<culture>.resx`` for each selected language, default included."""
        rows = self.all_rows()
        if not rows:
            return []

        out_dir = Path(folder)
        out_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for culture in self.grid_cultures:
            path = out_dir / f"{culture}.resx"
            count = resx_io.write_resx(path, rows, culture, key_prefix)
            logger.info("Exported %d resource(s) to %s", count, path)
            written.append(path)
        return written

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def _import_culture(self, path: Path, culture: str | None) -> str:
        culture = culture or path.stem
        if culture.lower() == self.default_culture.lower():
            raise ValueError(f"'{path.name}' targets the model default culture {self.default_culture}.")
        return self._language_tag(culture)

    def import_csv(
        self,
        file_path: str | Path,
        culture: str | None = None,
        overwrite: bool = False,
        fallback_to_default: bool = False,
    ) -> int:
        """Merge a CSV into the grid. The culture defaults to the file name."""
        path = Path(file_path)
        lcid = self._import_culture(path, culture)
        csv_rows = csv_io.read_csv(path, fallback_to_default)
        if not csv_rows:
            logger.info("Nothing to import from %s", path)
            return 0

        self.languages.set_flags(lcid, True)
        written = apply_translations(self.all_rows(), lcid, self.default_culture, csv_rows, overwrite)
        logger.info("Imported %d translation(s) for %s from %s", written, lcid, path)
        return written

    def import_resx(
        self,
        file_path: str | Path,
        reference_path: str | Path | None = None,
        culture: str | None = None,
        overwrite: bool = False,
        fallback_to_default: bool = False,
    ) -> int:
        """Merge a translated resx, keyed against the default-culture resx.

        ``reference_path`` defaults to ``<default culture>.resx`` next to
        the translated file.
        """
        path = Path(file_path)
        reference = Path(reference_path) if reference_path else path.with_name(f"{self.default_culture}.resx")
        lcid = self._import_culture(path, culture)

        pairs = resx_io.pair_resx(resx_io.read_resx(path), resx_io.read_resx(reference), fallback_to_default)
        if not pairs:
            raise NoResxMatchesError(str(path), str(reference))

        self.languages.set_flags(lcid, True)
        written = apply_translations(self.all_rows(), lcid, self.default_culture, pairs, overwrite)
        logger.info("Imported %d translation(s) for %s from %s", written, lcid, path)
        return written

    def import_files(
        self,
        file_paths: list[str | Path],
        overwrite: bool = False,
        fallback_to_default: bool = False,
    ) -> dict[str, int]:
        """Import several .csv/.resx files, each named after its culture."""
        results: dict[str, int] = {}
        for file_path in file_paths:
            path = Path(file_path)
            suffix = path.suffix.lower()
            if suffix == ".csv":
                results[str(path)] = self.import_csv(path, None, overwrite, fallback_to_default)
            elif suffix == ".resx":
                results[str(path)] = self.import_resx(path, None, None, overwrite, fallback_to_default)
            else:
                raise ValueError(f"Unsupported file type: '{path.name}'. Use .csv or .resx.")
        return results

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def update(self) -> dict:
        """Push the grid into the model's cultures and save."""
        from Microsoft.AnalysisServices.Tabular import Annotation, Culture  # type: ignore

        selected = self.grid_cultures
        selected_lower = {name.lower() for name in selected}
        cultures = self.model.Cultures

        removed = []
        for name in self.culture_names[1:]:
            if name.lower() not in selected_lower:
                existing = cultures.Find(name)
                if existing is not None:
                    cultures.Remove(existing)
                    removed.append(name)

        added = []
        for name in selected:
            if cultures.Find(name) is None:
                new_culture = Culture()
                new_culture.Name = name
                cultures.Add(new_culture)
                added.append(name)

        targets = [(name, cultures.Find(name)) for name in self.target_cultures]
        resolved: dict = {}
        written = 0
        for row in self.all_rows():
            tom_prop = to_tom_property(row.property)
            for ref in row.container.refs:
                if ref not in resolved:
                    resolved[ref] = resolve_object(self.model, ref)
                for name, culture in targets:
                    set_translation(culture, resolved[ref], tom_prop, row.get(name))
                    written += 1

        if self.model.Annotations.Find(APP_TAG) is None:
            annotation = Annotation()
            annotation.Name = APP_TAG
            annotation.Value = "1"
            self.model.Annotations.Add(annotation)

        self.model.SaveChanges()
        logger.info(
            "Saved translations for %s (added %s, removed %s)",
            ", ".join(self.target_cultures) or "no cultures",
            added or "none",
            removed or "none",
        )

        return {
            "cultures": self.target_cultures,
            "added_cultures": added,
            "removed_cultures": removed,
            "translations_written": written,
        }
