"""MCP tools for languages, import/export and committing translations."""

from __future__ import annotations

from fastmcp import FastMCP

from .config import Settings
from .connection import require_connected
from .exceptions import UnsupportedLanguageError
from .rows import TranslatedProperty


def register_tools(mcp: FastMCP, settings: Settings) -> None:
    """Register all translation tools on the MCP server."""

    @mcp.tool()
    def list_languages(selected_only: bool = False) -> list[dict]:
        """List supported languages with their selected/model-default flags."""
        dm = require_connected()
        langs = dm.languages.selected() if selected_only else list(dm.languages)
        return [lang.to_dict() for lang in langs]

    @mcp.tool()
    def select_languages(language_tags: list[str], selected: bool = True) -> dict:
        """Select (or deselect) target languages, e.g. ['fr-FR', 'de-DE'].

        The model default culture always stays selected. Deselected cultures
        are removed from the model by apply_changes.
        """
        dm = require_connected()

        unknown = [tag for tag in language_tags if dm.languages.get(tag) is None]
        if unknown:
            raise UnsupportedLanguageError(", ".join(unknown))

        changed, refused = [], []
        for tag in language_tags:
            (changed if dm.languages.set_flags(tag, selected) else refused).append(tag)

        return {
            "changed": changed,
            "unchanged_default": refused,
            "selected_languages": dm.grid_cultures,
        }

    @mcp.tool()
    def deselect_all_languages() -> dict:
        """Deselect every language except the model default."""
        dm = require_connected()
        dm.languages.deselect_all()
        return {"selected_languages": dm.grid_cultures}

    @mcp.tool()
    def get_translation_rows(property_type: str = "Caption", culture: str = "") -> dict:
        """Get the grid rows for Caption, Description, or DisplayFolder.

        Each row has its object path, the default-culture text and one value
        per selected language (or just ``culture`` if given). Row indexes are
        what set_translation expects.
        """
        dm = require_connected()
        prop = _parse_property(property_type)
        cultures = [dm.default_culture, culture] if culture else dm.grid_cultures

        rows = dm.rows.for_property(prop)
        return {
            "property": prop.value,
            "cultures": cultures,
            "count": len(rows),
            "rows": [{"index": i, **row.to_dict(cultures)} for i, row in enumerate(rows)],
        }

    @mcp.tool()
    def set_translation(property_type: str, index: int, culture: str, value: str) -> dict:
        """Edit one translation cell in the grid (not saved until apply_changes)."""
        dm = require_connected()
        prop = _parse_property(property_type)
        row = dm.set_translation(prop, index, culture, value)
        return {"index": index, **row.to_dict([dm.default_culture, culture])}

    @mcp.tool()
    def export_csv(folder_path: str) -> dict:
        """Export one <culture>.csv per selected non-default language."""
        dm = require_connected()
        files = dm.export_csv(folder_path)
        return {"folder": folder_path, "files": [str(f) for f in files]}

    @mcp.tool()
    def export_resx(folder_path: str, key_prefix: str = "") -> dict:
        """Export one <culture>.resx per selected language, default culture included."""
        dm = require_connected()
        files = dm.export_resx(folder_path, key_prefix or settings.key_prefix)
        return {"folder": folder_path, "files": [str(f) for f in files]}

    @mcp.tool()
    def import_csv(
        file_path: str,
        culture: str = "",
        overwrite: bool = False,
        fallback_to_default: bool = False,
    ) -> dict:
        """Import translations from a CSV file (Type,Original,Translation).

        Args:
            file_path: CSV file; its name is the culture unless ``culture`` is given
            culture: Target culture (e.g. 'fr-FR')
            overwrite: Replace translations that already exist
            fallback_to_default: Use the original text where the translation is empty
        """
        dm = require_connected()
        written = dm.import_csv(file_path, culture or None, overwrite, fallback_to_default)
        return {"file": file_path, "translations_applied": written}

    @mcp.tool()
    def import_resx(
        file_path: str,
        reference_path: str = "",
        culture: str = "",
        overwrite: bool = False,
        fallback_to_default: bool = False,
    ) -> dict:
        """Import translations from a resx file matched against a default-culture resx.

        Args:
            file_path: Translated resx; its name is the culture unless ``culture`` is given
            reference_path: Default-culture resx; defaults to <default culture>.resx beside file_path
            culture: Target culture (e.g. 'fr-FR')
            overwrite: Replace translations that already exist
            fallback_to_default: Use the original text where the translation is empty
        """
        dm = require_connected()
        written = dm.import_resx(file_path, reference_path or None, culture or None, overwrite, fallback_to_default)
        return {"file": file_path, "translations_applied": written}

    @mcp.tool()
    def import_files(file_paths: list[str], overwrite: bool = False, fallback_to_default: bool = False) -> dict:
        """Import several .csv/.resx files named after their cultures."""
        dm = require_connected()
        results = dm.import_files(file_paths, overwrite, fallback_to_default)
        return {"files": results, "translations_applied": sum(results.values())}

    @mcp.tool()
    def apply_changes() -> dict:
        """Write the grid into the model's cultures and save the model.

        Adds newly selected cultures, removes deselected ones (never the
        default), then saves everything in a single SaveChanges() call.
        """
        dm = require_connected()
        return dm.update()

    @mcp.tool()
    def reload_model() -> dict:
        """Discard unsaved edits and re-read translations from the model."""
        dm = require_connected()
        dm.reload()
        return {
            "captions": len(dm.captions),
            "descriptions": len(dm.descriptions),
            "display_folders": len(dm.display_folders),
        }


def _parse_property(property_type: str) -> TranslatedProperty:
    """Convert a property string to TranslatedProperty."""
    mapping = {
        "caption": TranslatedProperty.CAPTION,
        "description": TranslatedProperty.DESCRIPTION,
        "displayfolder": TranslatedProperty.DISPLAY_FOLDER,
        "display_folder": TranslatedProperty.DISPLAY_FOLDER,
    }

    key = property_type.lower().strip()
    if key not in mapping:
        raise ValueError(f"Unknown property_type: '{property_type}'. Use Caption/Description/DisplayFolder.")
    return mapping[key]
