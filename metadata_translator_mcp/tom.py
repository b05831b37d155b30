"""TOM assembly loading and object/translation helpers for pythonnet."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from .logging_config import get_logger
from .rows import ObjectRef, ObjectType, TranslatedProperty

logger = get_logger(__name__)

_REQUIRED_DLLS = [
    "Microsoft.AnalysisServices.Core",
    "Microsoft.AnalysisServices.Tabular",
    "Microsoft.AnalysisServices.Tabular.Json",
]

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_LIB_DIR = _PROJECT_ROOT / "lib"


def _search_paths(extra_dir: Path | None = None) -> list[Path]:
    """Return candidate directories that might contain TOM DLLs."""
    paths = [extra_dir] if extra_dir else []
    paths.append(_LIB_DIR)

    nuget_cache = Path.home() / ".nuget" / "packages"
    if nuget_cache.exists():
        for pkg_dir in nuget_cache.glob("microsoft.analysisservices*"):
            paths.extend(sorted(pkg_dir.rglob("net45"), reverse=True))

    program_files = os.environ.get("ProgramFiles", r"C:\Program Files")
    for ssms in sorted(Path(program_files).glob("Microsoft SQL Server Management Studio *"), reverse=True):
        paths.append(ssms / "Common7" / "IDE")

    return paths


def resolve_tom_dlls(extra_dir: Path | None = None) -> dict[str, Path]:
    """Find all required TOM DLLs. Return {name: path} mapping."""
    found: dict[str, Path] = {}
    for search_dir in _search_paths(extra_dir):
        if not search_dir.exists():
            continue
        for dll_name in _REQUIRED_DLLS:
            dll_path = search_dir / f"{dll_name}.dll"
            if dll_name not in found and dll_path.exists():
                found[dll_name] = dll_path
        if len(found) == len(_REQUIRED_DLLS):
            break

    missing = [name for name in _REQUIRED_DLLS if name not in found]
    if missing:
        searched = [str(p) for p in _search_paths(extra_dir) if p.exists()]
        raise RuntimeError(
            f"Missing TOM DLLs: {', '.join(missing)}\n"
            f"Searched: {', '.join(searched) or '(nothing)'}\n"
            f"Set METADATA_TRANSLATOR_DLL_DIR or install the "
            f"Microsoft.AnalysisServices.retail.amd64 NuGet package."
        )
    return found


def load_tom(extra_dir: Path | None = None) -> None:
    """Load TOM DLLs into the CLR. Must run before importing TOM types."""
    import clr  # type: ignore

    for name, path in resolve_tom_dlls(extra_dir).items():
        parent = str(path.parent)
        if parent not in sys.path:
            sys.path.insert(0, parent)
        clr.AddReference(str(path.with_suffix("")))
        logger.debug("Loaded %s from %s", name, path)


def to_tom_property(prop: TranslatedProperty):
    """Map a TranslatedProperty onto the TOM enum of the same name."""
    from Microsoft.AnalysisServices.Tabular import TranslatedProperty as TomProperty  # type: ignore

    return {
        TranslatedProperty.CAPTION: TomProperty.Caption,
        TranslatedProperty.DESCRIPTION: TomProperty.Description,
        TranslatedProperty.DISPLAY_FOLDER: TomProperty.DisplayFolder,
    }[prop]


def resolve_object(model, ref: ObjectRef):
    """Find the TOM object a handle points at."""
    if ref.object_type == ObjectType.MODEL:
        return model

    table = model.Tables.Find(ref.table)
    if table is None:
        raise ValueError(f"Table '{ref.table}' not found.")

    if ref.object_type == ObjectType.TABLE:
        return table
    if ref.object_type == ObjectType.COLUMN:
        found = table.Columns.Find(ref.name)
    elif ref.object_type == ObjectType.MEASURE:
        found = table.Measures.Find(ref.name)
    elif ref.object_type == ObjectType.HIERARCHY:
        found = table.Hierarchies.Find(ref.name)
    else:
        hierarchy = table.Hierarchies.Find(ref.hierarchy)
        found = hierarchy.Levels.Find(ref.name) if hierarchy is not None else None

    if found is None:
        raise ValueError(f"{ref.object_type.value} '{ref.path}' not found.")
    return found


def find_translation(culture, tom_obj, tom_prop):
    """Find an existing ObjectTranslation by iterating.

    ObjectTranslationCollection.Find() is not available through pythonnet.
    """
    for ot in culture.ObjectTranslations:
        if ot.Object == tom_obj and ot.Property == tom_prop:
            return ot
    return None


def get_translation(culture, tom_obj, tom_prop) -> str:
    ot = find_translation(culture, tom_obj, tom_prop)
    return (ot.Value or "") if ot is not None else ""


def set_translation(culture, tom_obj, tom_prop, value: str) -> None:
    """Replace the translation; an empty value just removes it."""
    from Microsoft.AnalysisServices.Tabular import ObjectTranslation  # type: ignore

    existing = find_translation(culture, tom_obj, tom_prop)
    if existing is not None:
        culture.ObjectTranslations.Remove(existing)

    if value:
        new_trans = ObjectTranslation()
        new_trans.Object = tom_obj
        new_trans.Property = tom_prop
        new_trans.Value = value
        culture.ObjectTranslations.Add(new_trans)
