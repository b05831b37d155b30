import sys
import types

import pytest

from metadata_translator_mcp.data_model import DataModel
from metadata_translator_mcp.languages import Language, LanguageRegistry


# ---------------------------------------------------------------------------
# In-memory stand-in for the TOM object graph
# ---------------------------------------------------------------------------

class Collection:
    def __init__(self, items=()):
        self._items = list(items)

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    @property
    def Count(self):
        return len(self._items)

    def Find(self, name):
        return next((item for item in self._items if item.Name == name), None)

    def Add(self, item):
        self._items.append(item)

    def Remove(self, item):
        self._items = [i for i in self._items if i is not item]


class TranslatedProperty:
    Caption = "Caption"
    Description = "Description"
    DisplayFolder = "DisplayFolder"


class ObjectTranslation:
    def __init__(self, obj=None, prop=None, value=None):
        self.Object = obj
        self.Property = prop
        self.Value = value


class Culture:
    def __init__(self, name=None):
        self.Name = name
        self.ObjectTranslations = Collection()

    def translate(self, obj, prop, value):
        self.ObjectTranslations.Add(ObjectTranslation(obj, prop, value))
        return self


class Annotation:
    def __init__(self):
        self.Name = None
        self.Value = None


class TomObject:
    def __init__(self, name, description="", display_folder="", type_="Data"):
        self.Name = name
        self.Description = description
        self.DisplayFolder = display_folder
        self.Type = type_


class Hierarchy(TomObject):
    def __init__(self, name, levels=(), **kwargs):
        super().__init__(name, **kwargs)
        self.Levels = Collection(TomObject(level) for level in levels)


class Table(TomObject):
    def __init__(self, name, description="", columns=(), measures=(), hierarchies=()):
        super().__init__(name, description)
        self.Columns = Collection(columns)
        self.Measures = Collection(measures)
        self.Hierarchies = Collection(hierarchies)


class Model:
    def __init__(self, name, culture, tables=(), cultures=(), description=""):
        self.Name = name
        self.Culture = culture
        self.Description = description
        self.Tables = Collection(tables)
        self.Cultures = Collection(cultures)
        self.Annotations = Collection()
        self.save_count = 0

    def SaveChanges(self):
        self.save_count += 1


@pytest.fixture(autouse=True)
def tom_namespace(monkeypatch):
    """Expose the fakes as Microsoft.AnalysisServices.Tabular."""
    tabular = types.ModuleType("Microsoft.AnalysisServices.Tabular")
    tabular.TranslatedProperty = TranslatedProperty
    tabular.ObjectTranslation = ObjectTranslation
    tabular.Culture = Culture
    tabular.Annotation = Annotation

    microsoft = types.ModuleType("Microsoft")
    analysis_services = types.ModuleType("Microsoft.AnalysisServices")
    microsoft.AnalysisServices = analysis_services
    analysis_services.Tabular = tabular

    monkeypatch.setitem(sys.modules, "Microsoft", microsoft)
    monkeypatch.setitem(sys.modules, "Microsoft.AnalysisServices", analysis_services)
    monkeypatch.setitem(sys.modules, "Microsoft.AnalysisServices.Tabular", tabular)
    return tabular


@pytest.fixture
def sales_model():
    """en-US model with a French culture that already translates the Sales table."""
    amount = TomObject("Amount", "Net amount", "Figures")
    sales = Table(
        "Sales",
        "Sales facts",
        columns=[
            TomObject("RowNumber-2662979B", type_="RowNumber"),
            amount,
            TomObject("Region"),
        ],
        measures=[
            TomObject("Total Sales", display_folder="Figures"),
            TomObject("Margin", display_folder="Ratios"),
        ],
        hierarchies=[Hierarchy("Geography", levels=["Country", "City"])],
    )
    date = Table("Date", columns=[TomObject("Year")])

    en = Culture("en-US")
    fr = Culture("fr-FR").translate(sales, "Caption", "Ventes").translate(amount, "Description", "Montant net")
    return Model("Sales Model", "en-US", tables=[sales, date], cultures=[en, fr])


@pytest.fixture
def languages():
    return LanguageRegistry([
        Language("en-US", "English (United States)"),
        Language("fr-FR", "French (France)"),
        Language("de-DE", "German (Germany)"),
        Language("es-ES", "Spanish (Spain)"),
    ])


@pytest.fixture
def data_model(sales_model, languages):
    return DataModel(sales_model, "localhost:54321", "Sales", languages)
