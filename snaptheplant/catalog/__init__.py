# Species catalog module
from snaptheplant.catalog.records import CareTip, SpeciesRecord
from snaptheplant.catalog.species_catalog import SpeciesCatalog

__all__ = [
    "CareTip",
    "SpeciesRecord",
    "SpeciesCatalog",
]
