"""Application use cases. Each returns ``Success`` or ``Failure``."""

from .create import CreateAffirmation
from .delete import DeleteAffirmation
from .edit import EditAffirmation
from .export_affirmations import ExportAffirmations, ExportReport
from .import_affirmations import ImportAffirmations, ImportMode, ImportReport
from .reorder import ReorderAffirmations
from .settings import UpdateSettings
from .show_next import ShowNextAffirmation

__all__ = [
    "CreateAffirmation",
    "DeleteAffirmation",
    "EditAffirmation",
    "ExportAffirmations",
    "ExportReport",
    "ImportAffirmations",
    "ImportMode",
    "ImportReport",
    "ReorderAffirmations",
    "ShowNextAffirmation",
    "UpdateSettings",
]
