from .assigner import SlugAssigner
from .finder import DualModeFinder, is_integer_param
from .repository import AsyncSluggableRepository, RecordView, SluggableRepository
from .resolver import UniquenessResolver

__all__ = [
    "AsyncSluggableRepository",
    "DualModeFinder",
    "RecordView",
    "SlugAssigner",
    "SluggableRepository",
    "UniquenessResolver",
    "is_integer_param",
]
