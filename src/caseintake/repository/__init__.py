from .base import Repository
from .fixtures import FixtureDataset, load_dataset
from .memory import InMemoryRepository

__all__ = [
    "FixtureDataset",
    "InMemoryRepository",
    "Repository",
    "load_dataset",
]
