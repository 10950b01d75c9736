"""
Core domain layer: dataset container, two-phase filter store, filter
predicates and the debounced staging controller
"""

from .dataset import DatasetContainer
from .filter_state import FilterState, TimeFilter
from .predicates import matches, time_range_label
from .staging import StagingController
from .store import DataStore

__all__ = [
    "DatasetContainer",
    "FilterState",
    "TimeFilter",
    "matches",
    "time_range_label",
    "StagingController",
    "DataStore",
]
