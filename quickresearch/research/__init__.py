"""QuickResearch — one-shot research answers from a remote object store.

Architecture:
    ObjectStoreClient    — submit / fetch / delete against the research service
    ResearchCoordinator  — object names, submit → wait → fetch, bulk teardown
    ObjectRegistry       — names created this session and not yet deleted
    ResearchSession      — UIState projection consumed by the CLI

CLI surface (wired in quickresearch.main):
    quickresearch ask "<question>" [--raw] [--log] [--keep]
    quickresearch chat [--keep]
"""

from .coordinator import ResearchCoordinator
from .registry import ObjectRegistry
from .session import ResearchSession, UIState

__all__ = ["ResearchCoordinator", "ObjectRegistry", "ResearchSession", "UIState"]
