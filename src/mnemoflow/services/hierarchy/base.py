"""Hierarchy Service - category tree over record ids."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...models.memory import MemoryRecord
from .._constants import EXT_HIERARCHY_SERVICE, EXT_LLM_SERVICE

MNEMOFLOW_HIERARCHY_SERVICE = 'MNEMOFLOW_HIERARCHY_SERVICE'
DEFAULT_MNEMOFLOW_HIERARCHY_SERVICE = 'default'

ROOT_CATEGORY = 'root'
PATH_SEPARATOR = '/'


@dataclass
class HierarchyNode:
    """One category segment: child segments plus ids filed directly at this node."""
    category: str
    children: dict[str, "HierarchyNode"] = field(default_factory=dict)
    memory_ids: list[str] = field(default_factory=list)

    def child(self, category: str) -> "HierarchyNode":
        node = self.children.get(category)
        if node is None:
            node = self.children[category] = HierarchyNode(category=category)
        return node

    def collect_ids(self) -> list[str]:
        """Ids in this node and every descendant, first occurrence order, no duplicates."""
        seen: dict[str, None] = dict.fromkeys(self.memory_ids)
        for node in self.children.values():
            seen.update(dict.fromkeys(node.collect_ids()))
        return list(seen)


def split_category_path(path: str) -> list[str]:
    return [segment.strip() for segment in path.split(PATH_SEPARATOR) if segment.strip()]


class HierarchyService(ABC):
    """Interface for hierarchical categorization."""

    @abstractmethod
    async def organize(self, record: MemoryRecord) -> list[str]:
        """File a record under model-proposed category paths. Returns the paths."""
        pass

    @abstractmethod
    def add(self, path: str, record_id: str) -> None:
        """File a record id at a category path. Idempotent."""
        pass

    @abstractmethod
    def get_by_category(self, path: str) -> list[str]:
        """Ids under a category path, including all sub-categories."""
        pass

    @abstractmethod
    def remove_memory(self, record_id: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


# noinspection PyAbstractClass
class HierarchyServicePluginBase(Plugin):
    """Base plugin for hierarchy service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_HIERARCHY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_HIERARCHY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MNEMOFLOW_HIERARCHY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MNEMOFLOW_HIERARCHY_SERVICE, DEFAULT_MNEMOFLOW_HIERARCHY_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_LLM_SERVICE,)
