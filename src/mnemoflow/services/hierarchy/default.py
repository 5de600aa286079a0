"""Model-driven hierarchical categorization."""
from logging import Logger

from scitrera_app_framework import Variables, get_logger

from ...models.memory import MemoryRecord
from ...utils import parse_json_payload
from .._constants import EXT_LLM_SERVICE
from ..llm import LLMService
from .base import (
    HierarchyService, HierarchyServicePluginBase, HierarchyNode, ROOT_CATEGORY, split_category_path,
)


class DefaultHierarchyService(HierarchyService):
    """Asks the generation port for 2-3 level category paths and files the record id at each leaf."""

    PROMPT = """Classify this memory into categories (2-3 levels deep):

Memory: {content}

Return a JSON array of category paths, like:
["personal/preferences/food", "personal/lifestyle"]

Be specific but not overly granular."""

    def __init__(self, llm_service: LLMService, v: Variables = None):
        self.llm_service = llm_service
        self.root = HierarchyNode(category=ROOT_CATEGORY)
        self.logger = get_logger(v, name=self.__class__.__name__)

    async def organize(self, record: MemoryRecord) -> list[str]:
        response = await self.llm_service.generate(self.PROMPT.format(content=record.content))
        paths = parse_json_payload(response)
        if not isinstance(paths, list):
            raise ValueError(f"Expected a JSON array of category paths, got {type(paths).__name__}")

        categories = []
        for path in paths:
            path = str(path)
            if not split_category_path(path):
                continue
            self.add(path, record.id)
            categories.append(path)
        self.logger.debug("Categorized %s under %s", record.id, categories)
        return categories

    def add(self, path: str, record_id: str) -> None:
        node = self.root
        for segment in split_category_path(path):
            node = node.child(segment)
        if record_id not in node.memory_ids:
            node.memory_ids.append(record_id)

    def get_by_category(self, path: str) -> list[str]:
        node = self.root
        for segment in split_category_path(path):
            node = node.children.get(segment)
            if node is None:
                return []
        return node.collect_ids()

    def remove_memory(self, record_id: str) -> None:
        stack = [self.root]
        while stack:
            node = stack.pop()
            if record_id in node.memory_ids:
                node.memory_ids.remove(record_id)
            stack.extend(node.children.values())

    def clear(self) -> None:
        self.root = HierarchyNode(category=ROOT_CATEGORY)


class DefaultHierarchyServicePlugin(HierarchyServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultHierarchyService:
        return DefaultHierarchyService(self.get_extension(EXT_LLM_SERVICE, v), v=v)
