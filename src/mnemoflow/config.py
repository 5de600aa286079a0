"""Configuration keys and defaults for mnemoflow.

Every option is an environment-style key resolved through scitrera-app-framework ``Variables``.
Service-specific keys that only one implementation reads live beside that implementation.
"""

from enum import Enum

# ============================================
# Data Home Directory
# ============================================
MNEMOFLOW_DATA_DIR = 'MNEMOFLOW_DATA_DIR'


# ============================================
# Embedding Providers
# ============================================
class EmbeddingProviderType(str, Enum):
    """Available embedding provider types."""

    OPENAI = "openai"  # OpenAI API (or any OpenAI-compatible endpoint)
    MOCK = "mock"  # Deterministic hash-based provider for tests and offline use


MNEMOFLOW_EMBEDDING_PROVIDER = 'MNEMOFLOW_EMBEDDING_PROVIDER'
DEFAULT_MNEMOFLOW_EMBEDDING_PROVIDER = EmbeddingProviderType.MOCK
MNEMOFLOW_EMBEDDING_ENABLED = 'MNEMOFLOW_EMBEDDING_ENABLED'
DEFAULT_MNEMOFLOW_EMBEDDING_ENABLED = True
MNEMOFLOW_EMBEDDING_MODEL = 'MNEMOFLOW_EMBEDDING_MODEL'
MNEMOFLOW_EMBEDDING_DIMENSIONS = 'MNEMOFLOW_EMBEDDING_DIMENSIONS'
MNEMOFLOW_EMBEDDING_CACHE_SIZE = 'MNEMOFLOW_EMBEDDING_CACHE_SIZE'
DEFAULT_MNEMOFLOW_EMBEDDING_CACHE_SIZE = 4096

# ============================================
# Embedding Service
# ============================================
MNEMOFLOW_EMBEDDING_SERVICE = 'MNEMOFLOW_EMBEDDING_SERVICE'
DEFAULT_MNEMOFLOW_EMBEDDING_SERVICE = 'default'


# ============================================
# LLM (Generation port)
# ============================================
class LLMProviderType(str, Enum):
    """Available generation provider types."""

    OPENAI = "openai"
    NOOP = "noop"  # Raises LLMNotConfiguredError on use


MNEMOFLOW_LLM_PROVIDER = 'MNEMOFLOW_LLM_PROVIDER'
DEFAULT_MNEMOFLOW_LLM_PROVIDER = LLMProviderType.NOOP
MNEMOFLOW_LLM_SERVICE = 'MNEMOFLOW_LLM_SERVICE'
DEFAULT_MNEMOFLOW_LLM_SERVICE = 'default'

# ============================================
# Storage Backend
# ============================================
MNEMOFLOW_STORAGE_BACKEND = 'MNEMOFLOW_STORAGE_BACKEND'
DEFAULT_MNEMOFLOW_STORAGE_BACKEND = 'memory'

MNEMOFLOW_SQLITE_STORAGE_PATH = 'MNEMOFLOW_SQLITE_STORAGE_PATH'
DEFAULT_MNEMOFLOW_SQLITE_STORAGE_PATH = "mnemoflow.db"


# ============================================
# Retrieval Strategy
# ============================================
class RetrievalStrategyType(str, Enum):
    """Ranking strategies usable by recall."""

    NONE = "none"  # Truncate to limit, no reordering
    KEYWORD = "keyword"
    EMBEDDING = "embedding"
    HYBRID = "hybrid"
    REMOTE_INDEX = "remote_index"  # Delegates ranking to the storage backend's similarity search


MNEMOFLOW_RETRIEVAL_STRATEGY = 'MNEMOFLOW_RETRIEVAL_STRATEGY'
DEFAULT_MNEMOFLOW_RETRIEVAL_STRATEGY = RetrievalStrategyType.KEYWORD

# ============================================
# Memory Service (core store/recall)
# ============================================
MNEMOFLOW_MEMORY_SERVICE = 'MNEMOFLOW_MEMORY_SERVICE'
DEFAULT_MNEMOFLOW_MEMORY_SERVICE = 'default'

MNEMOFLOW_AUTO_EMBED = 'MNEMOFLOW_AUTO_EMBED'
DEFAULT_MNEMOFLOW_AUTO_EMBED = True
MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT = 'MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT'
DEFAULT_MNEMOFLOW_DEFAULT_RETRIEVAL_LIMIT = 10

# ============================================
# Decay
# ============================================
MNEMOFLOW_ENABLE_DECAY = 'MNEMOFLOW_ENABLE_DECAY'
DEFAULT_MNEMOFLOW_ENABLE_DECAY = False
MNEMOFLOW_DECAY_FACTOR = 'MNEMOFLOW_DECAY_FACTOR'
DEFAULT_MNEMOFLOW_DECAY_FACTOR = 0.95

# ============================================
# Augmentation pipeline
# ============================================
MNEMOFLOW_PIPELINE_SERVICE = 'MNEMOFLOW_PIPELINE_SERVICE'
DEFAULT_MNEMOFLOW_PIPELINE_SERVICE = 'default'

# Stage flags: all explicit opt-in
MNEMOFLOW_ENABLE_GRAPH = 'MNEMOFLOW_ENABLE_GRAPH'
MNEMOFLOW_ENABLE_DUAL_MEMORY = 'MNEMOFLOW_ENABLE_DUAL_MEMORY'
MNEMOFLOW_ENABLE_WORKING_MEMORY = 'MNEMOFLOW_ENABLE_WORKING_MEMORY'
MNEMOFLOW_ENABLE_IMPORTANCE_SCORING = 'MNEMOFLOW_ENABLE_IMPORTANCE_SCORING'
MNEMOFLOW_ENABLE_CONTRADICTION_DETECTION = 'MNEMOFLOW_ENABLE_CONTRADICTION_DETECTION'
MNEMOFLOW_ENABLE_HIERARCHY = 'MNEMOFLOW_ENABLE_HIERARCHY'
MNEMOFLOW_ENABLE_VERSIONING = 'MNEMOFLOW_ENABLE_VERSIONING'
MNEMOFLOW_ENABLE_CONSOLIDATION = 'MNEMOFLOW_ENABLE_CONSOLIDATION'
MNEMOFLOW_ENABLE_REASONING = 'MNEMOFLOW_ENABLE_REASONING'
DEFAULT_MNEMOFLOW_STAGE_ENABLED = False

ALL_STAGE_FLAGS = (
    MNEMOFLOW_ENABLE_GRAPH,
    MNEMOFLOW_ENABLE_DUAL_MEMORY,
    MNEMOFLOW_ENABLE_WORKING_MEMORY,
    MNEMOFLOW_ENABLE_IMPORTANCE_SCORING,
    MNEMOFLOW_ENABLE_CONTRADICTION_DETECTION,
    MNEMOFLOW_ENABLE_HIERARCHY,
    MNEMOFLOW_ENABLE_VERSIONING,
    MNEMOFLOW_ENABLE_CONSOLIDATION,
    MNEMOFLOW_ENABLE_REASONING,
)
