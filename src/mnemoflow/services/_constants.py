"""
Centralized extension point constants for all mnemoflow services.

All EXT_* constants are defined here to avoid circular import issues.
"""

# ============================================
# Ports
# ============================================
EXT_STORAGE_BACKEND = 'mnemoflow-storage'
EXT_EMBEDDING_PROVIDER = 'mnemoflow-embedding-provider'
EXT_EMBEDDING_SERVICE = 'mnemoflow-embedding-service'
EXT_LLM_PROVIDER = 'mnemoflow-llm-provider'
EXT_LLM_SERVICE = 'mnemoflow-llm-service'

# ============================================
# Core
# ============================================
EXT_RETRIEVAL_STRATEGY = 'mnemoflow-retrieval-strategy'
EXT_MEMORY_SERVICE = 'mnemoflow-memory-service'
EXT_DECAY_SERVICE = 'mnemoflow-decay-service'

# ============================================
# Augmentation components
# ============================================
EXT_RELATION_GRAPH = 'mnemoflow-relation-graph'
EXT_WORKING_MEMORY = 'mnemoflow-working-memory'
EXT_IMPORTANCE_SCORER = 'mnemoflow-importance-scorer'
EXT_CONTRADICTION_SERVICE = 'mnemoflow-contradiction-service'
EXT_HIERARCHY_SERVICE = 'mnemoflow-hierarchy-service'
EXT_VERSIONING_SERVICE = 'mnemoflow-versioning-service'
EXT_DUAL_MEMORY_SERVICE = 'mnemoflow-dual-memory-service'
EXT_CONSOLIDATION_SERVICE = 'mnemoflow-consolidation-service'
EXT_REASONING_SERVICE = 'mnemoflow-reasoning-service'
EXT_ANALYTICS_SERVICE = 'mnemoflow-analytics-service'

# ============================================
# Pipeline
# ============================================
EXT_PIPELINE_SERVICE = 'mnemoflow-pipeline-service'
