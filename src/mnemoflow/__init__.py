"""mnemoflow: memory retrieval and augmentation for conversational agents."""

__version__ = "0.1.0"
