"""Content generation boundary: model client, prompts, schemas and decoders."""

from .generator import ContentGenerator, Generation

__all__ = [
    "ContentGenerator",
    "Generation",
]
