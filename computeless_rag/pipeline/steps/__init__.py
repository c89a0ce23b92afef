"""Steps of the RAG query and store pipelines."""

from .secrets import SecretProviderStep
from .embedding import EmbedderStep
from .retrieval import RetrieverStep
from .prompt import PromptBuilderStep, render_prompt
from .generation import GeneratorStep
from .upsert import UpsertStep

__all__ = [
    "SecretProviderStep",
    "EmbedderStep",
    "RetrieverStep",
    "PromptBuilderStep",
    "render_prompt",
    "GeneratorStep",
    "UpsertStep",
]
