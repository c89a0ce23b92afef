from dataclasses import dataclass, field
from typing import Any, Dict

import yaml

from . import config


@dataclass(frozen=True)
class SecretsConfig:
    secret_id: str = "pineconeApiKey"


@dataclass(frozen=True)
class EmbeddingConfig:
    model_id: str = "amazon.titan-embed-text-v1"


@dataclass(frozen=True)
class VectorStoreConfig:
    namespace: str = "computeless-rag"
    top_k: int = 3


@dataclass(frozen=True)
class GenerationConfig:
    model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"
    anthropic_version: str = "bedrock-2023-05-31"
    max_tokens: int = 1000


@dataclass(frozen=True)
class PromptConfig:
    persona: str = "an HR assistant"
    fallback_answer: str = "I do not have the necessary information to answer."


@dataclass(frozen=True)
class PipelineConfig:
    secrets: SecretsConfig = field(default_factory=SecretsConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    vector_store: VectorStoreConfig = field(default_factory=VectorStoreConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _parse_vector_store(data: Dict[str, Any]) -> VectorStoreConfig:
    top_k = int(data.get("top_k", VectorStoreConfig.top_k))
    if top_k < 1:
        raise ValueError(f"vector_store.top_k must be at least 1, got {top_k}")

    return VectorStoreConfig(
        namespace=data.get("namespace", VectorStoreConfig.namespace),
        top_k=top_k,
    )


def _parse_generation(data: Dict[str, Any]) -> GenerationConfig:
    return GenerationConfig(
        model_id=data.get("model_id", GenerationConfig.model_id),
        anthropic_version=data.get(
            "anthropic_version", GenerationConfig.anthropic_version
        ),
        max_tokens=int(data.get("max_tokens", GenerationConfig.max_tokens)),
    )


def parse_pipeline_config(data: Dict[str, Any]) -> PipelineConfig:
    secrets = data.get("secrets") or {}
    embedding = data.get("embedding") or {}
    prompt = data.get("prompt") or {}

    return PipelineConfig(
        secrets=SecretsConfig(
            secret_id=secrets.get("secret_id", SecretsConfig.secret_id)
        ),
        embedding=EmbeddingConfig(
            model_id=embedding.get("model_id", EmbeddingConfig.model_id)
        ),
        vector_store=_parse_vector_store(data.get("vector_store") or {}),
        generation=_parse_generation(data.get("generation") or {}),
        prompt=PromptConfig(
            persona=prompt.get("persona", PromptConfig.persona),
            fallback_answer=prompt.get(
                "fallback_answer", PromptConfig.fallback_answer
            ),
        ),
    )


def load_pipeline_config(path: str | None = None) -> PipelineConfig:
    """Load pipeline settings from YAML (``PIPELINE_CONFIG_PATH`` by default)."""
    return parse_pipeline_config(_load_yaml(path or config.PIPELINE_CONFIG_PATH))
