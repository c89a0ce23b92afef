"""Tests for pipeline YAML loading (computeless_rag/loader.py)."""

import pytest

from computeless_rag.loader import (
    PipelineConfig,
    load_pipeline_config,
    parse_pipeline_config,
)


@pytest.mark.unit
class TestLoadPipelineConfig:

    def test_packaged_yaml_matches_defaults(self):
        assert load_pipeline_config() == PipelineConfig()

    def test_packaged_values(self):
        config = load_pipeline_config()

        assert config.secrets.secret_id == "pineconeApiKey"
        assert config.embedding.model_id == "amazon.titan-embed-text-v1"
        assert config.vector_store.top_k == 3
        assert config.generation.max_tokens == 1000
        assert config.generation.anthropic_version == "bedrock-2023-05-31"

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("vector_store:\n  top_k: 5\nprompt:\n  persona: a payroll assistant\n")

        config = load_pipeline_config(str(path))

        assert config.vector_store.top_k == 5
        assert config.vector_store.namespace == "computeless-rag"
        assert config.prompt.persona == "a payroll assistant"
        assert config.generation == PipelineConfig().generation

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_pipeline_config(str(path)) == PipelineConfig()

    def test_env_path_is_used(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("secrets:\n  secret_id: otherKey\n")
        monkeypatch.setattr("computeless_rag.config.PIPELINE_CONFIG_PATH", str(path))

        assert load_pipeline_config().secrets.secret_id == "otherKey"


@pytest.mark.unit
class TestParsePipelineConfig:

    @pytest.mark.parametrize("top_k", [0, -1])
    def test_top_k_must_be_positive(self, top_k):
        with pytest.raises(ValueError, match="top_k"):
            parse_pipeline_config({"vector_store": {"top_k": top_k}})

    def test_null_sections_are_ignored(self):
        assert parse_pipeline_config({"embedding": None, "generation": None}) == PipelineConfig()

    def test_config_is_frozen(self):
        config = parse_pipeline_config({})

        with pytest.raises(AttributeError):
            config.vector_store.top_k = 10
