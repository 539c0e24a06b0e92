"""Unit tests for configuration models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from lzwphylo.core.alphabets import Alphabet
from lzwphylo.core.distance import DistanceMethod
from lzwphylo.models.config import KernelConfig, PipelineConfig, TreeConfig


class TestKernelConfig:
    """Tests for KernelConfig."""

    def test_defaults(self):
        """Defaults are IUPAC DNA, w=1.0 and gamma=0.05."""
        config = KernelConfig()
        assert config.alphabet is Alphabet.DNA_IUPAC
        assert config.weight == 1.0
        assert config.gamma == 0.05
        assert config.num_workers == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"gamma": 0.0},
            {"gamma": -0.1},
            {"weight": 0.0},
            {"weight": float("inf")},
            {"num_workers": 0},
            {"alphabet": "rna"},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Out-of-range values fail validation."""
        with pytest.raises(ValidationError):
            KernelConfig(**kwargs)

    def test_alphabet_from_string(self):
        """Alphabets can be given by value."""
        assert KernelConfig(alphabet="protein").alphabet is Alphabet.PROTEIN

    def test_frozen(self):
        """Configs are immutable."""
        config = KernelConfig()
        with pytest.raises(ValidationError):
            config.gamma = 0.5  # type: ignore[misc]


class TestTreeConfig:
    """Tests for TreeConfig."""

    def test_defaults(self):
        """Kernel-metric distance and simplified Newick by default."""
        config = TreeConfig()
        assert config.distance_method is DistanceMethod.KERNEL_METRIC
        assert config.strict_newick is False


class TestPipelineConfigYaml:
    """Tests for YAML loading and saving."""

    def test_round_trip(self, tmp_path: Path):
        """Saved configuration loads back unchanged."""
        config = PipelineConfig(
            kernel=KernelConfig(alphabet=Alphabet.DNA, gamma=0.2, num_workers=4),
            tree=TreeConfig(distance_method=DistanceMethod.COMPLEMENT, strict_newick=True),
        )
        path = tmp_path / "config.yaml"
        config.to_yaml(path)
        assert PipelineConfig.from_yaml(path) == config

    def test_yaml_str_uses_plain_values(self):
        """Enums are written as their string values."""
        text = PipelineConfig().to_yaml_str()
        assert "alphabet: dna_iupac" in text
        assert "distance_method: kernel-metric" in text

    def test_partial_file(self, tmp_path: Path):
        """Missing keys fall back to defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("kernel:\n  gamma: 0.1\n")
        config = PipelineConfig.from_yaml(path)
        assert config.kernel.gamma == 0.1
        assert config.kernel.weight == 1.0
        assert config.tree == TreeConfig()

    def test_empty_file(self, tmp_path: Path):
        """An empty file gives the default configuration."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert PipelineConfig.from_yaml(path) == PipelineConfig()

    def test_not_a_mapping(self, tmp_path: Path):
        """Top-level lists are rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            PipelineConfig.from_yaml(path)

    def test_section_not_a_mapping(self, tmp_path: Path):
        """Sections must be mappings."""
        path = tmp_path / "config.yaml"
        path.write_text("kernel: 3\n")
        with pytest.raises(ValueError, match="kernel"):
            PipelineConfig.from_yaml(path)

    def test_invalid_value(self, tmp_path: Path):
        """Invalid values fail validation."""
        path = tmp_path / "config.yaml"
        path.write_text("kernel:\n  gamma: -1\n")
        with pytest.raises(ValidationError):
            PipelineConfig.from_yaml(path)


class TestOverrides:
    """Tests for applying CLI overrides."""

    def test_none_values_skipped(self):
        """Unset options keep the configured value."""
        base = PipelineConfig(kernel=KernelConfig(gamma=0.3))
        updated = base.with_overrides(kernel={"gamma": None, "weight": 2.0})
        assert updated.kernel.gamma == 0.3
        assert updated.kernel.weight == 2.0

    def test_tree_override(self):
        """Tree options can be overridden."""
        updated = PipelineConfig().with_overrides(tree={"strict_newick": True})
        assert updated.tree.strict_newick is True
        assert updated.kernel == KernelConfig()

    def test_override_validated(self):
        """Overrides go through validation."""
        with pytest.raises(ValidationError):
            PipelineConfig().with_overrides(kernel={"gamma": 0.0})
