"""
Pydantic configuration models for lzwphylo.

These models define configuration for the LZW kernel and the
neighbor-joining tree builder. Configuration can be loaded from YAML
files or assembled from CLI arguments; CLI values override YAML values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, Field

from lzwphylo.core.alphabets import Alphabet
from lzwphylo.core.constants import DEFAULT_GAMMA, DEFAULT_WEIGHT
from lzwphylo.core.distance import DistanceMethod

logger = logging.getLogger(__name__)


class KernelConfig(BaseModel):
    """
    Configuration for LZW compression and kernel scoring.

    score(A, B) = exp(gamma * w * |A & B| - 0.5 * gamma * w * (|A| + |B|))

    Larger gamma spreads scores further apart; with large dictionaries a
    small gamma keeps distant sequences from collapsing to zero similarity.
    """

    alphabet: Alphabet = Field(
        default=Alphabet.DNA_IUPAC,
        description="Alphabet whose symbols seed every code dictionary.",
    )
    weight: float = Field(
        default=DEFAULT_WEIGHT,
        gt=0.0,
        allow_inf_nan=False,
        description="Weight per shared codeword (w).",
    )
    gamma: float = Field(
        default=DEFAULT_GAMMA,
        gt=0.0,
        allow_inf_nan=False,
        description="Exponential decay applied to weighted match counts.",
    )
    num_workers: int = Field(
        default=1,
        ge=1,
        description="Worker processes for pairwise scoring (1 = in-process).",
    )

    model_config = {"frozen": True}


class TreeConfig(BaseModel):
    """Configuration for distance conversion and tree output."""

    distance_method: DistanceMethod = Field(
        default=DistanceMethod.KERNEL_METRIC,
        description="How kernel similarities become NJ distances.",
    )
    strict_newick: bool = Field(
        default=False,
        description="Write standard Newick (terminating ';') via BioPython.",
    )

    model_config = {"frozen": True}


class PipelineConfig(BaseModel):
    """Complete configuration for sequences -> kernel -> tree."""

    kernel: KernelConfig = Field(default_factory=KernelConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)

    model_config = {"frozen": True}

    @classmethod
    def from_yaml(cls, path: Path) -> Self:
        """
        Load pipeline configuration from a YAML file.

        The file has optional 'kernel' and 'tree' sections. Unknown keys
        are ignored (forward compatibility); missing keys use defaults.

        Args:
            path: Path to YAML configuration file.

        Returns:
            PipelineConfig populated from YAML values merged with defaults.

        Raises:
            FileNotFoundError: If YAML file does not exist.
            ValueError: If YAML is not a mapping or holds invalid values.
        """
        import yaml

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            msg = f"YAML config must be a mapping, got {type(raw).__name__}"
            raise ValueError(msg)

        for section in ("kernel", "tree"):
            if section in raw and not isinstance(raw[section], dict):
                msg = f"YAML section '{section}' must be a mapping"
                raise ValueError(msg)

        logger.debug("Loaded configuration from %s", path)
        return cls(**raw)

    def to_yaml(self, path: Path) -> None:
        """
        Write pipeline configuration to a YAML file.

        Args:
            path: Output file path.
        """
        path.write_text(self.to_yaml_str())

    def to_yaml_str(self) -> str:
        """
        Serialize pipeline configuration to a YAML string.

        Returns:
            YAML-formatted string with 'kernel' and 'tree' sections.
        """
        import yaml

        return yaml.dump(self.model_dump(mode="json"), default_flow_style=False, sort_keys=False)

    def with_overrides(
        self,
        kernel: dict[str, Any] | None = None,
        tree: dict[str, Any] | None = None,
    ) -> PipelineConfig:
        """
        Return a validated copy with selected values replaced.

        None values in the override dicts are skipped, so unset CLI options
        keep the configured value.

        Args:
            kernel: KernelConfig field overrides.
            tree: TreeConfig field overrides.

        Returns:
            New PipelineConfig.
        """
        kernel_values = self.kernel.model_dump()
        kernel_values.update({k: v for k, v in (kernel or {}).items() if v is not None})
        tree_values = self.tree.model_dump()
        tree_values.update({k: v for k, v in (tree or {}).items() if v is not None})
        return PipelineConfig(
            kernel=KernelConfig(**kernel_values),
            tree=TreeConfig(**tree_values),
        )
