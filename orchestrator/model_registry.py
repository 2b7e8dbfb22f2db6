from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_REGISTRY_PATH = Path(__file__).resolve().parent.parent / "config" / "model_registry.yaml"


@dataclass
class ModelRegistry:
    _fallback_models: list[str]
    _completion_defaults: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: str | None = None) -> "ModelRegistry":
        registry_path = Path(path) if path else DEFAULT_REGISTRY_PATH
        if not registry_path.exists():
            raise ValueError(f"Model registry not found at {registry_path}")

        data = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
        if not data or "fallback_models" not in data:
            raise ValueError("Invalid model registry: missing fallback_models")

        return cls.from_list(data["fallback_models"], data.get("completion_defaults") or {})

    @classmethod
    def from_list(
        cls, models: list[str], completion_defaults: dict[str, Any] | None = None
    ) -> "ModelRegistry":
        if not isinstance(models, list) or not models:
            raise ValueError("fallback_models must be a non-empty list")

        cleaned: list[str] = []
        for model in models:
            if not isinstance(model, str) or not model.strip():
                raise ValueError(f"Invalid model identifier: {model!r}")
            model = model.strip()
            if model in cleaned:
                raise ValueError(f"Duplicate model identifier: {model}")
            cleaned.append(model)

        if completion_defaults is not None and not isinstance(completion_defaults, dict):
            raise ValueError("completion_defaults must be a mapping")

        return cls(_fallback_models=cleaned, _completion_defaults=dict(completion_defaults or {}))

    def fallback_models(self) -> list[str]:
        return list(self._fallback_models)

    def primary_model(self) -> str:
        return self._fallback_models[0]

    def completion_defaults(self) -> dict[str, Any]:
        return dict(self._completion_defaults)
