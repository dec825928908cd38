"""YAML configuration loader for the duplicate checker.

Loads matching.yaml from the config/ directory: stop-word overrides,
ledger description fields and the size of the reference window.
"""

from pathlib import Path

import yaml

from src.dedup.models import DEFAULT_DESCRIPTION_FIELDS
from src.dedup.text import DEFAULT_STOP_WORDS

LEDGER_TYPES = ("spending", "revenue")

DEFAULT_REFERENCE_LIMIT = 100

LEDGER_DESCRIPTION_FIELDS: dict[str, list[str]] = {
    "spending": list(DEFAULT_DESCRIPTION_FIELDS),
    "revenue": ["description", "suggestedSource", "source"],
}


class Config:
    """Loads and provides access to the matching configuration."""

    def __init__(self, config_dir: Path | str = "config"):
        self.config_dir = Path(config_dir)
        if not self.config_dir.is_dir():
            raise FileNotFoundError(f"Config directory not found: {self.config_dir}")

        self._matching: dict | None = None

    def _load(self, filename: str) -> dict:
        path = self.config_dir / filename
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if data is None:
            raise ValueError(f"Empty config file: {path}")
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
        return data

    @property
    def matching(self) -> dict:
        if self._matching is None:
            self._matching = self._load("matching.yaml")
        return self._matching

    @property
    def stop_words(self) -> frozenset[str]:
        """Active stop-word set.

        ``stop_words`` replaces the built-in French/English list when present;
        ``extra_stop_words`` is added on top of whichever list is active.
        Words are lowercased to match normalized descriptions.
        """
        base = self.matching.get("stop_words")
        words = set(DEFAULT_STOP_WORDS) if base is None else {str(w).lower() for w in base}
        for w in self.matching.get("extra_stop_words") or []:
            words.add(str(w).lower())
        return frozenset(words)

    @property
    def reference_limit(self) -> int:
        """How many of the most recent ledger rows to compare against."""
        limit = self.matching.get("reference_limit", DEFAULT_REFERENCE_LIMIT)
        try:
            limit = int(limit)
        except (TypeError, ValueError) as e:
            raise ValueError(f"reference_limit must be an integer, got {limit!r}") from e
        if limit < 0:
            raise ValueError(f"reference_limit must be >= 0, got {limit}")
        return limit

    def description_fields(self, ledger_type: str = "spending") -> list[str]:
        """Fields a description is read from, in priority order."""
        if ledger_type not in LEDGER_TYPES:
            raise ValueError(f"Unknown ledger type: {ledger_type}")
        configured = self.matching.get("description_fields") or {}
        fields = configured.get(ledger_type)
        if fields:
            return [str(f) for f in fields]
        return list(LEDGER_DESCRIPTION_FIELDS[ledger_type])
