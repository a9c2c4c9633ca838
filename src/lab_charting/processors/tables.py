# ============================================================================
# src/lab_charting/processors/tables.py
# ============================================================================
"""
Overridable bundle of the parameter lookup tables.
"""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Mapping, Optional, Tuple

from ..constants import (
    METADATA_KEYS,
    STATIC_FIELD_ALIASES,
    JUNK_KEYS,
    JUNK_KEY_FRAGMENTS,
    INVALID_VALUE_PHRASES,
    INVALID_VALUES,
    NUMERIC_KEYS,
    PARAMETER_ALIASES,
    CULTURE_KEYS,
    GENERAL_KEYS,
    IGNORED_KEYS,
)
from ..utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class ParameterTables:
    metadata_keys: FrozenSet[str] = METADATA_KEYS
    static_field_aliases: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: STATIC_FIELD_ALIASES)
    junk_keys: FrozenSet[str] = JUNK_KEYS
    junk_key_fragments: Tuple[str, ...] = JUNK_KEY_FRAGMENTS
    invalid_value_phrases: Tuple[str, ...] = INVALID_VALUE_PHRASES
    invalid_values: FrozenSet[str] = INVALID_VALUES
    numeric_keys: FrozenSet[str] = NUMERIC_KEYS
    aliases: Mapping[str, str] = field(default_factory=lambda: PARAMETER_ALIASES)
    culture_keys: FrozenSet[str] = CULTURE_KEYS
    general_keys: FrozenSet[str] = GENERAL_KEYS
    ignored_keys: FrozenSet[str] = IGNORED_KEYS

    def __post_init__(self):
        overlap = self.culture_keys & self.general_keys
        if overlap:
            raise ConfigurationError(
                f"Culture and general key sets overlap: {sorted(overlap)}"
            )

    def canonical_key(self, key: str) -> str:
        return self.aliases.get(key, key)

    def is_numeric(self, key: str) -> bool:
        """Numeric fields are recognised by their raw or alias-resolved name."""
        return key in self.numeric_keys or self.canonical_key(key) in self.numeric_keys

    def is_junk_key(self, key: str) -> bool:
        if key in self.junk_keys:
            return True
        lower = key.lower()
        return any(fragment in lower for fragment in self.junk_key_fragments)

    def is_invalid_value(self, value: str) -> bool:
        lower = value.lower().strip()
        if lower in self.invalid_values:
            return True
        return any(phrase in lower for phrase in self.invalid_value_phrases)

    @classmethod
    def with_overrides(cls, base: Optional["ParameterTables"] = None, **changes) -> "ParameterTables":
        """Copy of the defaults (or `base`) with some tables replaced."""
        return replace(base or cls(), **changes)


DEFAULT_PARAMETER_TABLES = ParameterTables()
