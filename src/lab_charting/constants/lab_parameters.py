# ============================================================================
# src/lab_charting/constants/lab_parameters.py
# ============================================================================
"""
Lab Parameter Tables

Canonical parameter names used by the NICU chart, the aliases the
extraction model tends to produce for them, and the key sets that drive
sanitization and classification.

All tables are immutable; override them through ParameterTables
(processors/tables.py) rather than editing in place.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

# Metadata the model sometimes returns as a value
METADATA_KEYS: FrozenSet[str] = frozenset({"Sample Type", "Specimen"})

# Static (non time-series) chart fields and the value keys that feed them.
# Order matters: when several aliases are present the last one wins.
STATIC_FIELD_ALIASES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "bloodGroup": ("Blood Group", "Blood Group & Rh", "BG", "Blood Group and Rh"),
    "g6pd": ("G6PD", "G6PD Status", "Glucose-6-Phosphate Dehydrogenase"),
})

# Placeholder keys copied from the prompt schema or table headers
JUNK_KEYS: FrozenSet[str] = frozenset({
    "AnyOtherParam",
    "Other Param",
    "Value",
    "Parameter",
    "Test Name",
    "Result",
    "Observed Value",
})

# Lower-case substrings that mark a key as placeholder junk
JUNK_KEY_FRAGMENTS: Tuple[str, ...] = ("anyother", "placeholder")

# Lower-case substrings that mark a value as missing
INVALID_VALUE_PHRASES: Tuple[str, ...] = (
    "not found",
    "not done",
    "pending",
    "test not performed",
    "see below",
    "comment",
    "note",
    "not detected",
    "sample not received",
)

# Whole-value placeholders
INVALID_VALUES: FrozenSet[str] = frozenset({"value"})

# Single-number parameters whose units are stripped ("12.5 g/dL" -> "12.5")
NUMERIC_KEYS: FrozenSet[str] = frozenset({
    "Hb", "TLC", "Platelets", "CRP", "I. Ca", "NRBC", "APTT", "Creatinine", "SGPT",
})

PARAMETER_ALIASES: Mapping[str, str] = MappingProxyType({
    # Total leucocyte count
    "WBC Count": "TLC",
    "Total WBC": "TLC",
    "WBC": "TLC",
    "Leukocyte Count": "TLC",
    "Total Leucocyte Count": "TLC",
    "T.L.C": "TLC",

    # Platelets
    "Platelet Count": "Platelets",
    "PLT": "Platelets",
    "Platelet": "Platelets",
    "PLT Count": "Platelets",

    # Hemoglobin
    "Hemoglobin": "Hb",
    "HGB": "Hb",
    "Haemoglobin": "Hb",

    # Differential counts
    "Neutrophil Count": "Neutrophils",
    "Lymphocyte Count": "Lymphocytes",
})

# Culture reports, charted against the report date
CULTURE_KEYS: FrozenSet[str] = frozenset({"Blood CS", "BAL CS", "Tip CS"})

# Routine panel written to the chart without review
GENERAL_KEYS: FrozenSet[str] = frozenset({
    "Hb", "TLC", "Platelets", "CRP", "Na/K/Cl", "I. Ca", "NRBC",
    "Sr.Bili(T/D)", "PT/INR", "APTT", "Creatinine", "SGPT", "POCUS",
    "Antibiotics", "Blood products", "Anti Apnea", "Inotropes",
})

# Hemogram indices nobody charts; dropped instead of flooding the inbox
IGNORED_KEYS: FrozenSet[str] = frozenset({
    "MCV", "MCH", "MCHC", "RDW", "PCV", "Hct",
    "Neutrophils", "Lymphocytes", "Monocytes", "Eosinophils", "Basophils",
    "MPV", "PDW", "PCT", "RBC", "RBC Count", "Mean Platelet Volume",
})
