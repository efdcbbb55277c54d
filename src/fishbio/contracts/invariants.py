"""Formal summary invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference.
"""

SUMMARY_INVARIANTS = {
    "recode": [
        "Recoded column is an ordered Categorical in enum order",
        "Rows with explicitly excluded or blank codes are dropped and counted",
        "Any other unmapped code raises MissingCategory",
    ],

    "aggregate": [
        "One cell per key combination present in the input",
        "mean/sum are float, count is integer, no rounding",
    ],

    "binning": [
        "Edges start at the origin and are strictly increasing",
        "Last edge is the smallest edge >= the maximum value",
        "Every value falls in exactly one bin; the maximum in the last bin",
    ],

    "densify": [
        "Output size == product of level counts",
        "Absent combinations are 0, present values unchanged",
    ],

    "reshape": [
        "Rows follow the canonical order, columns are chronological",
        "No cell introduced or lost; wide -> long -> wide is exact",
    ],

    "normalize": [
        "Each column sums to 100 when its count total is non-zero",
        "Zero-total columns are all zero, never NaN",
    ],
}

# Which analyses use which stages
ANALYSIS_STAGES = {
    "gsi": ["recode", "aggregate"],
    "length_frequency": ["recode", "binning", "aggregate", "densify"],
    "maturity": ["recode", "aggregate", "densify", "reshape", "normalize"],
    "province_species": ["aggregate", "densify", "reshape", "normalize"],
    "length_weight": ["recode"],
}
