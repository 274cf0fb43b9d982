"""Nutrient content attributes tracked on raw materials.

Values are percentages except ``ph_content``. The order here is the order
used in API responses.
"""

NUTRIENT_FIELDS: tuple[str, ...] = (
    "n_content",
    "p_content",
    "k_content",
    "mg_content",
    "ca_content",
    "s_content",
    "fe_content",
    "zn_content",
    "b_content",
    "mn_content",
    "cu_content",
    "mo_content",
    "na_content",
    "si_content",
    "h_content",
    "c_content",
    "o_content",
    "cl_content",
    "al_content",
    "organic_content",
    "alginic_acid_content",
    "mgo_content",
    "protein_content",
    "moisture_content",
    "ash_content",
    "ph_content",
)
