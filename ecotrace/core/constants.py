"""
Carbon credit and material tracking constants.
"""

# Conversion: 1 kg of verified residue = 0.8 carbon credit units
CREDIT_CONVERSION_FACTOR = 0.8

# QR payload: prefix + first characters of the material id
QR_ID_PREFIX = "ECO-"
QR_ID_LENGTH = 8

# Residue types offered by the registration form (not enforced by the engine)
KNOWN_MATERIAL_TYPES = (
    "corn_stover",
    "wheat_straw",
    "sugarcane_bagasse",
    "rice_husks",
    "wood_chips",
)
