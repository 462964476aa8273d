"""Medical specialty codes.

Maps substrings of NPI taxonomy descriptions to the numeric specialty code
placed in the credential. Resolution walks the table in declared order and
the first key contained in the description wins. A key that contains
another key ("Thoracic Surgery" and "Surgery") must be listed before it.
Codes are fixed: issued credentials depend on the mapping.
"""
from typing import Optional

SPECIALTY_CODES: tuple[tuple[str, int], ...] = (
    ("Allergy & Immunology", 1),
    ("Anesthesiology", 2),
    ("Cardiovascular Disease", 3),
    ("Colon & Rectal Surgery", 4),
    ("Dermatology", 5),
    ("Emergency Medicine", 6),
    ("Endocrinology", 7),
    ("Family Medicine", 8),
    ("Gastroenterology", 9),
    ("General Practice", 10),
    ("Geriatric Medicine", 11),
    ("Hematology", 12),
    ("Hospitalist", 13),
    ("Infectious Disease", 14),
    ("Internal Medicine", 15),
    ("Medical Genetics", 16),
    ("Nephrology", 17),
    ("Neurological Surgery", 18),
    ("Neurology", 19),
    ("Nuclear Medicine", 20),
    ("Obstetrics & Gynecology", 21),
    ("Radiation Oncology", 34),
    ("Oncology", 22),
    ("Ophthalmology", 23),
    ("Orthopaedic Surgery", 24),
    ("Otolaryngology", 25),
    ("Pain Medicine", 26),
    ("Pathology", 27),
    ("Pediatrics", 28),
    ("Physical Medicine & Rehabilitation", 29),
    ("Plastic Surgery", 30),
    ("Preventive Medicine", 31),
    ("Psychiatry", 32),
    ("Pulmonary Disease", 33),
    ("Radiology", 35),
    ("Rheumatology", 36),
    ("Sleep Medicine", 37),
    ("Sports Medicine", 38),
    ("Thoracic Surgery", 40),
    ("Urology", 41),
    ("Vascular Surgery", 42),
    ("Surgery", 39),
)


def resolve_specialty(
    description: str,
    table: tuple[tuple[str, int], ...] = SPECIALTY_CODES,
) -> Optional[int]:
    """Return the code of the first table key found in description.

    Matching is a case-insensitive substring test.
    """
    lowered = description.lower()
    for key, code in table:
        if key.lower() in lowered:
            return code
    return None
