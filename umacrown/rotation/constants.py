"""Static calendar and scenario configuration for the rotation planner.

Race names here must match ``races.name`` in the catalog.
"""

from umacrown.rotation.types import Slot, Stage

# ──────────────────────────────────────────────
# Canonical calendar
# junior:  Jul front .. Dec back  (index  0-11)
# classic: Jan front .. Dec back  (index 12-35)
# senior:  Jan front .. Dec back  (index 36-59)
# ──────────────────────────────────────────────

STAGE_MONTHS: dict[Stage, range] = {
    Stage.JUNIOR: range(7, 13),
    Stage.CLASSIC: range(1, 13),
    Stage.SENIOR: range(1, 13),
}

CANONICAL_SLOTS: tuple[Slot, ...] = tuple(
    Slot(stage, month, second_half)
    for stage, months in STAGE_MONTHS.items()
    for month in months
    for second_half in (False, True)
)

SLOT_INDEX: dict[Slot, int] = {slot: i for i, slot in enumerate(CANONICAL_SLOTS)}

# ──────────────────────────────────────────────
# Primary scenario (Breeders' Cup)
# ──────────────────────────────────────────────

# Every primary final is run in senior November, front half
PRIMARY_FINAL_SLOT = Slot(Stage.SENIOR, 11, False)

# (stage, race name, month, second_half) entries each final's route requires
MandatoryEntry = tuple[Stage, str, int, bool]

PRIMARY_MANDATORY: dict[str, list[MandatoryEntry]] = {
    "BC Turf": [
        (Stage.JUNIOR, "Hopeful Stakes", 12, True),
        (Stage.CLASSIC, "Japanese Derby", 5, True),
        (Stage.CLASSIC, "Japan Cup", 11, True),
        (Stage.SENIOR, "Takarazuka Kinen", 6, True),
    ],
    "BC Filly & Mare Turf": [
        (Stage.JUNIOR, "Hanshin Juvenile Fillies", 12, False),
        (Stage.CLASSIC, "Japanese Oaks", 5, True),
        (Stage.CLASSIC, "Queen Elizabeth II Cup", 11, False),
        (Stage.SENIOR, "Victoria Mile", 5, False),
    ],
    "BC Turf Sprint": [
        (Stage.JUNIOR, "Keio Hai Junior Stakes", 11, False),
        (Stage.CLASSIC, "Aoi Stakes", 5, True),
        (Stage.CLASSIC, "Sprinters Stakes", 9, True),
        (Stage.SENIOR, "Takamatsunomiya Kinen", 3, True),
    ],
    "BC Mile": [
        (Stage.JUNIOR, "Asahi Hai Futurity Stakes", 12, False),
        (Stage.CLASSIC, "NHK Mile Cup", 5, False),
        (Stage.CLASSIC, "Mile Championship", 11, True),
        (Stage.SENIOR, "Yasuda Kinen", 6, False),
    ],
    "BC Sprint": [
        (Stage.JUNIOR, "Oxalis Sho", 11, False),
        (Stage.CLASSIC, "Shoryu Stakes", 3, False),
        (Stage.CLASSIC, "JBC Sprint", 11, False),
        (Stage.SENIOR, "Negishi Stakes", 1, True),
    ],
    "BC Filly & Mare Sprint": [
        (Stage.JUNIOR, "Oxalis Sho", 11, False),
        (Stage.CLASSIC, "Shoryu Stakes", 3, False),
        (Stage.CLASSIC, "JBC Sprint", 11, False),
        (Stage.SENIOR, "Negishi Stakes", 1, True),
    ],
    "BC Dirt Mile": [
        (Stage.JUNIOR, "Zen-Nippon Nisai Yushun", 12, True),
        (Stage.CLASSIC, "Unicorn Stakes", 6, True),
        (Stage.CLASSIC, "Mile Championship Nambu Hai", 10, False),
        (Stage.SENIOR, "February Stakes", 2, True),
    ],
    "BC Distaff": [
        (Stage.JUNIOR, "Zen-Nippon Nisai Yushun", 12, True),
        (Stage.CLASSIC, "Kanto Oaks", 6, False),
        (Stage.CLASSIC, "JBC Ladies' Classic", 11, False),
        (Stage.SENIOR, "TCK Jo-o Hai", 1, True),
    ],
    "BC Classic": [
        (Stage.JUNIOR, "Zen-Nippon Nisai Yushun", 12, True),
        (Stage.CLASSIC, "Japan Dirt Derby", 7, False),
        (Stage.CLASSIC, "JBC Classic", 11, False),
        (Stage.SENIOR, "Teio Sho", 6, True),
    ],
}

# ──────────────────────────────────────────────
# Secondary scenario (L'Arc)
# ──────────────────────────────────────────────

# Kept out of the primary pool while the secondary scenario is still live.
# The Derby is included because classic May back half is forced in this scenario.
SECONDARY_EXCLUSIVE_NAMES = frozenset({
    "Prix de l'Arc de Triomphe",
    "Prix Niel",
    "Prix Foy",
    "Takarazuka Kinen",
    "Japanese Derby",
})

SECONDARY_MANDATORY: list[MandatoryEntry] = [
    (Stage.CLASSIC, "Japanese Derby", 5, True),
    (Stage.CLASSIC, "Prix Niel", 9, False),
    (Stage.CLASSIC, "Prix de l'Arc de Triomphe", 10, False),
    (Stage.SENIOR, "Takarazuka Kinen", 6, True),
    (Stage.SENIOR, "Prix Foy", 9, False),
    (Stage.SENIOR, "Prix de l'Arc de Triomphe", 10, False),
]

# Races without the secondary tag that still mean the scenario is outstanding
SECONDARY_SPECIFIC_NAMES = frozenset({
    "Prix de l'Arc de Triomphe",
    "Prix Niel",
    "Prix Foy",
})

# ──────────────────────────────────────────────
# Factor display
# ──────────────────────────────────────────────

FREE_FACTOR = "free"
FACTOR_SORT_ORDER = {
    "turf": 0, "dirt": 1, "sprint": 2, "mile": 3, "medium": 4, "long": 5, FREE_FACTOR: 99,
}
