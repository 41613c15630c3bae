"""
Region naming.

Names are drawn from the generation PRNG, so a seeded world always gets the
same names. Real country names are used until the list runs out; after
that (or when real names are disabled) syllable names like "Zantria" or
"Morvek" are generated.
"""

from typing import List, Sequence, Set

from .prng import SeededPRNG
from .region import Region

REAL_COUNTRY_NAMES = [
    "Afghanistan", "Albania", "Algeria", "Andorra", "Angola", "Argentina", "Armenia",
    "Australia", "Austria", "Azerbaijan", "Bahamas", "Bahrain", "Bangladesh", "Barbados",
    "Belarus", "Belgium", "Belize", "Benin", "Bhutan", "Bolivia", "Bosnia and Herzegovina",
    "Botswana", "Brazil", "Brunei", "Bulgaria", "Burkina Faso", "Burundi", "Cabo Verde",
    "Cambodia", "Cameroon", "Canada", "Central African Republic", "Chad", "Chile", "China",
    "Colombia", "Comoros", "Congo", "Costa Rica", "Croatia", "Cuba", "Cyprus", "Czechia",
    "Denmark", "Djibouti", "Dominica", "Dominican Republic", "Ecuador", "Egypt",
    "El Salvador", "Equatorial Guinea", "Eritrea", "Estonia", "Eswatini", "Ethiopia",
    "Fiji", "Finland", "France", "Gabon", "Gambia", "Georgia", "Germany", "Ghana", "Greece",
    "Grenada", "Guatemala", "Guinea", "Guinea-Bissau", "Guyana", "Haiti", "Honduras",
    "Hungary", "Iceland", "India", "Indonesia", "Iran", "Iraq", "Ireland", "Israel", "Italy",
    "Jamaica", "Japan", "Jordan", "Kazakhstan", "Kenya", "Kiribati", "Kuwait", "Kyrgyzstan",
    "Laos", "Latvia", "Lebanon", "Lesotho", "Liberia", "Libya", "Liechtenstein", "Lithuania",
    "Luxembourg", "Madagascar", "Malawi", "Malaysia",
]

SYLLABLES = [
    "zan", "mor", "vek", "tal", "rin", "dor", "lek", "sha", "val", "nor",
    "ka", "bel", "dra", "sil", "tur", "gar", "fen", "mir", "sol", "vor",
    "lin", "sar", "qu", "zel", "ron", "bar", "zen", "tir", "lom", "kal",
    "vin", "lor", "mel", "dar", "gol", "han", "jor", "ken", "lun", "mar",
]

MAX_NAME_ATTEMPTS = 1000


def generate_random_name(prng: SeededPRNG) -> str:
    """Two or three random syllables, capitalised."""
    count = 2 + prng.randint(2)
    name = "".join(prng.choice(SYLLABLES) for _ in range(count))
    return name.capitalize()


def _unique_random_name(prng: SeededPRNG, used: Set[str]) -> str:
    for _ in range(MAX_NAME_ATTEMPTS):
        name = generate_random_name(prng)
        if name not in used:
            return name
    raise RuntimeError("Failed to generate a unique region name")


def assign_names(
    regions: Sequence[Region], prng: SeededPRNG, use_real_names: bool = True
) -> List[str]:
    """
    Give every region a unique name, in place.

    Returns:
        The assigned names in region order
    """
    available = list(REAL_COUNTRY_NAMES) if use_real_names else []
    used: Set[str] = set()
    for region in regions:
        if available:
            index = prng.randint(len(available))
            name = available.pop(index)
        else:
            name = _unique_random_name(prng, used)
        region.name = name
        used.add(name)
    return [region.name for region in regions]
