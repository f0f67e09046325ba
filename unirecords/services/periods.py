WINTER = "Winter"
SUMMER = "Summer"

# lower-cased spellings accepted for each semester, local names included
_SYNONYMS = {
    "winter": WINTER,
    "zimski": WINTER,
    "зимски": WINTER,
    "summer": SUMMER,
    "leten": SUMMER,
    "летен": SUMMER,
}


def normalize_semester(value):
    """Map a free-text semester label onto ``"Winter"`` or ``"Summer"``.

    Blank and unrecognised labels fall back to ``"Winter"``; never raises.
    """
    if not isinstance(value, str):
        return WINTER
    return _SYNONYMS.get(value.strip().casefold(), WINTER)


def wants_odd_semester(semester):
    return normalize_semester(semester) == WINTER
