"""Single registry for the option lists offered by both forms.

Used by the validator (enum membership), the API (option endpoints) and the UI
(select boxes). New entries are appended; consumers look lists up by name.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReferenceItem:
    value: str
    label: str


COUNTRIES: tuple[ReferenceItem, ...] = (
    ReferenceItem("GB", "United Kingdom"),
    ReferenceItem("US", "United States"),
    ReferenceItem("CA", "Canada"),
    ReferenceItem("FR", "France"),
    ReferenceItem("DE", "Germany"),
    ReferenceItem("IE", "Ireland"),
    ReferenceItem("ES", "Spain"),
    ReferenceItem("IT", "Italy"),
    ReferenceItem("NL", "Netherlands"),
    ReferenceItem("CH", "Switzerland"),
    ReferenceItem("IN", "India"),
    ReferenceItem("AU", "Australia"),
    ReferenceItem("NZ", "New Zealand"),
    ReferenceItem("ZA", "South Africa"),
)

ADDRESS_TYPES: tuple[ReferenceItem, ...] = (
    ReferenceItem("residential", "Residential"),
    ReferenceItem("business", "Business"),
    ReferenceItem("postal", "Postal"),
)

TITLES: tuple[ReferenceItem, ...] = (
    ReferenceItem("mr", "Mr."),
    ReferenceItem("mrs", "Mrs."),
    ReferenceItem("miss", "Miss"),
    ReferenceItem("ms", "Ms."),
    ReferenceItem("dr", "Dr."),
)

GENDERS: tuple[ReferenceItem, ...] = (
    ReferenceItem("male", "Male"),
    ReferenceItem("female", "Female"),
    ReferenceItem("other", "Other"),
    ReferenceItem("prefer_not_to_say", "Prefer not to say"),
)

EMPLOYMENT_TYPES: tuple[ReferenceItem, ...] = (
    ReferenceItem("full_time", "Full Time"),
    ReferenceItem("part_time", "Part Time"),
    ReferenceItem("contract", "Contract"),
    ReferenceItem("temporary", "Temporary"),
    ReferenceItem("self_employed", "Self Employed"),
)

MARKETING_PREFERENCES: tuple[ReferenceItem, ...] = (
    ReferenceItem("email", "Email"),
    ReferenceItem("post", "Post"),
    ReferenceItem("sms", "SMS"),
    ReferenceItem("phone", "Phone"),
    ReferenceItem("none", "No Marketing"),
)

NATIONALITIES: tuple[ReferenceItem, ...] = (
    ReferenceItem("british", "British"),
    ReferenceItem("american", "American"),
    ReferenceItem("canadian", "Canadian"),
    ReferenceItem("french", "French"),
    ReferenceItem("german", "German"),
    ReferenceItem("indian", "Indian"),
    ReferenceItem("australian", "Australian"),
    ReferenceItem("new_zealand", "New Zealand"),
    ReferenceItem("south_african", "South African"),
    ReferenceItem("other", "Other"),
)

ACCOUNT_TYPES: tuple[ReferenceItem, ...] = (
    ReferenceItem("savings", "Savings"),
    ReferenceItem("checking", "Checking"),
    ReferenceItem("business", "Business"),
)

FUNDS_SOURCES: tuple[ReferenceItem, ...] = (
    ReferenceItem("salary", "Salary"),
    ReferenceItem("investment", "Investment"),
    ReferenceItem("inheritance", "Inheritance"),
    ReferenceItem("other", "Other"),
)


REFERENCE_DATA: dict[str, tuple[ReferenceItem, ...]] = {
    "countries": COUNTRIES,
    "address_types": ADDRESS_TYPES,
    "titles": TITLES,
    "genders": GENDERS,
    "employment_types": EMPLOYMENT_TYPES,
    "marketing_preferences": MARKETING_PREFERENCES,
    "nationalities": NATIONALITIES,
    "account_types": ACCOUNT_TYPES,
    "funds_sources": FUNDS_SOURCES,
}


def get_options(name: str) -> tuple[ReferenceItem, ...]:
    return REFERENCE_DATA[name]


def codes(name: str) -> list[str]:
    return [item.value for item in REFERENCE_DATA[name]]


def label_for(name: str, code: str) -> str | None:
    """Return the display label for *code*, or None when nothing matches."""
    for item in REFERENCE_DATA.get(name, ()):
        if item.value == code:
            return item.label
    return None
