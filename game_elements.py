"""
game_elements.py
================
The fixed game-element catalog for the Tudor Mansion theft mystery.

Centralising the card data here means the planner never hard-codes a
suspect, item, location, or time. Every planning function accepts a
GameCatalog, so tests and alternative editions can inject their own.

The four element lists are closed sets: IDs are unique within a category and
stable for the lifetime of the process. Themes are flavour only and never
affect solvability.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


# ---------------------------------------------------------------------------
# Element shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Suspect:
    id:   str
    name: str
    role: str


@dataclass(frozen=True)
class Item:
    """A collectible that can be stolen. `category` is antique, desk, or jewelry."""
    id:       str
    name:     str
    category: str


@dataclass(frozen=True)
class Location:
    id:             str
    name:           str
    indoor:         bool = True
    can_be_locked:  bool = True


@dataclass(frozen=True)
class TimePeriod:
    """A period of the day. `order` is 1-based and strictly increasing."""
    id:         str
    name:       str
    order:      int
    hour_range: str


@dataclass(frozen=True)
class MysteryTheme:
    id:                   str
    name:                 str
    period:               str
    description:          str
    typical_locked_rooms: Tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Catalog container
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameCatalog:
    """
    Read-only bundle of every element the planner may draw from.

    Attributes:
        suspects:  Ordered suspects.
        items:     Ordered items; each carries an item category.
        locations: Ordered locations.
        times:     Ordered time periods (by `order`).
        themes:    Mystery themes available for flavour.
    """
    suspects:  Tuple[Suspect, ...]
    items:     Tuple[Item, ...]
    locations: Tuple[Location, ...]
    times:     Tuple[TimePeriod, ...]
    themes:    Tuple[MysteryTheme, ...]

    def ids(self, category: str) -> Tuple[str, ...]:
        """Element IDs for an elimination category, in catalog order."""
        return tuple(e.id for e in self.elements(category))

    def elements(self, category: str) -> tuple:
        if category == "suspect":
            return self.suspects
        if category == "item":
            return self.items
        if category == "location":
            return self.locations
        if category == "time":
            return self.times
        raise KeyError(f"Unknown element category: {category!r}")

    def name_of(self, category: str, element_id: str) -> str:
        """Display name for an element, falling back to the raw ID."""
        for element in self.elements(category):
            if element.id == element_id:
                return element.name
        return element_id

    def item(self, item_id: str) -> Optional[Item]:
        return next((i for i in self.items if i.id == item_id), None)

    def time(self, time_id: str) -> Optional[TimePeriod]:
        return next((t for t in self.times if t.id == time_id), None)

    def theme(self, theme_id: str) -> Optional[MysteryTheme]:
        return next((t for t in self.themes if t.id == theme_id), None)

    def item_categories(self) -> Tuple[str, ...]:
        """Distinct item categories in first-seen order."""
        seen: Dict[str, None] = {}
        for item in self.items:
            seen.setdefault(item.category, None)
        return tuple(seen)


# ---------------------------------------------------------------------------
# Card data
# ---------------------------------------------------------------------------

SUSPECTS: Tuple[Suspect, ...] = (
    Suspect("S01", "Miss Scarlet",      "Socialite"),
    Suspect("S02", "Colonel Mustard",   "Military Officer"),
    Suspect("S03", "Mrs. White",        "Housekeeper"),
    Suspect("S04", "Mr. Green",         "Businessman"),
    Suspect("S05", "Mrs. Peacock",      "Socialite"),
    Suspect("S06", "Professor Plum",    "Scholar"),
    Suspect("S07", "Mrs. Meadow-Brook", "Widow"),
    Suspect("S08", "Prince Azure",      "Aristocrat"),
    Suspect("S09", "Lady Lavender",     "Herbalist"),
    Suspect("S10", "Rusty",             "Gardener"),
)

ITEMS: Tuple[Item, ...] = (
    Item("I01", "Spyglass",            "antique"),
    Item("I02", "Revolver",            "antique"),
    Item("I03", "Rare Book",           "antique"),
    Item("I04", "Medal",               "antique"),
    Item("I05", "Billfold",            "desk"),
    Item("I06", "Gold Pen",            "desk"),
    Item("I07", "Letter Opener",       "desk"),
    Item("I08", "Crystal Paperweight", "desk"),
    Item("I09", "Pocket Watch",        "jewelry"),
    Item("I10", "Jade Hairpin",        "jewelry"),
    Item("I11", "Scarab Brooch",       "jewelry"),
)

LOCATIONS: Tuple[Location, ...] = (
    Location("L01", "Hall", can_be_locked=False),
    Location("L02", "Lounge"),
    Location("L03", "Dining Room"),
    Location("L04", "Kitchen"),
    Location("L05", "Ballroom"),
    Location("L06", "Conservatory"),
    Location("L07", "Billiard Room"),
    Location("L08", "Library"),
    Location("L09", "Study"),
    Location("L10", "Rose Garden", indoor=False),
    Location("L11", "Fountain",    indoor=False),
)

TIME_PERIODS: Tuple[TimePeriod, ...] = (
    TimePeriod("T01", "Dawn",            1,  "5:00 AM - 7:00 AM"),
    TimePeriod("T02", "Breakfast",       2,  "7:00 AM - 9:00 AM"),
    TimePeriod("T03", "Late Morning",    3,  "9:00 AM - 11:00 AM"),
    TimePeriod("T04", "Lunch",           4,  "11:00 AM - 1:00 PM"),
    TimePeriod("T05", "Early Afternoon", 5,  "1:00 PM - 3:00 PM"),
    TimePeriod("T06", "Tea Time",        6,  "3:00 PM - 5:00 PM"),
    TimePeriod("T07", "Dusk",            7,  "5:00 PM - 7:00 PM"),
    TimePeriod("T08", "Dinner",          8,  "7:00 PM - 9:00 PM"),
    TimePeriod("T09", "Night",           9,  "9:00 PM - 12:00 AM"),
    TimePeriod("T10", "Midnight",        10, "12:00 AM - 2:00 AM"),
)

MYSTERY_THEMES: Tuple[MysteryTheme, ...] = (
    MysteryTheme("M01", "The Monte Carlo Affair", "September 1925",
                 "A gambling-themed weekend with high stakes and higher tensions",
                 ("Rose Garden", "Fountain")),
    MysteryTheme("M02", "The Garden Party", "Fall 1925",
                 "An outdoor celebration turns sinister when something goes missing",
                 ("Study",)),
    MysteryTheme("M03", "A Bad Sport", "Fall 1925",
                 "Competitive games bring out the worst in the guests",
                 ("Conservatory",)),
    MysteryTheme("M04", "The Hunt", "Fall 1925",
                 "A hunting weekend where the prey isn't just foxes",
                 ("Ballroom",)),
    MysteryTheme("M05", "The Autumn Leaves", "Late Fall 1925",
                 "As leaves fall, so do secrets long buried",
                 ("Kitchen",)),
    MysteryTheme("M06", "The Costume Party", "Winter 1925",
                 "Behind the masks, someone hides a guilty secret",
                 ("Library",)),
    MysteryTheme("M07", "Spring Cleaning", "Spring 1926",
                 "Cleaning house uncovers more than dust",
                 ("Dining Room",)),
    MysteryTheme("M08", "A Princess Is Born", "Spring 1926",
                 "A royal visit brings glamour and danger to Tudor Mansion",
                 ("Billiard Room",)),
    MysteryTheme("M09", "A Grand Ball", "Spring 1926",
                 "The social event of the season ends in scandal",
                 ()),
    MysteryTheme("M10", "The Last Straw", "May 1926",
                 "Tensions finally boil over in this dramatic finale",
                 ("Lounge",)),
    MysteryTheme("M11", "Christmas at the Mansion", "December 1925",
                 "Holiday cheer can't hide the darkness within",
                 ("Rose Garden", "Fountain")),
    MysteryTheme("M12", "A Dark and Stormy Night", "Winter 1925-1926",
                 "Trapped by the storm, secrets come to light",
                 ("Rose Garden", "Fountain")),
)


CATALOG = GameCatalog(
    suspects=SUSPECTS,
    items=ITEMS,
    locations=LOCATIONS,
    times=TIME_PERIODS,
    themes=MYSTERY_THEMES,
)
"""
The default catalog, verified against the physical cards:
10 suspects, 11 items, 11 locations, 10 time periods (42 cards).
"""
