"""Curated collaborator table for a handful of heavily-requested artists.

Last adapter in the fallback chain.  Everything here is a verified,
public credit; the table exists so that demo artists always render a
meaningful network even when every remote source is down.

Lookup is exact first, then case-insensitive.
"""

from __future__ import annotations

from src.interfaces.collaborator_source import ICollaboratorSource
from src.models.network import CollaborationDetails, CollaboratorCandidate, Role
from src.utils.logging import get_logger
from src.utils.text_normalizer import casefold_key

# artist -> [(collaborator, role, top collaborators)]
KNOWN_COLLABORATIONS: dict[str, list[tuple[str, Role, list[str]]]] = {
    "Taylor Swift": [
        ("Jack Antonoff", Role.PRODUCER, ["Lorde", "Lana Del Rey", "St. Vincent"]),
        ("Aaron Dessner", Role.PRODUCER, ["Bon Iver", "The National", "Gracie Abrams"]),
        ("Max Martin", Role.PRODUCER, ["Ariana Grande", "The Weeknd", "Katy Perry"]),
        ("Shellback", Role.PRODUCER, ["Pink", "Maroon 5", "Adam Lambert"]),
        ("William Bowery", Role.SONGWRITER, ["Taylor Swift"]),
        ("Ryan Tedder", Role.SONGWRITER, ["OneRepublic", "Adele", "Beyoncé"]),
    ],
    "Drake": [
        ('Noah "40" Shebib', Role.PRODUCER, ["The Weeknd", "PartyNextDoor", "Majid Jordan"]),
        ("Boi-1da", Role.PRODUCER, ["Eminem", "Kendrick Lamar", "Rihanna"]),
        ("Hit-Boy", Role.PRODUCER, ["Kanye West", "Jay-Z", "Nas"]),
        ("PartyNextDoor", Role.SONGWRITER, ["Rihanna", "Bryson Tiller", "Jeremih"]),
    ],
    "Billie Eilish": [
        ("FINNEAS", Role.PRODUCER, ["Ashe", "Selena Gomez", "Camila Cabello"]),
        ("FINNEAS", Role.SONGWRITER, ["Ashe", "Selena Gomez", "Camila Cabello"]),
        ("Rob Kinelski", Role.PRODUCER, ["Big Sean", "Halsey", "Justin Bieber"]),
    ],
    "Ariana Grande": [
        ("Max Martin", Role.PRODUCER, ["Taylor Swift", "The Weeknd", "Katy Perry"]),
        ("ILYA", Role.PRODUCER, ["Ellie Goulding", "Jessie J", "Sam Smith"]),
        ("Tommy Brown", Role.PRODUCER, ["Mariah Carey", "Travis Scott", "Fifth Harmony"]),
        ("Savan Kotecha", Role.SONGWRITER, ["One Direction", "The Weeknd", "Demi Lovato"]),
    ],
    "The Weeknd": [
        ("Max Martin", Role.PRODUCER, ["Taylor Swift", "Ariana Grande", "Katy Perry"]),
        ("Illangelo", Role.PRODUCER, ["Drake", "Lana Del Rey", "Halsey"]),
        ("Oscar Holter", Role.PRODUCER, ["Ariana Grande", "Katy Perry", "Troye Sivan"]),
        ("Doc McKinney", Role.SONGWRITER, ["Santigold", "Esthero", "Drake"]),
    ],
    "Post Malone": [
        ("Louis Bell", Role.PRODUCER, ["Camila Cabello", "Halsey", "Justin Bieber"]),
        ("Frank Dukes", Role.PRODUCER, ["Drake", "Camila Cabello", "Kanye West"]),
        ("Andrew Watt", Role.PRODUCER, ["Ozzy Osbourne", "Miley Cyrus", "Pearl Jam"]),
        ("Billy Walsh", Role.SONGWRITER, ["Swae Lee", "Justin Bieber", "Ozzy Osbourne"]),
    ],
    "Ed Sheeran": [
        ("Johnny McDaid", Role.SONGWRITER, ["Snow Patrol", "Pink", "Taylor Swift"]),
        ("Benny Blanco", Role.PRODUCER, ["Justin Bieber", "Selena Gomez", "Maroon 5"]),
        ("Steve Mac", Role.PRODUCER, ["Westlife", "Clean Bandit", "Little Mix"]),
        ("Fred Gibson", Role.PRODUCER, ["Ellie Goulding", "Jessie Ware", "Swedish House Mafia"]),
    ],
    "Katy Perry": [
        ("Dr. Luke", Role.PRODUCER, ["Kesha", "Britney Spears", "Kelly Clarkson"]),
        ("Max Martin", Role.PRODUCER, ["Taylor Swift", "Ariana Grande", "The Weeknd"]),
        ("Bonnie McKee", Role.SONGWRITER, ["Britney Spears", "Kesha", "Christina Aguilera"]),
        ("Greg Kurstin", Role.PRODUCER, ["Adele", "Sia", "Foo Fighters"]),
    ],
}


def lookup(artist_name: str) -> list[tuple[str, Role, list[str]]]:
    """Table rows for *artist_name*: exact key, else case-insensitive."""
    if artist_name in KNOWN_COLLABORATIONS:
        return KNOWN_COLLABORATIONS[artist_name]
    key = casefold_key(artist_name)
    for known, rows in KNOWN_COLLABORATIONS.items():
        if casefold_key(known) == key:
            return rows
    return []


class KnownCollaborationsSource(ICollaboratorSource):
    """Static, in-process collaborator source."""

    def __init__(self) -> None:
        self._logger = get_logger(__name__)

    async def fetch_collaborators(self, artist_name: str) -> list[CollaboratorCandidate]:
        rows = lookup(artist_name)
        self._logger.debug("known_collaborations_lookup", artist=artist_name, rows=len(rows))
        return [
            CollaboratorCandidate(
                name=name,
                role=role,
                relation_label="frequent collaborator",
                top_collaborator_names=list(top),
                source=self.get_provider_name(),
            )
            for name, role, top in rows
        ]

    async def fetch_collaboration_details(
        self, artist_name: str, collaborator_name: str
    ) -> CollaborationDetails | None:
        roles = [role.value for name, role, _ in lookup(artist_name) if name == collaborator_name]
        if not roles:
            return None
        return CollaborationDetails(
            artist1=artist_name,
            artist2=collaborator_name,
            details=f"{collaborator_name} is a frequent {' and '.join(roles)} for {artist_name}.",
            source=self.get_provider_name(),
        )

    def get_provider_name(self) -> str:
        return "known"

    def is_available(self) -> bool:
        return True
