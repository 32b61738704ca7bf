from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from takeout_sidecar.errors import EnrichmentShapeError

# Place coordinates are integers scaled by 10^7
E7_SCALE = 10_000_000

NARRATIVE_KEY = 'narrativeEnrichment'
LOCATION_KEY = 'locationEnrichment'


@dataclass(frozen=True)
class NarrativeEntry:
    text: str = ''

    def to_json(self) -> Dict[str, Any]:
        return {NARRATIVE_KEY: {'text': self.text}}


@dataclass(frozen=True)
class Place:
    name: str = ''
    description: str = ''
    latitude_e7: int = 0
    longitude_e7: int = 0

    @property
    def latitude(self) -> float:
        return self.latitude_e7 / E7_SCALE

    @property
    def longitude(self) -> float:
        return self.longitude_e7 / E7_SCALE


@dataclass(frozen=True)
class LocationEntry:
    places: Tuple[Place, ...] = ()

    def to_json(self) -> Dict[str, Any]:
        return {LOCATION_KEY: {'location': [
            {
                'name': p.name,
                'description': p.description,
                'latitudeE7': p.latitude_e7,
                'longitudeE7': p.longitude_e7,
            }
            for p in self.places
        ]}}


EnrichmentEntry = Union[NarrativeEntry, LocationEntry]


@dataclass(frozen=True)
class Enrichment:
    """Result of folding an album's enrichment entries together."""
    text: str = ''
    latitude: float = 0.0
    longitude: float = 0.0


def _text(value: Any, what: str, index: int) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise EnrichmentShapeError(f"{what} must be a string, got {type(value).__name__}", index)
    return value


def _e7(value: Any, what: str, index: int) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise EnrichmentShapeError(f"{what} must be an integer, got {type(value).__name__}", index)
    return value


def _parse_place(raw: Any, index: int) -> Place:
    if not isinstance(raw, Mapping):
        raise EnrichmentShapeError("location entries must be objects", index)
    return Place(
        name=_text(raw.get('name'), 'name', index),
        description=_text(raw.get('description'), 'description', index),
        latitude_e7=_e7(raw.get('latitudeE7'), 'latitudeE7', index),
        longitude_e7=_e7(raw.get('longitudeE7'), 'longitudeE7', index),
    )


def parse_entry(raw: Any, index: int = 0) -> EnrichmentEntry:
    """Turn one raw enrichment object into a typed entry.

    Exactly one of ``narrativeEnrichment`` or ``locationEnrichment`` must be
    present, anything else raises EnrichmentShapeError.
    """
    if isinstance(raw, (NarrativeEntry, LocationEntry)):
        return raw
    if not isinstance(raw, Mapping):
        raise EnrichmentShapeError(f"expected an object, got {type(raw).__name__}", index)

    kinds = [k for k in (NARRATIVE_KEY, LOCATION_KEY) if raw.get(k) is not None]
    if len(kinds) != 1:
        raise EnrichmentShapeError(
            f"expected exactly one of {NARRATIVE_KEY}/{LOCATION_KEY}, found {sorted(raw)}", index
        )

    body = raw[kinds[0]]
    if not isinstance(body, Mapping):
        raise EnrichmentShapeError(f"{kinds[0]} must be an object", index)

    if kinds[0] == NARRATIVE_KEY:
        return NarrativeEntry(text=_text(body.get('text'), 'text', index))

    places = body.get('location')
    if places is None:
        places = []
    if not isinstance(places, list):
        raise EnrichmentShapeError("location must be an array", index)
    return LocationEntry(places=tuple(_parse_place(p, index) for p in places))


def _append(text: str, sep: str, addition: str) -> str:
    if text:
        return text + sep + addition
    return addition


def merge_enrichments(entries: Iterable[Union[EnrichmentEntry, Mapping[str, Any]]]) -> Enrichment:
    """Fold narrative and location entries, in order, into one Enrichment.

    Narrative text and place names are joined with newlines, a place's
    description is joined to the text built so far with " - ". Coordinates
    are not accumulated: the last place seen wins.
    """
    text, latitude, longitude = '', 0.0, 0.0
    for index, raw in enumerate(entries or ()):
        entry = parse_entry(raw, index)

        if isinstance(entry, NarrativeEntry):
            if entry.text:
                text = _append(text, '\n', entry.text)
            continue

        for place in entry.places:
            if place.name:
                text = _append(text, '\n', place.name)
            if place.description:
                text = _append(text, ' - ', place.description)
            latitude, longitude = place.latitude, place.longitude

    return Enrichment(text=text, latitude=latitude, longitude=longitude)
