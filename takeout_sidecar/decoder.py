"""Decode Google Photos sidecar JSON into RawMetadataRecord values.

The same top-level object can either be an asset sidecar or an album
descriptor that nests its metadata under ``albumData``. The wrapped shape
is tried first; when it does not hold a usable object the payload is
decoded as a flat sidecar.
"""
import json
from typing import Any, Dict, Mapping, Optional, Union

from loguru import logger

from takeout_sidecar.enrichments import parse_entry
from takeout_sidecar.errors import EnrichmentShapeError, StructuralDecodeError
from takeout_sidecar.metadata import GeoData, PresenceField, RawMetadataRecord, TimeObject

ALBUM_KEY = 'albumData'


def _load(data: Union[bytes, bytearray, str]) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StructuralDecodeError(f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise StructuralDecodeError("JSON nested too deeply") from e


def _object(value: Any, path: str) -> Optional[Mapping[str, Any]]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise StructuralDecodeError(f"expected an object, got {type(value).__name__}", path)
    return value


def _string(value: Any, path: str) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise StructuralDecodeError(f"expected a string, got {type(value).__name__}", path)
    return value


def _boolean(value: Any, path: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise StructuralDecodeError(f"expected a boolean, got {type(value).__name__}", path)
    return value


def _number(value: Any, path: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise StructuralDecodeError(f"expected a number, got {type(value).__name__}", path)
    return float(value)


def _time(value: Any, path: str) -> Optional[TimeObject]:
    obj = _object(value, path)
    if obj is None:
        return None
    return TimeObject(
        timestamp=_string(obj.get('timestamp'), f"{path}.timestamp"),
        formatted=_string(obj.get('formatted'), f"{path}.formatted"),
    )


def _geo(value: Any, path: str) -> Optional[GeoData]:
    obj = _object(value, path)
    if obj is None:
        return None
    return GeoData(
        latitude=_number(obj.get('latitude'), f"{path}.latitude"),
        longitude=_number(obj.get('longitude'), f"{path}.longitude"),
        altitude=_number(obj.get('altitude'), f"{path}.altitude"),
    )


def _flat(obj: Any) -> RawMetadataRecord:
    obj = _object(obj, '$')
    if obj is None:
        raise StructuralDecodeError("expected an object, got null", '$')

    enrichments = obj.get('enrichments')
    if enrichments is None:
        enrichments = []
    if not isinstance(enrichments, list):
        raise StructuralDecodeError(
            f"expected an array, got {type(enrichments).__name__}", 'enrichments'
        )

    origin = _object(obj.get('googlePhotosOrigin'), 'googlePhotosOrigin') or {}

    return RawMetadataRecord(
        title=_string(obj.get('title'), 'title'),
        description=_string(obj.get('description'), 'description'),
        category=_string(obj.get('category'), 'category'),
        date=_time(obj.get('date'), 'date'),
        photo_taken_time=_time(obj.get('photoTakenTime'), 'photoTakenTime'),
        geo_data_exif=_geo(obj.get('geoDataExif'), 'geoDataExif'),
        geo_data=_geo(obj.get('geoData'), 'geoData'),
        trashed=_boolean(obj.get('trashed'), 'trashed'),
        archived=_boolean(obj.get('archived'), 'archived'),
        url=PresenceField.of(obj['url']) if 'url' in obj else PresenceField.absent(),
        favorited=_boolean(obj.get('favorited'), 'favorited'),
        enrichments=tuple(parse_entry(e, i) for i, e in enumerate(enrichments)),
        from_partner_sharing=(
            PresenceField.of(origin['fromPartnerSharing'])
            if 'fromPartnerSharing' in origin else PresenceField.absent()
        ),
    )


def decode_sidecar(data: Union[bytes, bytearray, str]) -> RawMetadataRecord:
    """Decode one sidecar payload, album-wrapped or flat.

    Raises StructuralDecodeError for malformed JSON or mistyped fields, and
    EnrichmentShapeError for an enrichment entry of unknown kind.
    """
    payload = _load(data)

    if isinstance(payload, Mapping) and payload.get(ALBUM_KEY) is not None:
        try:
            return _flat(payload[ALBUM_KEY])
        except (StructuralDecodeError, EnrichmentShapeError) as e:
            logger.debug(f"{ALBUM_KEY} is not a usable album wrapper ({e}), decoding as flat sidecar")

    return _flat(payload)


def _time_json(t: TimeObject) -> Dict[str, str]:
    out = {'timestamp': t.timestamp}
    if t.formatted:
        out['formatted'] = t.formatted
    return out


def _geo_json(g: GeoData) -> Dict[str, float]:
    return {'latitude': g.latitude, 'longitude': g.longitude, 'altitude': g.altitude}


def encode_sidecar(record: RawMetadataRecord) -> bytes:
    """Encode a record back to the flat sidecar shape."""
    out: Dict[str, Any] = {
        'title': record.title,
        'description': record.description,
    }
    if record.category:
        out['category'] = record.category
    if record.date is not None:
        out['date'] = _time_json(record.date)
    if record.photo_taken_time is not None:
        out['photoTakenTime'] = _time_json(record.photo_taken_time)
    if record.geo_data_exif is not None:
        out['geoDataExif'] = _geo_json(record.geo_data_exif)
    if record.geo_data is not None:
        out['geoData'] = _geo_json(record.geo_data)
    if record.trashed:
        out['trashed'] = True
    if record.archived:
        out['archived'] = True
    if record.url.is_present:
        out['url'] = record.url.raw
    if record.favorited:
        out['favorited'] = True
    if record.enrichments:
        out['enrichments'] = [e.to_json() for e in record.enrichments]
    if record.from_partner_sharing.is_present:
        out['googlePhotosOrigin'] = {'fromPartnerSharing': record.from_partner_sharing.raw}
    return json.dumps(out).encode('utf-8')
