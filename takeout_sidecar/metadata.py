from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from takeout_sidecar.enrichments import Enrichment, EnrichmentEntry

_ABSENT = object()


@dataclass(frozen=True)
class GeoData:
    """GPS block, either ``geoDataExif`` or ``geoData``."""
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0

    @property
    def is_zero(self) -> bool:
        return self.latitude == 0 and self.longitude == 0


@dataclass(frozen=True)
class TimeObject:
    """An epoch timestamp block such as ``photoTakenTime``."""
    timestamp: str = ''
    formatted: str = ''


@dataclass(frozen=True)
class PresenceField:
    """A field whose presence matters more than its content.

    Absent and present-but-empty are different states: ``raw`` keeps
    whatever the exporter wrote, so ``{}`` stays distinguishable from a
    missing key.
    """
    raw: Any = _ABSENT

    @classmethod
    def absent(cls) -> 'PresenceField':
        return cls()

    @classmethod
    def of(cls, raw: Any) -> 'PresenceField':
        if raw is None:
            return cls()
        return cls(raw)

    @property
    def is_present(self) -> bool:
        return self.raw is not _ABSENT

    def __bool__(self) -> bool:
        if not self.is_present:
            return False
        if isinstance(self.raw, bool):
            return self.raw
        return True

    def __repr__(self) -> str:
        if not self.is_present:
            return 'PresenceField.absent()'
        return f'PresenceField.of({self.raw!r})'


class Classification(Enum):
    ALBUM = 'album'
    ASSET = 'asset'
    UNDEFINED = 'undefined'


@dataclass(frozen=True)
class RawMetadataRecord:
    """One decoded sidecar, before any reconciliation."""
    title: str = ''
    description: str = ''
    category: str = ''
    date: Optional[TimeObject] = None
    photo_taken_time: Optional[TimeObject] = None
    geo_data_exif: Optional[GeoData] = None
    geo_data: Optional[GeoData] = None
    trashed: bool = False
    archived: bool = False
    url: PresenceField = field(default_factory=PresenceField.absent)
    favorited: bool = False
    enrichments: Tuple[EnrichmentEntry, ...] = ()
    from_partner_sharing: PresenceField = field(default_factory=PresenceField.absent)

    @property
    def capture_timestamp(self) -> str:
        return self.photo_taken_time.timestamp if self.photo_taken_time else ''

    @property
    def album_timestamp(self) -> str:
        return self.date.timestamp if self.date else ''

    @property
    def url_present(self) -> bool:
        return bool(self.url)

    @property
    def is_album(self) -> bool:
        return self.album_timestamp != ''

    @property
    def is_asset(self) -> bool:
        return self.capture_timestamp != ''

    @property
    def is_partner(self) -> bool:
        return bool(self.from_partner_sharing)

    @property
    def classification(self) -> Classification:
        if self.is_album:
            return Classification.ALBUM
        if self.is_asset:
            return Classification.ASSET
        return Classification.UNDEFINED

    def key(self) -> Tuple[str, str]:
        """Identity used to spot duplicates: title and the raw capture timestamp."""
        return self.title, self.capture_timestamp


@dataclass(frozen=True)
class CanonicalMetadata:
    """Normalized metadata for one photo or video.

    ``capture_instant`` is None when the time is unknown. A location of
    (0, 0) also means unknown.
    """
    file_name: str = ''
    description: str = ''
    capture_instant: Optional[datetime] = None
    latitude: float = 0.0
    longitude: float = 0.0
    trashed: bool = False
    archived: bool = False
    favorited: bool = False
    from_partner: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'fileName': self.file_name,
            'description': self.description,
            'captureInstant': self.capture_instant.isoformat() if self.capture_instant else None,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'trashed': self.trashed,
            'archived': self.archived,
            'favorited': self.favorited,
            'fromPartner': self.from_partner,
        }


@dataclass(frozen=True)
class AlbumInfo:
    title: str = ''
    description: str = ''
    enrichment: Enrichment = field(default_factory=Enrichment)

    @property
    def location(self) -> str:
        return self.enrichment.text

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'description': self.description,
            'location': self.enrichment.text,
            'latitude': self.enrichment.latitude,
            'longitude': self.enrichment.longitude,
        }
