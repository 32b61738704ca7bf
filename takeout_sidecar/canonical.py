from typing import Optional

from takeout_sidecar.enrichments import merge_enrichments
from takeout_sidecar.metadata import AlbumInfo, CanonicalMetadata, GeoData, RawMetadataRecord
from takeout_sidecar.timeresolver import TimeResolver


def select_location(record: RawMetadataRecord) -> GeoData:
    """Prefer the EXIF block, falling back to the API block.

    An EXIF location of exactly (0, 0) counts as missing, so a photo really
    taken at (0, 0) takes the API coordinates instead.
    """
    exif = record.geo_data_exif or GeoData()
    if not exif.is_zero:
        return exif
    return record.geo_data or GeoData()


class Canonicalizer:
    """Builds CanonicalMetadata from raw records."""

    def __init__(self, resolver: Optional[TimeResolver] = None):
        self.resolver = resolver or TimeResolver()

    def canonicalize(self, record: RawMetadataRecord) -> CanonicalMetadata:
        geo = select_location(record)
        # date.timestamp belongs to the album, never to the capture time
        return CanonicalMetadata(
            file_name=record.title,
            description=record.description,
            capture_instant=self.resolver.resolve(record.capture_timestamp),
            latitude=geo.latitude,
            longitude=geo.longitude,
            trashed=record.trashed,
            archived=record.archived,
            favorited=record.favorited,
            from_partner=record.is_partner,
        )

    @staticmethod
    def album_info(record: RawMetadataRecord) -> AlbumInfo:
        return AlbumInfo(
            title=record.title,
            description=record.description,
            enrichment=merge_enrichments(record.enrichments),
        )


def canonicalize(record: RawMetadataRecord, resolver: Optional[TimeResolver] = None) -> CanonicalMetadata:
    return Canonicalizer(resolver).canonicalize(record)


def album_info(record: RawMetadataRecord) -> AlbumInfo:
    return Canonicalizer.album_info(record)
