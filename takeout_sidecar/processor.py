from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from .canonical import Canonicalizer
from .decoder import decode_sidecar
from .errors import DecodeError
from .metadata import AlbumInfo, CanonicalMetadata, Classification, RawMetadataRecord
from .timeresolver import TimeResolver


@dataclass(frozen=True)
class ProcessedSidecar:
    """A decoded sidecar together with what it turned into."""
    path: Path
    record: RawMetadataRecord
    kind: Classification
    result: Union[CanonicalMetadata, AlbumInfo, None]

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'path': str(self.path), 'kind': self.kind.value}
        if isinstance(self.result, CanonicalMetadata):
            out['key'] = list(self.record.key())
        if self.result is not None:
            out.update(self.result.to_dict())
        return out


class SidecarProcessor:
    """Decodes sidecar files one at a time."""

    def __init__(self, resolver: Optional[TimeResolver] = None):
        self.canonicalizer = Canonicalizer(resolver)

    def process_bytes(self, path: Path, data: bytes) -> ProcessedSidecar:
        record = decode_sidecar(data)
        kind = record.classification

        if kind is Classification.ALBUM:
            result = self.canonicalizer.album_info(record)
        elif kind is Classification.ASSET:
            result = self.canonicalizer.canonicalize(record)
        else:
            logger.warning(f"Neither album nor asset timestamp in: {path}")
            result = None

        return ProcessedSidecar(path=path, record=record, kind=kind, result=result)

    def process_file(self, json_path: Path) -> Optional[ProcessedSidecar]:
        """Process a single sidecar file, returning None when it can't be read."""
        try:
            data = json_path.read_bytes()
        except OSError as e:
            logger.error(f"Cannot read {json_path}: {e}")
            return None

        try:
            return self.process_bytes(json_path, data)
        except DecodeError as e:
            logger.error(f"Invalid sidecar {json_path.name}: {e}")
            return None
