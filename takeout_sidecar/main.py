from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import json
import sys

import click
from tqdm import tqdm
from loguru import logger

from takeout_sidecar.metadata import Classification
from takeout_sidecar.processor import SidecarProcessor
from takeout_sidecar.timeresolver import TimeResolver

KINDS = {
    'all': {Classification.ALBUM, Classification.ASSET, Classification.UNDEFINED},
    'assets': {Classification.ASSET},
    'albums': {Classification.ALBUM},
}


def setup_logging(log_dir: Optional[Path], verbose: bool = False):
    """Configure loguru logger."""
    logger.remove()  # Remove default handler

    # Add colored stderr handler, stdout may carry records
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
    )

    if log_dir is None:
        return

    log_file = log_dir / f"sidecars_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    logger.add(
        log_file,
        level="DEBUG",
        rotation="100 MB",
        retention="1 week",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
    )


def find_sidecars(paths: Iterable[Path]) -> List[Path]:
    """Expand directories into the JSON files they contain."""
    sidecars = []
    for path in paths:
        if path.is_dir():
            sidecars.extend(sorted(path.rglob('*.json')))
        else:
            sidecars.append(path)
    return sidecars


@click.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option('--kind', type=click.Choice(list(KINDS)), default='all',
              help='Which records to write out')
@click.option('--output', '-o', type=click.File('w'), default='-',
              help='Where to write one JSON record per line (default: stdout)')
@click.option('--timezone', 'tz_name', default=None,
              help='IANA timezone for capture times. Defaults to TZ or the system zone.')
@click.option('--log-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory to store log files')
@click.option('--verbose', '-v', is_flag=True, help='Log debug messages')
def main(paths, kind: str, output, tz_name: Optional[str], log_dir: Optional[Path], verbose: bool):
    """Normalize Google Photos JSON sidecars into canonical metadata records."""
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(log_dir, verbose)

    tz = None
    if tz_name:
        try:
            tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            raise click.BadParameter(f"unknown timezone {tz_name!r}", param_hint='--timezone')

    processor = SidecarProcessor(TimeResolver(tz))
    wanted = KINDS[kind]

    sidecars = find_sidecars(paths)
    logger.info(f"Found {len(sidecars)} sidecar files to process")

    counts = {c: 0 for c in Classification}
    failed_files = []
    with tqdm(total=len(sidecars), desc='Processing sidecars', file=sys.stderr) as pbar:
        for json_path in sidecars:
            processed = processor.process_file(json_path)
            if processed is None:
                failed_files.append(json_path)
            else:
                counts[processed.kind] += 1
                if processed.kind in wanted:
                    output.write(json.dumps(processed.to_dict()) + '\n')
            pbar.update(1)

    # Log summary
    logger.info("Processing Summary:")
    logger.info(f"Total files processed: {len(sidecars)}")
    logger.info(f"Assets: {counts[Classification.ASSET]}")
    logger.info(f"Albums: {counts[Classification.ALBUM]}")
    logger.info(f"Undefined: {counts[Classification.UNDEFINED]}")
    logger.info(f"Failed: {len(failed_files)}")

    if failed_files:
        sys.exit(1)


if __name__ == '__main__':
    main()
