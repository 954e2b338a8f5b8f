import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from colorama import Fore, Style
from colorama import init as colorama_init
from dotenv import load_dotenv  # type: ignore[import-not-found]

from edidparse.__version__ import __version__
from edidparse.parser.descriptor import (
    DetailedTimingDescriptor,
    Dummy,
    OpaqueDescriptor,
    TextDescriptor,
    Unknown,
)
from edidparse.parser.errors import EdidError
from edidparse.source import DEFAULT_DRM_ROOT, EdidSource, discover_connectors

logger = logging.getLogger(__name__)


def _describe_descriptor(slot: int, desc: object) -> str:
    """Return one summary line for a descriptor slot."""

    if isinstance(desc, DetailedTimingDescriptor):
        t = desc.timing
        rate = t.refresh_rate()
        rate_text = f" @ {rate:.2f} Hz" if rate is not None else ""
        return (
            f"  [{slot}] detailed timing: {t.horizontal_active}x"
            f"{t.vertical_active}{rate_text}, {t.pixel_clock} kHz, "
            f"{t.horizontal_size}x{t.vertical_size} mm"
        )
    if isinstance(desc, TextDescriptor):
        return f"  [{slot}] {desc.kind}: {desc.text!r}"
    if isinstance(desc, OpaqueDescriptor):
        return f"  [{slot}] {desc.kind}: {desc.data.hex(' ')}"
    if isinstance(desc, Unknown):
        return f"  [{slot}] unknown tag 0x{desc.tag:02X}: {desc.data.hex(' ')}"
    if isinstance(desc, Dummy):
        return f"  [{slot}] dummy"
    return f"  [{slot}] {desc!r}"


def format_source(source: EdidSource) -> List[str]:
    """Render a decoded source as human readable lines."""

    edid = source.edid
    header = edid.header
    display = edid.display
    lines = [
        f"{Style.BRIGHT}{source.name}{Style.RESET_ALL}",
        f"  vendor {header.vendor_id}, product {header.product}, "
        f"serial {header.serial}",
        f"  made week {header.week} of {header.full_year}, "
        f"EDID {header.version}.{header.revision}",
        f"  input 0x{display.video_input:02X}, "
        f"{display.width_cm}x{display.height_cm} cm, "
        f"gamma {display.gamma_value():.2f}, "
        f"features 0x{display.features:02X}",
    ]
    for slot, desc in enumerate(edid.descriptors):
        lines.append(_describe_descriptor(slot, desc))
    lines.append(
        f"  extensions {edid.extension_count}, "
        f"{source.remaining} byte(s) after base block"
    )
    return lines


def _check_checksum(source: EdidSource) -> bool:
    if source.checksum_ok:
        click.echo(f"  {Fore.GREEN}checksum OK{Style.RESET_ALL}")
        return True
    logger.warning("Checksum mismatch in %s", source.path)
    click.echo(f"  {Fore.YELLOW}checksum mismatch{Style.RESET_ALL}")
    return False


@click.group()
@click.option(
    "--debug/--no-debug", default=False, help="Enable verbose debug logging."
)
@click.option(
    "--trace/--no-trace", default=False, help="Enable trace level logging."
)
@click.option(
    "--log-file",
    type=click.Path(file_okay=True, dir_okay=False),
    envvar="EDIDPARSE_LOG_FILE",
    help=("Path to write log output to instead of stderr."),
)
@click.version_option(__version__, prog_name="edidparse")
def cli(debug: bool, trace: bool, log_file: Optional[str] = None) -> None:
    """Decode EDID blocks read from files or DRM sysfs."""
    colorama_init(autoreset=True)
    if trace:
        level = 1
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        filename=log_file or None,
        level=level,
        format="[%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if trace:
        logging.debug("Trace mode is on")
    if debug:
        logging.debug("Debug mode is on")
    load_dotenv()


@cli.command(name="decode")
@click.argument(
    "path",
    type=click.Path(
        file_okay=True, dir_okay=False, exists=True, path_type=Path
    ),
)
@click.option(
    "--hex/--binary",
    "hex_text",
    default=False,
    show_default=True,
    help="Read PATH as a text hex dump instead of raw bytes.",
)
@click.option(
    "--check-checksum/--no-check-checksum",
    "check_checksum",
    default=False,
    show_default=True,
    help="Verify the base block checksum after decoding.",
)
def decode(path: Path, hex_text: bool, check_checksum: bool) -> None:
    """Decode the EDID dump stored in PATH."""

    try:
        source = EdidSource.create(path, hex_text=hex_text)
    except ValueError as exc:
        logger.error("Failed to decode %s: %s", path, exc)
        click.echo(f"{Fore.RED}Invalid EDID: {exc}{Style.RESET_ALL}", err=True)
        sys.exit(1)
    if source is None:
        click.echo("File is empty.", err=True)
        sys.exit(1)

    for line in format_source(source):
        click.echo(line)
    if check_checksum and not _check_checksum(source):
        sys.exit(2)


@cli.command(name="scan")
@click.argument(
    "root",
    type=click.Path(
        file_okay=False, dir_okay=True, exists=True, path_type=Path
    ),
    envvar="EDIDPARSE_DRM_ROOT",
    default=DEFAULT_DRM_ROOT,
)
@click.option(
    "--check-checksum/--no-check-checksum",
    "check_checksum",
    default=False,
    show_default=True,
    help="Verify the base block checksum of every connector.",
)
def scan(root: Path, check_checksum: bool) -> None:
    """Decode the EDID of every connected DRM connector under ROOT."""

    decoded_count = 0
    failed_count = 0
    for name, edid_path in discover_connectors(root):
        try:
            source = EdidSource.create(edid_path, name=name)
        except EdidError:
            logger.exception("Failed to decode %s", edid_path)
            failed_count += 1
            continue
        if source is None:
            continue

        decoded_count += 1
        for line in format_source(source):
            click.echo(line)
        if check_checksum:
            _check_checksum(source)

    click.echo(
        f"Done. Decoded {decoded_count} connector(s), {failed_count} failed."
    )


@cli.command(name="to-xlsx")
@click.argument(
    "root",
    type=click.Path(
        file_okay=True, dir_okay=True, exists=True, path_type=Path
    ),
    envvar="EDIDPARSE_DRM_ROOT",
    default=DEFAULT_DRM_ROOT,
)
@click.option(
    "--xlsx",
    "xlsx_path",
    type=click.Path(
        file_okay=True, dir_okay=False, writable=True, path_type=Path
    ),
    default=Path("edid.xlsx"),
    show_default=True,
    help="Path to the XLSX file to create.",
)
def to_xlsx(root: Path, xlsx_path: Path) -> None:
    """Export decoded EDIDs to an XLSX workbook.

    ROOT is either a single dump file or a DRM sysfs directory whose
    connectors are all exported.
    """

    from edidparse.xl import export_to_xlsx

    if root.is_file():
        candidates = [(root.name, root)]
    else:
        candidates = discover_connectors(root)

    sources: List[EdidSource] = []
    for name, edid_path in candidates:
        try:
            source = EdidSource.create(edid_path, name=name)
        except EdidError:
            logger.exception("Failed to decode %s", edid_path)
            continue
        if source is not None:
            sources.append(source)

    if not sources:
        click.echo("No EDID found.", err=True)
        return

    export_to_xlsx(sources, xlsx_path)
    click.echo(f"Done. Exported {len(sources)} EDID(s) to {xlsx_path}")
