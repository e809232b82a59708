# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for certrender.

Renders certificates from JSON job files, lists the form fields of a
template, and lists the known document kinds.

A job file looks like::

    {
        "record_id": "8c1d...",
        "issued_at": "2024-05-01T09:30:00",
        "field_map": {"engineer_name": "A. Smith", ...},
        "appliances": [{"location": "Kitchen", ...}],
        "photos": [{"category": "before"}]
    }
"""

# Standard Library
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Third Party
import click
from colorama import Fore, Style, init
from tqdm import tqdm

# Local
from . import __version__
from .document import RenderRequest, RenderResult, render_document
from .exceptions import (
    CertRenderError,
    TemplateLoadError,
    UnknownDocumentKindError,
)
from .forms import FormIndex
from .kinds import KINDS, get_kind
from .templates import TemplateStore
from .utils import setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_RENDER_FAILED = 3

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}✓{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}✗ Error:{Style.RESET_ALL} {msg}", err=True)


def print_warning(msg: str) -> None:
    """Prints a warning in yellow.

    Args:
        msg: The warning to output.
    """
    click.echo(f"{Fore.YELLOW}⚠{Style.RESET_ALL} {msg}")


def load_job(path: Path) -> RenderRequest:
    """Reads a JSON job file into a render request.

    ``record_id`` defaults to the file stem.

    Raises:
        ValueError: If the file is not valid JSON or lacks ``issued_at``.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path.name}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: expected a JSON object")

    issued_raw = data.get("issued_at")
    if not issued_raw:
        raise ValueError(f"{path.name}: missing issued_at")
    try:
        issued_at = datetime.fromisoformat(str(issued_raw).replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"{path.name}: invalid issued_at {issued_raw!r}") from e

    return RenderRequest(
        field_map=dict(data.get("field_map") or {}),
        issued_at=issued_at,
        record_id=str(data.get("record_id") or path.stem),
        appliances=tuple(data.get("appliances") or ()),
        preview_mode=bool(data.get("preview_mode", False)),
        photos=tuple(data.get("photos") or ()),
    )


def _print_report(result: RenderResult, quiet: bool) -> None:
    report = result.report
    if quiet or report.is_complete:
        return
    for skipped in report.skipped:
        if skipped.reason.value != "already_filled":
            print_warning(
                f"{skipped.key}: not written to {skipped.target} "
                f"({skipped.reason.value})"
            )
    for key in report.truncated:
        print_warning(f"{key}: text truncated")
    for slot in report.images_failed:
        print_warning(f"{slot}: image could not be embedded")


def _render_one(
    kind_name: str,
    job_path: Path,
    output_path: Path | None,
    output_dir: Path,
    *,
    preview: bool,
    qr_image: bytes | None,
    templates: TemplateStore,
    force: bool,
    quiet: bool,
) -> int:
    request = load_job(job_path)
    result = render_document(
        kind_name,
        request.field_map,
        request.appliances,
        issued_at=request.issued_at,
        record_id=request.record_id,
        preview_mode=preview or request.preview_mode,
        photos=request.photos,
        qr_image=qr_image,
        templates=templates,
    )
    target = output_path or output_dir / result.filename
    if target.exists() and not force:
        print_error(f"Output file already exists: {target}. Use --force to overwrite.")
        return EXIT_GENERAL_ERROR
    target.write_bytes(result.pdf_bytes)
    if not quiet:
        print_success(
            f"Rendered: {job_path.name} -> {target.name} "
            f"({result.metadata['page_count']} page(s), {result.report.strategy})"
        )
    _print_report(result, quiet)
    return EXIT_SUCCESS


@click.group()
@click.option("-q", "--quiet", is_flag=True, help="Only output errors")
@click.option("--verbose", is_flag=True, help="Detailed output")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, quiet: bool, verbose: bool) -> None:
    """Renders gas certificates and job paperwork to PDF."""
    # Initialize colorama for Windows compatibility
    init()
    setup_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"quiet": quiet}


@main.command()
@click.argument("kind")
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
@click.argument("output", required=False, type=click.Path(path_type=Path))
@click.option("--preview", is_flag=True, help="Show placeholders in empty boxes")
@click.option(
    "--template-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the template PDFs "
    "(default: $CERTRENDER_TEMPLATE_DIR or ./templates)",
)
@click.option(
    "--qr-image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="PNG or JPEG placed as the job sheet QR code",
)
@click.option("-f", "--force", is_flag=True, help="Overwrite existing files")
@click.pass_context
def render(
    ctx: click.Context,
    kind: str,
    input_path: Path,
    output: Path | None,
    preview: bool,
    template_dir: Path | None,
    qr_image: Path | None,
    force: bool,
) -> None:
    """Renders KIND documents from JSON job files.

    INPUT_PATH is a job file or a directory of job files.
    OUTPUT is the output PDF (single job) or directory (default: current
    directory).
    """
    quiet = ctx.obj["quiet"]
    templates = TemplateStore(template_dir)
    qr_bytes = qr_image.read_bytes() if qr_image is not None else None

    try:
        get_kind(kind)
        if input_path.is_file():
            if output is not None and output.is_dir():
                output_path, output_dir = None, output
            else:
                output_path, output_dir = output, Path.cwd()
            exit_code = _render_one(
                kind,
                input_path,
                output_path,
                output_dir,
                preview=preview,
                qr_image=qr_bytes,
                templates=templates,
                force=force,
                quiet=quiet,
            )
        else:
            exit_code = _render_directory(
                kind,
                input_path,
                output or Path.cwd(),
                preview=preview,
                qr_image=qr_bytes,
                templates=templates,
                force=force,
                quiet=quiet,
            )
    except UnknownDocumentKindError as e:
        print_error(str(e))
        exit_code = EXIT_GENERAL_ERROR
    except TemplateLoadError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except (ValueError, CertRenderError) as e:
        print_error(str(e))
        exit_code = EXIT_RENDER_FAILED
    except PermissionError as e:
        print_error(f"Access denied: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)


def _render_directory(
    kind_name: str,
    input_dir: Path,
    output_dir: Path,
    *,
    preview: bool,
    qr_image: bytes | None,
    templates: TemplateStore,
    force: bool,
    quiet: bool,
) -> int:
    """Renders every ``*.json`` job in a directory.

    A job that fails is reported and the rest still run; a missing
    template stops the batch since every job would fail the same way.

    Returns:
        Exit code.
    """
    jobs = sorted(input_dir.glob("*.json"))
    if not jobs:
        print_warning(f"No JSON job files found in {input_dir}")
        return EXIT_SUCCESS
    output_dir.mkdir(parents=True, exist_ok=True)

    failed = 0
    for job_path in tqdm(
        jobs, desc="Rendering", unit="file", ncols=80, disable=quiet
    ):
        try:
            code = _render_one(
                kind_name,
                job_path,
                None,
                output_dir,
                preview=preview,
                qr_image=qr_image,
                templates=templates,
                force=force,
                quiet=True,
            )
        except ValueError as e:
            print_error(str(e))
            code = EXIT_RENDER_FAILED
        if code != EXIT_SUCCESS:
            failed += 1

    logger.info(
        "Directory render completed: %d successful, %d failed",
        len(jobs) - failed,
        failed,
    )
    if not quiet:
        click.echo(f"\nSummary: {len(jobs) - failed} successful, {failed} failed")
    return EXIT_RENDER_FAILED if failed else EXIT_SUCCESS


@main.command()
@click.argument(
    "template", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def fields(template: Path) -> None:
    """Lists the form fields of TEMPLATE with their kind, page and position."""
    store = TemplateStore(template.parent)
    try:
        pdf = store.open(template.name)
    except TemplateLoadError as e:
        print_error(str(e))
        sys.exit(EXIT_FILE_NOT_FOUND)

    with pdf:
        index = FormIndex(pdf)
        if not len(index):
            print_warning(f"{template.name} has no form fields")
            return
        for entry in sorted(index, key=lambda f: f.name):
            page = "-" if entry.page_index is None else str(entry.page_index + 1)
            if entry.rect is None:
                position = ""
            else:
                x, y, w, h = entry.rect
                position = f"  [{x:.0f}, {y:.0f}, {w:.0f} x {h:.0f}]"
            click.echo(f"{entry.name}\t{entry.kind.value}\tpage {page}{position}")


@main.command()
def kinds() -> None:
    """Lists the document kinds that can be rendered."""
    for name, kind in KINDS.items():
        source = kind.template or ("flow layout" if kind.flow else "drawn")
        click.echo(f"{name}\t{kind.title}\t{source}")


if __name__ == "__main__":
    main()
