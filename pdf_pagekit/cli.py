"""
Command-line interface for PDF PageKit.
"""

import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from pdf_pagekit import __version__
from pdf_pagekit.config import EngineConfig
from pdf_pagekit.toolkit import SPLIT_METHODS, PageToolkit, parse_field_values
from pdf_pagekit.transforms import RedactionRect
from pdf_pagekit.utils import format_file_size

console = Console()


def _toolkit(ctx):
    return ctx.obj["toolkit"]


def _read(path):
    return Path(path).read_bytes()


def _write_outputs(outputs, output_dir):
    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)
    written = []
    for output in outputs:
        destination = target / output.name
        destination.write_bytes(output.data)
        written.append(destination)
    return written


def _report(written, sample_size=5):
    console.print(f"\n[bold green]✓ Created {len(written)} file(s)[/bold green]")
    if written:
        console.print(f"[dim]Output directory: {os.path.abspath(written[0].parent)}[/dim]")
    for path in written[:sample_size]:
        console.print(f"  • {path.name} ({format_file_size(path.stat().st_size)})")
    if len(written) > sample_size:
        console.print(f"  ... and {len(written) - sample_size} more")
    console.print()


def _fail(error):
    console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


def _with_progress(description, run):
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(description, total=None)

        def update_progress(current, total):
            progress.update(task, completed=current, total=total)

        return run(update_progress)


output_dir_option = click.option(
    '--output-dir', '-o',
    default='./output',
    help='Output directory',
    type=click.Path(file_okay=False),
)
password_option = click.option(
    '--password',
    default=None,
    help='Password for encrypted input',
    type=str,
)


@click.group()
@click.version_option(version=__version__)
@click.option('--strict-ranges', is_flag=True, default=None, help='Fail on malformed range tokens')
@click.option('--log-level', default=None, help='Logging level (DEBUG, INFO, WARNING, ERROR)')
@click.pass_context
def cli(ctx, strict_ranges, log_level):
    """
    PDF PageKit - Split, merge and transform PDF pages.

    Settings not given on the command line are read from PDF_PAGEKIT_*
    environment variables.
    """
    try:
        config = EngineConfig.from_env().with_updates(strict_ranges=strict_ranges, log_level=log_level)
    except ValueError as e:
        _fail(e)
    ctx.ensure_object(dict)
    ctx.obj["toolkit"] = PageToolkit(config)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@password_option
@click.pass_context
def show_info(ctx, input_pdf, password):
    """
    Display information about a PDF file.

    Example:

        pdf-pagekit info input.pdf
    """
    try:
        info = _toolkit(ctx).info(_read(input_pdf), password=password)

        table = Table(title=f"PDF Information: {os.path.basename(input_pdf)}")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        table.add_row("File Path", os.path.abspath(input_pdf))
        table.add_row("File Size", format_file_size(info.file_size))
        table.add_row("Number of Pages", str(info.num_pages))
        table.add_row("Encrypted", "Yes" if info.is_encrypted else "No")
        if info.page_sizes:
            width, height = info.page_sizes[0]
            table.add_row("First Page Size", f"{width:.1f} x {height:.1f} pt")

        for label, value in (
            ("Title", info.title),
            ("Author", info.author),
            ("Subject", info.subject),
            ("Creator", info.creator),
            ("Producer", info.producer),
        ):
            if value:
                table.add_row(label, value)

        console.print()
        console.print(table)
        console.print()
    except Exception as e:
        _fail(e)


@cli.command(name="split")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--method', '-m',
    default='each',
    type=click.Choice(SPLIT_METHODS),
    help='each: one file per page; pages: chunks of VALUE pages; range: one file per range',
)
@click.option('--value', '-v', default=None, help="Chunk size or range expression such as '1-3,5,7-9'")
@output_dir_option
@password_option
@click.pass_context
def split(ctx, input_pdf, method, value, output_dir, password):
    """
    Split a PDF into several files.

    Examples:

        pdf-pagekit split input.pdf

        pdf-pagekit split input.pdf -m pages -v 10

        pdf-pagekit split input.pdf -m range -v "1-3,5,7-9" -o parts
    """
    try:
        data = _read(input_pdf)
        outputs = _with_progress(
            "Splitting pages",
            lambda callback: _toolkit(ctx).split(
                data, method, value, password=password, progress_callback=callback
            ),
        )
        _report(_write_outputs(outputs, output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="merge")
@click.argument('input_pdfs', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@output_dir_option
@click.pass_context
def merge(ctx, input_pdfs, output_dir):
    """
    Merge PDFs in the order given.

    Example:

        pdf-pagekit merge a.pdf b.pdf c.pdf
    """
    try:
        sources = [_read(path) for path in input_pdfs]
        output = _with_progress(
            "Merging pages",
            lambda callback: _toolkit(ctx).merge(sources, progress_callback=callback),
        )
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="rotate")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--angle', '-a', default=90, type=int, help='Clockwise angle, a multiple of 90')
@output_dir_option
@password_option
@click.pass_context
def rotate(ctx, input_pdf, angle, output_dir, password):
    """Rotate every page."""
    try:
        output = _toolkit(ctx).rotate(_read(input_pdf), angle, password=password)
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="crop")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--top', default=0.0, type=float, help='Top margin in mm')
@click.option('--right', default=0.0, type=float, help='Right margin in mm')
@click.option('--bottom', default=0.0, type=float, help='Bottom margin in mm')
@click.option('--left', default=0.0, type=float, help='Left margin in mm')
@click.option('--first-page-only', is_flag=True, help='Crop only the first page')
@output_dir_option
@password_option
@click.pass_context
def crop(ctx, input_pdf, top, right, bottom, left, first_page_only, output_dir, password):
    """Crop page margins (millimetres)."""
    try:
        output = _toolkit(ctx).crop(
            _read(input_pdf),
            top=top,
            right=right,
            bottom=bottom,
            left=left,
            all_pages=not first_page_only,
            password=password,
        )
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="watermark")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--text', '-t', required=True, help='Watermark text')
@click.option('--opacity', default=None, type=float, help='Opacity in (0, 1]')
@output_dir_option
@password_option
@click.pass_context
def watermark(ctx, input_pdf, text, opacity, output_dir, password):
    """Stamp diagonal text on every page."""
    try:
        output = _toolkit(ctx).watermark(_read(input_pdf), text, opacity, password=password)
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="number")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--position', default='bottom', type=click.Choice(['top', 'bottom']))
@click.option('--align', default='center', type=click.Choice(['left', 'center', 'right']))
@click.option('--font-size', default=None, type=float)
@click.option('--start', 'start_number', default=1, type=int, help='Number printed on the first page')
@output_dir_option
@password_option
@click.pass_context
def number(ctx, input_pdf, position, align, font_size, start_number, output_dir, password):
    """Add page numbers."""
    try:
        output = _toolkit(ctx).add_page_numbers(
            _read(input_pdf),
            position=position,
            align=align,
            font_size=font_size,
            start_number=start_number,
            password=password,
        )
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="redact")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--rect', '-r', 'rects', multiple=True, required=True, help="Rectangle 'x,y,width,height' in preview pixels")
@click.option('--page', '-p', default=1, type=int, help='Page to redact (1-indexed)')
@click.option('--scale', default=None, type=float, help='Scale the rectangles were measured at')
@output_dir_option
@password_option
@click.pass_context
def redact(ctx, input_pdf, rects, page, scale, output_dir, password):
    """
    Black out rectangles on a page.

    The redacted page is flattened to an image, so its text is gone for good.

    Example:

        pdf-pagekit redact input.pdf -r 50,60,200,40 -r 50,300,120,20
    """
    try:
        rectangles = [RedactionRect.parse(value) for value in rects]
        output = _toolkit(ctx).redact(
            _read(input_pdf), rectangles, page=page, scale=scale, password=password
        )
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="compress")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--level', '-l', default=0.7, type=float, help='Lower is smaller (0.1 - 0.9)')
@output_dir_option
@password_option
@click.pass_context
def compress(ctx, input_pdf, level, output_dir, password):
    """Re-render pages as JPEG to reduce size."""
    try:
        data = _read(input_pdf)
        output = _with_progress(
            "Compressing pages",
            lambda callback: _toolkit(ctx).compress(
                data, level, password=password, progress_callback=callback
            ),
        )
        _report(_write_outputs([output], output_dir))
        console.print(
            f"[dim]{format_file_size(len(data))} → {format_file_size(output.size)}[/dim]\n"
        )
    except Exception as e:
        _fail(e)


@cli.command(name="to-images")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', 'image_format', default=None, type=click.Choice(['png', 'jpeg']))
@click.option('--scale', default=None, type=float, help='Render scale relative to 72 dpi')
@click.option('--quality', default=None, type=float, help='JPEG quality in (0, 1]')
@output_dir_option
@password_option
@click.pass_context
def to_images(ctx, input_pdf, image_format, scale, quality, output_dir, password):
    """Render every page to an image."""
    try:
        data = _read(input_pdf)
        outputs = _with_progress(
            "Rendering pages",
            lambda callback: _toolkit(ctx).to_images(
                data, image_format, scale, quality, password=password, progress_callback=callback
            ),
        )
        _report(_write_outputs(outputs, output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="to-pptx")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@output_dir_option
@password_option
@click.pass_context
def to_pptx(ctx, input_pdf, output_dir, password):
    """Turn every page into a full-slide image in converted.pptx."""
    try:
        data = _read(input_pdf)
        output = _with_progress(
            "Rendering slides",
            lambda callback: _toolkit(ctx).to_pptx(
                data, password=password, progress_callback=callback
            ),
        )
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="from-images")
@click.argument('images', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--page-size', default='a4', type=click.Choice(['a4', 'letter']))
@click.option('--orientation', default='portrait', type=click.Choice(['portrait', 'landscape']))
@click.option('--margin', default=10.0, type=float, help='Margin in mm')
@output_dir_option
@click.pass_context
def from_images(ctx, images, page_size, orientation, margin, output_dir):
    """Build a PDF with one image per page."""
    try:
        output = _toolkit(ctx).images_to_pdf(
            [_read(path) for path in images],
            page_size=page_size,
            orientation=orientation,
            margin_mm=margin,
        )
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="protect")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@output_dir_option
@click.pass_context
def protect(ctx, input_pdf, password, output_dir):
    """Encrypt a PDF with a password."""
    try:
        output = _toolkit(ctx).protect(_read(input_pdf), password)
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="unlock")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', prompt=True, hide_input=True)
@output_dir_option
@click.pass_context
def unlock(ctx, input_pdf, password, output_dir):
    """Remove password protection."""
    try:
        output = _toolkit(ctx).unlock(_read(input_pdf), password)
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="text")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--html', 'as_html', is_flag=True, help='Write one HTML file per page instead')
@output_dir_option
@password_option
@click.pass_context
def text(ctx, input_pdf, as_html, output_dir, password):
    """Extract page text to extracted.txt (or pageN.html)."""
    try:
        toolkit = _toolkit(ctx)
        data = _read(input_pdf)
        if as_html:
            outputs = toolkit.to_html(data, password=password)
        else:
            outputs = [toolkit.extract_text(data, password=password)]
        _report(_write_outputs(outputs, output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="compare")
@click.argument('first_pdf', type=click.Path(exists=True, dir_okay=False))
@click.argument('second_pdf', type=click.Path(exists=True, dir_okay=False))
@output_dir_option
@click.pass_context
def compare(ctx, first_pdf, second_pdf, output_dir):
    """Compare the text of two PDFs page by page."""
    try:
        output = _toolkit(ctx).compare(_read(first_pdf), _read(second_pdf))
        console.print(output.data.decode("utf-8"))
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="tables")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@output_dir_option
@password_option
@click.pass_context
def tables(ctx, input_pdf, output_dir, password):
    """Detect table rows and export them as CSV and XLSX."""
    try:
        toolkit = _toolkit(ctx)
        rows = toolkit.extract_tables(_read(input_pdf), password=password)

        preview = Table(title=f"Detected rows: {len(rows)}", show_header=False)
        for row in rows[:10]:
            preview.add_row(*row)
        console.print(preview)

        _report(_write_outputs(toolkit.export_tables(rows), output_dir))
    except Exception as e:
        _fail(e)


@cli.command(name="form-fields")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def form_fields(ctx, input_pdf):
    """List fillable form fields."""
    try:
        fields = _toolkit(ctx).form_fields(_read(input_pdf))

        table = Table(title="Form Fields")
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Value", style="green")
        for field in fields:
            table.add_row(field.name, field.field_type or "", field.value)
        console.print(table)
    except Exception as e:
        _fail(e)


@cli.command(name="fill-form")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--field', '-f', 'fields', multiple=True, required=True, help="Field value as 'name=value'")
@output_dir_option
@click.pass_context
def fill_form(ctx, input_pdf, fields, output_dir):
    """Fill form fields and flatten the form."""
    try:
        output = _toolkit(ctx).fill_form(_read(input_pdf), parse_field_values(fields))
        _report(_write_outputs([output], output_dir))
    except Exception as e:
        _fail(e)


if __name__ == '__main__':
    cli()
