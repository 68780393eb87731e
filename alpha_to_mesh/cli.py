#!/usr/bin/env python3
"""
Command-line interface for the alpha image to mesh converter.

This module handles all the CLI-specific stuff: argument parsing, pretty
printing, error display, etc. The actual conversion logic lives in
alpha_to_mesh.py and can be imported/used programmatically.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .constants import (
    DEFAULT_THRESHOLD,
    DEFAULT_DETAIL,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_OUTPUT_SUFFIX,
    HORIZONTAL,
    MODE_NAMES,
    OUTPUT_FORMATS,
    SUPPORTED_IMAGE_EXTENSIONS,
    __version__
)
from .config import GeometryConfig, parse_mode
from .alpha_to_mesh import convert_image_to_mesh
from .region_builder import EmptySilhouetteError

# Create Rich consoles for output and errors
console = Console()
error_console = Console(stderr=True)

STAGE_LABELS = {
    "load": "[cyan]📁 Loading image...",
    "scan": "[magenta]🔍 Scanning rows...",
    "triangulate": "[magenta]🔺 Triangulating...",
    "mesh": "[blue]🎲 Building mesh...",
    "validate": "[yellow]🩺 Validating mesh...",
    "export": "[green]📦 Writing mesh...",
    "debug": "[green]🖼  Rendering overlay...",
}


def is_image_file(filepath: Path) -> bool:
    """Check if a file is a supported image format."""
    return filepath.suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS


def default_output_path(input_path: Path, output_format: str) -> Path:
    """{input_name}_mesh.{format} next to the input image."""
    return input_path.with_name(input_path.stem + DEFAULT_OUTPUT_SUFFIX + "." + output_format)


def configure_logging(verbose: bool) -> None:
    """
    Send the package's debug logs to stderr when --verbose is given.

    Only the alpha_to_mesh logger is touched so embedding applications keep
    their own logging configuration.
    """
    if not verbose:
        return

    package_logger = logging.getLogger('alpha_to_mesh')
    package_logger.setLevel(logging.DEBUG)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('   [%(name)s] %(message)s'))
        package_logger.addHandler(handler)


def generate_batch_summary(
    results: Dict[str, List[Dict[str, Any]]],
    output_folder: Path,
    start_time: datetime,
    end_time: datetime
) -> str:
    """
    Generate a Markdown summary of batch processing results.

    Args:
        results: Dictionary with 'success', 'skipped' and 'failed' lists
        output_folder: Where to write the summary file
        start_time: When batch processing started
        end_time: When batch processing finished

    Returns:
        Path to the generated summary file
    """
    timestamp = start_time.strftime("%Y%m%d%H%M%S")
    summary_path = output_folder / f"batch_summary_{timestamp}.md"

    duration = end_time - start_time

    lines = []
    lines.append("# Batch Conversion Summary")
    lines.append(f"**Date:** {start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"**Duration:** {duration.total_seconds():.1f} seconds")
    lines.append("")

    lines.append("## Results Overview")
    lines.append(f"- ✅ **Successful:** {len(results['success'])} files")
    lines.append(f"- ⚠️  **Skipped (no silhouette):** {len(results['skipped'])} files")
    lines.append(f"- ❌ **Failed:** {len(results['failed'])} files")
    lines.append("")

    if results['success']:
        lines.append("## ✅ Successful Conversions")
        lines.append("")
        lines.append("| Input File | Output File | Regions | Triangles | File Size |")
        lines.append("|------------|-------------|---------|-----------|-----------|")

        for item in results['success']:
            lines.append(
                f"| {item['input_file']} | {item['output_file']} | "
                f"{item['num_regions']} | {item['num_triangles']} | {item['file_size']} |"
            )
        lines.append("")

    if results['skipped']:
        lines.append("## ⚠️  Skipped Files")
        lines.append("")
        for item in results['skipped']:
            lines.append(f"### {item['input_file']}")
            lines.append(f"**Reason:** {item['reason']}")
            lines.append("")

    if results['failed']:
        lines.append("## ❌ Failed Files")
        lines.append("")
        for item in results['failed']:
            lines.append(f"### {item['input_file']}")
            lines.append(f"**Error:** {item['error']}")
            lines.append("")

    summary_path.write_text('\n'.join(lines), encoding='utf-8')

    return str(summary_path)


def process_batch(
    input_folder: Path,
    output_folder: Path,
    config: GeometryConfig,
    recurse: bool = False
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Convert every image in a folder.

    Images without any opaque silhouette are reported as skipped; any
    other error marks the file as failed. Processing always continues
    with the next file.

    Args:
        input_folder: Folder containing input images
        output_folder: Folder where mesh files should be written
        config: GeometryConfig shared by every file
        recurse: If True, process subfolders and mirror their structure

    Returns:
        Dictionary with 'success', 'skipped' and 'failed' results
    """
    results = {
        'success': [],
        'skipped': [],
        'failed': []
    }

    output_folder.mkdir(parents=True, exist_ok=True)

    if recurse:
        image_files = [f for f in input_folder.rglob('*') if f.is_file() and is_image_file(f)]
    else:
        image_files = [f for f in input_folder.iterdir() if f.is_file() and is_image_file(f)]

    if not image_files:
        console.print(f"[yellow]⚠️  No image files found in {input_folder}[/yellow]")
        return results

    console.print(f"[cyan]📁 Found {len(image_files)} image(s) to process[/cyan]")
    console.print()

    for i, input_path in enumerate(sorted(image_files), start=1):
        console.print(f"[cyan][{i}/{len(image_files)}] Processing: {input_path.name}[/cyan]")

        relative_path = input_path.relative_to(input_folder) if recurse else Path(input_path.name)
        output_file_path = default_output_path(output_folder / relative_path, config.output_format)
        output_file_path.parent.mkdir(parents=True, exist_ok=True)
        input_display = str(relative_path)

        try:
            stats = convert_image_to_mesh(
                input_path=str(input_path),
                output_path=str(output_file_path),
                config=config
            )

            results['success'].append({
                'input_file': input_display,
                'output_file': str(output_file_path.relative_to(output_folder)),
                'num_regions': stats['num_regions'],
                'num_triangles': stats['num_triangles'],
                'file_size': stats['file_size']
            })
            console.print(
                f"[green]   ✅ Success: {stats['num_regions']} regions, "
                f"{stats['num_triangles']} triangles, {stats['file_size']}[/green]"
            )

        except EmptySilhouetteError as e:
            results['skipped'].append({
                'input_file': input_display,
                'reason': str(e)
            })
            console.print("[yellow]   ⚠️  Skipped: no opaque silhouette[/yellow]")

        except Exception as e:
            results['failed'].append({
                'input_file': input_display,
                'error': str(e)
            })
            error_console.print(f"[red]   ❌ Failed: {e}[/red]")

        console.print()

    return results


def build_parser() -> argparse.ArgumentParser:
    """Set up the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Convert images with transparency into flat silhouette meshes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single file conversion
  %(prog)s leaf.png
  %(prog)s leaf.png --output leaf.obj --detail 0.2
  %(prog)s tree.png --threshold 128 --mode vertical --format json --debug

  # Batch mode
  %(prog)s --batch --batch-input sprites/ --batch-output meshes/ --recurse

The program will:
  1. Load your image and read its alpha channel
  2. Find where each row switches between opaque and transparent
  3. Group rows with the same outline into regions
  4. Stitch triangle strips across each region
  5. Export positions, normals and UVs as OBJ or JSON
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show program's version number and exit"
    )

    parser.add_argument(
        "image_file",
        type=str,
        nargs='?',
        help="Input image file (PNG, WEBP, etc.) - not used in batch mode"
    )

    parser.add_argument(
        "--batch",
        action="store_true",
        help="Enable batch mode to process multiple images from a folder"
    )

    parser.add_argument(
        "--batch-input",
        type=str,
        default="batch/input",
        help="Input folder for batch mode (default: batch/input)"
    )

    parser.add_argument(
        "--batch-output",
        type=str,
        default="batch/output",
        help="Output folder for batch mode (default: batch/output)"
    )

    parser.add_argument(
        "--recurse",
        action="store_true",
        help="Process subfolders recursively in batch mode, maintaining folder structure in output"
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output mesh file path (default: {input_name}_mesh.{format})"
    )

    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Alpha value below which pixels are transparent, 0-255 (default: {DEFAULT_THRESHOLD})"
    )

    parser.add_argument(
        "--detail",
        type=float,
        default=DEFAULT_DETAIL,
        help=f"Triangle density between 0 and 1, bigger means more triangles (default: {DEFAULT_DETAIL})"
    )

    parser.add_argument(
        "--mode",
        type=str,
        choices=sorted(MODE_NAMES.values()),
        default=MODE_NAMES[HORIZONTAL],
        help="Whether image rows run along the mesh's horizontal or vertical axis (default: horizontal)"
    )

    parser.add_argument(
        "--format",
        type=str,
        choices=sorted(OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help=f"Output mesh format (default: {DEFAULT_OUTPUT_FORMAT})"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Also save a PNG overlay of the detected regions and triangles"
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check the generated mesh for winding, degenerate faces and bounds"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print debug logging from the triangulation stages"
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.batch:
        if args.image_file:
            error_console.print("[red]❌ Error: Don't specify an image file when using --batch mode[/red]")
            error_console.print("[red]   Use --batch-input to specify the input folder instead[/red]")
            sys.exit(1)
    elif not args.image_file:
        error_console.print("[red]❌ Error: Image file is required (or use --batch mode)[/red]")
        parser.print_help()
        sys.exit(1)

    configure_logging(args.verbose)

    try:
        config = GeometryConfig(
            threshold=args.threshold,
            detail=args.detail,
            mode=parse_mode(args.mode),
            debug_render=args.debug,
            validate_mesh=args.validate,
            output_format=args.format
        )
    except ValueError as e:
        error_console.print(f"[red]❌ Error: Invalid configuration: {e}[/red]")
        sys.exit(1)

    # =========================================================================
    # Batch mode
    # =========================================================================
    if args.batch:
        input_folder = Path(args.batch_input)
        output_folder = Path(args.batch_output)

        if not input_folder.is_dir():
            error_console.print(f"[red]❌ Error: Batch input folder not found: {input_folder}[/red]")
            sys.exit(1)

        start_time = datetime.now()
        results = process_batch(input_folder, output_folder, config, recurse=args.recurse)
        end_time = datetime.now()

        summary_path = generate_batch_summary(results, output_folder, start_time, end_time)

        console.print(Panel.fit(
            f"[bold]Batch complete:[/bold] "
            f"[green]{len(results['success'])} converted[/green], "
            f"[yellow]{len(results['skipped'])} skipped[/yellow], "
            f"[red]{len(results['failed'])} failed[/red]\n"
            f"Summary: {summary_path}",
            border_style="green" if not results['failed'] else "yellow"
        ))

        if results['failed']:
            sys.exit(1)
        return

    # =========================================================================
    # Single file mode
    # =========================================================================
    input_path = Path(args.image_file)
    output_path = args.output or str(default_output_path(input_path, config.output_format))

    config_table = Table(show_header=False, box=box.SIMPLE, padding=(0, 1))
    config_table.add_column("Setting", style="bold cyan")
    config_table.add_column("Value", style="white")
    config_table.add_row("Input", str(input_path))
    config_table.add_row("Output", output_path)
    config_table.add_row("Threshold", f"{config.threshold:g}")
    config_table.add_row("Detail", f"{config.detail:g}")
    config_table.add_row("Mode", config.mode_name)
    console.print(config_table)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=False
    ) as progress:
        tasks: Dict[str, Any] = {}

        def progress_callback(stage: str, message: str):
            label = STAGE_LABELS.get(stage, stage)
            if stage not in tasks:
                for task_id in tasks.values():
                    progress.update(task_id, completed=1, total=1)
                tasks[stage] = progress.add_task(f"{label} {message}", total=None)
            else:
                progress.update(tasks[stage], description=f"{label} {message}")

        try:
            stats = convert_image_to_mesh(
                input_path=str(input_path),
                output_path=output_path,
                config=config,
                progress_callback=progress_callback
            )
            for task_id in tasks.values():
                progress.update(task_id, completed=1, total=1)
        except FileNotFoundError as e:
            error_console.print(f"\n[red]❌ Error: {e}[/red]")
            sys.exit(1)
        except EmptySilhouetteError as e:
            error_console.print(f"\n[red]❌ No geometry: {e}[/red]")
            error_console.print(f"[yellow]   Try a lower --threshold (current: {config.threshold:g})[/yellow]")
            sys.exit(1)
        except ValueError as e:
            error_console.print(f"\n[red]❌ Invalid parameter: {e}[/red]")
            sys.exit(1)
        except Exception as e:
            error_console.print(f"\n[red]❌ Unexpected error: {e}[/red]")
            import traceback
            traceback.print_exc()
            sys.exit(1)

    console.print()
    console.print(Panel.fit(
        "[bold green]✅ Conversion complete![/bold green]",
        border_style="green"
    ))

    stats_table = Table(show_header=False, box=box.SIMPLE, padding=(0, 1))
    stats_table.add_column("Label", style="bold cyan")
    stats_table.add_column("Value", style="white")

    stats_table.add_row("Image:", f"{stats['image_width']} x {stats['image_height']} pixels")
    stats_table.add_row("Regions:", f"{stats['num_regions']} (max {stats['max_transitions']} transitions per row)")
    stats_table.add_row("Triangles:", f"{stats['num_triangles']} ({stats['num_vertices']} vertices)")
    stats_table.add_row("Output:", f"{stats['output_path']} ({stats['file_size']})")

    if 'debug_path' in stats:
        stats_table.add_row("Overlay:", stats['debug_path'])

    console.print(stats_table)

    if 'validation' in stats:
        validation = stats['validation']
        if validation.is_valid:
            console.print("[green]✓ Mesh validation passed[/green]")
        else:
            for error in validation.errors:
                error_console.print(f"[red]   ✗ {error}[/red]")
        for warning in validation.warnings:
            console.print(f"[yellow]   ⚠ {warning}[/yellow]")

    console.print()


if __name__ == "__main__":
    main()
