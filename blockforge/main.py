"""Command-line entry point for blockforge.

This tool loads an image, pixelates it into square blocks with the chosen
sampling mode, color effect and palette size, optionally overlays a grid,
and writes either a native-size preview or watermarked exports at one or
more integer scales.

All processing occurs on NumPy arrays; Pillow is used only for decoding,
encoding and drawing the watermark text.

Usage example:
    python -m blockforge.main -i input.png -o output.png --pixel 8 --effect posterize --levels 4 --scale 1 2 4
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Optional

from .effects import parse_hex_color
from .errors import BlockforgeError
from .export import BATCH_SCALES, export_batch
from .presets import PRESETS_FILE, PresetStore, all_presets, find_preset
from .settings import COLOR_EFFECTS, SAMPLING_MODES, SHAPES, PixelSettings
from .utils.loader import MAX_INPUT_BYTES, read_image_bytes
from .utils.pixelate import pixelate_image


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="blockforge",
        description=(
            "Pixelate images into blocks with sampling, color effects and "
            "palette reduction, and export watermarked PNGs at integer scales."
        ),
    )

    parser.add_argument("-i", "--input", help="Path to input image file")
    parser.add_argument("-o", "--output", help="Path to output PNG file")

    parser.add_argument("--preset", type=str, default=None, help="Start from a named preset")
    parser.add_argument("--pixel", type=int, default=None, help="Block size in source pixels (>=1)")
    parser.add_argument("--shape", type=str, default=None, choices=SHAPES, help="Block shape")
    parser.add_argument(
        "--sampling",
        type=str,
        default=None,
        choices=SAMPLING_MODES,
        help="Block color: averaged | nearest (top-left pixel)",
    )
    parser.add_argument(
        "--effect",
        type=str,
        default=None,
        choices=COLOR_EFFECTS,
        help="Color effect: normal | grayscale | duotone | posterize",
    )
    parser.add_argument(
        "--colors",
        type=int,
        default=None,
        help="Target palette size (approximate total colors, 2..256).",
    )
    parser.add_argument("--levels", type=int, default=None, help="Posterize levels (2..8)")
    parser.add_argument(
        "--duotone",
        nargs=2,
        metavar=("DARK", "LIGHT"),
        default=None,
        help="Duotone gradient endpoints as #rrggbb",
    )
    parser.add_argument(
        "--grid",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Overlay block boundaries",
    )

    parser.add_argument(
        "--scale",
        type=int,
        nargs="+",
        default=None,
        help="Export scale factor(s) (>=1). Several scales write one file each.",
    )
    parser.add_argument(
        "--batch",
        action="store_true",
        help=f"Export at scales {', '.join(str(s) for s in BATCH_SCALES)}",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Write the native-size pixelation only (no upscale, no watermark)",
    )

    parser.add_argument(
        "--presets-file",
        type=Path,
        default=PRESETS_FILE,
        help=f"User presets file (default: {PRESETS_FILE})",
    )
    parser.add_argument("--save-preset", type=str, default=None, help="Store the resulting settings under NAME")
    parser.add_argument("--delete-preset", type=str, default=None, help="Delete the user preset NAME")
    parser.add_argument("--list-presets", action="store_true", help="List built-in and user presets")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def validate_args(ns: argparse.Namespace) -> None:
    """Validate argument values and raise ValueError for invalid inputs.

    Parameters
    ----------
    ns : argparse.Namespace
        Parsed CLI arguments.
    """
    if ns.input is None or ns.output is None:
        raise ValueError("--input and --output are required to process an image")
    if ns.pixel is not None and ns.pixel < 1:
        raise ValueError("--pixel must be an integer >= 1")
    if ns.scale is not None and any(s < 1 for s in ns.scale):
        raise ValueError("--scale must be an integer >= 1")
    if ns.colors is not None and not 2 <= ns.colors <= 256:
        raise ValueError("--colors must be in 2..256")
    if ns.preview and (ns.scale or ns.batch):
        raise ValueError("--preview cannot be combined with --scale or --batch")
    p = Path(ns.input)
    if not p.exists():
        raise ValueError(f"Input file not found: {ns.input}")
    if p.stat().st_size > MAX_INPUT_BYTES:
        raise ValueError(f"Input file exceeds {MAX_INPUT_BYTES // (1024 * 1024)} MB: {ns.input}")


def build_settings(ns: argparse.Namespace, store: Optional[PresetStore] = None) -> PixelSettings:
    """Start from ``--preset`` (or defaults) and apply explicit options on top."""
    base = find_preset(ns.preset, store).settings if ns.preset else PixelSettings()

    changes: dict[str, Any] = {}
    if ns.pixel is not None:
        changes["pixel_size"] = ns.pixel
    if ns.shape is not None:
        changes["shape"] = ns.shape
    if ns.sampling is not None:
        changes["sampling"] = ns.sampling
    if ns.effect is not None:
        changes["color_effect"] = ns.effect
    if ns.colors is not None:
        changes["palette_size"] = ns.colors
    if ns.levels is not None:
        changes["posterize_levels"] = ns.levels
    if ns.duotone is not None:
        changes["duotone_color1"] = parse_hex_color(ns.duotone[0])
        changes["duotone_color2"] = parse_hex_color(ns.duotone[1])
    if ns.grid is not None:
        changes["show_grid"] = ns.grid
    return base.replace(**changes) if changes else base


def output_paths(output: Path, scales: list[int]) -> dict[int, Path]:
    """One output path per scale; several scales get a ``-<N>x`` suffix."""
    if len(scales) == 1:
        return {scales[0]: output}
    return {s: output.with_name(f"{output.stem}-{s}x{output.suffix or '.png'}") for s in scales}


def _list_presets(store: PresetStore) -> None:
    user = {p.name for p in store.load()}
    for p in all_presets(store):
        tag = "user" if p.name in user else "built-in"
        print(f"{p.name} [{tag}]: {p.settings.to_dict()}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry function for the CLI.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing.

    Returns
    -------
    int
        Exit status code (0 for success, non-zero for failure).
    """
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    store = PresetStore(args.presets_file)

    # Preset housekeeping needs no image
    if args.list_presets or args.delete_preset:
        if args.delete_preset:
            try:
                store.delete(args.delete_preset)
            except KeyError:
                print(f"No user preset named {args.delete_preset!r}")
                return 2
            print(f"Deleted preset {args.delete_preset!r}")
        if args.list_presets:
            _list_presets(store)
        if args.input is None:
            return 0

    try:
        validate_args(args)
        settings = build_settings(args, store)
    except KeyError as e:
        print(f"Argument error: unknown preset {e}")
        return 2
    except ValueError as e:
        print(f"Argument error: {e}")
        return 2

    if args.save_preset:
        store.save(args.save_preset, settings)
        print(f"Saved preset {args.save_preset!r}")

    data = read_image_bytes(args.input)
    output = Path(args.output)

    if args.preview:
        try:
            output.write_bytes(pixelate_image(data, settings))
        except BlockforgeError as e:
            print(f"Preview failed: {e}")
            return 1
        return 0

    scales = list(BATCH_SCALES) if args.batch else (args.scale or [1])
    paths = output_paths(output, scales)
    status = 0
    for result in export_batch(data, settings, scales):
        if result.ok:
            paths[result.scale].write_bytes(result.data)  # type: ignore[arg-type]
            print(f"Wrote {paths[result.scale]} ({result.scale}x)")
        else:
            print(f"Failed to export {result.scale}x: {result.error}")
            status = 1
    return status


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
