"""
Command-Line Interface

Render, generate and inspect arterial trees from the command line.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace

from .analysis.topology import EPSILON, MATCH_METHODS
from .analysis.structure import compute_tree_stats
from .visualization.attributes import ColorMode
from .visualization.tree_plots import plot_render_data, save_render
from .io.serialize import save_json
from .adapters.networkx_adapter import to_networkx_digraph, write_graphml
from .pipeline import TreeViewer, ViewerConfig, load_viewer_config, load_tree
from .utils import setup_logging

from generators.arterial import ProceduralTreeConfig, generate_procedural_tree, get_preset, list_presets

logger = logging.getLogger(__name__)


def _add_analysis_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--method",
        choices=MATCH_METHODS,
        default=None,
        help="Endpoint matching strategy (default: grid)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help=f"Coincidence tolerance, Manhattan distance (default: {EPSILON})",
    )
    parser.add_argument(
        "--forest",
        action="store_true",
        help="Measure every disconnected component from its own root",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arterial-tree",
        description="Arterial Tree Viewer - reconstruct, measure and draw 2D vascular trees",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=str, default=None, help="Also write the log here")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a tree file (or the procedural tree)")
    render_parser.add_argument(
        "files",
        nargs="*",
        help="VTK tree files; the first one is rendered. None: procedural tree",
    )
    render_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="ViewerConfig JSON file (command-line flags override it)",
    )
    render_parser.add_argument(
        "--color-mode", "-c",
        choices=[m.value for m in ColorMode],
        default=None,
        help="Color mode (default: depth)",
    )
    render_parser.add_argument(
        "--thickness", "-t",
        action="store_true",
        help="Scale line width with descendant count",
    )
    render_parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Save the image here instead of opening a window",
    )
    render_parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not open a plot window",
    )
    _add_analysis_args(render_parser)

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Write the procedural tree as JSON")
    gen_parser.add_argument(
        "--preset",
        choices=list_presets(),
        default="arterial_default",
        help="Generator preset (default: arterial_default)",
    )
    gen_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: preset seed, 42)",
    )
    gen_parser.add_argument(
        "--output", "-o",
        type=str,
        required=True,
        help="Output JSON path",
    )

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Print tree statistics as JSON")
    stats_parser.add_argument("file", nargs="?", default=None, help="VTK tree file (default: procedural)")
    stats_parser.add_argument(
        "--graphml",
        type=str,
        default=None,
        help="Also export the reconstructed tree as GraphML",
    )
    _add_analysis_args(stats_parser)

    return parser


def cmd_render(args) -> int:
    config = load_viewer_config(args.config) if args.config else ViewerConfig()

    render = config.render
    if args.color_mode:
        render = render.with_color_mode(ColorMode.from_name(args.color_mode))
    if args.thickness:
        render = render.with_thickness(True)

    # only flags given on the command line override the config file
    overrides = {"forest": config.forest or args.forest, "render": render}
    if args.files:
        overrides["tree_files"] = list(args.files)
    if args.method is not None:
        overrides["match_method"] = args.method
    if args.tolerance is not None:
        overrides["tolerance"] = args.tolerance
    # replace() re-runs ViewerConfig validation
    config = replace(config, **overrides)

    viewer = TreeViewer(config)
    if viewer.tree_files:
        result = viewer.load_current()
        for warning in result.warnings:
            logger.warning(warning)
    else:
        viewer.load_procedural()

    data = viewer.frame()
    title = f"{viewer.soup.source} - {viewer.render_config.color_mode.value}"

    if args.output:
        path = save_render(data, args.output, title=title)
        print(f"Saved render to {path}")
    elif not args.no_show:
        plot_render_data(data, show=True, title=title)
    return 0


def cmd_generate(args) -> int:
    config: ProceduralTreeConfig = get_preset(args.preset)
    if args.seed is not None:
        config.random_seed = args.seed

    soup = generate_procedural_tree(config)
    save_json(soup, args.output)
    print(f"Wrote {len(soup)} segments to {args.output}")
    return 0


def cmd_stats(args) -> int:
    if args.file:
        soup = load_tree(args.file).soup
    else:
        soup = generate_procedural_tree()

    viewer = TreeViewer(ViewerConfig(
        tolerance=args.tolerance if args.tolerance is not None else EPSILON,
        match_method=args.method or "grid",
        forest=args.forest,
    ))
    viewer.set_soup(soup)
    analysis = viewer.analyze()

    stats = compute_tree_stats(soup, analysis.topology, analysis.metrics)
    print(json.dumps(stats, indent=2, default=str))

    if args.graphml:
        G = to_networkx_digraph(soup, analysis.topology, analysis.metrics)
        path = write_graphml(G, args.graphml)
        print(f"Wrote GraphML to {path}")
    return 0


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "render": cmd_render,
        "generate": cmd_generate,
        "stats": cmd_stats,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
