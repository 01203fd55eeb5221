"""
PlaneSolver — Entry point.

Reduce a system of up to four equations in x, y and z step by step and
print every intermediate matrix, the classification of the system and the
geometry of its planes.

    python main.py "x + y + z = 3, x - y + z = 1, 2x + y - z = 2"
    python main.py "x + y + z = 3" "x - y + z = 1" --figure planes.png
"""

import argparse
import sys

from planesolver import storage
from planesolver.analysis import describe
from planesolver.formatting import format_matrix, format_point
from planesolver.graph import build_figure, set_theme
from planesolver.logging_config import setup_logging
from planesolver.parsing import parse_system
from planesolver.session import MatrixSession


def run(text: str = "") -> MatrixSession:
    """Solve *text* (or the default sample) and print the walk-through."""
    session = MatrixSession(parse_system(text) if text.strip() else None)
    session.compute()

    for index, step in enumerate(session.steps):
        print(f"Step {index}: {step['description']}")
        print(format_matrix(step["matrix"]))
        print()

    print(describe(session.analysis))

    session.go_to_step(session.step_count - 1)
    scene = session.scene()
    for item in scene["points"]:
        rows = ", ".join(f"R{r + 1}" for r in item["rows"])
        print(f"Planes {rows} meet at {format_point(item['point'])}")
    return session


def save_figure(session: MatrixSession, path: str, settings: dict) -> None:
    """Render the original planes of *session* to an image file."""
    set_theme(settings["theme"])
    fig = build_figure(
        session.matrix,
        title=session.analysis["summary"] if session.analysis else "",
        segment_length=settings["segment_length"],
        show_intersections=settings["show_intersections"],
    )
    fig.savefig(path)
    print(f"Figure saved to {path}")


def parse_args(argv) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="planesolver",
        description="Row-reduce a system of linear equations in x, y and z.",
    )
    parser.add_argument(
        "equations", nargs="*",
        help="Equations, one per argument or separated by ',' or ';'",
    )
    parser.add_argument("--figure", default=None, help="Save a 3-D preview to this path")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = storage.get_settings()
    setup_logging(settings["log_level"])
    try:
        session = run(", ".join(args.equations))
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.figure:
        save_figure(session, args.figure, settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
