"""
Command line interface reporting on the layers of a vector data source.

Usage:

.. code-block:: shell

    vecinfo [-ro] [-q] [-where expr] [-spat xmin ymin xmax ymax]
            [-geomfield name] [-fid id] [-sql stmt] [-dialect name] [-al]
            [-so] [-fields={YES/NO}] [-geom={YES/NO/SUMMARY}] [-xml] [-json]
            [-rc n] [--formats] [--version] datasource [layer ...]

Copyright (C) 2024 The vecinfo developers

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""

from __future__ import annotations

import argparse
import sys

from typing import List, Optional

from vecinfo import __version__
from vecinfo.config import get_settings
from vecinfo.core.datasource import available_drivers, open_datasource
from vecinfo.core.geometry import spatial_filter_from_bounds
from vecinfo.report.config import (
    DisplayOptions,
    GeometryDisplay,
    ReportFormat,
    RunConfiguration,
)
from vecinfo.report.filter import LayerFilter
from vecinfo.report.reporter import LayerReporter
from vecinfo.utils.exceptions import (
    DataSourceOpenError,
    InvalidAttributeFilterError,
    LayerNotFoundError,
    UnsupportedFormatError,
)

Settings = get_settings()
logger = Settings.logger


class ArgumentParser(argparse.ArgumentParser):
    """argument parser exiting with status 1 on usage errors"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="vecinfo",
        description="Lists information about the layers of a vector data source",
        allow_abbrev=False,
    )
    parser.add_argument("datasource", nargs="?", help="path or URL of the data source")
    parser.add_argument("layers", nargs="*", help="names of the layers to report on")
    parser.add_argument(
        "-ro", action="store_true", help="open read-only (data sources are never written)"
    )
    parser.add_argument(
        "-q", "-quiet", dest="quiet", action="store_true", help="report layer names only"
    )
    parser.add_argument("-where", help="attribute filter (SQL WHERE clause)")
    parser.add_argument(
        "-spat",
        nargs=4,
        type=float,
        metavar=("xmin", "ymin", "xmax", "ymax"),
        help="spatial filter rectangle",
    )
    parser.add_argument(
        "-geomfield", help="geometry field the spatial filter applies to"
    )
    parser.add_argument("-fid", type=int, help="report the feature with this identifier only")
    parser.add_argument("-sql", help="SQL statement whose result set is reported")
    parser.add_argument("-dialect", help="SQL dialect (e.g., OGRSQL or SQLITE)")
    parser.add_argument(
        "-al", dest="all_layers", action="store_true", help="report on all layers"
    )
    parser.add_argument(
        "-so", "-summary", dest="summary_only", action="store_true",
        help="summary only, no features"
    )
    parser.add_argument(
        "-fields",
        type=str.upper,
        choices=["YES", "NO"],
        help="display attribute fields of features",
    )
    parser.add_argument(
        "-geom",
        type=str.upper,
        choices=[member.value for member in GeometryDisplay],
        help="display of feature geometries",
    )
    parser.add_argument(
        "-xml",
        dest="output_format",
        action="store_const",
        const=ReportFormat.XML_TREE,
        help="XML output",
    )
    parser.add_argument(
        "-json",
        dest="output_format",
        action="store_const",
        const=ReportFormat.JSON_TREE,
        help="JSON output (not supported)",
    )
    parser.add_argument(
        "-rc", dest="repeat_count", type=int, default=1, help="repeat count"
    )
    parser.add_argument(
        "--formats", action="store_true", help="list the supported drivers and exit"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.set_defaults(output_format=ReportFormat.PLAIN_TEXT)
    return parser


def driver_listing() -> List[str]:
    """lines listing the available drivers and their access modes"""
    return [
        f"  -> {name} ({modes})" for name, modes in sorted(available_drivers().items())
    ]


def config_from_args(args: argparse.Namespace) -> RunConfiguration:
    """
    Builds the run configuration from parsed command line arguments

    :param args:
        parsed arguments
    :returns:
        immutable run configuration
    """
    display_kwargs = {}
    if args.fields is not None:
        display_kwargs["fields"] = args.fields == "YES"
    if args.geom is not None:
        display_kwargs["geometry"] = GeometryDisplay(args.geom)
    return RunConfiguration(
        verbose=not args.quiet,
        summary_only=args.summary_only,
        fetch_fid=args.fid,
        display=DisplayOptions(**display_kwargs),
        repeat_count=args.repeat_count,
        output_format=args.output_format,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point of the `vecinfo` command

    :param argv:
        command line arguments (without program name). Taken from `sys.argv`
        if not provided.
    :returns:
        exit code (0 on success, 1 on failure)
    """
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    if args.formats:
        print("Supported Formats:")
        for line in driver_listing():
            print(line)
        return 0
    if args.datasource is None:
        parser.print_usage(sys.stderr)
        return 1

    try:
        config = config_from_args(args)
        spatial_filter = None
        if args.spat is not None:
            spatial_filter = spatial_filter_from_bounds(*args.spat)
        layer_filter = LayerFilter(
            where=args.where,
            spatial_filter=spatial_filter,
            geom_field=args.geomfield,
        )
        reporter = LayerReporter(config, layer_filter)
    except (ValueError, UnsupportedFormatError) as e:
        logger.error(f"FAILURE: {e}")
        return 1

    try:
        datasource = open_datasource(args.datasource)
    except DataSourceOpenError as e:
        drivers = "\n".join(driver_listing())
        logger.error(f"FAILURE: {e}\nThe following drivers are available:\n{drivers}")
        return 1

    with datasource:
        if config.verbose:
            logger.info(
                f"Open of `{datasource.name}' using driver `{datasource.driver}' successful."
            )
        try:
            reporter.run(
                datasource,
                layer_names=args.layers,
                all_layers=args.all_layers,
                sql=args.sql,
                dialect=args.dialect,
            )
        except (InvalidAttributeFilterError, LayerNotFoundError) as e:
            logger.error(f"FAILURE: {e}")
            return 1
    return 0
