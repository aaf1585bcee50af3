"""
Run configuration of layer reports. The configuration is built once (e.g.,
from the command line) and read, but never modified, by all report
components.

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

from enum import Enum
from typing import Optional

from vecinfo.config import get_settings

Settings = get_settings()


class ReportFormat(Enum):
    """
    output formats of layer reports. JSON is declared but not implemented.
    """

    PLAIN_TEXT = "text"
    XML_TREE = "xml"
    JSON_TREE = "json"


class GeometryDisplay(Enum):
    """
    display of geometries in plain text feature dumps
    """

    FULL = "YES"
    SUMMARY = "SUMMARY"
    SUPPRESSED = "NO"


class FetchKind(Enum):
    ALL = "all"
    BY_ID = "by_id"
    SUMMARY = "summary"


class DisplayOptions(object):
    """
    Display options of the plain text feature dump

    :attrib fields:
        display attribute fields if True
    :attrib geometry:
        display of geometries (full WKT, summary or suppressed)
    """

    def __init__(
        self,
        fields: bool = Settings.DISPLAY_FIELDS,
        geometry: GeometryDisplay = GeometryDisplay(Settings.DISPLAY_GEOMETRY.upper()),
    ):
        if not isinstance(geometry, GeometryDisplay):
            raise TypeError("geometry must be a GeometryDisplay member")
        object.__setattr__(self, "fields", bool(fields))
        object.__setattr__(self, "geometry", geometry)

    def __setattr__(self, *args, **kwargs):
        raise TypeError("DisplayOptions object attributes are immutable")

    def __delattr__(self, *args, **kwargs):
        raise TypeError("DisplayOptions object attributes are immutable")

    def __repr__(self) -> str:
        return str(self.__dict__)

    def __eq__(self, other) -> bool:
        return isinstance(other, DisplayOptions) and self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash((self.fields, self.geometry))


class RunConfiguration(object):
    """
    Immutable settings of a report run.

    :attrib verbose:
        report the full layer metadata (True) or the layer name only
    :attrib summary_only:
        report the layer metadata without features
    :attrib fetch_fid:
        identifier of the single feature to report (None for all)
    :attrib display:
        display options of the plain text feature dump
    :attrib repeat_count:
        number of passes over the requested layers (>= 1)
    :attrib output_format:
        format of the reports
    """

    def __init__(
        self,
        verbose: bool = True,
        summary_only: bool = False,
        fetch_fid: Optional[int] = None,
        display: Optional[DisplayOptions] = None,
        repeat_count: int = 1,
        output_format: ReportFormat = ReportFormat.PLAIN_TEXT,
    ):
        """
        Class constructor

        :param verbose:
            report the full layer metadata (True, default) or the layer name only
        :param summary_only:
            report the layer metadata without features (False by default)
        :param fetch_fid:
            identifier of the single feature to report. None (default) reports all
            features.
        :param display:
            display options of the plain text feature dump. Defaults are taken
            from the package settings.
        :param repeat_count:
            number of passes over the requested layers. Must be at least 1.
        :param output_format:
            format of the reports (plain text by default)
        """
        if type(repeat_count) != int or repeat_count < 1:
            raise ValueError("Repeat count must be a positive integer value")
        if fetch_fid is not None and type(fetch_fid) != int:
            raise TypeError("Feature identifier must be an integer value")
        if not isinstance(output_format, ReportFormat):
            raise TypeError("output_format must be a ReportFormat member")

        object.__setattr__(self, "verbose", bool(verbose))
        object.__setattr__(self, "summary_only", bool(summary_only))
        object.__setattr__(self, "fetch_fid", fetch_fid)
        object.__setattr__(
            self, "display", display if display is not None else DisplayOptions()
        )
        object.__setattr__(self, "repeat_count", repeat_count)
        object.__setattr__(self, "output_format", output_format)

    def __setattr__(self, *args, **kwargs):
        raise TypeError("RunConfiguration object attributes are immutable")

    def __delattr__(self, *args, **kwargs):
        raise TypeError("RunConfiguration object attributes are immutable")

    def __repr__(self) -> str:
        return str(self.__dict__)


class FetchMode(object):
    """
    Features to dump: all features, a single feature by its identifier or
    none (summary)
    """

    def __init__(self, kind: FetchKind, fid: Optional[int] = None):
        if kind == FetchKind.BY_ID and fid is None:
            raise ValueError("Fetching by identifier requires an identifier")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "fid", fid if kind == FetchKind.BY_ID else None)

    def __setattr__(self, *args, **kwargs):
        raise TypeError("FetchMode object attributes are immutable")

    def __repr__(self) -> str:
        if self.kind == FetchKind.BY_ID:
            return f"FetchMode(by_id={self.fid})"
        return f"FetchMode({self.kind.value})"

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, FetchMode)
            and self.kind == other.kind
            and self.fid == other.fid
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.fid))

    @classmethod
    def all(cls) -> FetchMode:
        return cls(FetchKind.ALL)

    @classmethod
    def by_id(cls, fid: int) -> FetchMode:
        return cls(FetchKind.BY_ID, fid)

    @classmethod
    def summary(cls) -> FetchMode:
        return cls(FetchKind.SUMMARY)

    @classmethod
    def from_config(cls, config: RunConfiguration) -> FetchMode:
        """
        Fetch mode of a run. A feature identifier takes precedence over
        the summary-only flag.

        :param config:
            run configuration
        :returns:
            the fetch mode
        """
        if config.fetch_fid is not None:
            return cls.by_id(config.fetch_fid)
        if config.summary_only:
            return cls.summary()
        return cls.all()
