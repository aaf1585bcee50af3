"""
Base class of report serializers.

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

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from vecinfo.config import get_settings
from vecinfo.core.geometry import Extent
from vecinfo.report.config import DisplayOptions, ReportFormat
from vecinfo.report.feature import FeatureRecord
from vecinfo.report.metadata import LayerMetadata

Settings = get_settings()


def format_coordinate(value: float) -> str:
    return Settings.EXTENT_FORMAT.format(value)


def format_extent(extent: Extent) -> str:
    """extent as `(minx, miny) - (maxx, maxy)`"""
    minx, miny, maxx, maxy = (format_coordinate(coord) for coord in extent)
    return f"({minx}, {miny}) - ({maxx}, {maxy})"


class BaseSerializer(ABC):
    """
    Renders layer metadata and feature records to text

    :attrib output_format:
        the report format produced by the serializer
    :attrib reports_missing_inline:
        True if a missing feature (fetch by identifier) is reported in
        the rendered text instead of the diagnostic stream
    """

    output_format: ReportFormat
    reports_missing_inline: bool = False

    def __init__(self, display: Optional[DisplayOptions] = None):
        """
        Class constructor

        :param display:
            optional display options (defaults from the package settings)
        """
        self._display = display if display is not None else DisplayOptions()

    @property
    def display(self) -> DisplayOptions:
        return self._display

    @abstractmethod
    def render(
        self,
        metadata: LayerMetadata,
        features: Iterable[FeatureRecord],
        missing_fid: Optional[int] = None,
    ) -> str:
        """
        Renders the report of a single layer

        :param metadata:
            layer metadata
        :param features:
            feature records to render (consumed)
        :param missing_fid:
            identifier of a requested feature not found on the layer
        :returns:
            the report as text
        """
