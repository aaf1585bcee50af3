"""
Plain text layer reports.

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

from shapely import wkt
from typing import Iterable, List, Optional

from vecinfo.core.geometry import summarize_geometry
from vecinfo.report.config import GeometryDisplay, ReportFormat
from vecinfo.report.feature import FeatureRecord
from vecinfo.report.formats.base import BaseSerializer, format_extent
from vecinfo.report.metadata import LayerMetadata
from vecinfo.utils.constants import UNKNOWN_SRS

NULL_VALUE = "(null)"


class TextSerializer(BaseSerializer):
    """
    Renders layer reports as labeled lines followed by one block per
    feature
    """

    output_format = ReportFormat.PLAIN_TEXT
    reports_missing_inline = True

    def _metadata_lines(self, metadata: LayerMetadata) -> List[str]:
        lines = ["", f"Layer name: {metadata.name}"]
        if not metadata.verbose:
            return lines

        geometry_fields = metadata.geometry_fields
        multiple = metadata.has_multiple_geometry_fields
        if multiple:
            for geom_field in geometry_fields:
                lines.append(f"Geometry ({geom_field.name}): {geom_field.geometry_type}")
        else:
            lines.append(f"Geometry: {metadata.geometry_type}")

        if metadata.feature_count is not None:
            lines.append(f"Feature Count: {metadata.feature_count}")

        if multiple:
            for geom_field in geometry_fields:
                if geom_field.extent is not None:
                    lines.append(
                        f"Extent ({geom_field.name}): {format_extent(geom_field.extent)}"
                    )
            for geom_field in geometry_fields:
                lines.append(f"SRS WKT ({geom_field.name}):")
                lines.append(geom_field.srs_wkt)
        else:
            if metadata.extent is not None:
                lines.append(f"Extent: {format_extent(metadata.extent)}")
            lines.append("Layer SRS WKT:")
            lines.append(metadata.srs_wkt or UNKNOWN_SRS)

        if metadata.fid_column is not None:
            lines.append(f"FID Column = {metadata.fid_column}")

        if multiple:
            for idx, geom_field in enumerate(geometry_fields):
                lines.append(f"Geometry Column {idx + 1} = {geom_field.name}")
        elif metadata.geometry_column is not None:
            lines.append(f"Geometry Column = {metadata.geometry_column}")

        for field in metadata.fields:
            lines.append(
                f"{field.name}: {field.type_name} ({field.width}.{field.precision})"
            )
        return lines

    def _geometry_lines(self, record: FeatureRecord) -> List[str]:
        if self.display.geometry == GeometryDisplay.SUPPRESSED:
            return []
        multiple = len(record.geometries) > 1
        lines = []
        for name, geom_wkt in record.geometries.items():
            if geom_wkt is None:
                continue
            if self.display.geometry == GeometryDisplay.SUMMARY:
                summary = summarize_geometry(wkt.loads(geom_wkt))
            else:
                summary = [geom_wkt]
            if multiple:
                summary[0] = f"{name} = {summary[0]}"
            lines.extend(f"  {line}" for line in summary)
        return lines

    def feature_lines(self, layer_name: str, record: FeatureRecord) -> List[str]:
        """
        Lines of a single feature block

        :param layer_name:
            name of the layer the feature belongs to
        :param record:
            the feature record
        :returns:
            lines of the block (without trailing blank line)
        """
        lines = [f"Feature({layer_name}):{record.fid}"]
        if self.display.fields:
            for name, value in record.attributes.items():
                type_name = record.field_types.get(name, "")
                shown = value if value is not None else NULL_VALUE
                lines.append(f"  {name} ({type_name}) = {shown}")
        if record.style is not None:
            lines.append(f"  Style = {record.style}")
        lines.extend(self._geometry_lines(record))
        return lines

    def render(
        self,
        metadata: LayerMetadata,
        features: Iterable[FeatureRecord],
        missing_fid: Optional[int] = None,
    ) -> str:
        lines = self._metadata_lines(metadata)
        for record in features:
            lines.extend(self.feature_lines(metadata.name, record))
            lines.append("")
        if missing_fid is not None:
            lines.append(f"Unable to locate feature id {missing_fid} on this layer.")
        return "\n".join(lines) + "\n"
