"""
XML layer reports built with `xml.dom.minidom`.

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

from typing import Iterable, Optional
from xml.dom import minidom

from vecinfo.report.config import ReportFormat
from vecinfo.report.feature import FeatureRecord
from vecinfo.report.formats.base import BaseSerializer, format_coordinate
from vecinfo.report.metadata import LayerMetadata
from vecinfo.utils.constants import UNKNOWN_SRS


class XmlSerializer(BaseSerializer):
    """
    Renders a layer report as XML document with a `Layer` root holding
    a `Meta` and a `Features` element. Display options do not apply, the
    document always contains all attributes and the full geometries.
    """

    output_format = ReportFormat.XML_TREE

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._doc = minidom.Document()

    def _text_element(self, tag: str, text: Optional[str]) -> minidom.Element:
        element = self._doc.createElement(tag)
        if text is not None and text != "":
            element.appendChild(self._doc.createTextNode(text))
        return element

    def _meta_element(self, metadata: LayerMetadata) -> minidom.Element:
        meta = self._doc.createElement("Meta")
        meta.appendChild(self._text_element("Name", metadata.name))
        if not metadata.verbose:
            return meta

        if metadata.feature_count is not None:
            meta.appendChild(
                self._text_element("FeatureCount", str(metadata.feature_count))
            )
        for geom_field in metadata.geometry_fields:
            element = self._doc.createElement("GeometryField")
            element.setAttribute("name", geom_field.name)
            element.setAttribute("type", geom_field.geometry_type)
            if geom_field.extent is not None:
                extent = self._doc.createElement("Extent")
                for key, coord in zip(("minx", "miny", "maxx", "maxy"), geom_field.extent):
                    extent.setAttribute(key, format_coordinate(coord))
                element.appendChild(extent)
            element.appendChild(self._text_element("SRS", geom_field.srs_wkt or UNKNOWN_SRS))
            meta.appendChild(element)
        if metadata.fid_column is not None:
            meta.appendChild(self._text_element("FIDColumn", metadata.fid_column))
        for geom_field in metadata.geometry_fields:
            if geom_field.name != "":
                meta.appendChild(self._text_element("GeometryColumn", geom_field.name))
        for field in metadata.fields:
            element = self._doc.createElement("Field")
            element.setAttribute("name", field.name)
            element.setAttribute("type", field.type_name)
            element.setAttribute("width", str(field.width))
            element.setAttribute("precision", str(field.precision))
            meta.appendChild(element)
        return meta

    def _feature_element(self, record: FeatureRecord) -> minidom.Element:
        feature = self._doc.createElement("Feature")
        feature.setAttribute("id", str(record.fid))
        for name, value in record.attributes.items():
            attr = self._text_element("Attr", value)
            attr.setAttribute("name", name)
            feature.appendChild(attr)
        if record.style is not None:
            feature.appendChild(self._text_element("Style", record.style))
        # null geometries give an empty element
        for name, geom_wkt in record.geometries.items():
            geometry = self._text_element("Geometry", geom_wkt)
            geometry.setAttribute("name", name)
            feature.appendChild(geometry)
        return feature

    def render(
        self,
        metadata: LayerMetadata,
        features: Iterable[FeatureRecord],
        missing_fid: Optional[int] = None,
    ) -> str:
        # missing features are reported on the diagnostic stream
        layer = self._doc.createElement("Layer")
        layer.appendChild(self._meta_element(metadata))
        features_element = self._doc.createElement("Features")
        for record in features:
            features_element.appendChild(self._feature_element(record))
        layer.appendChild(features_element)
        return layer.toprettyxml(indent="  ")
