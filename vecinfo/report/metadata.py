"""
Extraction of layer metadata (schema, spatial extent, spatial reference and
feature count) into a format-neutral record.

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

from dataclasses import dataclass
from typing import Optional, Tuple

from vecinfo.config import get_settings
from vecinfo.core.geometry import Extent, pretty_srs_wkt
from vecinfo.core.layer import VectorLayer
from vecinfo.utils.exceptions import ExtentUnavailableError

logger = get_settings().logger


@dataclass(frozen=True)
class AttributeField:
    """attribute field as reported"""

    name: str
    type_name: str
    width: int
    precision: int


@dataclass(frozen=True)
class GeometryField:
    """
    geometry field as reported

    :attrib name:
        name of the geometry field ('' if unnamed)
    :attrib geometry_type:
        geometry type name
    :attrib srs_wkt:
        pretty WKT of the spatial reference system or "(unknown)"
    :attrib extent:
        extent (minx, miny, maxx, maxy) or None if not available
    """

    name: str
    geometry_type: str
    srs_wkt: str
    extent: Optional[Extent] = None


@dataclass(frozen=True)
class LayerMetadata:
    """
    Format-neutral metadata of a layer. Apart from the name all entries are
    only populated for verbose reports.

    With more than one geometry field, the geometry fields are the source of
    geometry type, extent and spatial reference. Otherwise, the layer-level
    entries apply.
    """

    name: str
    verbose: bool = False
    geometry_type: Optional[str] = None
    extent: Optional[Extent] = None
    srs_wkt: Optional[str] = None
    geometry_fields: Tuple[GeometryField, ...] = ()
    fields: Tuple[AttributeField, ...] = ()
    feature_count: Optional[int] = None
    fid_column: Optional[str] = None
    geometry_column: Optional[str] = None

    @property
    def has_multiple_geometry_fields(self) -> bool:
        return len(self.geometry_fields) > 1

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.fields)


def _get_extent(layer: VectorLayer, geom_field: Optional[int] = None) -> Optional[Extent]:
    try:
        return layer.get_extent(geom_field)
    except ExtentUnavailableError as e:
        logger.debug(str(e))
        return None


def extract_metadata(layer: VectorLayer, verbose: bool) -> LayerMetadata:
    """
    Extracts the metadata of a layer. The layer is not modified but the
    extent computation might require a full scan of its features.

    :param layer:
        layer to describe
    :param verbose:
        if False, the metadata contain the layer name only
    :returns:
        `LayerMetadata` of the layer
    """
    if not verbose:
        return LayerMetadata(name=layer.name)

    geom_defns = layer.geometry_fields
    if len(geom_defns) > 1:
        geometry_fields = tuple(
            GeometryField(
                name=defn.name,
                geometry_type=defn.geometry_type,
                srs_wkt=pretty_srs_wkt(defn.crs_wkt),
                extent=_get_extent(layer, idx),
            )
            for idx, defn in enumerate(geom_defns)
        )
        layer_extent = None
    else:
        # single (or no) geometry field: layer-level values
        layer_extent = _get_extent(layer)
        geometry_fields = tuple(
            GeometryField(
                name=defn.name,
                geometry_type=layer.geometry_type,
                srs_wkt=pretty_srs_wkt(layer.crs_wkt),
                extent=layer_extent,
            )
            for defn in geom_defns
        )

    fields = tuple(
        AttributeField(
            name=defn.name,
            type_name=defn.type_name,
            width=defn.width,
            precision=defn.precision,
        )
        for defn in layer.fields
    )

    return LayerMetadata(
        name=layer.name,
        verbose=True,
        geometry_type=layer.geometry_type,
        extent=layer_extent,
        srs_wkt=pretty_srs_wkt(layer.crs_wkt),
        geometry_fields=geometry_fields,
        fields=fields,
        feature_count=layer.get_feature_count(),
        fid_column=layer.fid_column or None,
        geometry_column=layer.geometry_column or None,
    )
