"""
Attribute and spatial filters narrowing the features of a layer.

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

from shapely.geometry import Polygon
from typing import Optional

from vecinfo.config import get_settings
from vecinfo.core.layer import VectorLayer

logger = get_settings().logger


def apply_filters(
    layer: VectorLayer,
    where: Optional[str] = None,
    spatial_filter: Optional[Polygon] = None,
    geom_field: Optional[str] = None,
) -> None:
    """
    Installs attribute and spatial filter on a layer. Afterwards, the layer
    returns only features meeting both filters.

    :param layer:
        layer to filter
    :param where:
        optional where clause
    :param spatial_filter:
        optional geometry the features must intersect
    :param geom_field:
        optional name of the geometry field the spatial filter applies to.
        If not provided, the primary geometry field is used. If the layer has
        no geometry field of that name the spatial filter is not installed.
    :raises InvalidAttributeFilterError:
        if the where clause is invalid
    """
    if where is not None:
        layer.set_attribute_filter(where)

    if spatial_filter is None:
        return
    if geom_field is not None:
        idx = layer.get_geom_field_index(geom_field)
        if idx < 0:
            logger.warning(f"Cannot find geometry field {geom_field}.")
            return
        layer.set_spatial_filter(spatial_filter, idx)
    else:
        layer.set_spatial_filter(spatial_filter)


class LayerFilter:
    """
    Filters applied to every layer of a report run.

    :attrib where:
        where clause (attribute filter), e.g. `owner = 'Smith'`
    :attrib spatial_filter:
        geometry the features must intersect
    :attrib geom_field:
        name of the geometry field the spatial filter applies to
    """

    def __init__(
        self,
        where: Optional[str] = None,
        spatial_filter: Optional[Polygon] = None,
        geom_field: Optional[str] = None,
    ):
        """
        Constructor method

        :param where:
            optional where clause
        :param spatial_filter:
            optional geometry the features must intersect
        :param geom_field:
            optional name of the geometry field the spatial filter applies
            to (the primary geometry field if not provided)
        """
        # check inputs
        if where is not None and not isinstance(where, str):
            raise TypeError("Where clause must be a string")
        if where is not None and where.strip() == "":
            raise ValueError("Where clause must not be an empty string")
        if spatial_filter is not None and not isinstance(spatial_filter, Polygon):
            raise TypeError("Spatial filter must be a Polygon")
        if geom_field is not None and not isinstance(geom_field, str):
            raise TypeError("Geometry field name must be a string")

        self._where = where
        self._spatial_filter = spatial_filter
        self._geom_field = geom_field

    def __repr__(self) -> str:
        return (
            f"LayerFilter(where={self.where}, spatial_filter="
            + f"{self.spatial_filter}, geom_field={self.geom_field})"
        )

    @property
    def where(self) -> Optional[str]:
        """attribute filter"""
        return self._where

    @property
    def spatial_filter(self) -> Optional[Polygon]:
        """spatial filter"""
        return self._spatial_filter

    @property
    def geom_field(self) -> Optional[str]:
        """geometry field of the spatial filter"""
        return self._geom_field

    @property
    def is_empty(self) -> bool:
        """True if neither attribute nor spatial filter are set"""
        return self.where is None and self.spatial_filter is None

    def apply(self, layer: VectorLayer) -> None:
        """
        Installs the filters on a layer

        :param layer:
            layer to filter
        """
        apply_filters(
            layer,
            where=self.where,
            spatial_filter=self.spatial_filter,
            geom_field=self.geom_field,
        )
