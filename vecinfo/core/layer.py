"""
Contracts of vector data sources and their layers as consumed by the layer
reports. A data source owns its layers; reports only borrow them.

Concrete implementations are found in `vecinfo.core.datasource` (data sources
readable by `fiona`) and `vecinfo.core.memory` (`GeoDataFrame` backed layers).

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
from dataclasses import dataclass, field
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from typing import Any, Dict, Iterator, List, Optional

from vecinfo.core.geometry import Extent
from vecinfo.utils.constants import GeometryTypes
from vecinfo.utils.exceptions import QueryError


@dataclass(frozen=True)
class FieldDefn:
    """attribute field of a layer schema"""

    name: str
    type_name: str
    width: int = 0
    precision: int = 0


@dataclass(frozen=True)
class GeomFieldDefn:
    """geometry field of a layer schema"""

    name: str
    geometry_type: str
    crs_wkt: Optional[str] = None


@dataclass
class LayerFeature:
    """
    A feature as returned by a layer.

    :attrib fid:
        feature identifier
    :attrib attributes:
        attribute values by field name. Fields not set on the feature
        are not contained.
    :attrib geometries:
        `shapely` geometries by geometry field name (None if not set)
    :attrib style:
        optional style string
    """

    fid: int
    attributes: Dict[str, Any] = field(default_factory=dict)
    geometries: Dict[str, Optional[BaseGeometry]] = field(default_factory=dict)
    style: Optional[str] = None


class VectorLayer(ABC):
    """
    A named collection of features with a schema and a read cursor.

    Filters narrow the features returned by `get_next_feature`; setting
    a filter rewinds the cursor. `get_feature` ignores filters.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """the layer name"""

    @property
    @abstractmethod
    def fields(self) -> List[FieldDefn]:
        """attribute fields in schema order"""

    @property
    @abstractmethod
    def geometry_fields(self) -> List[GeomFieldDefn]:
        """geometry fields, the primary geometry field first"""

    @property
    def geometry_type(self) -> str:
        """layer-level geometry type (of the primary geometry field)"""
        if len(self.geometry_fields) == 0:
            return GeometryTypes.NONE.value
        return self.geometry_fields[0].geometry_type

    @property
    def crs_wkt(self) -> Optional[str]:
        """layer-level spatial reference system as WKT"""
        if len(self.geometry_fields) == 0:
            return None
        return self.geometry_fields[0].crs_wkt

    @property
    def fid_column(self) -> str:
        """name of the column holding feature identifiers ('' if implicit)"""
        return ""

    @property
    def geometry_column(self) -> str:
        """name of the primary geometry column ('' if unnamed)"""
        if len(self.geometry_fields) == 0:
            return ""
        return self.geometry_fields[0].name

    def get_geom_field_index(self, name: str) -> int:
        """
        Index of a geometry field by its name

        :param name:
            name of the geometry field
        :returns:
            field index or -1 if there is no such field
        """
        for idx, geom_field in enumerate(self.geometry_fields):
            if geom_field.name == name:
                return idx
        return -1

    @abstractmethod
    def get_feature_count(self) -> int:
        """number of features passing the current filters"""

    @abstractmethod
    def get_extent(self, geom_field: Optional[int] = None) -> Extent:
        """
        Extent (minx, miny, maxx, maxy) of a geometry field. Might require
        a full scan of the layer.

        :param geom_field:
            index of the geometry field. The primary field if None.
        :returns:
            extent of the geometry field
        :raises ExtentUnavailableError:
            if the extent cannot be determined (e.g., empty layers)
        """

    @abstractmethod
    def set_attribute_filter(self, where: Optional[str]) -> None:
        """
        Installs (or with None removes) an attribute filter

        :param where:
            where clause the features must meet
        :raises InvalidAttributeFilterError:
            if the expression cannot be evaluated
        """

    @abstractmethod
    def set_spatial_filter(
        self, geometry: Optional[Polygon], geom_field: int = 0
    ) -> None:
        """
        Installs (or with None removes) a spatial filter on a geometry field

        :param geometry:
            features must intersect this geometry
        :param geom_field:
            index of the geometry field to filter on
        """

    @abstractmethod
    def reset_reading(self) -> None:
        """rewinds the read cursor to the first feature"""

    @abstractmethod
    def get_next_feature(self) -> Optional[LayerFeature]:
        """next feature passing the filters or None when exhausted"""

    @abstractmethod
    def get_feature(self, fid: int) -> LayerFeature:
        """
        Feature by its identifier

        :param fid:
            feature identifier
        :returns:
            the feature
        :raises FeatureNotFoundError:
            if there is no feature with this identifier
        """

    def __iter__(self) -> Iterator[LayerFeature]:
        """iterates from the current cursor position until exhausted"""
        while True:
            feature = self.get_next_feature()
            if feature is None:
                return
            yield feature


class VectorDataSource(ABC):
    """
    A data source exposing one or more vector layers
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """name of the data source"""

    @property
    @abstractmethod
    def driver(self) -> str:
        """name of the driver used to open the data source"""

    @property
    @abstractmethod
    def layers(self) -> List[VectorLayer]:
        """layers of the data source in data source order"""

    @property
    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    def get_layer_by_name(self, name: str) -> Optional[VectorLayer]:
        """
        Layer by its name

        :param name:
            layer name
        :returns:
            the layer or None if there is no such layer
        """
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def execute_sql(
        self,
        statement: str,
        dialect: Optional[str] = None,
        spatial_filter: Optional[Polygon] = None,
    ) -> VectorLayer:
        """
        Executes a SQL statement and returns the result set as layer

        :param statement:
            SQL statement
        :param dialect:
            optional SQL dialect (e.g., "OGRSQL" or "SQLITE")
        :param spatial_filter:
            optional spatial filter applied to the result set
        :returns:
            result set as layer
        :raises QueryError:
            if the statement cannot be executed
        """
        raise QueryError(
            f"{type(self).__name__} does not support SQL statements"
        )

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
