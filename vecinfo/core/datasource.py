"""
Data sources and layers readable by `fiona` (i.e., by the vector drivers of
GDAL/OGR). SQL statements are executed with `pyogrio` and returned as
`FrameLayer` objects.

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

import fiona
import geopandas as gpd
import pyogrio
import re

from fiona.errors import FionaError
from pathlib import Path
from shapely.geometry import Polygon, shape
from typing import Dict, List, Optional, Tuple, Union

from vecinfo.config import get_settings
from vecinfo.core.geometry import Extent, geometry_type_name
from vecinfo.core.layer import (
    FieldDefn,
    GeomFieldDefn,
    LayerFeature,
    VectorDataSource,
    VectorLayer,
)
from vecinfo.core.memory import FrameLayer
from vecinfo.utils.constants import FIONA_FIELD_TYPES, NULL_FID, GeometryTypes
from vecinfo.utils.exceptions import (
    DataSourceOpenError,
    ExtentUnavailableError,
    FeatureNotFoundError,
    InvalidAttributeFilterError,
    QueryError,
)

logger = get_settings().logger


def parse_field_schema(field_schema: str) -> Tuple[str, int, int]:
    """
    Parses a `fiona` field schema such as "str:80" or "float:24.15"

    :param field_schema:
        `fiona` field schema
    :returns:
        tuple of field type name, width and precision
    """
    type_part, _, size_part = field_schema.partition(":")
    field_type = FIONA_FIELD_TYPES.get(type_part)
    type_name = field_type.value if field_type is not None else type_part
    width, precision = 0, 0
    if size_part:
        width_part, _, precision_part = size_part.partition(".")
        width = int(width_part) if width_part.isdigit() else 0
        precision = int(precision_part) if precision_part.isdigit() else 0
    return type_name, width, precision


def available_drivers() -> Dict[str, str]:
    """
    Vector drivers known to `fiona` with their access modes ("r", "rw", ...)
    """
    return dict(fiona.supported_drivers)


class FionaLayer(VectorLayer):
    """
    Layer of a data source opened through `fiona`. The layer keeps its
    `fiona` collection open until `close` is called.
    """

    def __init__(self, path: str, name: str):
        """
        Class constructor

        :param path:
            path (or URL) of the data source
        :param name:
            name of the layer in the data source
        """
        self._path = path
        self._name = name
        self._collection = fiona.open(path, layer=name)
        schema = self._collection.schema

        self._fields = []
        for field_name, field_schema in schema.get("properties", {}).items():
            type_name, width, precision = parse_field_schema(field_schema)
            self._fields.append(
                FieldDefn(
                    name=field_name,
                    type_name=type_name,
                    width=width,
                    precision=precision,
                )
            )

        # fiona does not report the column names, pyogrio does
        try:
            info = pyogrio.read_info(path, layer=name)
        except RuntimeError as e:
            logger.debug(f"Could not read layer info of {name}: {e}")
            info = {}
        self._fid_column = info.get("fid_column") or ""

        geometry_type = geometry_type_name(schema.get("geometry"))
        if geometry_type == GeometryTypes.NONE.value:
            self._geometry_fields = []
        else:
            self._geometry_fields = [
                GeomFieldDefn(
                    name=info.get("geometry_name") or "",
                    geometry_type=geometry_type,
                    crs_wkt=self._collection.crs_wkt or None,
                )
            ]

        self._where = None
        self._bbox = None
        self._iterator = None

    def __repr__(self) -> str:
        return f"FionaLayer({self._path}, {self.name})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def driver(self) -> str:
        return self._collection.driver

    @property
    def fields(self) -> List[FieldDefn]:
        return list(self._fields)

    @property
    def geometry_fields(self) -> List[GeomFieldDefn]:
        return list(self._geometry_fields)

    @property
    def fid_column(self) -> str:
        return self._fid_column

    def _filter_kwargs(self) -> dict:
        kwargs = {}
        if self._where is not None:
            kwargs["where"] = self._where
        if self._bbox is not None:
            kwargs["bbox"] = self._bbox
        return kwargs

    def _to_feature(self, feature) -> LayerFeature:
        attributes = {
            key: value
            for key, value in dict(feature.properties).items()
            if value is not None
        }
        geometries = {}
        for geom_field in self._geometry_fields:
            geometry = feature.geometry
            geometries[geom_field.name] = shape(geometry) if geometry is not None else None
        fid = int(feature.id) if feature.id is not None else NULL_FID
        return LayerFeature(fid=fid, attributes=attributes, geometries=geometries)

    def get_feature_count(self) -> int:
        if self._where is None and self._bbox is None:
            # filters of earlier reads stay installed on the collection
            self._collection.filter()
            count = len(self._collection)
        else:
            # counting runs its own iteration on the collection
            count = sum(1 for _ in self._collection.filter(**self._filter_kwargs()))
        self.reset_reading()
        return count

    def get_extent(self, geom_field: Optional[int] = None) -> Extent:
        idx = 0 if geom_field is None else geom_field
        if idx != 0 or len(self._geometry_fields) == 0:
            raise ExtentUnavailableError(f"Layer {self.name} has no geometry field {idx}")
        try:
            bounds = self._collection.bounds
        except FionaError as e:
            raise ExtentUnavailableError(
                f"Could not compute extent of layer {self.name}: {e}"
            ) from e
        if bounds is None:
            raise ExtentUnavailableError(f"Layer {self.name} has no extent")
        return tuple(float(coord) for coord in bounds)

    def set_attribute_filter(self, where: Optional[str]) -> None:
        if where is not None:
            # fiona installs the filter when the iterator is created
            try:
                self._collection.filter(where=where)
            except Exception as e:
                raise InvalidAttributeFilterError(
                    f"Could not evaluate {where}: {e}"
                ) from e
        self._where = where
        self.reset_reading()

    def set_spatial_filter(
        self, geometry: Optional[Polygon], geom_field: int = 0
    ) -> None:
        if geometry is not None and geom_field != 0:
            raise IndexError(f"Layer {self.name} has no geometry field {geom_field}")
        self._bbox = geometry.bounds if geometry is not None else None
        self.reset_reading()

    def reset_reading(self) -> None:
        self._iterator = None

    def get_next_feature(self) -> Optional[LayerFeature]:
        if self._iterator is None:
            self._iterator = self._collection.filter(**self._filter_kwargs())
        try:
            feature = next(self._iterator)
        except StopIteration:
            return None
        return self._to_feature(feature)

    def get_feature(self, fid: int) -> LayerFeature:
        try:
            feature = self._collection.get(fid)
        except (KeyError, IndexError) as e:
            raise FeatureNotFoundError(
                f"Unable to locate feature id {fid} on layer {self.name}"
            ) from e
        # random access moves the read cursor of the collection
        self.reset_reading()
        return self._to_feature(feature)

    def close(self) -> None:
        self._collection.close()


def _result_layer_name(statement: str) -> str:
    """name of the layer a SQL statement selects from"""
    match = re.search(r"\bFROM\s+[\"`']?(\w+)", statement, flags=re.I)
    return match.group(1) if match is not None else "SELECT"


class FionaDataSource(VectorDataSource):
    """
    Data source opened through `fiona`. Use `open_datasource` to get
    an instance.
    """

    def __init__(self, path: str, layer_names: List[str]):
        """
        Class constructor

        :param path:
            path (or URL) of the data source
        :param layer_names:
            names of the layers in the data source
        """
        self._path = path
        self._layers = [FionaLayer(path, name) for name in layer_names]

    def __repr__(self) -> str:
        return f"FionaDataSource({self._path}, {len(self._layers)} layers)"

    @property
    def name(self) -> str:
        return self._path

    @property
    def driver(self) -> str:
        if len(self._layers) == 0:
            return ""
        return self._layers[0].driver

    @property
    def layers(self) -> List[FionaLayer]:
        return list(self._layers)

    def execute_sql(
        self,
        statement: str,
        dialect: Optional[str] = None,
        spatial_filter: Optional[Polygon] = None,
    ) -> FrameLayer:
        try:
            frame = pyogrio.read_dataframe(
                self._path,
                sql=statement,
                sql_dialect=dialect,
                mask=spatial_filter,
                fid_as_index=True,
            )
        except Exception as e:
            raise QueryError(f"Could not execute {statement}: {e}") from e
        if not isinstance(frame, gpd.GeoDataFrame):
            # result sets without geometry column
            frame = gpd.GeoDataFrame(frame)
        return FrameLayer(_result_layer_name(statement), frame)

    def close(self) -> None:
        for layer in self._layers:
            layer.close()


def open_datasource(path: Union[str, Path]) -> FionaDataSource:
    """
    Opens a vector data source (read-only)

    :param path:
        path (or URL) of the data source
    :returns:
        opened data source. Close it after use (or use it as context
        manager).
    :raises DataSourceOpenError:
        if none of the drivers is able to open the data source
    """
    path = str(path)
    try:
        layer_names = fiona.listlayers(path)
        return FionaDataSource(path, layer_names)
    except (FionaError, OSError) as e:
        raise DataSourceOpenError(f"Unable to open datasource `{path}': {e}") from e
