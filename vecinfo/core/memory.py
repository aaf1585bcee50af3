"""
In-memory layers backed by `geopandas.GeoDataFrame` objects. They hold the
result sets of SQL statements and allow to report on vector data not stored
in a file. Unlike file based layers, a `GeoDataFrame` can hold more than one
geometry column. The active geometry column is the primary geometry field.

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

import datetime
import geopandas as gpd
import numpy as np
import pandas as pd
import re

from geopandas.array import GeometryDtype
from shapely.geometry import Polygon
from typing import Any, Dict, List, Optional

from vecinfo.config import get_settings
from vecinfo.core.geometry import Extent, infer_geometry_type
from vecinfo.core.layer import (
    FieldDefn,
    GeomFieldDefn,
    LayerFeature,
    VectorDataSource,
    VectorLayer,
)
from vecinfo.utils.constants import FieldTypes
from vecinfo.utils.exceptions import (
    ExtentUnavailableError,
    FeatureNotFoundError,
    InvalidAttributeFilterError,
)

Settings = get_settings()

# single quoted SQL string literals ('' escapes a quote)
_SQL_LITERAL = re.compile(r"('(?:[^']|'')*')")
_IDENTIFIER = r"(`[^`]+`|\b\w+\b)"


def _translate_sql_tokens(clause: str) -> str:
    """translates a where clause fragment without string literals"""
    # double quoted identifiers
    clause = re.sub(r'"([^"]+)"', r"`\1`", clause)
    clause = re.sub(
        _IDENTIFIER + r"\s+IS\s+NOT\s+NULL\b", r"\1.notnull()", clause, flags=re.I
    )
    clause = re.sub(_IDENTIFIER + r"\s+IS\s+NULL\b", r"\1.isnull()", clause, flags=re.I)
    clause = clause.replace("<>", "!=")
    clause = re.sub(r"(?<![<>!=])=(?!=)", "==", clause)
    for keyword in ("AND", "OR", "NOT", "IN"):
        clause = re.sub(rf"\b{keyword}\b", keyword.lower(), clause, flags=re.I)
    return clause


def where_to_expression(where: str) -> str:
    """
    Translates a SQL where clause into a `pandas.eval` expression. Supported
    are comparison operators (=, <>, !=, <, <=, >, >=), AND, OR, NOT, IN and
    IS [NOT] NULL.

    >>> where_to_expression("owner = 'Smith' AND area > 10")
    "owner == 'Smith' and area > 10"

    :param where:
        SQL where clause
    :returns:
        expression to evaluate with `pandas.DataFrame.eval`
    """
    translated = []
    for idx, part in enumerate(_SQL_LITERAL.split(where)):
        if idx % 2 == 1:
            translated.append(repr(part[1:-1].replace("''", "'")))
        else:
            translated.append(_translate_sql_tokens(part))
    return "".join(translated)


def _is_unset(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, np.ndarray)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _field_type(series: pd.Series) -> str:
    """attribute field type of a `pandas` column"""
    dtype = series.dtype
    if pd.api.types.is_bool_dtype(dtype):
        return FieldTypes.INTEGER.value
    if pd.api.types.is_integer_dtype(dtype):
        if dtype.itemsize > 4:
            return FieldTypes.INTEGER64.value
        return FieldTypes.INTEGER.value
    if pd.api.types.is_float_dtype(dtype):
        return FieldTypes.REAL.value
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return FieldTypes.DATETIME.value
    # object columns are typed by their first value
    values = series.dropna()
    if len(values) == 0:
        return FieldTypes.STRING.value
    first = values.iloc[0]
    if isinstance(first, (bool, np.bool_)):
        return FieldTypes.INTEGER.value
    if isinstance(first, (int, np.integer)):
        return FieldTypes.INTEGER64.value
    if isinstance(first, (float, np.floating)):
        return FieldTypes.REAL.value
    # datetime is a subclass of date
    if isinstance(first, datetime.datetime):
        return FieldTypes.DATETIME.value
    if isinstance(first, datetime.date):
        return FieldTypes.DATE.value
    if isinstance(first, datetime.time):
        return FieldTypes.TIME.value
    if isinstance(first, (bytes, bytearray)):
        return FieldTypes.BINARY.value
    if isinstance(first, (list, tuple, np.ndarray)) and len(first) > 0:
        item = first[0]
        if isinstance(item, (int, np.integer)):
            return FieldTypes.INTEGER_LIST.value
        if isinstance(item, (float, np.floating)):
            return FieldTypes.REAL_LIST.value
        return FieldTypes.STRING_LIST.value
    return FieldTypes.STRING.value


class FrameLayer(VectorLayer):
    """
    Layer backed by a `GeoDataFrame`

    :attrib frame:
        the `GeoDataFrame` holding the features
    """

    def __init__(
        self,
        name: str,
        frame: gpd.GeoDataFrame,
        fid_column: Optional[str] = None,
        style_column: Optional[str] = Settings.STYLE_COLUMN,
    ):
        """
        Class constructor

        :param name:
            name of the layer
        :param frame:
            `GeoDataFrame` with features. All columns of geometry dtype are
            geometry fields, the active geometry column comes first.
        :param fid_column:
            optional column with feature identifiers. If not provided, the
            (integer) index is used or the row number if the index is not of
            integer type.
        :param style_column:
            optional column with feature style strings (ignored if the frame
            has no such column)
        """
        if name == "":
            raise ValueError("Empty layer names are not allowed")
        if not isinstance(frame, gpd.GeoDataFrame):
            raise TypeError("frame must be a GeoDataFrame")
        if fid_column is not None and fid_column not in frame.columns:
            raise ValueError(f"{fid_column} is not a column of the frame")

        self._name = name
        self._frame = frame
        self._fid_column = fid_column if fid_column is not None else ""
        self._style_column = style_column if style_column in frame.columns else None

        geometry_columns = [
            col for col in frame.columns if isinstance(frame[col].dtype, GeometryDtype)
        ]
        active = frame.active_geometry_name
        if active in geometry_columns:
            geometry_columns.remove(active)
            geometry_columns.insert(0, active)
        self._geometry_columns = geometry_columns
        self._geometry_fields = [
            GeomFieldDefn(
                name=col,
                geometry_type=infer_geometry_type(frame[col]),
                crs_wkt=frame[col].crs.to_wkt() if frame[col].crs is not None else None,
            )
            for col in geometry_columns
        ]
        skip = set(geometry_columns) | {self._fid_column, self._style_column}
        self._fields = [
            FieldDefn(name=col, type_name=_field_type(frame[col]))
            for col in frame.columns
            if col not in skip
        ]

        if fid_column is not None:
            fids = frame[fid_column]
        elif pd.api.types.is_integer_dtype(frame.index.dtype):
            fids = frame.index
        else:
            fids = range(len(frame))
        self._fids = np.asarray(fids, dtype=np.int64)

        self._attribute_mask = None
        self._spatial_mask = None
        self._selection = None
        self._cursor = 0

    def __repr__(self) -> str:
        return f"FrameLayer({self.name}, {len(self._frame)} features)"

    @property
    def frame(self) -> gpd.GeoDataFrame:
        return self._frame

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> List[FieldDefn]:
        return list(self._fields)

    @property
    def geometry_fields(self) -> List[GeomFieldDefn]:
        return list(self._geometry_fields)

    @property
    def fid_column(self) -> str:
        return self._fid_column

    def _get_selection(self) -> np.ndarray:
        """row positions passing attribute and spatial filter"""
        if self._selection is None:
            keep = np.ones(len(self._frame), dtype=bool)
            if self._attribute_mask is not None:
                keep &= self._attribute_mask
            if self._spatial_mask is not None:
                keep &= self._spatial_mask
            self._selection = np.flatnonzero(keep)
        return self._selection

    def _feature_at(self, pos: int) -> LayerFeature:
        attributes = {}
        for field_defn in self._fields:
            value = self._frame[field_defn.name].iat[pos]
            if not _is_unset(value):
                attributes[field_defn.name] = value
        geometries = {
            col: self._frame[col].iat[pos] for col in self._geometry_columns
        }
        style = None
        if self._style_column is not None:
            value = self._frame[self._style_column].iat[pos]
            if not _is_unset(value):
                style = str(value)
        return LayerFeature(
            fid=int(self._fids[pos]),
            attributes=attributes,
            geometries=geometries,
            style=style,
        )

    def get_feature_count(self) -> int:
        return len(self._get_selection())

    def get_extent(self, geom_field: Optional[int] = None) -> Extent:
        idx = 0 if geom_field is None else geom_field
        if idx < 0 or idx >= len(self._geometry_columns):
            raise ExtentUnavailableError(
                f"Layer {self.name} has no geometry field {idx}"
            )
        geoms = self._frame[self._geometry_columns[idx]]
        geoms = geoms[~(geoms.isna() | geoms.is_empty)]
        if len(geoms) == 0:
            raise ExtentUnavailableError(
                f"Geometry field {self._geometry_columns[idx]} of layer "
                f"{self.name} holds no geometries"
            )
        return tuple(float(coord) for coord in geoms.total_bounds)

    def set_attribute_filter(self, where: Optional[str]) -> None:
        if where is None:
            self._attribute_mask = None
        else:
            expression = where_to_expression(where)
            try:
                result = self._frame.eval(expression, engine="python")
            except Exception as e:
                raise InvalidAttributeFilterError(
                    f"Could not evaluate {where}: {e}"
                ) from e
            if isinstance(result, (bool, np.bool_)):
                result = np.full(len(self._frame), bool(result))
            mask = np.asarray(result)
            if len(self._frame) > 0 and mask.dtype != bool:
                raise InvalidAttributeFilterError(
                    f"{where} does not evaluate to true or false"
                )
            self._attribute_mask = mask.astype(bool)
        self._selection = None
        self.reset_reading()

    def set_spatial_filter(
        self, geometry: Optional[Polygon], geom_field: int = 0
    ) -> None:
        if geometry is None:
            self._spatial_mask = None
        elif len(self._geometry_columns) == 0:
            # features without geometry never intersect
            self._spatial_mask = np.zeros(len(self._frame), dtype=bool)
        else:
            if geom_field < 0 or geom_field >= len(self._geometry_columns):
                raise IndexError(f"Layer {self.name} has no geometry field {geom_field}")
            geoms = self._frame[self._geometry_columns[geom_field]]
            self._spatial_mask = np.asarray(geoms.intersects(geometry), dtype=bool)
        self._selection = None
        self.reset_reading()

    def reset_reading(self) -> None:
        self._cursor = 0

    def get_next_feature(self) -> Optional[LayerFeature]:
        selection = self._get_selection()
        if self._cursor >= len(selection):
            return None
        pos = selection[self._cursor]
        self._cursor += 1
        return self._feature_at(pos)

    def get_feature(self, fid: int) -> LayerFeature:
        positions = np.flatnonzero(self._fids == fid)
        if len(positions) == 0:
            raise FeatureNotFoundError(
                f"Unable to locate feature id {fid} on layer {self.name}"
            )
        return self._feature_at(positions[0])


class MemoryDataSource(VectorDataSource):
    """
    Data source holding `FrameLayer` objects
    """

    def __init__(self, layers: List[FrameLayer], name: str = "memory"):
        names = [layer.name for layer in layers]
        if len(set(names)) != len(names):
            raise ValueError("Layer names must be unique")
        self._layers = list(layers)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def driver(self) -> str:
        return "Memory"

    @property
    def layers(self) -> List[FrameLayer]:
        return list(self._layers)

    @classmethod
    def from_frames(
        cls, frames: Dict[str, gpd.GeoDataFrame], name: str = "memory"
    ) -> MemoryDataSource:
        """
        Data source from `GeoDataFrame` objects

        :param frames:
            `GeoDataFrame` objects by layer name
        :param name:
            name of the data source
        :returns:
            new `MemoryDataSource` instance
        """
        return cls([FrameLayer(key, frame) for key, frame in frames.items()], name=name)
