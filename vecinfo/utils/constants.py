"""
Type names used in layer reports.

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

from enum import Enum

# feature identifier of features without identifier
NULL_FID = -1

# placeholder reported for geometry fields without spatial reference
UNKNOWN_SRS = "(unknown)"


class FieldTypes(Enum):
    """
    attribute field types as reported in layer and feature dumps
    """

    INTEGER = "Integer"
    INTEGER64 = "Integer64"
    REAL = "Real"
    STRING = "String"
    DATE = "Date"
    TIME = "Time"
    DATETIME = "DateTime"
    BINARY = "Binary"
    INTEGER_LIST = "IntegerList"
    REAL_LIST = "RealList"
    STRING_LIST = "StringList"


# fiona schema type names (the part before the colon in, e.g., "str:80")
FIONA_FIELD_TYPES = {
    "int32": FieldTypes.INTEGER,
    "int": FieldTypes.INTEGER64,
    "int64": FieldTypes.INTEGER64,
    "bool": FieldTypes.INTEGER,
    "float": FieldTypes.REAL,
    "str": FieldTypes.STRING,
    "date": FieldTypes.DATE,
    "time": FieldTypes.TIME,
    "datetime": FieldTypes.DATETIME,
    "bytes": FieldTypes.BINARY,
    "List[str]": FieldTypes.STRING_LIST,
    "List[int]": FieldTypes.INTEGER_LIST,
    "List[float]": FieldTypes.REAL_LIST,
}


class GeometryTypes(Enum):
    """
    geometry types as reported in layer dumps
    """

    UNKNOWN = "Unknown (any)"
    NONE = "None"
    POINT = "Point"
    LINESTRING = "Line String"
    POLYGON = "Polygon"
    MULTIPOINT = "Multi Point"
    MULTILINESTRING = "Multi Line String"
    MULTIPOLYGON = "Multi Polygon"
    GEOMETRYCOLLECTION = "Geometry Collection"


# geometry type names used by shapely (``geom_type``) and fiona (schema)
GEOMETRY_TYPE_NAMES = {
    "Point": GeometryTypes.POINT,
    "LineString": GeometryTypes.LINESTRING,
    "LinearRing": GeometryTypes.LINESTRING,
    "Polygon": GeometryTypes.POLYGON,
    "MultiPoint": GeometryTypes.MULTIPOINT,
    "MultiLineString": GeometryTypes.MULTILINESTRING,
    "MultiPolygon": GeometryTypes.MULTIPOLYGON,
    "GeometryCollection": GeometryTypes.GEOMETRYCOLLECTION,
    "None": GeometryTypes.NONE,
    "Unknown": GeometryTypes.UNKNOWN,
    "Geometry": GeometryTypes.UNKNOWN,
    "Any": GeometryTypes.UNKNOWN,
}
