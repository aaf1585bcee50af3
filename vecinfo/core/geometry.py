"""
Utils for naming, summarizing and filtering ``shapely.geometry`` objects and
for exporting spatial reference systems.

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

import geopandas as gpd

from pyproj import CRS
from pyproj.enums import WktVersion
from pyproj.exceptions import CRSError
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from typing import List, Optional, Tuple, Union

from vecinfo.config import get_settings
from vecinfo.utils.constants import GEOMETRY_TYPE_NAMES, GeometryTypes, UNKNOWN_SRS

logger = get_settings().logger

Extent = Tuple[float, float, float, float]


def geometry_type_name(type_name: Optional[str]) -> str:
    """
    Translates a `shapely` or `fiona` geometry type name (e.g., "MultiPolygon"
    or "3D LineString") into the name used in layer reports ("Multi Polygon",
    "3D Line String").

    :param type_name:
        geometry type name. None is reported as unknown geometry type.
    :returns:
        geometry type name for reporting
    """
    if type_name is None:
        return GeometryTypes.UNKNOWN.value
    name = type_name.strip()
    prefix = ""
    if name.startswith("3D "):
        prefix, name = "3D ", name[3:]
    geometry_type = GEOMETRY_TYPE_NAMES.get(name)
    if geometry_type is None:
        return prefix + name
    return prefix + geometry_type.value


def infer_geometry_type(geoms: gpd.GeoSeries) -> str:
    """
    Infers the geometry type of a geometry column. Columns holding more than
    a single geometry type (or no geometries at all) are of unknown type.

    :param geoms:
        ``GeoSeries`` with geometries (might contain None)
    :returns:
        geometry type name for reporting
    """
    valid = geoms[~geoms.isna()]
    geom_types = valid.geom_type.unique()
    if len(geom_types) != 1:
        return GeometryTypes.UNKNOWN.value
    name = geometry_type_name(geom_types[0])
    if valid.has_z.any():
        name = f"3D {name}"
    return name


def spatial_filter_from_bounds(
    xmin: float, ymin: float, xmax: float, ymax: float
) -> Polygon:
    """
    Returns the rectangle spanned by the passed coordinates as closed ring
    of five points in the order (xmin, ymin), (xmin, ymax), (xmax, ymax),
    (xmax, ymin), (xmin, ymin).

    :param xmin:
        minimum x coordinate
    :param ymin:
        minimum y coordinate
    :param xmax:
        maximum x coordinate
    :param ymax:
        maximum y coordinate
    :returns:
        rectangular `Polygon` to use as spatial filter
    """
    return Polygon(
        [(xmin, ymin), (xmin, ymax), (xmax, ymax), (xmax, ymin), (xmin, ymin)]
    )


def summarize_geometry(geom: BaseGeometry) -> List[str]:
    """
    Summary of a geometry listing its type and the number of points or parts
    instead of all coordinates. Parts of multi-geometries and collections are
    summarized in separate, indented lines.

    :param geom:
        `shapely` geometry to summarize
    :returns:
        summary lines
    """
    name = geom.geom_type.upper()
    if geom.is_empty:
        return [f"{name} EMPTY"]
    if geom.geom_type == "Point":
        return [name]
    if geom.geom_type in ("LineString", "LinearRing"):
        return [f"{name} : {len(geom.coords)} points"]
    if geom.geom_type == "Polygon":
        line = f"{name} : {len(geom.exterior.coords)} points"
        interiors = list(geom.interiors)
        if interiors:
            rings = ", ".join(f"{len(ring.coords)} points" for ring in interiors)
            line += f", {len(interiors)} inner rings ({rings})"
        return [line]
    parts = list(geom.geoms)
    lines = [f"{name} : {len(parts)} geometries:"]
    for part in parts:
        lines.extend(f"  {line}" for line in summarize_geometry(part))
    return lines


def pretty_srs_wkt(crs: Optional[Union[str, CRS]]) -> str:
    """
    Exports a spatial reference system as indented (pretty) WKT. Geometry
    fields without spatial reference get the "(unknown)" placeholder.

    :param crs:
        WKT string or `pyproj` CRS. None or an empty string denote a
        missing spatial reference.
    :returns:
        pretty-printed WKT or placeholder
    """
    if crs is None or (isinstance(crs, str) and crs.strip() == ""):
        return UNKNOWN_SRS
    try:
        crs = CRS.from_user_input(crs)
    except CRSError as e:
        # keep what the data source reported
        logger.debug(f"Could not parse spatial reference system: {e}")
        return str(crs)
    wkt = crs.to_wkt(version=WktVersion.WKT1_GDAL, pretty=True)
    if wkt is None:
        # not expressible in WKT1
        wkt = crs.to_wkt(pretty=True)
    return wkt
