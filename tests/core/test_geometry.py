'''
Tests for the geometry helpers (type names, spatial filter rectangle,
geometry summaries and spatial reference export).

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
'''

import geopandas as gpd

from pyproj import CRS
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiPolygon,
    Point,
    Polygon,
    box,
)

from vecinfo.core.geometry import (
    geometry_type_name,
    infer_geometry_type,
    pretty_srs_wkt,
    spatial_filter_from_bounds,
    summarize_geometry,
)

def test_geometry_type_name():
    assert geometry_type_name('Polygon') == 'Polygon'
    assert geometry_type_name('MultiPolygon') == 'Multi Polygon'
    assert geometry_type_name('LineString') == 'Line String'
    assert geometry_type_name('3D LineString') == '3D Line String'
    assert geometry_type_name('GeometryCollection') == 'Geometry Collection'
    assert geometry_type_name(None) == 'Unknown (any)', 'missing type must be unknown'
    assert geometry_type_name('Unknown') == 'Unknown (any)'
    assert geometry_type_name('None') == 'None'

def test_infer_geometry_type():
    polygons = gpd.GeoSeries([box(0, 0, 1, 1), None, box(1, 1, 2, 2)])
    assert infer_geometry_type(polygons) == 'Polygon', 'nulls must be ignored'

    mixed = gpd.GeoSeries([box(0, 0, 1, 1), Point(0, 0)])
    assert infer_geometry_type(mixed) == 'Unknown (any)', 'mixed types are unknown'

    points_3d = gpd.GeoSeries([Point(0, 0, 1), Point(1, 1, 2)])
    assert infer_geometry_type(points_3d) == '3D Point'

    empty = gpd.GeoSeries([], dtype='geometry')
    assert infer_geometry_type(empty) == 'Unknown (any)'

def test_spatial_filter_from_bounds():
    rectangle = spatial_filter_from_bounds(0, 1, 10, 11)
    assert isinstance(rectangle, Polygon)
    assert list(rectangle.exterior.coords) == [
        (0, 1), (0, 11), (10, 11), (10, 1), (0, 1)
    ], 'wrong point order'
    assert rectangle.bounds == (0, 1, 10, 11)

def test_summarize_geometry():
    assert summarize_geometry(Point(1, 2)) == ['POINT']
    assert summarize_geometry(LineString([(0, 0), (1, 1), (2, 0)])) == [
        'LINESTRING : 3 points'
    ]
    assert summarize_geometry(box(0, 0, 1, 1)) == ['POLYGON : 5 points']

    # polygon with hole
    donut = Polygon(
        [(0, 0), (0, 10), (10, 10), (10, 0)],
        holes=[[(2, 2), (2, 4), (4, 4), (4, 2)]]
    )
    assert summarize_geometry(donut) == [
        'POLYGON : 5 points, 1 inner rings (5 points)'
    ]

    multi = MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)])
    assert summarize_geometry(multi) == [
        'MULTIPOLYGON : 2 geometries:',
        '  POLYGON : 5 points',
        '  POLYGON : 5 points',
    ]

    collection = GeometryCollection([Point(0, 0), multi])
    summary = summarize_geometry(collection)
    assert summary[0] == 'GEOMETRYCOLLECTION : 2 geometries:'
    assert summary[2] == '  MULTIPOLYGON : 2 geometries:'
    assert summary[3] == '    POLYGON : 5 points', 'nested parts must be indented'

    assert summarize_geometry(Polygon()) == ['POLYGON EMPTY']

def test_pretty_srs_wkt():
    assert pretty_srs_wkt(None) == '(unknown)'
    assert pretty_srs_wkt('') == '(unknown)'

    wkt = pretty_srs_wkt(CRS.from_epsg(2056))
    assert wkt.startswith('PROJCS["CH1903+ / LV95"'), 'expected WKT1 export'
    assert '\n' in wkt, 'WKT must be pretty-printed'

    # WKT strings are accepted as well
    assert pretty_srs_wkt(CRS.from_epsg(4326).to_wkt()).startswith('GEOGCS["WGS 84"')
