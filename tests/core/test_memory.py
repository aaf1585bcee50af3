'''
Tests for the in-memory layers backed by GeoDataFrames.

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
import pandas as pd
import pytest

from shapely.geometry import Point, box

from vecinfo.core.geometry import spatial_filter_from_bounds
from vecinfo.core.memory import FrameLayer, MemoryDataSource, where_to_expression
from vecinfo.utils.exceptions import (
    ExtentUnavailableError,
    FeatureNotFoundError,
    InvalidAttributeFilterError,
    QueryError,
)

def test_where_to_expression():
    assert where_to_expression("owner = 'Smith'") == "owner == 'Smith'"
    assert where_to_expression('area >= 10 AND area <> 12') == 'area >= 10 and area != 12'
    assert where_to_expression('owner IS NULL') == 'owner.isnull()'
    assert where_to_expression('owner is not null') == 'owner.notnull()'
    assert where_to_expression('"land use" = 1') == '`land use` == 1'
    # literals are not translated
    assert where_to_expression("owner = 'A AND B'") == "owner == 'A AND B'"
    assert where_to_expression("owner = 'O''Neil'") == 'owner == "O\'Neil"'

def test_frame_layer_schema(get_parcels_layer):
    layer = get_parcels_layer()
    assert layer.name == 'parcels'
    assert [f.name for f in layer.fields] == ['id', 'owner', 'area'], 'wrong field order'
    assert [f.type_name for f in layer.fields] == ['Integer64', 'String', 'Real']
    assert len(layer.geometry_fields) == 1
    assert layer.geometry_type == 'Polygon'
    assert layer.geometry_column == 'geometry'
    assert layer.fid_column == ''
    assert layer.crs_wkt is not None
    assert layer.get_feature_count() == 4
    assert layer.get_extent() == (0.0, 0.0, 24.0, 24.0)

    # layer without spatial reference
    layer = get_parcels_layer(crs=None)
    assert layer.crs_wkt is None

def test_frame_layer_iteration(get_parcels_layer):
    layer = get_parcels_layer()
    features = list(layer)
    assert [f.fid for f in features] == [0, 1, 2, 3], 'fids must follow the index'
    assert features[0].attributes == {'id': 1, 'owner': 'Smith', 'area': 16.0}
    assert 'owner' not in features[3].attributes, 'unset fields must be omitted'
    assert features[0].geometries['geometry'].equals(box(0, 0, 4, 4))

    # exhausted until the cursor is reset
    assert layer.get_next_feature() is None
    layer.reset_reading()
    assert layer.get_next_feature().fid == 0

def test_frame_layer_attribute_filter(get_parcels_layer):
    layer = get_parcels_layer()
    layer.set_attribute_filter("owner = 'Smith'")
    assert layer.get_feature_count() == 2
    assert [f.attributes['owner'] for f in layer] == ['Smith', 'Smith']

    layer.set_attribute_filter('owner IS NULL')
    assert [f.fid for f in layer] == [3]

    # removing the filter
    layer.set_attribute_filter(None)
    assert layer.get_feature_count() == 4

    with pytest.raises(InvalidAttributeFilterError):
        layer.set_attribute_filter('no_such_field = 1')
    with pytest.raises(InvalidAttributeFilterError):
        layer.set_attribute_filter('area + 1')

def test_frame_layer_spatial_filter(get_parcels_layer, get_two_geometry_layer):
    layer = get_parcels_layer()
    layer.set_spatial_filter(spatial_filter_from_bounds(0, 0, 10, 10))
    assert [f.fid for f in layer] == [0, 1, 3]

    # both filters
    layer.set_attribute_filter("owner = 'Smith'")
    assert [f.fid for f in layer] == [0]

    layer.set_spatial_filter(None)
    assert [f.fid for f in layer] == [0, 2]

    # filters on the secondary geometry field
    layer = get_two_geometry_layer()
    rectangle = spatial_filter_from_bounds(0, 0, 10, 10)
    layer.set_spatial_filter(rectangle, 1)
    assert [f.attributes['name'] for f in layer] == ['b', 'c']
    layer.set_spatial_filter(rectangle, 0)
    assert [f.attributes['name'] for f in layer] == ['a', 'c']

    with pytest.raises(IndexError):
        layer.set_spatial_filter(rectangle, 2)

def test_frame_layer_two_geometry_fields(get_two_geometry_layer):
    layer = get_two_geometry_layer()
    assert [g.name for g in layer.geometry_fields] == ['footprint', 'entrance']
    assert [g.geometry_type for g in layer.geometry_fields] == ['Polygon', 'Point']
    assert layer.geometry_fields[1].crs_wkt is None
    assert layer.get_geom_field_index('entrance') == 1
    assert layer.get_geom_field_index('roof') == -1
    assert [f.name for f in layer.fields] == ['name']
    assert layer.get_extent(1) == (3.5, 3.5, 60.0, 60.0)

    feature = layer.get_next_feature()
    assert set(feature.geometries.keys()) == {'footprint', 'entrance'}
    assert feature.geometries['entrance'].equals(Point(60, 60))

def test_frame_layer_get_feature(get_parcels):
    gdf = get_parcels()
    layer = FrameLayer('parcels', gdf, fid_column='id')
    assert layer.fid_column == 'id'
    assert 'id' not in [f.name for f in layer.fields], 'fid column is no attribute'

    feature = layer.get_feature(3)
    assert feature.fid == 3
    assert feature.attributes['owner'] == 'Smith'

    # lookup ignores filters
    layer.set_attribute_filter("owner = 'Jones'")
    assert layer.get_feature(1).fid == 1

    with pytest.raises(FeatureNotFoundError):
        layer.get_feature(42)

def test_frame_layer_style():
    gdf = gpd.GeoDataFrame(
        {'OGR_STYLE': ['PEN(c:#FF0000)', None]},
        geometry=[Point(0, 0), Point(1, 1)]
    )
    layer = FrameLayer('styled', gdf)
    assert layer.fields == [], 'style column is no attribute'
    features = list(layer)
    assert features[0].style == 'PEN(c:#FF0000)'
    assert features[1].style is None

def test_frame_layer_without_geometries():
    gdf = gpd.GeoDataFrame(pd.DataFrame({'value': [1.5, 2.5]}))
    layer = FrameLayer('table', gdf)
    assert layer.geometry_fields == []
    assert layer.geometry_type == 'None'
    assert layer.geometry_column == ''
    with pytest.raises(ExtentUnavailableError):
        layer.get_extent()

    # features without geometry never intersect
    layer.set_spatial_filter(spatial_filter_from_bounds(0, 0, 1, 1))
    assert layer.get_feature_count() == 0

def test_frame_layer_empty_extent():
    gdf = gpd.GeoDataFrame({'value': [1]}, geometry=[None])
    layer = FrameLayer('nulls', gdf)
    with pytest.raises(ExtentUnavailableError):
        layer.get_extent()

def test_frame_layer_inputs(get_parcels):
    with pytest.raises(ValueError):
        FrameLayer('', get_parcels())
    with pytest.raises(TypeError):
        FrameLayer('parcels', pd.DataFrame({'a': [1]}))
    with pytest.raises(ValueError):
        FrameLayer('parcels', get_parcels(), fid_column='fid')

def test_memory_datasource(get_parcels, get_memory_datasource):
    ds = get_memory_datasource()
    assert ds.driver == 'Memory'
    assert ds.layer_names == ['parcels', 'buildings']
    assert ds.get_layer_by_name('buildings').name == 'buildings'
    assert ds.get_layer_by_name('roads') is None

    with pytest.raises(QueryError):
        ds.execute_sql('SELECT * FROM parcels')

    ds = MemoryDataSource.from_frames({'a': get_parcels(), 'b': get_parcels()})
    assert ds.layer_names == ['a', 'b']
    with pytest.raises(ValueError):
        MemoryDataSource([FrameLayer('a', get_parcels()), FrameLayer('a', get_parcels())])
