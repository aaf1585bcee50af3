'''
Global pytest fixtures
'''

import geopandas as gpd
import pytest

from pathlib import Path
from shapely.geometry import LineString, Point, box

from vecinfo.core.memory import FrameLayer, MemoryDataSource

@pytest.fixture
def tmppath(tmpdir):
    '''
    Fixture to make sure that test function receive proper
    Posix or Windows path instead of 'localpath'
    '''
    return Path(tmpdir)

@pytest.fixture()
def get_parcels():
    """
    Fixture returning a GeoDataFrame with four parcels (polygons) owned by
    Smith (twice), Jones and an unknown owner
    """
    def _get_parcels(crs='EPSG:2056'):
        return gpd.GeoDataFrame(
            {
                'id': [1, 2, 3, 4],
                'owner': ['Smith', 'Jones', 'Smith', None],
                'area': [16.0, 16.0, 16.0, 1.5],
            },
            geometry=[
                box(0, 0, 4, 4),
                box(5, 5, 9, 9),
                box(20, 20, 24, 24),
                box(2, 2, 3, 3),
            ],
            crs=crs
        )
    return _get_parcels

@pytest.fixture()
def get_parcels_layer(get_parcels):
    """Fixture returning the parcels as in-memory layer"""
    def _get_parcels_layer(crs='EPSG:2056'):
        return FrameLayer('parcels', get_parcels(crs=crs))
    return _get_parcels_layer

@pytest.fixture()
def get_two_geometry_layer():
    """
    Fixture returning an in-memory layer with two geometry fields. The
    primary field (`footprint`) and the secondary field (`entrance`) place
    the features differently so that filters on either field select
    different features.
    """
    def _get_two_geometry_layer():
        gdf = gpd.GeoDataFrame(
            {
                'name': ['a', 'b', 'c'],
                'footprint': gpd.GeoSeries(
                    [box(1, 1, 2, 2), box(50, 50, 52, 52), box(3, 3, 4, 4)]
                ),
                'entrance': gpd.GeoSeries(
                    [Point(60, 60), Point(5, 5), Point(3.5, 3.5)]
                ),
            },
            geometry='footprint',
            crs='EPSG:4326'
        )
        return FrameLayer('buildings', gdf)
    return _get_two_geometry_layer

@pytest.fixture()
def get_memory_datasource(get_parcels_layer, get_two_geometry_layer):
    """Fixture returning a data source with the parcels and buildings layers"""
    def _get_memory_datasource():
        return MemoryDataSource(
            [get_parcels_layer(), get_two_geometry_layer()]
        )
    return _get_memory_datasource

@pytest.fixture()
def get_gpkg(tmppath, get_parcels):
    """
    Fixture writing a GeoPackage with the parcels and a roads layer into a
    temporary directory
    """
    def _get_gpkg():
        fpath = tmppath.joinpath('cadastre.gpkg')
        get_parcels().to_file(fpath, layer='parcels', driver='GPKG')
        roads = gpd.GeoDataFrame(
            {'label': ['main street', 'side street']},
            geometry=[
                LineString([(0, 0), (10, 0)]),
                LineString([(0, 0), (0, 5), (5, 5)]),
            ],
            crs='EPSG:2056'
        )
        roads.to_file(fpath, layer='roads', driver='GPKG')
        return fpath
    return _get_gpkg
