"""
sample script showing how to report on GeoDataFrames held in memory: the
parcels of a small cadastre are filtered by owner and by a rectangle and the
reports are written as plain text and XML to stdout

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

import geopandas as gpd
from shapely.geometry import box
from vecinfo.core.geometry import spatial_filter_from_bounds
from vecinfo.core.memory import MemoryDataSource
from vecinfo.report.config import (
    DisplayOptions,
    GeometryDisplay,
    ReportFormat,
    RunConfiguration,
)
from vecinfo.report.filter import LayerFilter
from vecinfo.report.reporter import LayerReporter

# user inputs
owner = 'Smith'
xmin, ymin, xmax, ymax = 0., 0., 10., 10.

parcels = gpd.GeoDataFrame(
    {
        'parcel_no': ['A-1', 'A-2', 'B-7'],
        'owner': ['Smith', 'Jones', 'Smith'],
    },
    geometry=[box(0, 0, 4, 4), box(5, 5, 9, 9), box(20, 20, 24, 24)],
    crs=2056
)
datasource = MemoryDataSource.from_frames({'parcels': parcels}, name='cadastre')

# filters are shared by all layers (and passes) of a run
layer_filter = LayerFilter(
    where=f"owner = '{owner}'",
    spatial_filter=spatial_filter_from_bounds(xmin, ymin, xmax, ymax)
)

# plain text with geometry summaries
config = RunConfiguration(
    display=DisplayOptions(geometry=GeometryDisplay.SUMMARY)
)
LayerReporter(config, layer_filter).run(datasource, layer_names=['parcels'])

# XML without features
config = RunConfiguration(summary_only=True, output_format=ReportFormat.XML_TREE)
LayerReporter(config, layer_filter).run(datasource, all_layers=True)
