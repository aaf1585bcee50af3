'''
Tests for the plain text and XML serializers of layer reports.

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
import pytest
import re

from shapely.geometry import Point
from xml.dom import minidom

from vecinfo.core.memory import FrameLayer
from vecinfo.report.config import DisplayOptions, FetchMode, GeometryDisplay, ReportFormat
from vecinfo.report.feature import dump_features
from vecinfo.report.formats import get_serializer
from vecinfo.report.formats.text import TextSerializer
from vecinfo.report.formats.xmltree import XmlSerializer
from vecinfo.report.metadata import extract_metadata
from vecinfo.utils.exceptions import UnsupportedFormatError

ATTR_LINE = re.compile(r'^  (\S+) \((\w*)\) = (.*)$')

def _report_input(layer, verbose=True):
    metadata = extract_metadata(layer, verbose=verbose)
    records = list(dump_features(layer, FetchMode.all(), metadata))
    return metadata, records

def _text_pairs(text):
    pairs = []
    for line in text.splitlines():
        match = ATTR_LINE.match(line)
        if match is not None:
            value = match.group(3)
            pairs.append((match.group(1), None if value == '(null)' else value))
    return pairs

def _xml_pairs(text):
    pairs = []
    doc = minidom.parseString(text)
    for attr in doc.getElementsByTagName('Attr'):
        value = attr.firstChild.data if attr.firstChild is not None else None
        pairs.append((attr.getAttribute('name'), value))
    return pairs

def test_get_serializer():
    assert isinstance(get_serializer(ReportFormat.PLAIN_TEXT), TextSerializer)
    assert isinstance(get_serializer(ReportFormat.XML_TREE), XmlSerializer)
    with pytest.raises(UnsupportedFormatError):
        get_serializer(ReportFormat.JSON_TREE)

def test_text_summary(get_parcels_layer):
    metadata, _ = _report_input(get_parcels_layer(crs=None))
    text = TextSerializer().render(metadata, [])
    assert text == (
        '\n'
        'Layer name: parcels\n'
        'Geometry: Polygon\n'
        'Feature Count: 4\n'
        'Extent: (0.000000, 0.000000) - (24.000000, 24.000000)\n'
        'Layer SRS WKT:\n'
        '(unknown)\n'
        'Geometry Column = geometry\n'
        'id: Integer64 (0.0)\n'
        'owner: String (0.0)\n'
        'area: Real (0.0)\n'
    )

def test_text_minimal(get_parcels_layer):
    metadata, _ = _report_input(get_parcels_layer(), verbose=False)
    assert TextSerializer().render(metadata, []) == '\nLayer name: parcels\n'

def test_text_features(get_parcels_layer):
    metadata, records = _report_input(get_parcels_layer())
    text = TextSerializer().render(metadata, records)
    block = (
        'Feature(parcels):0\n'
        '  id (Integer64) = 1\n'
        '  owner (String) = Smith\n'
        '  area (Real) = 16\n'
        '  POLYGON ((4 0, 4 4, 0 4, 0 0, 4 0))\n'
        '\n'
    )
    assert block in text
    assert '  owner (String) = (null)\n' in text, 'unset values must be shown as (null)'
    assert text.count('Feature(parcels):') == 4

def test_text_display_options(get_parcels_layer):
    metadata, records = _report_input(get_parcels_layer())

    display = DisplayOptions(fields=False, geometry=GeometryDisplay.SUMMARY)
    text = TextSerializer(display=display).render(metadata, records[:1])
    assert text.endswith('Feature(parcels):0\n  POLYGON : 5 points\n\n')

    display = DisplayOptions(fields=True, geometry=GeometryDisplay.SUPPRESSED)
    text = TextSerializer(display=display).render(metadata, records[:1])
    assert text.endswith('  area (Real) = 16\n\n'), 'geometry must be suppressed'

def test_text_two_geometry_fields(get_two_geometry_layer):
    metadata, records = _report_input(get_two_geometry_layer())
    text = TextSerializer().render(metadata, records)
    assert 'Geometry (footprint): Polygon\n' in text
    assert 'Geometry (entrance): Point\n' in text
    assert 'Extent (entrance): (3.500000, 3.500000) - (60.000000, 60.000000)\n' in text
    assert 'SRS WKT (entrance):\n(unknown)\n' in text
    assert 'Geometry Column 1 = footprint\n' in text
    assert 'Geometry Column 2 = entrance\n' in text
    assert '  entrance = POINT (60 60)\n' in text
    assert 'Layer SRS WKT' not in text

def test_text_style():
    gdf = gpd.GeoDataFrame(
        {'OGR_STYLE': ['PEN(c:#FF0000)']}, geometry=[Point(0, 0)]
    )
    metadata, records = _report_input(FrameLayer('styled', gdf))
    text = TextSerializer().render(metadata, records)
    assert 'Feature(styled):0\n  Style = PEN(c:#FF0000)\n  POINT (0 0)\n' in text

def test_text_missing_fid(get_parcels_layer):
    metadata, _ = _report_input(get_parcels_layer(), verbose=False)
    text = TextSerializer().render(metadata, [], missing_fid=42)
    assert text == '\nLayer name: parcels\nUnable to locate feature id 42 on this layer.\n'

def test_xml_report(get_parcels_layer):
    metadata, records = _report_input(get_parcels_layer())
    text = XmlSerializer().render(metadata, records)
    doc = minidom.parseString(text)

    layer = doc.documentElement
    assert layer.tagName == 'Layer'
    meta = layer.getElementsByTagName('Meta')[0]
    assert meta.getElementsByTagName('Name')[0].firstChild.data == 'parcels'
    assert meta.getElementsByTagName('FeatureCount')[0].firstChild.data == '4'
    geom_field = meta.getElementsByTagName('GeometryField')[0]
    assert geom_field.getAttribute('type') == 'Polygon'
    extent = geom_field.getElementsByTagName('Extent')[0]
    assert extent.getAttribute('maxx') == '24.000000'
    srs = geom_field.getElementsByTagName('SRS')[0].firstChild.data
    assert srs.startswith('PROJCS["CH1903+ / LV95"')
    fields = meta.getElementsByTagName('Field')
    assert [f.getAttribute('name') for f in fields] == ['id', 'owner', 'area']
    assert fields[1].getAttribute('type') == 'String'

    features = layer.getElementsByTagName('Feature')
    assert [f.getAttribute('id') for f in features] == ['0', '1', '2', '3']
    geometry = features[0].getElementsByTagName('Geometry')[0]
    assert geometry.getAttribute('name') == 'geometry'
    assert geometry.firstChild.data == 'POLYGON ((4 0, 4 4, 0 4, 0 0, 4 0))'

def test_xml_null_geometry():
    gdf = gpd.GeoDataFrame({'value': [1, 2]}, geometry=[Point(0, 0), None])
    metadata, records = _report_input(FrameLayer('points', gdf))
    doc = minidom.parseString(XmlSerializer().render(metadata, records))
    features = doc.getElementsByTagName('Feature')
    geometries = [f.getElementsByTagName('Geometry') for f in features]
    assert [len(g) for g in geometries] == [1, 1], 'one Geometry per geometry field'
    assert geometries[0][0].firstChild.data == 'POINT (0 0)'
    assert geometries[1][0].getAttribute('name') == 'geometry'
    assert geometries[1][0].firstChild is None, 'null geometry must be empty'

def test_xml_summary_only(get_parcels_layer):
    metadata, _ = _report_input(get_parcels_layer())
    doc = minidom.parseString(XmlSerializer().render(metadata, []))
    meta = doc.getElementsByTagName('Meta')[0]
    assert len(meta.getElementsByTagName('Field')) == 3, 'Meta must be populated'
    features = doc.getElementsByTagName('Features')[0]
    assert features.getElementsByTagName('Feature') == []

def test_xml_ignores_missing_fid(get_parcels_layer):
    metadata, _ = _report_input(get_parcels_layer(), verbose=False)
    text = XmlSerializer().render(metadata, [], missing_fid=42)
    assert 'Unable to locate' not in text
    minidom.parseString(text)

def test_serializer_equivalence(get_parcels_layer, get_two_geometry_layer):
    for layer_factory in (get_parcels_layer, get_two_geometry_layer):
        metadata, records = _report_input(layer_factory())
        text_pairs = _text_pairs(TextSerializer().render(metadata, records))
        xml_pairs = _xml_pairs(XmlSerializer().render(metadata, records))
        assert len(text_pairs) > 0
        assert text_pairs == xml_pairs, 'serializers must report the same values'
