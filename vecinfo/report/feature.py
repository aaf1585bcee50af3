"""
Module dumping the features of a layer as format-neutral records.

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
import numpy as np

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from vecinfo.config import get_settings
from vecinfo.core.layer import LayerFeature, VectorLayer
from vecinfo.report.config import FetchKind, FetchMode
from vecinfo.report.metadata import LayerMetadata
from vecinfo.utils.constants import NULL_FID
from vecinfo.utils.exceptions import FeatureNotFoundError

logger = get_settings().logger


@dataclass(frozen=True)
class FeatureRecord:
    """
    A feature as reported

    :attrib fid:
        feature identifier (`NULL_FID` if the feature has none)
    :attrib attributes:
        attribute values as strings by field name in schema order. Unset
        fields have None.
    :attrib geometries:
        geometries as WKT by geometry field name (None if not set)
    :attrib style:
        optional style string
    :attrib field_types:
        type names of the attribute fields
    """

    fid: int = NULL_FID
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    geometries: Dict[str, Optional[str]] = field(default_factory=dict)
    style: Optional[str] = None
    field_types: Dict[str, str] = field(default_factory=dict)


def format_field_value(value: Any) -> str:
    """
    Formats an attribute value for reporting

    :param value:
        attribute value (not None)
    :returns:
        value as string
    """
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return "%.15g" % value
    # datetime is a subclass of date
    if isinstance(value, datetime.datetime):
        return value.strftime("%Y/%m/%d %H:%M:%S")
    if isinstance(value, datetime.date):
        return value.strftime("%Y/%m/%d")
    if isinstance(value, datetime.time):
        return value.strftime("%H:%M:%S")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex().upper()
    if isinstance(value, (list, tuple, np.ndarray)):
        items = ",".join(format_field_value(item) for item in value)
        return f"({len(value)}:{items})"
    return str(value)


def to_record(feature: LayerFeature, field_types: Dict[str, str]) -> FeatureRecord:
    """
    Converts a layer feature into a `FeatureRecord`

    :param feature:
        feature returned by a layer
    :param field_types:
        type names by field name. Its keys define the attributes of the
        record.
    :returns:
        the feature record
    """
    attributes = {}
    for name in field_types:
        value = feature.attributes.get(name)
        attributes[name] = format_field_value(value) if value is not None else None
    geometries = {
        name: geom.wkt if geom is not None else None
        for name, geom in feature.geometries.items()
    }
    return FeatureRecord(
        fid=feature.fid,
        attributes=attributes,
        geometries=geometries,
        style=feature.style,
        field_types=field_types,
    )


def dump_features(
    layer: VectorLayer,
    mode: FetchMode,
    metadata: Optional[LayerMetadata] = None,
) -> Iterator[FeatureRecord]:
    """
    Yields the features of a layer as `FeatureRecord` objects. Sequential
    reading starts at the current cursor position of the layer, i.e., the
    caller has to reset the cursor to read the layer again.

    :param layer:
        layer to dump
    :param mode:
        all features, a single feature by its identifier or no features
    :param metadata:
        optional layer metadata. The attribute fields of verbose metadata
        define the keys of the records, otherwise the layer schema is used.
    :returns:
        generator of feature records
    """
    if metadata is not None and metadata.verbose:
        field_types = {f.name: f.type_name for f in metadata.fields}
    else:
        field_types = {f.name: f.type_name for f in layer.fields}

    if mode.kind == FetchKind.SUMMARY:
        return
    if mode.kind == FetchKind.BY_ID:
        try:
            feature = layer.get_feature(mode.fid)
        except FeatureNotFoundError as e:
            logger.debug(str(e))
            return
        yield to_record(feature, field_types)
        return

    while True:
        feature = layer.get_next_feature()
        if feature is None:
            break
        yield to_record(feature, field_types)
