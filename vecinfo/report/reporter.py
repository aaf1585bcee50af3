"""
Orchestration of layer reports: filtering, metadata extraction, feature
dumping and serialization of the layers of a data source.

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

import sys

from typing import List, Optional, Sequence, TextIO

from vecinfo.config import get_settings
from vecinfo.core.layer import VectorDataSource, VectorLayer
from vecinfo.report.config import FetchKind, FetchMode, RunConfiguration
from vecinfo.report.feature import dump_features
from vecinfo.report.filter import LayerFilter, apply_filters
from vecinfo.report.formats import get_serializer
from vecinfo.report.metadata import extract_metadata
from vecinfo.utils.constants import GeometryTypes
from vecinfo.utils.exceptions import LayerNotFoundError, QueryError

Settings = get_settings()
logger = Settings.logger


def layer_listing(datasource: VectorDataSource) -> List[str]:
    """
    One line per layer of a data source with its (1-based) position, name and
    geometry type(s). Unknown geometry types are not listed.

    :param datasource:
        data source to list
    :returns:
        listing lines
    """
    lines = []
    for idx, layer in enumerate(datasource.layers):
        line = f"{idx + 1}: {layer.name}"
        geometry_fields = layer.geometry_fields
        if len(geometry_fields) > 1:
            types = ", ".join(geom_field.geometry_type for geom_field in geometry_fields)
            line += f" ({types})"
        elif layer.geometry_type != GeometryTypes.UNKNOWN.value:
            line += f" ({layer.geometry_type})"
        lines.append(line)
    return lines


class LayerReporter:
    """
    Writes reports on the layers of a data source to a text stream

    :attrib config:
        run configuration
    :attrib layer_filter:
        filters applied to every reported layer
    """

    def __init__(
        self,
        config: RunConfiguration,
        layer_filter: Optional[LayerFilter] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Class constructor

        :param config:
            run configuration
        :param layer_filter:
            optional filters applied to every reported layer
        :param stream:
            text stream the reports are written to (stdout by default)
        :raises UnsupportedFormatError:
            if the output format of the configuration is not implemented
        """
        self._config = config
        self._layer_filter = layer_filter if layer_filter is not None else LayerFilter()
        self._stream = stream if stream is not None else sys.stdout
        # fails before anything is written
        self._serializer = get_serializer(config.output_format, config.display)
        self._fetch_mode = FetchMode.from_config(config)

    @property
    def config(self) -> RunConfiguration:
        return self._config

    @property
    def layer_filter(self) -> LayerFilter:
        return self._layer_filter

    @property
    def fetch_mode(self) -> FetchMode:
        return self._fetch_mode

    def _emit(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def report_on_layer(self, layer: VectorLayer, apply_filter: bool = True) -> None:
        """
        Reports on a single layer

        :param layer:
            layer to report on
        :param apply_filter:
            install the filters of the run on the layer before reporting
        :raises InvalidAttributeFilterError:
            if the attribute filter cannot be installed
        """
        if apply_filter:
            self.layer_filter.apply(layer)

        metadata = extract_metadata(layer, self.config.verbose)
        features = dump_features(layer, self.fetch_mode, metadata)

        missing_fid = None
        if self.fetch_mode.kind == FetchKind.BY_ID:
            features = list(features)
            if len(features) == 0:
                if self._serializer.reports_missing_inline:
                    missing_fid = self.fetch_mode.fid
                else:
                    logger.warning(
                        f"Unable to locate feature id {self.fetch_mode.fid} on this layer."
                    )

        self._emit(self._serializer.render(metadata, features, missing_fid))

    def report_on_query(
        self,
        datasource: VectorDataSource,
        sql: str,
        dialect: Optional[str] = None,
    ) -> None:
        """
        Executes a SQL statement and reports on its result set. Without a
        geometry field name the spatial filter is handed to the data source
        along with the statement, otherwise it is installed on the named
        geometry field of the result set.

        :param datasource:
            data source to query
        :param sql:
            SQL statement
        :param dialect:
            optional SQL dialect
        """
        spatial_filter = self.layer_filter.spatial_filter
        geom_field = self.layer_filter.geom_field
        if dialect is None:
            dialect = Settings.SQL_DIALECT

        try:
            result = datasource.execute_sql(
                sql,
                dialect=dialect,
                spatial_filter=spatial_filter if geom_field is None else None,
            )
        except QueryError as e:
            logger.error(str(e))
            return

        if geom_field is not None:
            apply_filters(
                result,
                where=self.layer_filter.where,
                spatial_filter=spatial_filter,
                geom_field=geom_field,
            )
        else:
            apply_filters(result, where=self.layer_filter.where)
        self.report_on_layer(result, apply_filter=False)

    def list_layers(self, datasource: VectorDataSource) -> None:
        """writes the layer listing of a data source"""
        lines = layer_listing(datasource)
        if lines:
            self._emit("\n".join(lines) + "\n")

    def run(
        self,
        datasource: VectorDataSource,
        layer_names: Sequence[str] = (),
        all_layers: bool = False,
        sql: Optional[str] = None,
        dialect: Optional[str] = None,
    ) -> None:
        """
        Reports on a data source. A SQL statement is executed and reported
        once. Otherwise, the requested layers (or all layers) are reported in
        as many passes as the repeat count of the configuration says, each
        pass after the first rewinding the layers. Without layer names and
        without `all_layers` the layers are listed only.

        :param datasource:
            opened data source
        :param layer_names:
            names of the layers to report on
        :param all_layers:
            report on all layers of the data source
        :param sql:
            optional SQL statement whose result set is reported instead of
            the layers
        :param dialect:
            optional SQL dialect of the statement
        :raises LayerNotFoundError:
            if a requested layer does not exist
        """
        if sql is not None:
            if len(layer_names) > 0:
                logger.warning("layer names ignored in combination with -sql.")
            self.report_on_query(datasource, sql, dialect)
            return

        requested = []
        for name in layer_names:
            layer = datasource.get_layer_by_name(name)
            if layer is None:
                raise LayerNotFoundError(f"Couldn't fetch requested layer {name}!")
            requested.append(layer)

        for repeat in range(self.config.repeat_count):
            if len(requested) == 0 and not all_layers:
                self.list_layers(datasource)
                continue
            layers = requested if len(requested) > 0 else datasource.layers
            for layer in layers:
                if repeat > 0:
                    layer.reset_reading()
                self.report_on_layer(layer)
