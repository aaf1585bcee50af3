"""
Serializers rendering layer reports as plain text or XML.

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

from typing import Optional

from vecinfo.report.config import DisplayOptions, ReportFormat
from vecinfo.report.formats.base import BaseSerializer
from vecinfo.report.formats.text import TextSerializer
from vecinfo.report.formats.xmltree import XmlSerializer
from vecinfo.utils.exceptions import UnsupportedFormatError

SERIALIZERS = {
    ReportFormat.PLAIN_TEXT: TextSerializer,
    ReportFormat.XML_TREE: XmlSerializer,
}


def get_serializer(
    output_format: ReportFormat, display: Optional[DisplayOptions] = None
) -> BaseSerializer:
    """
    Returns the serializer of an output format

    :param output_format:
        report format
    :param display:
        optional display options
    :returns:
        serializer instance
    :raises UnsupportedFormatError:
        if there is no serializer for the format
    """
    serializer = SERIALIZERS.get(output_format)
    if serializer is None:
        name = getattr(output_format, "value", output_format)
        raise UnsupportedFormatError(f"Output format {name} is not supported")
    return serializer(display=display)
