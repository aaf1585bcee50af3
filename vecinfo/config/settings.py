"""
Global *vecinfo* settings defining display defaults of the layer reports and
the package-wide logging setup. The module exposes a `logger` object for
package wide-logging (console and optional file output). Console output is
written to stderr so that diagnostics never end up in a report.

The ``Settings`` class uses ``pydantic``. This means all attributes of the class can
be **overwritten** using environmental variables (prefixed by ``VECINFO_``)
or a `.env` file.

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

import logging

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    The vecinfo setting class. Allows to modify default
    settings and behavior of the package using a .env file
    or environmental variables
    """

    model_config = SettingsConfigDict(
        env_prefix="VECINFO_", env_file=".env", arbitrary_types_allowed=True
    )

    # display defaults of the plain text feature dump (-fields, -geom)
    DISPLAY_FIELDS: bool = True
    DISPLAY_GEOMETRY: str = "YES"

    # SQL dialect handed to the data source when none is passed (-dialect)
    SQL_DIALECT: Optional[str] = None

    # number format of extent coordinates
    EXTENT_FORMAT: str = "{:f}"

    # column of in-memory layers holding feature style strings
    STYLE_COLUMN: str = "OGR_STYLE"

    # define logger
    LOGGER_NAME: str = "vecinfo"
    LOG_FORMAT: str = "%(levelname)s: %(message)s"
    # no file output unless a path is given
    LOG_FILE: Optional[str] = None
    LOGGING_LEVEL: int = logging.INFO

    # logger
    logger: logging.Logger = logging.getLogger(LOGGER_NAME)

    def get_logger(self):
        """
        returns a logger object with stream and (optional) file handler
        """
        self.logger.setLevel(self.LOGGING_LEVEL)
        formatter: logging.Formatter = logging.Formatter(self.LOG_FORMAT)
        if self.LOG_FILE is not None:
            fh: logging.FileHandler = logging.FileHandler(self.LOG_FILE)
            fh.setLevel(self.LOGGING_LEVEL)
            fh.setFormatter(formatter)
            self.logger.addHandler(fh)
        # console handler writes to stderr
        ch: logging.StreamHandler = logging.StreamHandler()
        ch.setLevel(self.LOGGING_LEVEL)
        ch.setFormatter(formatter)
        self.logger.addHandler(ch)


@lru_cache()
def get_settings():
    """
    loads package settings using ``last-recently-used`` cache
    """
    s = Settings()
    s.get_logger()
    return s
