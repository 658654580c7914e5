# This software is released under the Revised BSD License.
# See LICENSE for details
#
# Copyright (c) 2019, Ryan Chapin, https//:www.ryanchapin.com
# All rights reserved.

from enum import Enum


class RunResult(Enum):
    SUCCESS = "success"
    FAIL = "fail"


class LogLevel(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @staticmethod
    def get_enum_value_from_string(value_string: str):
        """
        Convert a string to the corresponding LogLevel enum value.
        :param value_string: The string representation of the enum value, in any case.
        :return: The corresponding LogLevel enum value or None if not found.
        """
        try:
            return LogLevel(value_string.lower())
        except (AttributeError, ValueError):
            return None
