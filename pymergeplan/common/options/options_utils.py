################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

from typing import Any, Type

from pymergeplan.common.memory_size import MemorySize


class OptionsUtils:
    """Conversion of raw configuration values into typed option values."""

    @staticmethod
    def convert_value(value: Any, target_type: Type) -> Any:
        """
        Convert a raw value to the target type.

        Raises:
            ValueError: If the conversion is not possible
        """
        if value is None:
            return None

        # bool is a subclass of int, so it must never pass as an int option
        if isinstance(value, target_type) and not (target_type is int and isinstance(value, bool)):
            return value

        if target_type == str:
            return OptionsUtils.convert_to_string(value)
        elif target_type == int:
            return OptionsUtils.convert_to_int(value)
        elif target_type == MemorySize:
            return OptionsUtils.convert_to_memory_size(value)
        else:
            raise ValueError(f"Unsupported type: {target_type}")

    @staticmethod
    def convert_to_string(value: Any) -> str:
        if isinstance(value, MemorySize):
            return f"{value.get_bytes()} b"
        return str(value)

    @staticmethod
    def convert_to_int(value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Cannot convert boolean {value} to int")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            return int(value.strip())
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise ValueError(f"Cannot convert {type(value)} to int")

    @staticmethod
    def convert_to_memory_size(value: Any) -> MemorySize:
        if isinstance(value, MemorySize):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return MemorySize.of_bytes(value)
        if isinstance(value, str):
            return MemorySize.parse(value)
        raise ValueError(f"Cannot convert {type(value)} to MemorySize")
