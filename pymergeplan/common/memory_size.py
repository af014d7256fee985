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
"""
MemorySize is a number of bytes that can be parsed from a text expression.

If the expression is a pure number, the value is interpreted as bytes.
Supported suffixes (case insensitive, optional whitespace before the unit):
- b, bytes
- k, kb, kibibytes (1024 bytes)
- m, mb, mebibytes (1024 kibibytes)
- g, gb, gibibytes (1024 mebibytes)
- t, tb, tebibytes (1024 gibibytes)
"""

import re


class MemoryUnit:
    """Units understood by MemorySize.parse."""

    def __init__(self, units, multiplier: int):
        self.units = units
        self.multiplier = multiplier

    @staticmethod
    def parse_unit(unit_str: str) -> 'MemoryUnit':
        if not unit_str:
            return BYTES
        for unit in ALL_UNITS:
            if unit_str in unit.units:
                return unit
        raise ValueError(
            f"Memory size unit '{unit_str}' does not match any of the recognized units: "
            f"{', '.join('|'.join(u.units) for u in ALL_UNITS)}")


BYTES = MemoryUnit(("b", "bytes"), 1)
KILO_BYTES = MemoryUnit(("k", "kb", "kibibytes"), 1 << 10)
MEGA_BYTES = MemoryUnit(("m", "mb", "mebibytes"), 1 << 20)
GIGA_BYTES = MemoryUnit(("g", "gb", "gibibytes"), 1 << 30)
TERA_BYTES = MemoryUnit(("t", "tb", "tebibytes"), 1 << 40)
ALL_UNITS = (BYTES, KILO_BYTES, MEGA_BYTES, GIGA_BYTES, TERA_BYTES)


class MemorySize:
    """A non-negative number of bytes."""

    def __init__(self, bytes: int):
        if bytes < 0:
            raise ValueError("bytes must be >= 0")
        self.bytes = bytes

    @staticmethod
    def of_bytes(bytes: int) -> 'MemorySize':
        return MemorySize(bytes)

    def get_bytes(self) -> int:
        return self.bytes

    def __eq__(self, other) -> bool:
        if not isinstance(other, MemorySize):
            return False
        return self.bytes == other.bytes

    def __hash__(self) -> int:
        return hash(self.bytes)

    def __str__(self) -> str:
        if self.bytes == 0:
            return "0 bytes"
        for unit in reversed(ALL_UNITS):
            if self.bytes % unit.multiplier == 0:
                return f"{self.bytes // unit.multiplier} {unit.units[-1]}"
        return f"{self.bytes} bytes"

    def __repr__(self) -> str:
        return f"MemorySize({self.bytes})"

    @staticmethod
    def parse(text: str) -> 'MemorySize':
        """
        Parses the given string as a MemorySize.

        Raises:
            ValueError: If the expression cannot be parsed.
        """
        return MemorySize(MemorySize.parse_bytes(text))

    @staticmethod
    def parse_bytes(text: str) -> int:
        if text is None:
            raise ValueError("text cannot be None")

        trimmed = text.strip()
        if not trimmed:
            raise ValueError("argument is an empty- or whitespace-only string")

        match = re.match(r'^(\d+)\s*([a-zA-Z]*)$', trimmed)
        if not match:
            raise ValueError(f"cannot parse memory size: '{text}'")

        value = int(match.group(1))
        unit_str = match.group(2).lower() if match.group(2) else ""
        result = value * MemoryUnit.parse_unit(unit_str).multiplier

        # split-size fields are signed 64bit
        if result >= 1 << 63:
            raise ValueError(
                f"The value '{text}' cannot be represented as 64bit number of bytes (numeric overflow).")
        return result
