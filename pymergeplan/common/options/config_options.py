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

from typing import Generic, Type, TypeVar

from pymergeplan.common.memory_size import MemorySize
from pymergeplan.common.options.config_option import ConfigOption

T = TypeVar('T')


class ConfigOptions:
    """
    Entry point for building ConfigOption instances.

    Examples:
        parallelism = ConfigOptions.key("merge.probe.parallelism").int_type().default_value(1)
        split_size = ConfigOptions.key("merge.size.per-task").memory_type().no_default_value()
    """

    @staticmethod
    def key(key: str) -> 'OptionBuilder':
        if not key:
            raise ValueError("Key must not be None or empty.")
        return ConfigOptions.OptionBuilder(key)

    class OptionBuilder:
        """Chooses the value type of the option being built."""

        def __init__(self, key: str):
            self.key = key

        def int_type(self) -> 'ConfigOptions.TypedConfigOptionBuilder[int]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, int)

        def string_type(self) -> 'ConfigOptions.TypedConfigOptionBuilder[str]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, str)

        def memory_type(self) -> 'ConfigOptions.TypedConfigOptionBuilder[MemorySize]':
            return ConfigOptions.TypedConfigOptionBuilder(self.key, MemorySize)

    class TypedConfigOptionBuilder(Generic[T]):
        """Builder for ConfigOption with a defined atomic type."""

        def __init__(self, key: str, clazz: Type[T]):
            self.key = key
            self.clazz = clazz

        def default_value(self, value: T) -> ConfigOption[T]:
            return ConfigOption(
                key=self.key,
                clazz=self.clazz,
                description=ConfigOption.EMPTY_DESCRIPTION,
                default_value=value
            )

        def no_default_value(self) -> ConfigOption[T]:
            return ConfigOption(
                key=self.key,
                clazz=self.clazz,
                description=ConfigOption.EMPTY_DESCRIPTION,
                default_value=None
            )
