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

import logging
import re
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)


class PartitionPathUtils:
    """Conversions between partition specs and ``col=value`` directory names."""

    PARTITION_SEGMENT = re.compile(r'^([^/]+)=([^/]+)$')

    @staticmethod
    def unescape_path_name(text: str) -> str:
        return unquote(text)

    @staticmethod
    def path_segments(path: str) -> List[str]:
        """Directory names of a location, without scheme and authority."""
        parsed = urlparse(path)
        # a one letter scheme is a Windows drive
        raw = parsed.path if len(parsed.scheme) > 1 else path
        return [segment for segment in raw.split('/') if segment]

    @staticmethod
    def trailing_segments(path: str, count: int) -> List[str]:
        """
        The last ``count`` names of a location, exactly as written. Names are not unescaped: the
        moved directory keeps its on-disk name.
        """
        if count <= 0:
            return []
        segments = [segment for segment in path.rstrip('/').split('/') if segment]
        return segments[-count:]

    @staticmethod
    def make_spec_from_path(
            path: str,
            required_keys: Optional[Iterable[str]] = None,
            base_spec: Optional[Dict[str, Optional[str]]] = None) -> Optional['OrderedDict[str, str]']:
        """
        Collects ``key=value`` directory names of ``path``, from its root down to the leaf, on top
        of ``base_spec``.

        Returns None when any of ``required_keys`` is not present in the path.
        """
        spec = OrderedDict(base_spec or {})
        missing = set(required_keys or ())
        for segment in PartitionPathUtils.path_segments(path):
            match = PartitionPathUtils.PARTITION_SEGMENT.match(segment)
            if not match:
                continue
            key = PartitionPathUtils.unescape_path_name(match.group(1))
            spec[key] = PartitionPathUtils.unescape_path_name(match.group(2))
            missing.discard(key)

        if missing:
            logger.warning("Cannot create partition spec from %s; missing keys %s", path, sorted(missing))
            return None
        return spec

    @staticmethod
    def full_partition_spec(
            part_spec: Dict[str, Optional[str]], path: str) -> Optional['OrderedDict[str, str]']:
        """
        Completes a dynamic partition spec (static values set, dynamic values None) from the
        directory names of ``path``. Every column of ``part_spec`` must appear in the path;
        other ``key=value`` names, like skewed-value directories, are not part of the result.
        """
        spec = PartitionPathUtils.make_spec_from_path(path, part_spec.keys(), part_spec)
        if spec is None:
            return None
        return OrderedDict((key, spec[key]) for key in part_spec)
