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
import os
import subprocess
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import pyarrow
import pyarrow.fs
from packaging.version import parse
from pyarrow.fs import FileSystem

from pymergeplan.common.options import Options
from pymergeplan.common.options.config import HdfsOptions, S3Options

# Records every path the resolver probes, merges or moves.
FILE_OP_LOGGER = logging.getLogger("pymergeplan.file_op")


class FileIO:
    """Listing and existence checks over the pyarrow filesystem that owns a location."""

    HIDDEN_PREFIXES = ("_", ".")

    def __init__(self, path: str, catalog_options=None):
        self.properties = Options.of(catalog_options)
        self.logger = logging.getLogger(__name__)
        scheme, netloc, _ = self.parse_location(path)
        if scheme in {"s3", "s3a", "s3n"}:
            self.filesystem = self._initialize_s3_fs()
        elif scheme in {"hdfs", "viewfs"}:
            self.filesystem = self._initialize_hdfs_fs(netloc)
        elif scheme in {"file"}:
            self.filesystem = self._initialize_local_fs()
        else:
            raise ValueError(f"Unrecognized filesystem type in URI: {scheme}")

    @staticmethod
    def parse_location(location: str):
        uri = urlparse(location)
        if not uri.scheme:
            return "file", uri.netloc, os.path.abspath(location)
        elif uri.scheme in ("hdfs", "viewfs"):
            return uri.scheme, uri.netloc, uri.path
        else:
            return uri.scheme, uri.netloc, f"{uri.netloc}{uri.path}"

    @staticmethod
    def _create_s3_retry_config(
            max_attempts: int = 10,
            request_timeout: int = 60,
            connect_timeout: int = 60
    ) -> Dict[str, Any]:
        """
        AwsStandardS3RetryStrategy and timeout parameters are only available
        in PyArrow >= 8.0.0.
        """
        if parse(pyarrow.__version__) < parse("8.0.0"):
            return {}
        from pyarrow.fs import AwsStandardS3RetryStrategy
        return {
            'request_timeout': request_timeout,
            'connect_timeout': connect_timeout,
            'retry_strategy': AwsStandardS3RetryStrategy(max_attempts=max_attempts),
        }

    def _initialize_s3_fs(self) -> FileSystem:
        from pyarrow.fs import S3FileSystem

        client_kwargs = {
            "endpoint_override": self.properties.get(S3Options.S3_ENDPOINT),
            "access_key": self.properties.get(S3Options.S3_ACCESS_KEY_ID),
            "secret_key": self.properties.get(S3Options.S3_ACCESS_KEY_SECRET),
            "session_token": self.properties.get(S3Options.S3_SECURITY_TOKEN),
            "region": self.properties.get(S3Options.S3_REGION),
        }
        client_kwargs.update(self._create_s3_retry_config())

        return S3FileSystem(**client_kwargs)

    def _initialize_hdfs_fs(self, netloc: Optional[str]) -> FileSystem:
        from pyarrow.fs import HadoopFileSystem

        if 'HADOOP_HOME' not in os.environ:
            raise RuntimeError("HADOOP_HOME environment variable is not set.")
        if 'HADOOP_CONF_DIR' not in os.environ:
            raise RuntimeError("HADOOP_CONF_DIR environment variable is not set.")

        hadoop_home = os.environ.get("HADOOP_HOME")
        native_lib_path = f"{hadoop_home}/lib/native"
        os.environ['LD_LIBRARY_PATH'] = f"{native_lib_path}:{os.environ.get('LD_LIBRARY_PATH', '')}"

        class_paths = subprocess.run(
            [f'{hadoop_home}/bin/hadoop', 'classpath', '--glob'],
            capture_output=True,
            text=True,
            check=True
        )
        os.environ['CLASSPATH'] = class_paths.stdout.strip()

        authority = urlparse(f"//{netloc}")
        user = self.properties.get(HdfsOptions.HDFS_USER) or os.environ.get('HADOOP_USER_NAME', 'hadoop')
        return HadoopFileSystem(
            host=authority.hostname or "default",
            port=authority.port or 0,
            user=user
        )

    def _initialize_local_fs(self) -> FileSystem:
        from pyarrow.fs import LocalFileSystem

        return LocalFileSystem()

    def exists(self, path: str) -> bool:
        try:
            path_str = self.to_filesystem_path(path)
            file_info = self.filesystem.get_file_info([path_str])[0]
            return file_info.type != pyarrow.fs.FileType.NotFound
        except Exception:
            self.logger.debug("Failed to check existence of %s", path, exc_info=True)
            return False

    def list_status(self, path: str, allow_not_found: bool = True) -> List[pyarrow.fs.FileInfo]:
        """
        Lists the direct children of ``path``, sorted by name.

        Raises:
            OSError: If the directory cannot be listed, or does not exist and
                ``allow_not_found`` is False.
        """
        path_str = self.to_filesystem_path(path)
        selector = pyarrow.fs.FileSelector(path_str, recursive=False, allow_not_found=allow_not_found)
        return sorted(self.filesystem.get_file_info(selector), key=lambda info: info.base_name)

    def list_status_at_depth(self, path: str, depth: int) -> List[Tuple[str, pyarrow.fs.FileInfo]]:
        """
        Returns the entries exactly ``depth`` levels below ``path`` with their locations anchored
        under ``path``. Only directories are descended into; the last level keeps directories and
        regular files. Hidden entries (``_SUCCESS``, ``.staging`` ...) are skipped at every level.

        The walk is level by level, so it never descends deeper than ``depth``.

        Raises:
            OSError: If any directory on the way cannot be listed.
        """
        root = path.rstrip('/')
        if depth <= 0:
            return [(root, self.filesystem.get_file_info(self.to_filesystem_path(root)))]

        current_level = [root]
        entries = []
        for level in range(depth):
            last_level = level == depth - 1
            entries = []
            for directory in current_level:
                for info in self.list_status(directory, allow_not_found=False):
                    if self.is_hidden(info.base_name):
                        continue
                    if info.type == pyarrow.fs.FileType.Directory or (
                            last_level and info.type == pyarrow.fs.FileType.File):
                        entries.append((self.to_uri(directory, info.base_name), info))
            current_level = [location for location, info in entries
                             if info.type == pyarrow.fs.FileType.Directory]
        return entries

    @staticmethod
    def is_hidden(name: str) -> bool:
        return name.startswith(FileIO.HIDDEN_PREFIXES)

    @staticmethod
    def to_uri(parent: str, child: str) -> str:
        """Appends a child name below a location, keeping its scheme and authority."""
        return f"{parent.rstrip('/')}/{child.strip('/')}"

    def to_filesystem_path(self, path: str) -> str:
        from pyarrow.fs import S3FileSystem
        import re

        parsed = urlparse(path)
        normalized_path = re.sub(r'/+', '/', parsed.path) if parsed.path else ''

        if isinstance(self.filesystem, S3FileSystem):
            # For S3, return "bucket/path" format
            if parsed.scheme:
                if parsed.netloc:
                    path_part = normalized_path.lstrip('/')
                    return f"{parsed.netloc}/{path_part}" if path_part else parsed.netloc
                result = normalized_path.lstrip('/')
                return result if result else '.'
            return str(path)

        if parsed.scheme:
            if not normalized_path:
                return '.'
            return normalized_path

        return str(path)
