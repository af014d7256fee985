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

import os
import shutil
import tempfile
import unittest

import pyarrow.fs
from pyarrow.fs import LocalFileSystem

from pymergeplan.common.file_io import FileIO
from pymergeplan.tests.output_dir_fixture import write_files


class FileIOTest(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp(prefix="file_io_test_")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_local_filesystem_from_path(self):
        self.assertIsInstance(FileIO(self.temp_dir).filesystem, LocalFileSystem)
        self.assertIsInstance(FileIO(f"file://{self.temp_dir}").filesystem, LocalFileSystem)

    def test_unknown_scheme(self):
        with self.assertRaises(ValueError):
            FileIO("ftp://host/out")

    def test_local_filesystem_path_conversion(self):
        file_io = FileIO("file:///tmp/warehouse")
        self.assertEqual(file_io.to_filesystem_path("file:///tmp/path/ds=1"), "/tmp/path/ds=1")
        self.assertEqual(file_io.to_filesystem_path("file://///tmp///path"), "/tmp/path")
        self.assertEqual(file_io.to_filesystem_path("/tmp/path/ds=1"), "/tmp/path/ds=1")
        self.assertEqual(file_io.to_filesystem_path("file://"), ".")

    def test_to_uri_keeps_scheme(self):
        self.assertEqual(FileIO.to_uri("s3://bucket/out/", "ds=1"), "s3://bucket/out/ds=1")
        self.assertEqual(FileIO.to_uri("/out", "/ds=1/"), "/out/ds=1")

    def test_exists(self):
        file_io = FileIO(self.temp_dir)
        self.assertTrue(file_io.exists(self.temp_dir))
        self.assertTrue(file_io.exists(f"file://{self.temp_dir}"))
        self.assertFalse(file_io.exists(os.path.join(self.temp_dir, "missing")))

    def test_list_status_is_sorted(self):
        for name in ["c", "a", "b"]:
            write_files(os.path.join(self.temp_dir, name), [1])
        names = [info.base_name for info in FileIO(self.temp_dir).list_status(self.temp_dir)]
        self.assertEqual(names, ["a", "b", "c"])

    def test_list_status_of_missing_directory(self):
        file_io = FileIO(self.temp_dir)
        missing = os.path.join(self.temp_dir, "missing")
        self.assertEqual(file_io.list_status(missing), [])
        with self.assertRaises(FileNotFoundError):
            file_io.list_status(missing, allow_not_found=False)

    def test_list_status_at_depth(self):
        root = os.path.join(self.temp_dir, "out")
        write_files(os.path.join(root, "ds=1", "hr=00"), [1])
        write_files(os.path.join(root, "ds=1", "hr=01"), [1])
        write_files(os.path.join(root, "ds=2", "hr=00", "nested"), [1])
        write_files(os.path.join(root, "ds=2", "_tmp.hr=02"), [1])
        write_files(os.path.join(root, ".staging", "hr=00"), [1])
        write_files(root, [1])
        file_io = FileIO(root)

        self.assertEqual([location for location, _ in file_io.list_status_at_depth(root, 0)], [root])
        self.assertEqual(
            [location for location, _ in file_io.list_status_at_depth(root, 1)],
            [os.path.join(root, "000000_0"), os.path.join(root, "ds=1"), os.path.join(root, "ds=2")])
        self.assertEqual(
            [location for location, _ in file_io.list_status_at_depth(root + "/", 2)],
            [os.path.join(root, "ds=1", "hr=00"),
             os.path.join(root, "ds=1", "hr=01"),
             os.path.join(root, "ds=2", "hr=00")])

    def test_list_status_at_depth_keeps_file_entries_of_last_level(self):
        root = os.path.join(self.temp_dir, "out")
        write_files(os.path.join(root, "ds=1"), [3])
        write_files(root, [7])

        entries = dict(FileIO(root).list_status_at_depth(root, 1))

        self.assertEqual(entries[os.path.join(root, "000000_0")].type, pyarrow.fs.FileType.File)
        self.assertEqual(entries[os.path.join(root, "000000_0")].size, 7)
        self.assertEqual(entries[os.path.join(root, "ds=1")].type, pyarrow.fs.FileType.Directory)
        # files above the last level are not descended into or returned
        self.assertEqual(
            [location for location, _ in FileIO(root).list_status_at_depth(root, 2)],
            [os.path.join(root, "ds=1", "000000_0")])

    def test_list_status_at_depth_keeps_uri(self):
        root = os.path.join(self.temp_dir, "out")
        os.makedirs(os.path.join(root, "ds=1"))
        uri = f"file://{root}"
        self.assertEqual([location for location, _ in FileIO(uri).list_status_at_depth(uri, 1)],
                         [f"{uri}/ds=1"])

    def test_list_status_at_depth_of_missing_root(self):
        with self.assertRaises(FileNotFoundError):
            FileIO(self.temp_dir).list_status_at_depth(os.path.join(self.temp_dir, "missing"), 1)


if __name__ == '__main__':
    unittest.main()
