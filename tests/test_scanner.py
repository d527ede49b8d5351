import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from folder_compare.core.errors import (
    EntryReadError,
    PatternCompileError,
    RootNotADirectoryError,
    RootNotFoundError,
)
from folder_compare.core.folder.scanner import (
    FolderScanner,
    PatternMatcher,
    ScanOptions,
    read_pattern_file,
)

from tests._util import write_tree


class PatternMatcherTest(unittest.TestCase):
    """Test exclusion pattern compilation and matching."""

    def test_empty_set_matches_nothing(self):
        matcher = PatternMatcher([])
        self.assertFalse(matcher)
        self.assertEqual(0, len(matcher))
        self.assertFalse(matcher.matches("/any/path.txt"))

    def test_substring_match(self):
        matcher = PatternMatcher([".doc", ".txt"])
        self.assertTrue(matcher.matches("/root/docs/readme.doc"))
        self.assertTrue(matcher.matches("/root/notes.txt"))
        self.assertFalse(matcher.matches("/root/image.png"))

    def test_any_pattern_excludes(self):
        matcher = PatternMatcher([r"\.log$", r"/build/"])
        self.assertTrue(matcher.matches("/src/app.log"))
        self.assertTrue(matcher.matches("/src/build/app.o"))
        self.assertFalse(matcher.matches("/src/app.py"))

    def test_empty_string_pattern_matches_everything(self):
        matcher = PatternMatcher([""])
        self.assertTrue(matcher.matches("/a/b"))

    def test_backslashes_normalized(self):
        matcher = PatternMatcher(["dir/file"])
        with mock.patch("folder_compare.core.folder.scanner.os.sep", "\\"):
            self.assertTrue(matcher.matches("C:\\dir\\file.txt"))

    def test_invalid_pattern_raises(self):
        with self.assertRaises(PatternCompileError) as cm:
            PatternMatcher(["ok", "(unclosed"])

        self.assertEqual("(unclosed", cm.exception.pattern)
        self.assertEqual("pattern", cm.exception.phase)
        self.assertIn("(unclosed", str(cm.exception))

    def test_patterns_property(self):
        matcher = PatternMatcher(["a", "b"])
        self.assertEqual(("a", "b"), matcher.patterns)

    def test_from_file_skips_comments_and_blanks(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pattern_file = Path(tmpdir) / "exclude.pat"
            pattern_file.write_text("# comment\n\\.doc$\n\n  \n/tmp_build/\n")

            self.assertEqual([r"\.doc$", "/tmp_build/"], read_pattern_file(pattern_file))

            matcher = PatternMatcher.from_file(pattern_file)
            self.assertTrue(matcher.matches("/x/a.doc"))
            self.assertFalse(matcher.matches("/x/a.docx"))


class FolderScannerTest(unittest.TestCase):
    """Test directory traversal."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory(prefix="fc-")
        self.root = Path(self._tmpdir.name) / "root"
        self.root.mkdir()

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_scan_maps_relative_to_absolute(self):
        write_tree(self.root, {
            "a.txt": "a",
            "nested/deep/file.bin": b"\x00\x01",
        })

        result = FolderScanner().scan(self.root)

        self.assertEqual(["a.txt", "nested/deep/file.bin"], list(result.files))
        self.assertEqual(self.root.absolute() / "nested" / "deep" / "file.bin",
                         result.files["nested/deep/file.bin"])
        self.assertEqual(2, result.file_count)
        self.assertEqual(0, result.error_count)
        self.assertIn("a.txt", result)

    def test_directories_are_not_entries(self):
        (self.root / "empty").mkdir()
        write_tree(self.root, {"sub/x": "x"})

        result = FolderScanner().scan(self.root)

        self.assertEqual(["sub/x"], list(result.files))

    def test_excluded_files_skipped(self):
        write_tree(self.root, {
            "keep.py": "",
            "skip.pyc": "",
            "docs/readme.doc": "",
        })

        scanner = FolderScanner(ScanOptions(exclude_patterns=[r"\.pyc$", r"\.doc$"]))
        result = scanner.scan(self.root)

        self.assertEqual(["keep.py"], list(result.files))

    def test_excluded_directory_pruned(self):
        write_tree(self.root, {
            "node_modules/pkg/index.js": "",
            "src/index.js": "",
        })

        scanner = FolderScanner(ScanOptions(exclude_patterns=[r"/node_modules$"]))

        with mock.patch.object(scanner.matcher, "matches", wraps=scanner.matcher.matches) as matches:
            result = scanner.scan(self.root)

        self.assertEqual(["src/index.js"], list(result.files))
        checked = [call.args[0] for call in matches.call_args_list]
        self.assertFalse(any("node_modules/pkg" in path for path in checked))

    def test_patterns_match_full_path(self):
        write_tree(self.root, {"a.txt": ""})

        scanner = FolderScanner(ScanOptions(exclude_patterns=["/root/a"]))
        self.assertEqual({}, scanner.scan(self.root).files)

    def test_explicit_matcher_used(self):
        write_tree(self.root, {"a.txt": "", "b.txt": ""})

        scanner = FolderScanner(matcher=PatternMatcher([r"/b\.txt$"]))
        self.assertEqual(["a.txt"], list(scanner.scan(self.root).files))

    def test_missing_root(self):
        missing = self.root / "missing"

        with self.assertRaises(RootNotFoundError) as cm:
            FolderScanner().scan(missing)

        self.assertIsInstance(cm.exception, FileNotFoundError)
        self.assertEqual(missing.absolute(), cm.exception.path)

    def test_root_is_file(self):
        write_tree(self.root, {"file": "x"})

        with self.assertRaises(RootNotADirectoryError) as cm:
            FolderScanner().scan(self.root / "file")

        self.assertIsInstance(cm.exception, NotADirectoryError)

    def test_scan_lazy_yields_pairs(self):
        write_tree(self.root, {"b": "", "a/c": ""})

        pairs = dict(FolderScanner().scan_lazy(self.root))

        self.assertEqual({"a/c", "b"}, set(pairs))
        self.assertTrue(all(p.is_absolute() for p in pairs.values()))

    def test_scan_lazy_validates_root_on_iteration(self):
        with self.assertRaises(RootNotFoundError):
            list(FolderScanner().scan_lazy(self.root / "missing"))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_symlinks_skipped_by_default(self):
        write_tree(self.root, {"real.txt": "x", "dir/inner.txt": "y"})
        os.symlink(self.root / "real.txt", self.root / "link.txt")
        os.symlink(self.root / "dir", self.root / "linkdir")

        result = FolderScanner().scan(self.root)

        self.assertEqual(["dir/inner.txt", "real.txt"], list(result.files))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_symlinks_followed_when_enabled(self):
        write_tree(self.root, {"real.txt": "x", "dir/inner.txt": "y"})
        os.symlink(self.root / "real.txt", self.root / "link.txt")
        os.symlink(self.root / "dir", self.root / "linkdir")

        result = FolderScanner(ScanOptions(follow_symlinks=True)).scan(self.root)

        self.assertEqual(
            ["dir/inner.txt", "link.txt", "linkdir/inner.txt", "real.txt"],
            list(result.files)
        )

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_broken_symlink_recorded_when_followed(self):
        os.symlink(self.root / "nowhere", self.root / "broken")
        write_tree(self.root, {"ok.txt": ""})

        result = FolderScanner(ScanOptions(follow_symlinks=True)).scan(self.root)

        self.assertEqual(["ok.txt"], list(result.files))
        self.assertEqual("broken", result.errors[0][0])

    def _failing_lstat(self, name):
        original_lstat = Path.lstat

        def fake_lstat(path, *args, **kwargs):
            if path.name == name:
                raise PermissionError(13, "Permission denied", str(path))
            return original_lstat(path, *args, **kwargs)

        return mock.patch.object(Path, "lstat", fake_lstat)

    def test_unreadable_entry_skipped_leniently(self):
        write_tree(self.root, {"ok.txt": "", "locked.txt": ""})

        with self._failing_lstat("locked.txt"), self.assertLogs(level="WARNING") as logs:
            result = FolderScanner().scan(self.root)

        self.assertEqual(["ok.txt"], list(result.files))
        self.assertEqual("locked.txt", result.errors[0][0])
        self.assertIn("locked.txt", logs.output[0])

    def test_unreadable_entry_raises_strictly(self):
        write_tree(self.root, {"ok.txt": "", "locked.txt": ""})

        scanner = FolderScanner(ScanOptions(ignore_errors=False))
        with self._failing_lstat("locked.txt"), self.assertRaises(EntryReadError) as cm:
            scanner.scan(self.root)

        self.assertEqual("locked.txt", cm.exception.path.name)
        self.assertEqual("traversal", cm.exception.phase)

    def _failing_scandir(self, failing_path):
        original_scandir = os.scandir

        def fake_scandir(path="."):
            if Path(path) == failing_path:
                raise PermissionError(13, "Permission denied", str(path))
            return original_scandir(path)

        return mock.patch("os.scandir", fake_scandir)

    def test_unlistable_subdirectory_skipped_leniently(self):
        write_tree(self.root, {"ok.txt": "", "locked/inner.txt": ""})
        locked = self.root.absolute() / "locked"

        with self._failing_scandir(locked), self.assertLogs(level="WARNING"):
            result = FolderScanner().scan(self.root)

        self.assertEqual(["ok.txt"], list(result.files))
        self.assertEqual([("locked", "Access error: Permission denied")], result.errors)

    def test_unlistable_subdirectory_raises_strictly(self):
        write_tree(self.root, {"locked/inner.txt": ""})
        locked = self.root.absolute() / "locked"

        scanner = FolderScanner(ScanOptions(ignore_errors=False))
        with self._failing_scandir(locked), self.assertRaises(EntryReadError):
            scanner.scan(self.root)

    def test_unlistable_root_raises(self):
        write_tree(self.root, {"a.txt": ""})

        with self._failing_scandir(self.root.absolute()), self.assertRaises(EntryReadError) as cm:
            FolderScanner().scan(self.root)

        self.assertEqual(self.root.absolute(), cm.exception.path)


if __name__ == '__main__':
    unittest.main()
