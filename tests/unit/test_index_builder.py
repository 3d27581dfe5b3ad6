"""
Unit tests for the background index builder.

Tests cache loading, rescan triggers, persistence, partial walks, and the
builder loop.
"""

import os
import sys
import tempfile
import shutil
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from quickfind.index.builder import IndexBuilder
from quickfind.models.config import EngineConfig
from quickfind.storage.persistent_store import PersistentStore, PersistenceError, INDEX_CACHE_NAME


class RecordingWalker:
    """Walker stand-in that yields fixed paths and can fail part-way."""

    def __init__(self, paths, fail_after=None):
        self.paths = paths
        self.fail_after = fail_after
        self.builder = None
        self.indexing_seen = []

    def walk_paths(self, roots):
        for i, path in enumerate(self.paths):
            if self.fail_after is not None and i >= self.fail_after:
                raise OSError("device disappeared")
            if self.builder is not None:
                self.indexing_seen.append(self.builder.is_indexing())
            yield path

    def reset_stats(self):
        pass

    def get_stats(self):
        return {'entries_collected': 0, 'directories_traversed': 0, 'entries_ignored': 0, 'errors': 0}


class TestIndexBuilder:
    """Test cases for the IndexBuilder class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_root = Path(self.temp_dir)
        for relative in ["Desktop/report.pdf", "Desktop/photos/beach.jpg", "Applications/Foo.app/Contents/Info.plist"]:
            full_path = self.test_root / relative
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(relative)
        (self.test_root / "Volumes").mkdir()

        self.config = EngineConfig(paths={
            'home_dir': str(self.test_root),
            'applications_dir': str(self.test_root / "Applications"),
            'volumes_root': str(self.test_root / "Volumes"),
            'cache_dir': str(self.test_root / "cache"),
            'scan_dirs': [str(self.test_root / "Desktop")],
        })
        self.store = PersistentStore(self.config.paths.cache_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _p(self, relative: str) -> str:
        return str(self.test_root / relative)

    def test_initial_cycle_scans(self):
        """Test that the first cycle rescans and persists the index."""
        builder = IndexBuilder(self.config, self.store)
        assert len(builder.snapshot()) == 0

        assert builder.rebuild_if_needed(now=0.0) is True

        paths = builder.snapshot().paths
        assert self._p("Desktop/report.pdf") in paths
        assert self._p("Desktop/photos/beach.jpg") in paths
        assert self._p("Applications/Foo.app") in paths
        assert self.store.read_lines(INDEX_CACHE_NAME) == list(paths)

    def test_cache_loaded_on_start(self):
        """Test that a persisted index is served before the first scan."""
        self.store.write_lines(INDEX_CACHE_NAME, ["/cached/a.txt", "/cached/b.txt"])

        builder = IndexBuilder(self.config, self.store)

        assert builder.snapshot().paths == ("/cached/a.txt", "/cached/b.txt")

    def test_rescan_interval(self):
        """Test that quiet cycles skip the rescan until the interval has passed."""
        builder = IndexBuilder(self.config, self.store)
        builder.rebuild_if_needed(now=0.0)

        assert builder.rebuild_if_needed(now=30.0) is False
        assert builder.rebuild_if_needed(now=600.0) is False
        assert builder.rebuild_if_needed(now=601.0) is True
        assert builder.rebuild_if_needed(now=631.0) is False

    def test_force_update(self):
        """Test that a forced update rescans on the next cycle only."""
        builder = IndexBuilder(self.config, self.store)
        builder.rebuild_if_needed(now=0.0)

        builder.force_update()

        assert builder.rebuild_if_needed(now=1.0) is True
        assert builder.rebuild_if_needed(now=2.0) is False

    def test_volume_change_triggers_rescan(self):
        """Test that attaching a volume rescans and indexes it."""
        builder = IndexBuilder(self.config, self.store)
        builder.rebuild_if_needed(now=0.0)

        (self.test_root / "Volumes" / "USB").mkdir()
        (self.test_root / "Volumes" / "USB" / "movie.mp4").write_text("m")

        assert builder.rebuild_if_needed(now=1.0) is True
        assert self._p("Volumes/USB/movie.mp4") in builder.snapshot().paths

    def test_new_files_appear_after_rescan(self):
        """Test that a rescan replaces the snapshot."""
        builder = IndexBuilder(self.config, self.store)
        builder.rebuild_if_needed(now=0.0)
        before = builder.snapshot()

        (self.test_root / "Desktop" / "new.txt").write_text("n")
        builder.force_update()
        builder.rebuild_if_needed(now=1.0)

        assert self._p("Desktop/new.txt") not in before.paths
        assert self._p("Desktop/new.txt") in builder.snapshot().paths

    @pytest.mark.skipif(sys.platform == "darwin", reason="filesystem requires UTF-8 names")
    def test_undecodable_filename_indexed_and_cached(self):
        """Test that a filename that is not valid UTF-8 is published and survives a restart."""
        desktop = os.fsencode(self._p("Desktop"))
        with open(os.path.join(desktop, b"bad\xff.txt"), "wb") as f:
            f.write(b"x")
        bad = os.fsdecode(os.path.join(desktop, b"bad\xff.txt"))

        builder = IndexBuilder(self.config, self.store)
        builder.rebuild()

        assert bad in builder.snapshot().paths
        assert self._p("Desktop/report.pdf") in builder.snapshot().paths
        assert bad in IndexBuilder(self.config, self.store).snapshot().paths

    def test_unencodable_cache_still_publishes(self):
        """Test that a path the cache cannot store does not discard the scan."""
        builder = IndexBuilder(self.config, self.store, walker=RecordingWalker(["/a", "/b/\ud800"]))

        builder.rebuild()

        assert builder.snapshot().paths == ("/a", "/b/\ud800")
        assert builder.is_indexing() is False

    def test_indexing_flag_set_during_walk(self):
        """Test that is_indexing is true only while a rescan runs."""
        walker = RecordingWalker(["/a", "/b"])
        builder = IndexBuilder(self.config, self.store, walker=walker)
        walker.builder = builder

        builder.rebuild()

        assert walker.indexing_seen == [True, True]
        assert builder.is_indexing() is False

    def test_partial_walk_published(self):
        """Test that a walk failing part-way still publishes what it collected."""
        walker = RecordingWalker(["/a", "/b", "/c"], fail_after=2)
        builder = IndexBuilder(self.config, self.store, walker=walker)

        snapshot = builder.rebuild()

        assert snapshot.paths == ("/a", "/b")
        assert builder.snapshot() is snapshot
        assert builder.is_indexing() is False
        assert self.store.read_lines(INDEX_CACHE_NAME) == ["/a", "/b"]

    def test_persistence_failure_still_publishes(self):
        """Test that an unwritable cache does not block the new snapshot."""
        store = MagicMock(spec=PersistentStore)
        store.read_lines.return_value = []
        store.write_lines.side_effect = PersistenceError("read-only")
        builder = IndexBuilder(self.config, store, walker=RecordingWalker(["/a"]))

        builder.rebuild()

        assert builder.snapshot().paths == ("/a",)

    def test_unreadable_cache_ignored(self):
        """Test that a failing cache read starts with an empty index."""
        store = MagicMock(spec=PersistentStore)
        store.read_lines.side_effect = PersistenceError("permission denied")

        builder = IndexBuilder(self.config, store)

        assert len(builder.snapshot()) == 0

    def test_scan_roots(self):
        """Test the roots walked by a rescan."""
        builder = IndexBuilder(self.config, self.store)

        assert builder.scan_roots() == [
            self._p("Desktop"), self._p("Applications"), self._p("Volumes")
        ]

    def test_run_forever_stops_immediately(self):
        """Test that a set stop event ends the loop before any cycle."""
        builder = IndexBuilder(self.config, self.store)
        stop = threading.Event()
        stop.set()

        with patch.object(builder, 'rebuild_if_needed') as cycle:
            builder.run_forever(stop)

        cycle.assert_not_called()

    def test_run_forever_survives_failing_cycle(self):
        """Test that a failing cycle is logged and does not escape the loop."""
        builder = IndexBuilder(self.config, self.store)
        stop = threading.Event()

        def failing_cycle():
            stop.set()
            raise RuntimeError("boom")

        with patch.object(builder, 'rebuild_if_needed', side_effect=failing_cycle) as cycle:
            builder.run_forever(stop)

        assert cycle.call_count == 1
