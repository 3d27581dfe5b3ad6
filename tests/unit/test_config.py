"""
Unit tests for configuration models.

Tests default values, path normalization, pruning patterns, and
cross-section validation of the engine configuration.
"""

from pathlib import Path
import pytest
from pydantic import ValidationError

from quickfind.models.config import (
    EngineConfig, PathsConfig, IndexingConfig, AliasConfig, NativeIndexConfig,
    LimitsConfig, DEFAULT_IGNORE_PATTERNS
)


class TestPathsConfig:
    """Test cases for PathsConfig."""

    def test_defaults(self):
        """Test default locations."""
        config = PathsConfig()

        assert config.applications_dir == "/Applications"
        assert config.volumes_root == "/Volumes"
        assert config.home_dir == str(Path.home())
        assert config.cache_dir == str(Path.home() / "Library" / "Caches" / "quickfind")
        assert config.scan_dirs == [
            str(Path.home() / "Desktop"),
            str(Path.home() / "Downloads"),
            str(Path.home() / "Documents"),
        ]

    def test_trailing_slash_stripped(self):
        """Test that trailing separators are removed."""
        config = PathsConfig(applications_dir="/Applications/", volumes_root="/Volumes//")

        assert config.applications_dir == "/Applications"
        assert config.volumes_root == "/Volumes"

    def test_root_path_kept(self):
        """Test that the filesystem root is not stripped to nothing."""
        config = PathsConfig(volumes_root="/")
        assert config.volumes_root == "/"

    def test_empty_path_rejected(self):
        """Test that blank paths are rejected."""
        with pytest.raises(ValidationError):
            PathsConfig(cache_dir="  ")

    def test_blank_scan_dirs_dropped(self):
        """Test that blank scan directories are dropped."""
        config = PathsConfig(scan_dirs=["/data", "", "  "])
        assert config.scan_dirs == ["/data"]

    def test_get_cache_path(self):
        """Test cache path conversion."""
        config = PathsConfig(cache_dir="/tmp/quickfind-cache")
        assert config.get_cache_path() == Path("/tmp/quickfind-cache")


class TestIndexingConfig:
    """Test cases for IndexingConfig pruning patterns."""

    def setup_method(self):
        """Set up test fixtures."""
        self.config = IndexingConfig()

    def test_defaults(self):
        """Test default intervals and patterns."""
        assert self.config.poll_interval == 30
        assert self.config.rescan_interval == 600
        assert self.config.max_index_entries == 2000000
        assert self.config.ignore == DEFAULT_IGNORE_PATTERNS

    def test_node_modules_listed_but_not_descended(self):
        """Test that node_modules itself is kept while its contents are pruned."""
        assert not self.config.should_ignore("/Users/u/proj/node_modules")
        assert self.config.should_ignore("/Users/u/proj/node_modules/pkg")
        assert self.config.should_ignore("/Users/u/proj/node_modules/pkg/index.js")
        assert self.config.prunes_children("/Users/u/proj/node_modules")

    def test_library_contents_pruned(self):
        """Test that Library directories are not descended into."""
        assert not self.config.should_ignore("/Users/u/Library")
        assert self.config.should_ignore("/Users/u/Library/Caches")
        assert self.config.prunes_children("/Users/u/Library")

    def test_bundle_executables_pruned(self):
        """Test that bundle executables are pruned but other bundle contents are not."""
        assert not self.config.should_ignore("/Applications/Foo.app")
        assert not self.config.should_ignore("/Applications/Foo.app/Contents/MacOS")
        assert self.config.should_ignore("/Applications/Foo.app/Contents/MacOS/Foo")
        assert not self.config.should_ignore("/Applications/Foo.app/Contents/Resources/icon.png")

    def test_hidden_entries_pruned(self):
        """Test that hidden files and directories are pruned."""
        assert self.config.should_ignore("/Users/u/.git")
        assert self.config.should_ignore("/Users/u/.zshrc")
        assert self.config.should_ignore("/Users/u/Desktop/.DS_Store")

    def test_regular_entries_kept(self):
        """Test that ordinary paths are not pruned."""
        assert not self.config.should_ignore("/Users/u/Documents/report.pdf")
        assert not self.config.should_ignore("/Users/u/Documents/my.file.name.txt")
        assert not self.config.prunes_children("/Users/u/Documents")

    def test_relative_patterns_normalized(self):
        """Test that relative patterns match at any depth."""
        config = IndexingConfig(ignore=["build/**", "*.tmp", "# comment", ""])

        assert config.ignore == ["**/build/**", "**/*.tmp"]
        assert config.should_ignore("/Users/u/proj/build/out.o")
        assert config.should_ignore("/Users/u/scratch.tmp")
        assert not config.should_ignore("/Users/u/proj/build")

    def test_rooted_pattern(self):
        """Test that rooted patterns only match from the root."""
        config = IndexingConfig(ignore=["/private/**"])

        assert config.should_ignore("/private/var/log")
        assert not config.should_ignore("/Users/u/private/notes.txt")

    def test_interval_must_be_positive(self):
        """Test that non-positive intervals are rejected."""
        with pytest.raises(ValidationError):
            IndexingConfig(poll_interval=0)


class TestAliasConfig:
    """Test cases for AliasConfig."""

    def test_extra_normalized(self):
        """Test that user aliases are lowercased and trimmed."""
        config = AliasConfig(extra={" HD ": "Hyper Draw"})
        assert config.extra == {"hd": "hyper draw"}

    def test_blank_alias_rejected(self):
        """Test that blank tokens or targets are rejected."""
        with pytest.raises(ValidationError):
            AliasConfig(extra={"hd": " "})


class TestEngineConfig:
    """Test cases for EngineConfig."""

    def test_defaults(self):
        """Test default section values."""
        config = EngineConfig()

        assert config.native.command == "mdfind"
        assert config.native.home_timeout == 3.0
        assert config.native.volumes_timeout == 4.0
        assert config.aliases.refresh_interval == 3600
        assert config.limits.max_results == 100
        assert config.limits.max_strong_matches == 1000
        assert config.limits.fallback_threshold == 20
        assert config.limits.max_fallback == 50

    def test_branch_timeout_must_exceed_native_timeouts(self):
        """Test that the branch wait bound covers both native scopes."""
        with pytest.raises(ValidationError):
            EngineConfig(native={'volumes_timeout': 12.0})
        with pytest.raises(ValidationError):
            EngineConfig(limits={'branch_timeout': 4.0})

        config = EngineConfig(native={'volumes_timeout': 12.0}, limits={'branch_timeout': 15.0})
        assert config.limits.branch_timeout == 15.0

    def test_get_scan_roots(self):
        """Test that scan roots list user dirs, then applications, then volumes."""
        config = EngineConfig(paths={
            'scan_dirs': ['/data/a', '/data/b'],
            'applications_dir': '/Apps',
            'volumes_root': '/Mounts',
        })

        assert config.get_scan_roots() == ['/data/a', '/data/b', '/Apps', '/Mounts']

    def test_validate_configuration_warnings(self):
        """Test non-fatal warnings for missing directories and odd intervals."""
        config = EngineConfig(
            paths={'applications_dir': '/nonexistent/apps', 'scan_dirs': ['/nonexistent/desk']},
            indexing={'poll_interval': 60, 'rescan_interval': 30}
        )

        warnings = config.validate_configuration()

        assert any('Applications directory does not exist' in w for w in warnings)
        assert any('/nonexistent/desk' in w for w in warnings)
        assert any('rescan_interval' in w for w in warnings)

    def test_dict_round_trip(self):
        """Test conversion to and from dictionaries."""
        config = EngineConfig(
            paths={'scan_dirs': ['/data']},
            aliases={'extra': {'hd': 'hyper draw'}},
            native=NativeIndexConfig(enabled=False),
            limits=LimitsConfig(max_results=10)
        )

        restored = EngineConfig.from_dict(config.to_dict())

        assert restored.to_dict() == config.to_dict()
        assert restored.native.enabled is False
        assert restored.limits.max_results == 10

    def test_from_dict_none(self):
        """Test that an empty document gives the defaults."""
        assert EngineConfig.from_dict(None).to_dict() == EngineConfig().to_dict()

    def test_str(self):
        """Test string representation."""
        text = str(EngineConfig(native={'enabled': False}))
        assert "Native index: off" in text
        assert "Applications: /Applications" in text
