"""Tests for dups.finder — the end-to-end duplicate detection pipeline."""

from dups.errors import AllocationError
from dups.errors import IdentityConflict
from dups.finder import collect_duplicates
from dups.finder import find_duplicates

import os
import pathlib
import pytest


def _names(sets):
    return sorted(sorted(pathlib.Path(p).name for p in s) for s in sets)


class TestFindDuplicates:
    """Test duplicate detection across whole trees."""

    def test_no_files_returns_empty(self, tmp_root):
        assert collect_duplicates([tmp_root]) == []

    def test_finds_pair(self, tmp_root, make_file):
        make_file("dirA/x.txt", b"hello")
        make_file("dirA/y.txt", b"hello")
        assert _names(collect_duplicates([tmp_root])) == [["x.txt", "y.txt"]]

    def test_different_sizes_never_match(self, tmp_root, make_file):
        make_file("a.txt", b"hello")
        make_file("b.txt", b"hello!")
        assert collect_duplicates([tmp_root]) == []

    def test_empty_files_form_one_set(self, tmp_root, make_file):
        make_file("e1", b"")
        make_file("e2", b"")
        make_file("u", b"abc")
        assert _names(collect_duplicates([tmp_root])) == [["e1", "e2"]]

    def test_multiple_roots(self, tmp_path):
        left = tmp_path / "left"
        right = tmp_path / "right"
        left.mkdir()
        right.mkdir()
        (left / "a.bin").write_bytes(b"shared bytes")
        (right / "b.bin").write_bytes(b"shared bytes")
        (right / "c.bin").write_bytes(b"other bytes!")
        assert _names(collect_duplicates([left, right])) == [["a.bin", "b.bin"]]

    def test_sets_are_sound_and_complete(self, tmp_root, make_file):
        contents = {
            "a1": b"A" * 20000, "a2": b"A" * 20000, "a3": b"A" * 20000,
            "b1": b"A" * 19999 + b"B", "b2": b"A" * 19999 + b"B",
            "c": b"C" * 20000,
            "d1": b"d", "d2": b"d",
        }
        for name, data in contents.items():
            make_file(name, data)
        sets = collect_duplicates([tmp_root], block_size=4096)
        assert _names(sets) == [["a1", "a2", "a3"], ["b1", "b2"], ["d1", "d2"]]
        for s in sets:
            first = pathlib.Path(s[0]).read_bytes()
            assert all(pathlib.Path(p).read_bytes() == first for p in s[1:])

    def test_repeat_runs_agree(self, tmp_root, make_file):
        for i in range(3):
            make_file(f"x{i}", b"repeat")
            make_file(f"sub/y{i}", b"other!")
        first = collect_duplicates([tmp_root])
        second = collect_duplicates([tmp_root])
        assert sorted(first) == sorted(second)

    def test_stats(self, tmp_root, make_file):
        make_file("a", b"12")
        make_file("b", b"12")
        make_file("c", b"123")
        stats = find_duplicates([tmp_root], lambda paths: None)
        assert stats.files == 3
        assert stats.size_classes == 2
        assert stats.candidate_classes == 1
        assert stats.windows_read == 2
        assert stats.duplicate_sets == 1

    def test_progress_writes_to_stderr_only(self, tmp_root, make_file, capsys):
        make_file("a", b"12")
        make_file("b", b"12")
        sets = []
        stats = find_duplicates([tmp_root], sets.append, progress=True)
        captured = capsys.readouterr()
        assert stats.duplicate_sets == 1
        assert len(sets) == 1
        assert captured.out == ""
        assert "Comparing" in captured.err
        assert "1/1" in captured.err

    @pytest.mark.skipif(not hasattr(os, "link"), reason="needs hard links")
    def test_hard_link_across_roots_aborts(self, tmp_path):
        left = tmp_path / "left"
        right = tmp_path / "right"
        left.mkdir()
        right.mkdir()
        (left / "a").write_bytes(b"linked")
        os.link(left / "a", right / "a")
        with pytest.raises(IdentityConflict):
            collect_duplicates([left, right])

    @pytest.mark.skipif(not hasattr(os, "link"), reason="needs hard links")
    def test_hard_link_skip_policy(self, tmp_path):
        left = tmp_path / "left"
        right = tmp_path / "right"
        left.mkdir()
        right.mkdir()
        (left / "a").write_bytes(b"linked")
        (left / "copy").write_bytes(b"linked")
        os.link(left / "a", right / "a")
        sets = collect_duplicates([left, right], on_identity_conflict="skip")
        assert len(sets) == 1
        assert len(sets[0]) == 2
        assert len({os.stat(p).st_ino for p in sets[0]}) == 2

    def test_memory_error_becomes_allocation_error(self, tmp_root, make_file, monkeypatch):
        make_file("a", b"x")

        def exhausted(root, sink):
            raise MemoryError

        monkeypatch.setattr("dups.finder.walk", exhausted)
        with pytest.raises(AllocationError):
            collect_duplicates([tmp_root])
