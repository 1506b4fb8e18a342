#!/usr/bin/env python3
"""
Tests for line pattern compilation and matching.
"""

import pytest

from leveltutor.engine import compile_pattern
from leveltutor.errors import InvalidPattern


class TestCompilePattern:
    """Tests for compile_pattern"""

    def test_compiles(self):
        """Test a valid pattern"""
        pattern = compile_pattern('^done$', 'completion')
        assert pattern.name == 'completion'
        assert pattern.pattern == '^done$'
        assert pattern.groups == 0

    def test_invalid_regex(self):
        """Test that a broken regex names its source"""
        with pytest.raises(InvalidPattern) as exc_info:
            compile_pattern('([a-z', 'completion')
        assert exc_info.value.name == 'completion'
        assert exc_info.value.pattern == '([a-z'

    def test_group_required(self):
        """Test that capture patterns need a group"""
        with pytest.raises(InvalidPattern) as exc_info:
            compile_pattern(r'\w+=ok', 'name', require_group=True)
        assert 'capturing group' in str(exc_info.value)

    def test_group_present(self):
        """Test a capture pattern with one group"""
        pattern = compile_pattern(r'name=(\w+)', 'name', require_group=True)
        assert pattern.groups == 1


class TestLinePattern:
    """Tests for per-line matching"""

    def test_search_is_unanchored(self):
        """Test that matching finds the pattern anywhere in a line"""
        pattern = compile_pattern('done', 'completion')
        assert pattern.matches('all done here')
        assert not pattern.matches('nothing')

    def test_any_line(self):
        """Test that any single line can complete"""
        pattern = compile_pattern('^done$', 'completion')
        assert pattern.any_line('first\ndone\nlast')
        assert not pattern.any_line('first\nnot done\n')

    def test_no_cross_line_matching(self):
        """Test that a pattern spanning lines never matches"""
        pattern = compile_pattern('a\nb', 'completion')
        assert not pattern.any_line('a\nb')

        pattern = compile_pattern('one.two', 'completion')
        assert not pattern.any_line('one\ntwo')

    def test_crlf_lines(self):
        """Test that Windows line endings do not break anchors"""
        pattern = compile_pattern('^done$', 'completion')
        assert pattern.any_line('first\r\ndone\r\n')

    def test_first_match_in_file_order(self):
        """Test that the earliest matching line wins"""
        pattern = compile_pattern(r'^x=(\d+)', 'x', require_group=True)
        match = pattern.first_match('y=0\nx=1\nx=2')
        assert match.group(1) == '1'

    def test_first_match_none(self):
        """Test no match"""
        pattern = compile_pattern(r'^x=(\d+)', 'x', require_group=True)
        assert pattern.first_match('y=0') is None


class TestLineSplitting:
    """Tests for how content is broken into lines"""

    def test_only_newline_separates_lines(self):
        """Test that form feeds and other separators stay inside a line"""
        pattern = compile_pattern('^done$', 'completion')
        for separator in ('\x0c', '\x0b', '\x1c', '\x85', ' '):
            assert not pattern.any_line(f'x{separator}done')

    def test_trailing_newline_adds_no_empty_line(self):
        """Test that a final newline does not create a blank last line"""
        pattern = compile_pattern('^$', 'completion')
        assert not pattern.any_line('text\n')
        assert pattern.any_line('text\n\nmore')

    def test_carriage_return_dropped(self):
        """Test that only the \\r of a \\r\\n ending is removed"""
        pattern = compile_pattern(r'^done\r?$', 'completion')
        assert pattern.first_match('done\r\n').group(0) == 'done'
        assert not compile_pattern('^done$', 'completion').any_line('done\r\r\n')
