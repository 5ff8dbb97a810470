# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tests for PR title classification.
"""

import pytest

from nixpr.triage.classifier import TitleClassification, classify, extract_package_name, is_package_pr


class TestIsPackagePr:
    @pytest.mark.parametrize(
        'title',
        [
            'fastfetch-rs: init at 0.1.6',
            'rundeck: 5.18.0 -> 5.19.0',
            'python312Packages.foo: 1.0 -> 2.0',
            'foo: INIT AT 1.0',
            'foo: Init At 1.0',
            'foo:1.0->1.1',
        ],
    )
    def test_package_changes(self, title):
        assert is_package_pr(title)

    @pytest.mark.parametrize(
        'title',
        [
            'nixos/nginx: add option',
            'treewide: update something',
            'Fix typo in readme',
            'foo 1.0 -> 2.0',  # arrow without a colon
            'init at 1.0',
            '',
        ],
    )
    def test_not_package_changes(self, title):
        assert not is_package_pr(title)

    def test_marker_before_colon_does_not_count(self):
        assert not is_package_pr('foo -> bar: refactor')
        assert not is_package_pr('init at: something else')

    def test_only_first_colon_separates(self):
        # description is "bar: 1.0 -> 2.0", which contains the arrow
        assert is_package_pr('foo: bar: 1.0 -> 2.0')
        assert extract_package_name('foo: bar: 1.0 -> 2.0') == 'foo'


class TestExtractPackageName:
    def test_version_bump(self):
        assert extract_package_name('rundeck: 5.18.0 -> 5.19.0') == 'rundeck'

    def test_init(self):
        assert extract_package_name('fastfetch-rs: init at 0.1.6') == 'fastfetch-rs'

    def test_no_colon(self):
        assert extract_package_name('No colon here') is None

    def test_empty_name(self):
        assert extract_package_name(': init at 1.0') is None
        assert extract_package_name('   : 1.0 -> 2.0') is None

    def test_name_is_trimmed(self):
        assert extract_package_name('  hello  : 2.12 -> 2.13') == 'hello'

    def test_name_present_for_non_package_title(self):
        assert extract_package_name('nixos/nginx: add option') == 'nixos/nginx'


class TestClassify:
    def test_full_result(self):
        assert classify('rundeck: 5.18.0 -> 5.19.0') == TitleClassification(True, 'rundeck')

    def test_no_colon_result(self):
        assert classify('hello 2.12 -> 2.13') == TitleClassification(False, None)

    def test_empty_name_still_package_change(self):
        result = classify(': init at 1.0')
        assert result.is_package_change
        assert result.package_name is None
