"""Tests for spam_auditor.scanner.settings — defaults, clamping, keyword normalization."""
import json

import pytest

from spam_auditor.scanner.settings import (
    AuditSettings,
    default_settings,
    parse_keywords,
    sanitize_settings,
)


class TestDefaults:

    def test_default_values(self):
        d = default_settings()
        assert d['lookback_days'] == 14
        assert d['spam_threshold'] == 25
        assert d['pending_threshold'] == 20
        assert d['spam_ratio_threshold'] == 0.40
        assert d['link_threshold'] == 2
        assert d['light_mode'] is True
        assert d['batch_size'] == 50
        assert d['heuristics_cutoff'] == 5000

    def test_default_keywords_are_comma_separated(self):
        d = default_settings()
        assert d['keyword_list'].startswith('viagra, casino, porn')
        assert 'win money' in d['keyword_list']
        assert 'keywords' not in d


class TestParseKeywords:

    def test_trims_lowercases_and_dedups(self):
        assert parse_keywords(' Viagra, casino ,VIAGRA,, Win Money ') == ('viagra', 'casino', 'win money')

    def test_accepts_iterables(self):
        assert parse_keywords(['Loan', 'loan', ' seo ']) == ('loan', 'seo')

    def test_none_and_empty(self):
        assert parse_keywords(None) == ()
        assert parse_keywords('') == ()
        assert parse_keywords(' , ,') == ()


class TestSanitizeSettings:

    def test_empty_input_uses_defaults_but_light_mode_off(self):
        """An absent checkbox means off."""
        s = sanitize_settings({})
        assert s.lookback_days == 14
        assert s.light_mode is False

    @pytest.mark.parametrize('field,given,expected', [
        ('lookback_days', 0, 1),
        ('lookback_days', -5, 1),
        ('spam_threshold', 0, 1),
        ('pending_threshold', -1, 0),
        ('link_threshold', 0, 1),
        ('batch_size', 1, 5),
        ('heuristics_cutoff', -100, 0),
    ])
    def test_integers_clamped_to_lower_bound(self, field, given, expected):
        s = sanitize_settings({field: given})
        assert getattr(s, field) == expected

    def test_ratio_clamped_to_unit_interval(self):
        assert sanitize_settings({'spam_ratio_threshold': 1.7}).spam_ratio_threshold == 1.0
        assert sanitize_settings({'spam_ratio_threshold': -0.2}).spam_ratio_threshold == 0.0
        assert sanitize_settings({'spam_ratio_threshold': '0.55'}).spam_ratio_threshold == 0.55

    def test_string_numbers_are_parsed(self):
        s = sanitize_settings({'lookback_days': '30', 'batch_size': '100'})
        assert s.lookback_days == 30
        assert s.batch_size == 100

    def test_garbage_numbers_fall_back_to_defaults(self):
        s = sanitize_settings({'lookback_days': 'soon', 'spam_ratio_threshold': 'high'})
        assert s.lookback_days == 14
        assert s.spam_ratio_threshold == 0.40

    @pytest.mark.parametrize('value', ['inf', '-inf', float('inf'), 'nan', 10 ** 400])
    def test_non_finite_integers_fall_back_to_defaults(self, value):
        s = sanitize_settings({'lookback_days': value, 'batch_size': value})
        assert s.lookback_days == 14
        assert s.batch_size == 50

    def test_infinite_ratio_is_clamped(self):
        assert sanitize_settings({'spam_ratio_threshold': 'inf'}).spam_ratio_threshold == 1.0
        assert sanitize_settings({'spam_ratio_threshold': float('-inf')}).spam_ratio_threshold == 0.0
        assert sanitize_settings({'spam_ratio_threshold': 'nan'}).spam_ratio_threshold == 0.40

    def test_json_overflow_literal_falls_back(self):
        raw = json.loads('{"lookback_days": 1e400, "spam_threshold": 1e400}')
        s = sanitize_settings(raw)
        assert s.lookback_days == 14
        assert s.spam_threshold == 25

    @pytest.mark.parametrize('value,expected', [
        (1, True), ('1', True), (True, True), ('on', True),
        (0, False), ('0', False), ('', False), ('false', False), (None, False),
    ])
    def test_light_mode_checkbox_semantics(self, value, expected):
        assert sanitize_settings({'light_mode': value}).light_mode is expected

    def test_keyword_list_normalized(self):
        s = sanitize_settings({'keyword_list': 'Casino, casino,  FOREX '})
        assert s.keywords == ('casino', 'forex')
        assert s.keyword_list == 'casino, forex'

    def test_round_trips_through_to_dict(self):
        original = AuditSettings(lookback_days=7, light_mode=True, keywords=('a', 'b'))
        assert sanitize_settings(original.to_dict()) == original
