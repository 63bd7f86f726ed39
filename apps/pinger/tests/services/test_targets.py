"""Tests for Target validation and the targets file loader."""

import json
import random
import tempfile
from pathlib import Path

from django.test import SimpleTestCase

from apps.pinger.services import (
    InvalidTarget,
    Target,
    TargetConfigError,
    load_targets,
    load_targets_or_empty,
)


class TargetFromDictTests(SimpleTestCase):
    """Tests for Target.from_dict validation."""

    def test_valid_target(self):
        """A complete record builds the matching Target."""
        target = Target.from_dict({'url': 'https://a.example', 'min_delay': 1, 'max_delay': 5})
        self.assertEqual(target, Target('https://a.example', 1, 5))

    def test_to_dict_matches_input(self):
        """to_dict gives back the record the target was built from."""
        data = {'url': 'https://a.example', 'min_delay': 2, 'max_delay': 3}
        self.assertEqual(Target.from_dict(data).to_dict(), data)

    def test_zero_delays_allowed(self):
        """Zero-minute delays are valid."""
        target = Target.from_dict({'url': 'http://a.example', 'min_delay': 0, 'max_delay': 0})
        self.assertEqual(target.max_delay, 0)

    def test_missing_field(self):
        """A record without max_delay is rejected."""
        with self.assertRaises(InvalidTarget):
            Target.from_dict({'url': 'https://a.example', 'min_delay': 1})

    def test_not_an_object(self):
        """A record must be a JSON object."""
        with self.assertRaises(InvalidTarget):
            Target.from_dict(['https://a.example', 1, 2])

    def test_negative_delay(self):
        """Negative delays are rejected."""
        with self.assertRaises(InvalidTarget):
            Target.from_dict({'url': 'https://a.example', 'min_delay': -1, 'max_delay': 2})

    def test_min_greater_than_max(self):
        """min_delay may not exceed max_delay."""
        with self.assertRaises(InvalidTarget):
            Target.from_dict({'url': 'https://a.example', 'min_delay': 5, 'max_delay': 2})

    def test_non_integer_delay(self):
        """Strings and floats are not delays."""
        with self.assertRaises(InvalidTarget):
            Target.from_dict({'url': 'https://a.example', 'min_delay': '1', 'max_delay': 2})
        with self.assertRaises(InvalidTarget):
            Target.from_dict({'url': 'https://a.example', 'min_delay': 1.5, 'max_delay': 2})

    def test_boolean_delay_rejected(self):
        """true/false are not delays even though bool is an int."""
        with self.assertRaises(InvalidTarget):
            Target.from_dict({'url': 'https://a.example', 'min_delay': True, 'max_delay': 2})

    def test_empty_url(self):
        """A blank url is rejected."""
        with self.assertRaises(InvalidTarget):
            Target.from_dict({'url': '  ', 'min_delay': 1, 'max_delay': 2})

    def test_url_is_opaque(self):
        """Any non-empty url is accepted; unreachable ones fail at ping time."""
        for url in ('a.example', 'ftp://a.example', 'https://a.example/health'):
            target = Target.from_dict({'url': url, 'min_delay': 1, 'max_delay': 1})
            self.assertEqual(target.url, url)

    def test_url_with_lone_surrogate_rejected(self):
        """A url holding an unencodable surrogate escape is invalid, not a crash."""
        data = json.loads('{"url": "https://a.example/\\ud800", "min_delay": 1, "max_delay": 1}')
        with self.assertRaises(InvalidTarget):
            Target.from_dict(data)

    def test_target_is_immutable(self):
        """Targets are replaced, never changed in place."""
        target = Target('https://a.example', 1, 2)
        with self.assertRaises(AttributeError):
            target.url = 'https://b.example'


class DrawDelayTests(SimpleTestCase):
    """Tests for the randomized per-cycle delay."""

    def test_equal_bounds_always_return_that_value(self):
        """min_delay == max_delay draws the same delay every time."""
        target = Target('https://a.example', 7, 7)
        rng = random.Random(1)
        for _ in range(50):
            self.assertEqual(target.draw_delay(rng), 7)

    def test_draws_stay_in_bounds_and_reach_both_ends(self):
        """Draws are inclusive of both bounds."""
        target = Target('https://a.example', 2, 5)
        rng = random.Random(42)
        draws = [target.draw_delay(rng) for _ in range(500)]

        self.assertTrue(all(2 <= d <= 5 for d in draws))
        self.assertIn(2, draws)
        self.assertIn(5, draws)


class LoadTargetsTests(SimpleTestCase):
    """Tests for load_targets and load_targets_or_empty."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / 'targets.json'

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, contents):
        """Helper to write a targets file from a string or JSON-able value."""
        if not isinstance(contents, str):
            contents = json.dumps(contents)
        self.path.write_text(contents, encoding='utf-8')

    def test_loads_targets_in_order(self):
        """Targets come back in file order."""
        self.write([
            {'url': 'https://a.example', 'min_delay': 1, 'max_delay': 2},
            {'url': 'https://b.example', 'min_delay': 3, 'max_delay': 4},
        ])
        targets = load_targets(self.path)
        self.assertEqual([t.url for t in targets], ['https://a.example', 'https://b.example'])

    def test_empty_list(self):
        """An empty array is a valid, empty config."""
        self.write([])
        self.assertEqual(load_targets(self.path), [])

    def test_missing_file(self):
        """A missing file is a config error."""
        with self.assertRaises(TargetConfigError) as ctx:
            load_targets(self.path)
        self.assertIn('Failed to read', ctx.exception.reason)

    def test_malformed_json(self):
        """Broken JSON is a config error."""
        self.write('[{"url": ')
        with self.assertRaises(TargetConfigError) as ctx:
            load_targets(self.path)
        self.assertIn('Failed to parse', ctx.exception.reason)

    def test_not_a_list(self):
        """The document must be an array."""
        self.write({'url': 'https://a.example', 'min_delay': 1, 'max_delay': 2})
        with self.assertRaises(TargetConfigError):
            load_targets(self.path)

    def test_invalid_record_reports_index(self):
        """The error names the offending record."""
        self.write([
            {'url': 'https://a.example', 'min_delay': 1, 'max_delay': 2},
            {'url': 'https://b.example', 'min_delay': 9, 'max_delay': 2},
        ])
        with self.assertRaises(InvalidTarget) as ctx:
            load_targets(self.path)
        self.assertIn('#1', ctx.exception.reason)

    def test_surrogate_url_is_a_config_error(self):
        """A lone surrogate escape in a url fails as a config error."""
        self.write('[{"url": "https://a.example/\\ud800", "min_delay": 1, "max_delay": 1}]')
        with self.assertRaises(TargetConfigError):
            load_targets(self.path)

    def test_duplicate_urls_rejected(self):
        """A file must not repeat a url."""
        self.write([
            {'url': 'https://a.example', 'min_delay': 1, 'max_delay': 2},
            {'url': 'https://a.example', 'min_delay': 3, 'max_delay': 4},
        ])
        with self.assertRaises(TargetConfigError):
            load_targets(self.path)

    def test_or_empty_returns_empty_on_missing_file(self):
        """Startup loading falls back to no targets with a warning."""
        with self.assertLogs('apps.pinger.services.targets', level='WARNING'):
            self.assertEqual(load_targets_or_empty(self.path), [])

    def test_or_empty_returns_empty_on_surrogate_url(self):
        """Startup loading survives an unencodable url."""
        self.write('[{"url": "https://a.example/\\ud800", "min_delay": 1, "max_delay": 1}]')
        with self.assertLogs('apps.pinger.services.targets', level='WARNING'):
            self.assertEqual(load_targets_or_empty(self.path), [])

    def test_or_empty_returns_targets_when_valid(self):
        """Startup loading returns the targets of a valid file."""
        self.write([{'url': 'https://a.example', 'min_delay': 1, 'max_delay': 2}])
        self.assertEqual(len(load_targets_or_empty(self.path)), 1)
