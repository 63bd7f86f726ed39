"""
Ping targets and the JSON config source they are loaded from.

A targets file is a JSON array of records:

    [
        {"url": "https://example.onrender.com/health", "min_delay": 5, "max_delay": 12}
    ]

Delays are whole minutes.
"""

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .exceptions import InvalidTarget, TargetConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """One URL to keep awake, pinged every min_delay..max_delay minutes."""
    url: str
    min_delay: int
    max_delay: int

    @classmethod
    def from_dict(cls, data) -> 'Target':
        if not isinstance(data, dict):
            raise InvalidTarget(f"Target must be an object, got {type(data).__name__}")

        try:
            url = data['url']
            min_delay = data['min_delay']
            max_delay = data['max_delay']
        except KeyError as e:
            raise InvalidTarget(f"Missing field in target: {e}")

        if not isinstance(url, str) or not url.strip():
            raise InvalidTarget("Target url must be a non-empty string")

        # JSON allows lone surrogate escapes, which can't be logged or sent
        try:
            url.encode('utf-8')
        except UnicodeEncodeError:
            raise InvalidTarget(f"Target url is not valid text: {url!r}")

        for name, value in (('min_delay', min_delay), ('max_delay', max_delay)):
            # bool is an int subclass, but true/false are not delays
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidTarget(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidTarget(f"{name} must not be negative, got {value}")

        if min_delay > max_delay:
            raise InvalidTarget(
                f"min_delay ({min_delay}) is greater than max_delay ({max_delay}) for {url}"
            )

        return cls(url=url, min_delay=min_delay, max_delay=max_delay)

    def to_dict(self) -> dict:
        return {
            'url': self.url,
            'min_delay': self.min_delay,
            'max_delay': self.max_delay,
        }

    def draw_delay(self, rng=random) -> int:
        """Random delay in minutes, inclusive of both bounds."""
        return rng.randint(self.min_delay, self.max_delay)


def parse_targets(records) -> List[Target]:
    """Validate a decoded JSON document into a list of unique targets."""
    if not isinstance(records, list):
        raise TargetConfigError(f"Targets must be a JSON array, got {type(records).__name__}")

    targets = []
    seen = set()
    for index, record in enumerate(records):
        try:
            target = Target.from_dict(record)
        except InvalidTarget as e:
            raise InvalidTarget(f"Target #{index}: {e.reason}")
        if target.url in seen:
            raise TargetConfigError(f"Duplicate target url: {target.url}")
        seen.add(target.url)
        targets.append(target)
    return targets


def load_targets(path) -> List[Target]:
    """Read and validate a targets file. Raises TargetConfigError on any failure."""
    path = Path(path)
    try:
        contents = path.read_text(encoding='utf-8')
    except OSError as e:
        raise TargetConfigError(f"Failed to read {path}: {e}")

    try:
        records = json.loads(contents)
    except json.JSONDecodeError as e:
        raise TargetConfigError(f"Failed to parse {path}: {e}")

    targets = parse_targets(records)
    logger.debug(f"Loaded {len(targets)} targets from {path}")
    return targets


def load_targets_or_empty(path) -> List[Target]:
    """Startup variant of load_targets: a missing or broken file means no targets."""
    try:
        return load_targets(path)
    except TargetConfigError as e:
        logger.warning(f"Starting with no targets: {e}")
        return []
