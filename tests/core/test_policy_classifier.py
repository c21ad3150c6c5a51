from __future__ import annotations

import pytest

from talentmatch.core.policy import PolicyClassifier
from talentmatch.schemas.config import ConfigurationError


@pytest.mark.parametrize(
    ("overall", "expected"),
    [(100, "hot"), (85, "hot"), (84, "standard"), (70, "standard"), (69, "maybe"), (50, "maybe"), (49, "hidden"), (0, "hidden")],
)
def test_exact_thresholds(overall: int, expected: str):
    assert PolicyClassifier().classify(overall) == expected


def test_incompatible_domain_is_always_hidden():
    classifier = PolicyClassifier()

    assert classifier.classify(100, is_incompatible=True) == "hidden"
    assert classifier.classify(100, is_incompatible=True, mode="preview") == "hidden"


def test_killed_pair_is_always_hidden():
    classifier = PolicyClassifier()

    assert classifier.classify(100, is_killed=True) == "hidden"
    assert classifier.classify(100, is_killed=True, mode="preview") == "hidden"


def test_preview_mode_loosens_hidden_threshold():
    classifier = PolicyClassifier()

    assert classifier.classify(40) == "hidden"
    assert classifier.classify(40, mode="preview") == "maybe"
    assert classifier.classify(34, mode="preview") == "hidden"
    assert classifier.threshold("maybe", mode="preview") == 35


def test_thresholds_are_configurable():
    classifier = PolicyClassifier(thresholds={"hot": 90, "standard": 60, "maybe": 30})

    assert classifier.classify(88) == "standard"
    assert classifier.classify(30) == "maybe"
    assert classifier.thresholds == {"hot": 90.0, "standard": 60.0, "maybe": 30.0}


@pytest.mark.parametrize(
    "thresholds",
    [{"hot": "high"}, {"hot": 60, "standard": 70}, {"maybe": None}],
)
def test_invalid_thresholds_are_rejected(thresholds: dict):
    with pytest.raises(ConfigurationError):
        PolicyClassifier(thresholds=thresholds)
