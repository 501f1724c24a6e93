from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import make_article, make_source

from newswire.analysis import group_similar_stories
from newswire.models import BiasSpectrum


@pytest.fixture
def outlets():
    return {
        "left": make_source("left-daily", bias=BiasSpectrum.LEFT),
        "center": make_source("center-wire", bias=BiasSpectrum.CENTER),
        "right": make_source("right-times", bias=BiasSpectrum.RIGHT),
    }


def test_similar_titles_within_window_form_a_group(outlets):
    # 3 shared tokens out of 4 -> 0.75
    a = make_article("wildfire forces evacuations", hours_ago=0, source=outlets["left"])
    b = make_article("wildfire forces mass evacuations", hours_ago=3, source=outlets["right"])

    groups = group_similar_stories([a, b])

    assert len(groups) == 1
    group = groups[0]
    assert group.representative is a
    assert group.articles == (a, b)
    assert group.source_count == 2


def test_articles_outside_window_never_group(outlets):
    a = make_article("wildfire forces evacuations", hours_ago=0, source=outlets["left"])
    b = make_article("wildfire forces mass evacuations", hours_ago=5, source=outlets["right"])
    same = make_article("wildfire forces evacuations", hours_ago=5, source=outlets["center"])

    assert group_similar_stories([a, b]) == []
    assert group_similar_stories([a, same]) == []


def test_singletons_are_discarded(outlets):
    a = make_article("wildfire forces evacuations", source=outlets["left"])
    b = make_article("markets close higher on friday", source=outlets["center"])
    assert group_similar_stories([a, b]) == []
    assert group_similar_stories([]) == []


def test_similarity_must_exceed_threshold(outlets):
    # 2 of 3 tokens -> 0.667
    a = make_article("wildfire forces evacuations", source=outlets["left"])
    b = make_article("wildfire forces", source=outlets["right"])
    assert group_similar_stories([a, b]) == []
    assert len(group_similar_stories([a, b], similarity_threshold=0.6)) == 1


def test_window_is_configurable(outlets):
    a = make_article("wildfire forces evacuations", hours_ago=0, source=outlets["left"])
    b = make_article("wildfire forces mass evacuations", hours_ago=5, source=outlets["right"])
    assert len(group_similar_stories([a, b], window=timedelta(hours=6))) == 1


def test_bias_aggregate_skips_members_without_bias(outlets):
    a = make_article("quake strikes off coast", source=outlets["left"], bias=BiasSpectrum.LEFT)
    b = make_article("quake strikes off the coast", source=outlets["center"])
    c = make_article("quake strikes off coast", hours_ago=1, source=outlets["right"], bias=BiasSpectrum.CENTER_RIGHT)

    (group,) = group_similar_stories([a, b, c])

    assert group.source_count == 3
    assert group.bias_range == (-1.5, 0.7)
    assert group.average_bias == pytest.approx(-0.4)
    assert group.bias_distribution == "1L / 1C / 1R"


def test_group_without_any_bias_reports_zero(outlets):
    a = make_article("quake strikes off coast", source=outlets["left"])
    b = make_article("quake strikes off coast", source=outlets["right"])
    (group,) = group_similar_stories([a, b])
    assert group.bias_range == (0.0, 0.0)
    assert group.average_bias == 0.0


def test_groups_sorted_by_size_and_pass_is_greedy(outlets):
    small_a = make_article("bridge closed for repairs", source=outlets["left"])
    small_b = make_article("bridge closed for repairs", source=outlets["right"])
    big = [
        make_article("election results certified in ohio", source=outlets[k])
        for k in ("left", "center", "right")
    ]

    groups = group_similar_stories([small_a, big[0], small_b, big[1], big[2]])

    assert [g.source_count for g in groups] == [3, 2]
    assert groups[0].representative is big[0]
    assert groups[1].articles == (small_a, small_b)


def test_anchor_claims_members_first(outlets):
    # b is similar to both a and c; it joins a's group because a comes first,
    # leaving c alone.
    a = make_article("storm hits coast town", source=outlets["left"])
    b = make_article("storm hits coast town today", source=outlets["center"])
    c = make_article("storm hits coast town today again", source=outlets["right"])

    groups = group_similar_stories([a, b, c])

    assert len(groups) == 1
    assert groups[0].articles == (a, b)
