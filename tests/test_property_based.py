# tests/test_property_based.py
"""
Property-based tests for the score aggregator and emissions calculator.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from esg_portal.emissions import compute_emissions
from esg_portal.scoring import MetricInput, compute_scores, normalize

CATEGORIES = ["environmental", "social", "governance"]

value_st = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
target_st = st.floats(min_value=0.01, max_value=1e6, allow_nan=False, allow_infinity=False)


@st.composite
def targeted_record(draw):
    return MetricInput(
        category=draw(st.sampled_from(CATEGORIES)),
        metric_name=draw(st.sampled_from(["a", "b", "c", "d"])),
        value=draw(value_st),
        target=draw(target_st),
    )


@settings(max_examples=200)
@given(records=st.lists(targeted_record(), max_size=30))
def test_scores_bounded_when_every_record_has_target(records):
    snapshot = compute_scores(records)
    for score in snapshot.category_scores().values():
        assert 0 <= score <= 100
    assert 0 <= snapshot.overall_score <= 100
    assert snapshot.total_entries == len(records)


@settings(max_examples=200)
@given(value=value_st, target=target_st, lower=st.booleans())
def test_normalize_bounded(value, target, lower):
    assert 0 <= normalize(value, target, lower) <= 100


@settings(max_examples=100)
@given(
    gas=st.floats(min_value=0, max_value=1e6, allow_nan=False),
    electricity=st.floats(min_value=0, max_value=1e6, allow_nan=False),
    travel=st.floats(min_value=0, max_value=1e6, allow_nan=False),
    region=st.sampled_from(["US", "EU", "China", "India", "Global", "Atlantis", None]),
)
def test_emissions_non_negative(gas, electricity, travel, region):
    result = compute_emissions(
        {"naturalGas": gas, "electricity": electricity, "business_travel": travel}, region
    )
    assert result.scope1_total >= 0
    assert result.scope2_total >= 0
    assert result.scope3_total >= 0
    assert result.total >= 0
