"""Unit tests for the rank fairness multiplier."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from duotracker.scoring.multiplier import pair_multipliers, rank_multiplier
from duotracker.scoring.ranks import parse_rank_string, rank_to_value, value_to_rank

pytestmark = pytest.mark.unit

rank_values = st.integers(min_value=0, max_value=36)


class TestRankMultiplier:
    """Tests for rank_multiplier."""

    def test_equal_ranks_not_penalized(self):
        """Equal ranks should give a multiplier of 1.0."""
        gold = parse_rank_string("G2")
        assert rank_multiplier(gold, gold) == 1.0

    def test_within_one_tier_of_average_not_penalized(self):
        """Player one tier under the average should not be penalized."""
        # avg = (12 + 20) / 2 = 16, threshold 12
        assert rank_multiplier(parse_rank_string("G4"), parse_rank_string("E4")) == 1.0

    def test_bronze_with_diamond_partner(self):
        """Bronze paired with diamond should lose about a third."""
        noob, carry = parse_rank_string("B3"), parse_rank_string("D2")
        assert rank_to_value(noob) == 5
        assert rank_to_value(carry) == 26

        noob_mult, carry_mult = pair_multipliers(noob, carry)
        assert noob_mult == pytest.approx(0.65, abs=0.05)
        assert noob_mult == pytest.approx(0.675)
        assert carry_mult == 1.0

    def test_floor_at_half(self):
        """Multiplier should never go below 0.5."""
        assert rank_multiplier(parse_rank_string("I4"), parse_rank_string("C")) == 0.5

    @given(own=rank_values, partner=rank_values)
    def test_bounds(self, own, partner):
        """Multiplier should stay within [0.5, 1.0]."""
        result = rank_multiplier(value_to_rank(own), value_to_rank(partner))
        assert 0.5 <= result <= 1.0

    @given(own=rank_values, partner=rank_values)
    def test_stronger_player_never_penalized(self, own, partner):
        """The stronger player should always get 1.0."""
        own_rank, partner_rank = value_to_rank(own), value_to_rank(partner)
        if rank_to_value(own_rank) >= rank_to_value(partner_rank):
            assert rank_multiplier(own_rank, partner_rank) == 1.0

    @given(own=rank_values, partner=rank_values)
    def test_no_penalty_above_threshold(self, own, partner):
        """Players at or above the threshold should get 1.0."""
        own_rank, partner_rank = value_to_rank(own), value_to_rank(partner)
        own_value, partner_value = rank_to_value(own_rank), rank_to_value(partner_rank)
        if own_value >= (own_value + partner_value) / 2 - 4:
            assert rank_multiplier(own_rank, partner_rank) == 1.0

    @given(own=rank_values, partner=rank_values)
    def test_at_least_one_player_unpenalized(self, own, partner):
        """At least one player in a pair should get 1.0."""
        noob_mult, carry_mult = pair_multipliers(value_to_rank(own), value_to_rank(partner))
        assert max(noob_mult, carry_mult) == 1.0
