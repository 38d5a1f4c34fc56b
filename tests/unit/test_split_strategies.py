"""Test split calculations"""

from decimal import Decimal
from uuid import UUID

import pytest

from splitter.core.exceptions import InvalidInputError
from splitter.core.money import Money
from splitter.models.payment import SplitMode
from splitter.models.split import Split
from splitter.services.split_strategies import (
    EqualSplitStrategy,
    PercentageSplitStrategy,
    UnequalSplitStrategy,
    distribute_residual,
    divide_evenly,
    get_split_strategy,
)

M1, M2, M3, M4 = (UUID(int=i) for i in range(1, 5))


def gbp(amount) -> Money:
    return Money.from_decimal(amount, "GBP")


def inputs(*member_ids, amounts=None, percentages=None):
    amounts = amounts or [Decimal("0")] * len(member_ids)
    percentages = percentages or [None] * len(member_ids)
    return [
        Split(member_id=m, amount=Decimal(str(a)), percentage=p, currency="GBP")
        for m, a, p in zip(member_ids, amounts, percentages)
    ]


def amounts_of(splits):
    return [s.amount for s in splits]


class TestGetSplitStrategy:
    """Test get_split_strategy factory function"""

    def test_get_equal_strategy(self):
        """Test getting equal split strategy"""
        strategy = get_split_strategy(SplitMode.EQUAL)
        assert isinstance(strategy, EqualSplitStrategy)

    def test_get_percentage_strategy(self):
        """Test getting percentage split strategy"""
        strategy = get_split_strategy(SplitMode.PERCENTAGE)
        assert isinstance(strategy, PercentageSplitStrategy)

    def test_get_unequal_strategy(self):
        """Test getting unequal split strategy"""
        strategy = get_split_strategy(SplitMode.UNEQUAL)
        assert isinstance(strategy, UnequalSplitStrategy)


class TestDistributeResidual:
    """Test leftover minor unit distribution"""

    def test_positive_residual_follows_priority(self):
        """Test units go to the smallest priority keys first"""
        shares = {M1: 10, M2: 30, M3: 20}
        result = distribute_residual(shares, 2, priority=lambda m: -shares[m])
        assert result == {M1: 10, M2: 31, M3: 21}

    def test_residual_cycles_when_larger_than_members(self):
        """Test the residual wraps around until it is used up"""
        result = distribute_residual({M1: 0, M2: 0}, 5, priority=lambda m: m)
        assert result == {M1: 3, M2: 2}

    def test_negative_residual_takes_units_away(self):
        """Test a negative residual removes units"""
        result = distribute_residual({M1: 5, M2: 5}, -1, priority=lambda m: m)
        assert result == {M1: 4, M2: 5}

    def test_input_is_not_modified(self):
        """Test the original mapping is left alone"""
        shares = {M1: 1}
        distribute_residual(shares, 1, priority=lambda m: m)
        assert shares == {M1: 1}


class TestEqualSplitStrategy:
    """Test equal split strategy"""

    @pytest.fixture
    def strategy(self):
        return EqualSplitStrategy()

    def test_equal_split_two_participants(self, strategy):
        """Test equal split with 2 participants"""
        splits = strategy.calculate_splits(gbp("100.00"), inputs(M1, M2))

        assert amounts_of(splits) == [Decimal("50.00"), Decimal("50.00")]
        assert all(s.currency == "GBP" for s in splits)

    def test_equal_split_three_participants(self, strategy):
        """Test equal split with 3 participants (requires a remainder unit)"""
        splits = strategy.calculate_splits(gbp("10.00"), inputs(M1, M2, M3))

        # Lowest member id absorbs the remainder when there is no payment id
        assert amounts_of(splits) == [Decimal("3.34"), Decimal("3.33"), Decimal("3.33")]
        assert sum(amounts_of(splits)) == Decimal("10.00")

    def test_equal_split_negative_total(self, strategy):
        """Test received amounts split with the total's sign"""
        splits = strategy.calculate_splits(gbp("-10.00"), inputs(M1, M2, M3))

        assert amounts_of(splits) == [Decimal("-3.34"), Decimal("-3.33"), Decimal("-3.33")]
        assert sum(amounts_of(splits)) == Decimal("-10.00")

    def test_payment_id_rotates_remainder(self, strategy):
        """Test the payment id picks which member absorbs the remainder"""
        payment_id = UUID(int=5)  # 5 % 3 == 2, so the third member starts
        splits = strategy.calculate_splits(gbp("10.00"), inputs(M1, M2, M3), payment_id)

        assert amounts_of(splits) == [Decimal("3.33"), Decimal("3.33"), Decimal("3.34")]

    def test_remainder_ignores_input_order(self, strategy):
        """Test the same members in a different order get the same amounts"""
        forward = strategy.calculate_splits(gbp("0.05"), inputs(M1, M2, M3))
        backward = strategy.calculate_splits(gbp("0.05"), inputs(M3, M2, M1))

        assert {s.member_id: s.amount for s in forward} == {s.member_id: s.amount for s in backward}
        assert [s.member_id for s in backward] == [M3, M2, M1]

    def test_deterministic(self, strategy):
        """Test repeated calls give identical splits"""
        first = strategy.calculate_splits(gbp("7.01"), inputs(M1, M2, M3, M4), UUID(int=99))
        second = strategy.calculate_splits(gbp("7.01"), inputs(M1, M2, M3, M4), UUID(int=99))
        assert first == second

    @pytest.mark.parametrize("total", ["0.01", "0.02", "999999.99", "-123.45", "0.00", "100.00"])
    @pytest.mark.parametrize("count", [1, 3, 7])
    def test_sum_and_spread(self, strategy, total, count):
        """Test shares add up exactly and differ by at most one cent"""
        members = [UUID(int=i) for i in range(1, count + 1)]
        splits = strategy.calculate_splits(gbp(total), inputs(*members))

        cents = [s.money().minor_units for s in splits]
        assert sum(cents) == gbp(total).minor_units
        assert max(cents) - min(cents) <= 1

    def test_drops_percentages(self, strategy):
        """Test equal splits carry no percentage"""
        splits = strategy.calculate_splits(
            gbp("10.00"), inputs(M1, M2, percentages=[Decimal("70"), Decimal("30")])
        )
        assert [s.percentage for s in splits] == [None, None]
        assert amounts_of(splits) == [Decimal("5.00"), Decimal("5.00")]

    def test_equal_split_zero_participants(self, strategy):
        """Test equal split with no participants raises InvalidInputError"""
        with pytest.raises(InvalidInputError, match="zero participants"):
            strategy.calculate_splits(gbp("100.00"), [])

    def test_divide_evenly_zero_members(self):
        """Test the integer helper refuses to divide by zero"""
        with pytest.raises(InvalidInputError):
            divide_evenly(100, [])


class TestUnequalSplitStrategy:
    """Test proportional rescaling of manual amounts"""

    @pytest.fixture
    def strategy(self):
        return UnequalSplitStrategy()

    def test_rescale_keeps_proportions(self, strategy):
        """Test [6.00, 4.00] rescaled to 5.00"""
        splits = strategy.calculate_splits(gbp("5.00"), inputs(M1, M2, amounts=["6.00", "4.00"]))

        assert amounts_of(splits) == [Decimal("3.00"), Decimal("2.00")]

    def test_rescale_drops_percentages(self, strategy):
        """Test manual splits carry no percentage"""
        splits = strategy.calculate_splits(
            gbp("5.00"),
            inputs(M1, M2, amounts=["6.00", "4.00"], percentages=[Decimal("60"), Decimal("40")]),
        )

        assert [s.percentage for s in splits] == [None, None]

    def test_rescale_distributes_residual_to_largest(self, strategy):
        """Test leftover cents go to the largest shares"""
        splits = strategy.calculate_splits(
            gbp("10.00"), inputs(M1, M2, M3, amounts=["1.00", "2.00", "1.00"])
        )

        # 250 / 500 / 250 exactly
        assert amounts_of(splits) == [Decimal("2.50"), Decimal("5.00"), Decimal("2.50")]

        splits = strategy.calculate_splits(
            gbp("10.01"), inputs(M1, M2, M3, amounts=["1.00", "1.00", "1.00"])
        )
        # 333 each, two cents left; ties broken by member id
        assert amounts_of(splits) == [Decimal("3.34"), Decimal("3.34"), Decimal("3.33")]

    def test_rescale_to_negative_target(self, strategy):
        """Test the target's sign is applied to every share"""
        splits = strategy.calculate_splits(gbp("-5.00"), inputs(M1, M2, amounts=["6.00", "4.00"]))

        assert amounts_of(splits) == [Decimal("-3.00"), Decimal("-2.00")]

    def test_rescale_from_negative_priors(self, strategy):
        """Test proportions come from absolute prior amounts"""
        splits = strategy.calculate_splits(gbp("5.00"), inputs(M1, M2, amounts=["-6.00", "-4.00"]))

        assert amounts_of(splits) == [Decimal("3.00"), Decimal("2.00")]

    def test_zero_basis_falls_back_to_equal(self, strategy):
        """Test all-zero priors split equally instead of dividing by zero"""
        splits = strategy.calculate_splits(gbp("10.00"), inputs(M1, M2, M3))

        assert amounts_of(splits) == [Decimal("3.34"), Decimal("3.33"), Decimal("3.33")]

    def test_new_member_without_amount_gets_nothing(self, strategy):
        """Test a member with no prior amount keeps a zero share"""
        splits = strategy.calculate_splits(gbp("9.00"), inputs(M1, M2, amounts=["3.00", "0"]))

        assert amounts_of(splits) == [Decimal("9.00"), Decimal("0.00")]

    @pytest.mark.parametrize("target", ["0.01", "13.37", "-250.00", "1000000.00"])
    def test_sum_matches_target(self, strategy, target):
        """Test rescaled shares always add up exactly"""
        splits = strategy.calculate_splits(
            gbp(target), inputs(M1, M2, M3, M4, amounts=["1.11", "2.22", "3.33", "0.07"])
        )

        assert sum(amounts_of(splits)) == gbp(target).to_decimal()
        sign = gbp(target).sign()
        assert all(s.money().sign() in (0, sign) for s in splits)

    def test_zero_participants(self, strategy):
        """Test rescaling nothing raises InvalidInputError"""
        with pytest.raises(InvalidInputError):
            strategy.calculate_splits(gbp("10.00"), [])


class TestPercentageSplitStrategy:
    """Test percentage split strategy"""

    @pytest.fixture
    def strategy(self):
        return PercentageSplitStrategy()

    def test_percentage_split_valid(self, strategy):
        """Test percentage split with valid percentages"""
        splits = strategy.calculate_splits(
            gbp("1000.00"), inputs(M1, M2, percentages=[Decimal("60"), Decimal("40")])
        )

        assert amounts_of(splits) == [Decimal("600.00"), Decimal("400.00")]
        assert [s.percentage for s in splits] == [Decimal("60"), Decimal("40")]

    def test_percentage_split_thirds(self, strategy):
        """Test [33.33, 33.33, 33.34]% of 100.00"""
        splits = strategy.calculate_splits(
            gbp("100.00"),
            inputs(M1, M2, M3, percentages=[Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]),
        )

        assert amounts_of(splits) == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
        assert sum(amounts_of(splits)) == Decimal("100.00")

    def test_correction_restores_exact_sum(self, strategy):
        """Test leftover cents go to the largest share"""
        splits = strategy.calculate_splits(
            gbp("0.10"),
            inputs(M1, M2, M3, percentages=[Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]),
        )

        assert amounts_of(splits) == [Decimal("0.03"), Decimal("0.03"), Decimal("0.04")]

    def test_without_correction_drift_is_bounded(self):
        """Test naive per-item rounding drifts by at most half a cent per member"""
        strategy = PercentageSplitStrategy(apply_correction=False)
        splits = strategy.calculate_splits(
            gbp("0.10"),
            inputs(M1, M2, M3, percentages=[Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]),
        )

        total = sum(amounts_of(splits))
        assert total == Decimal("0.09")
        assert abs(total - Decimal("0.10")) <= 3 * Decimal("0.005")

    def test_negative_total(self, strategy):
        """Test received payments split with a negative sign"""
        splits = strategy.calculate_splits(
            gbp("-10.00"), inputs(M1, M2, percentages=[Decimal("75"), Decimal("25")])
        )

        assert amounts_of(splits) == [Decimal("-7.50"), Decimal("-2.50")]

    def test_percentages_not_summing_to_100_still_cover_total(self, strategy):
        """Test amounts are allocated against the percentage total"""
        splits = strategy.calculate_splits(
            gbp("100.00"), inputs(M1, M2, percentages=[Decimal("50"), Decimal("40")])
        )

        assert amounts_of(splits) == [Decimal("55.56"), Decimal("44.44")]

    def test_all_zero_percentages(self, strategy):
        """Test zero percentages give zero amounts"""
        splits = strategy.calculate_splits(
            gbp("100.00"), inputs(M1, M2, percentages=[Decimal("0"), Decimal("0")])
        )

        assert amounts_of(splits) == [Decimal("0.00"), Decimal("0.00")]

    def test_percentage_split_negative_percentage(self, strategy):
        """Test percentage split with negative percentage raises error"""
        with pytest.raises(InvalidInputError, match="Percentage must be between 0 and 100"):
            strategy.calculate_splits(
                gbp("100.00"), inputs(M1, M2, percentages=[Decimal("-10"), Decimal("110")])
            )

    def test_percentage_split_over_100_percent(self, strategy):
        """Test percentage split with single percentage > 100 raises error"""
        with pytest.raises(InvalidInputError, match="Percentage must be between 0 and 100"):
            strategy.calculate_splits(gbp("100.00"), inputs(M1, percentages=[Decimal("101")]))

    def test_percentage_split_100_percent_single(self, strategy):
        """Test percentage split with single participant at 100%"""
        splits = strategy.calculate_splits(gbp("500.00"), inputs(M1, percentages=[Decimal("100")]))

        assert amounts_of(splits) == [Decimal("500.00")]

    def test_zero_participants(self, strategy):
        """Test percentage split with no participants raises InvalidInputError"""
        with pytest.raises(InvalidInputError, match="zero participants"):
            strategy.calculate_splits(gbp("100.00"), [])
