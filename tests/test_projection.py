from __future__ import annotations

from math import isclose

from finplan.core.projection import (
    calculate_projection,
    coi_rate_for_age,
    compare_interest_scenarios,
    has_lapsed,
    projection_horizon,
)
from finplan.schemas.projection import (
    DEFAULT_PROJECTION_CONFIG,
    BonusRule,
    BonusType,
    CoiBand,
    ProjectionConfig,
)


def frictionless_config(**overrides) -> ProjectionConfig:
    """No charges, no COI, no fees: the account is premiums plus interest."""
    params = dict(initialCharges={}, bonuses=[], coiBands=[], monthlyAdminFee=0)
    params.update(overrides)
    return ProjectionConfig(**params)


def standard_policy(**overrides):
    params = dict(
        current_age=30,
        annual_premium=20_000_000,
        sum_assured=1_000_000_000,
        payment_term=15,
        interest_rate=0.05,
    )
    params.update(overrides)
    return calculate_projection(**params)


def test_immediate_lapse_with_nothing_paid():
    rows = calculate_projection(
        current_age=30,
        annual_premium=0,
        sum_assured=0,
        payment_term=0,
        interest_rate=0.05,
    )

    assert len(rows) == 1
    assert rows[0].year == 1
    assert rows[0].age == 31
    assert rows[0].accountValue == 0
    assert rows[0].surrenderValue == 0
    assert has_lapsed(rows)


def test_first_year_roll_forward_with_default_config():
    rows = standard_policy()
    first = rows[0]

    # 15% of premium allocated, 5% interest, COI on ~996.85m at risk, 480k admin
    allocated = 20_000_000 * 0.15
    interest = allocated * 0.05
    coi = (1_000_000_000 - allocated - interest) / 1000 * 0.001
    expected = allocated + interest - coi - 40_000 * 12

    assert first.premiumPaid == 20_000_000
    assert first.accumulatedPremium == 20_000_000
    assert first.accountValue == round(expected)
    assert first.deathBenefit == 1_000_000_000


def test_premium_stops_after_payment_term():
    rows = standard_policy()
    paying = [row for row in rows if row.year <= 15]
    stopped = [row for row in rows if row.year > 15]

    assert all(row.premiumPaid == 20_000_000 for row in paying)
    assert stopped and all(row.premiumPaid == 0 for row in stopped)
    assert rows[-1].accumulatedPremium == 15 * 20_000_000


def test_surrender_value_zero_for_first_two_years():
    rows = standard_policy()
    assert len(rows) >= 3
    for row in rows:
        if row.year <= 2:
            assert row.surrenderValue == 0
        else:
            assert row.surrenderValue == row.accountValue


def test_death_benefit_is_max_of_sum_assured_and_account():
    rows = calculate_projection(
        current_age=30,
        annual_premium=1_000,
        sum_assured=1_500,
        payment_term=10,
        interest_rate=0.0,
        config=frictionless_config(),
    )
    assert rows[0].deathBenefit == 1_500
    assert rows[1].deathBenefit == 2_000
    assert all(row.deathBenefit == max(1_500, row.accountValue) for row in rows)


def test_horizon_caps_at_fifty_years_or_age_99():
    config = frictionless_config()

    young = calculate_projection(20, 1_000, 0, 100, 0.01, config)
    assert len(young) == 50
    assert young[-1].age == 70

    older = calculate_projection(60, 1_000, 0, 100, 0.01, config)
    assert len(older) == 39
    assert older[-1].age == 99

    assert calculate_projection(99, 1_000, 0, 100, 0.01, config) == []
    assert projection_horizon(120) == 0


def test_lapse_stops_before_horizon():
    rows = standard_policy(annual_premium=100_000, sum_assured=0)
    assert len(rows) < projection_horizon(30)
    assert rows[-1].accountValue == 0
    assert has_lapsed(rows)


def test_account_values_never_negative():
    scenarios = [
        dict(annual_premium=5_000_000, sum_assured=5_000_000_000, payment_term=3),
        dict(annual_premium=1_000_000, sum_assured=0, payment_term=50),
        dict(annual_premium=50_000_000, sum_assured=2_000_000_000, payment_term=10, current_age=65),
    ]
    for overrides in scenarios:
        for row in standard_policy(**overrides):
            assert row.accountValue >= 0
            assert row.surrenderValue >= 0
            assert row.surrenderValue <= row.accountValue


def test_projection_is_deterministic():
    assert standard_policy() == standard_policy()


def test_premium_based_bonus_uses_annual_premium():
    config = frictionless_config(
        bonuses=[BonusRule(year=2, rate=0.5, type=BonusType.PREMIUM_BASED)]
    )
    rows = calculate_projection(30, 1_000, 0, 10, 0.0, config)
    assert rows[0].accountValue == 1_000
    assert rows[1].accountValue == 2_500
    assert rows[2].accountValue == 3_500


def test_account_based_bonus_uses_prior_account_value():
    config = frictionless_config(
        bonuses=[BonusRule(year=3, rate=0.1, type=BonusType.ACCOUNT_BASED)]
    )
    rows = calculate_projection(30, 1_000, 0, 10, 0.0, config)
    # 2,000 carried into year 3, bonus 10% of that
    assert rows[2].accountValue == 3_200


def test_unlisted_years_carry_no_initial_charge():
    config = frictionless_config(initialCharges={1: 0.5})
    rows = calculate_projection(30, 1_000, 0, 10, 0.0, config)
    assert rows[0].accountValue == 500
    assert rows[1].accountValue == 1_500


def test_interest_credited_on_prior_value_plus_allocation():
    rows = calculate_projection(30, 1_000, 0, 10, 0.10, frictionless_config())
    assert isclose(rows[0].accountValue, 1_100)
    assert isclose(rows[1].accountValue, round((1_100 + 1_000) * 1.1))


def test_coi_charged_only_on_amount_at_risk():
    config = frictionless_config(coiBands=[CoiBand(fromAge=0, rate=1.0)])
    # 1,000 at risk per 1,000 of premium gap: coi = (10,000 - 1,000) / 1000 * 1.0 = 9
    rows = calculate_projection(30, 1_000, 10_000, 10, 0.0, config)
    assert rows[0].accountValue == 991


def test_coi_rate_bands_are_strictly_above_age():
    bands = DEFAULT_PROJECTION_CONFIG.coiBands
    assert coi_rate_for_age(30, bands) == 0.001
    assert coi_rate_for_age(40, bands) == 0.001
    assert coi_rate_for_age(41, bands) == 0.003
    assert coi_rate_for_age(55, bands) == 0.008
    assert coi_rate_for_age(65, bands) == 0.015
    assert coi_rate_for_age(71, bands) == 0.030
    assert coi_rate_for_age(30, list(reversed(bands))) == 0.001
    assert coi_rate_for_age(30, []) == 0.0


def test_nan_inputs_do_not_raise():
    nan = float("nan")
    rows = calculate_projection(30, nan, nan, 10, nan)
    # nothing is ever allocated, so the account is still empty in year 2
    assert len(rows) == 2
    assert all(row.accountValue == 0 for row in rows)


def test_year_one_wipe_out_recovers_while_premiums_are_due():
    rows = calculate_projection(
        current_age=30,
        annual_premium=3_000_000,
        sum_assured=500_000_000,
        payment_term=20,
        interest_rate=0.05,
    )

    # 15% of 3m allocated in year 1 does not cover the 480k admin fee
    assert rows[0].accountValue == 0
    # 50% allocated in year 2: 1.5m + 75k interest - ~500 COI - 480k admin
    assert isclose(rows[1].accountValue, 1_094_500, abs_tol=100)
    assert len(rows) > 2
    assert not has_lapsed(rows)


def test_year_one_zero_stops_when_no_premium_follows():
    rows = calculate_projection(30, 100_000, 0, 1, 0.05)
    assert len(rows) == 1
    assert rows[0].accountValue == 0


def test_compare_interest_scenarios_uses_config_presets():
    comparison = compare_interest_scenarios(
        current_age=30,
        annual_premium=20_000_000,
        sum_assured=1_000_000_000,
        payment_term=15,
    )
    assert comparison.standardRate == 0.05
    assert comparison.highRate == 0.065
    assert comparison.standard == standard_policy(interest_rate=0.05)
    assert comparison.high[-1].accountValue > comparison.standard[-1].accountValue
