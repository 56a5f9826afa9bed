"""Tests for accumulation, disposition and threshold validation."""

from datetime import timedelta

import pytest

from ghsa_audit.utils.alert_filter import filter_alerts
from ghsa_audit.utils.models import AuditConfig, FilterCriteria, VerdictAccumulator
from ghsa_audit.utils.severity import SeverityLevel
from ghsa_audit.utils.verdict import (
    DISPOSITION_RULES,
    ConflictingThresholds,
    accumulate,
    compute_disposition,
    validate_thresholds,
)


class TestAccumulate:
    """Tests for folding repositories into the accumulator."""

    def test_initial_values(self, now):
        acc = VerdictAccumulator.new(now)
        assert acc.has_disabled_repo is False
        assert acc.worst_severity is SeverityLevel.UNKNOWN
        assert acc.matching_open_count == 0
        assert acc.oldest_created_at == now

    def test_disabled_repo_only_sets_flag(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, False, [make_alert(severity=SeverityLevel.CRITICAL, days_ago=90)], now)
        assert acc.has_disabled_repo is True
        assert acc.worst_severity is SeverityLevel.UNKNOWN
        assert acc.matching_open_count == 0
        assert acc.oldest_created_at == now

    def test_open_alerts_raise_worst_and_count(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(
            acc,
            True,
            [
                make_alert(severity=SeverityLevel.MEDIUM, days_ago=3),
                make_alert(severity=SeverityLevel.HIGH, days_ago=12),
            ],
            now,
        )
        assert acc.worst_severity is SeverityLevel.HIGH
        assert acc.matching_open_count == 2
        assert acc.oldest_created_at == now - timedelta(days=12)

    def test_empty_state_counts_as_open(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(state="", severity=SeverityLevel.LOW)], now)
        assert acc.matching_open_count == 1
        assert acc.worst_severity is SeverityLevel.LOW

    def test_closed_alert_excluded(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(
            acc,
            True,
            [
                make_alert(state="fixed", severity=SeverityLevel.CRITICAL, days_ago=100),
                make_alert(state="dismissed", severity=SeverityLevel.HIGH, days_ago=50),
            ],
            now,
        )
        assert acc.worst_severity is SeverityLevel.UNKNOWN
        assert acc.matching_open_count == 0
        assert acc.oldest_created_at == now

    def test_monotonic_across_repositories(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        batches = [
            (True, [make_alert(severity=SeverityLevel.HIGH, days_ago=20)]),
            (False, []),
            (True, [make_alert(severity=SeverityLevel.LOW, days_ago=2)]),
            (True, []),
            (True, [make_alert(severity=SeverityLevel.CRITICAL, days_ago=40)]),
        ]
        previous = (acc.worst_severity, acc.oldest_created_at, acc.matching_open_count, acc.has_disabled_repo)
        for enabled, alerts in batches:
            accumulate(acc, enabled, alerts, now)
            worst, oldest, count, disabled = (
                acc.worst_severity,
                acc.oldest_created_at,
                acc.matching_open_count,
                acc.has_disabled_repo,
            )
            assert worst >= previous[0]
            assert oldest <= previous[1]
            assert count >= previous[2]
            assert disabled >= previous[3]
            previous = (worst, oldest, count, disabled)

        assert acc.has_disabled_repo is True
        assert acc.worst_severity is SeverityLevel.CRITICAL
        assert acc.matching_open_count == 3
        assert acc.repos_examined == 5


class TestComputeDisposition:
    """Tests for the ordered disposition rules."""

    def test_rule_order(self):
        assert [r.name for r in DISPOSITION_RULES] == [
            "fail-severity",
            "fail-age",
            "fail-match",
            "fail-disabled",
        ]

    def test_pass_without_thresholds(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(severity=SeverityLevel.CRITICAL, days_ago=400)], now)
        accumulate(acc, False, [], now)
        disposition = compute_disposition(acc, AuditConfig(), now)
        assert disposition.code == 0
        assert disposition.failed is False

    @pytest.mark.parametrize(
        "worst, expected",
        [
            (SeverityLevel.LOW, 2),
            (SeverityLevel.MEDIUM, 3),
            (SeverityLevel.HIGH, 4),
            (SeverityLevel.CRITICAL, 5),
        ],
    )
    def test_severity_failure_code(self, make_alert, now, worst, expected):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(severity=worst)], now)
        disposition = compute_disposition(acc, AuditConfig(fail_severity=SeverityLevel.LOW), now)
        assert disposition.code == expected
        assert disposition.reason == "fail-severity"

    def test_severity_below_threshold_passes(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(severity=SeverityLevel.MEDIUM)], now)
        assert compute_disposition(acc, AuditConfig(fail_severity=SeverityLevel.HIGH), now).code == 0

    def test_age_failure(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(days_ago=15)], now)
        disposition = compute_disposition(acc, AuditConfig(fail_age_days=10), now)
        assert disposition.code == 1
        assert disposition.reason == "fail-age"

    def test_age_not_exceeded(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(days_ago=10)], now)
        assert compute_disposition(acc, AuditConfig(fail_age_days=10), now).code == 0

    def test_match_failure_uses_worst_severity(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(severity=SeverityLevel.MEDIUM)], now)
        disposition = compute_disposition(acc, AuditConfig(fail_match=True), now)
        assert disposition.code == 3
        assert disposition.reason == "fail-match"

    def test_match_failure_with_unknown_severity(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(severity=SeverityLevel.UNKNOWN)], now)
        assert compute_disposition(acc, AuditConfig(fail_match=True), now).code == 1

    def test_match_without_matches_passes(self, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [], now)
        assert compute_disposition(acc, AuditConfig(fail_match=True), now).code == 0

    def test_severity_takes_precedence_over_disabled(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, False, [], now)
        accumulate(acc, True, [make_alert(severity=SeverityLevel.HIGH)], now)
        config = AuditConfig(fail_severity=SeverityLevel.MEDIUM, fail_disabled=True)
        disposition = compute_disposition(acc, config, now)
        assert disposition.code == 4
        assert disposition.reason == "fail-severity"

    def test_age_takes_precedence_over_match(self, make_alert, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, [make_alert(severity=SeverityLevel.CRITICAL, days_ago=60)], now)
        disposition = compute_disposition(acc, AuditConfig(fail_age_days=30, fail_match=True), now)
        assert disposition.code == 1
        assert disposition.reason == "fail-age"

    def test_scenario_a_disabled_repo(self, now):
        acc = VerdictAccumulator.new(now)
        accumulate(acc, False, [], now)
        disposition = compute_disposition(acc, AuditConfig(fail_disabled=True), now)
        assert disposition.code == 1
        assert disposition.reason == "fail-disabled"

    def test_scenario_b_worst_severity_code(self, make_alert, now):
        config = AuditConfig(fail_severity=SeverityLevel.HIGH)
        alerts = [
            make_alert(severity=SeverityLevel.HIGH, days_ago=10),
            make_alert(severity=SeverityLevel.CRITICAL, days_ago=40),
        ]
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, filter_alerts(alerts, config.criteria, now), now)
        assert acc.worst_severity is SeverityLevel.CRITICAL
        assert compute_disposition(acc, config, now).code == 5

    def test_scenario_d_closed_alert_ignored(self, make_alert, now):
        config = AuditConfig(fail_severity=SeverityLevel.LOW, fail_match=True)
        alerts = [make_alert(state="fixed", severity=SeverityLevel.CRITICAL)]
        filtered = filter_alerts(alerts, config.criteria, now)
        assert filtered == alerts
        acc = VerdictAccumulator.new(now)
        accumulate(acc, True, filtered, now)
        assert acc.worst_severity is SeverityLevel.UNKNOWN
        assert acc.matching_open_count == 0
        assert compute_disposition(acc, config, now).code == 0

    def test_scenario_f_no_repositories(self, now):
        acc = VerdictAccumulator.new(now)
        config = AuditConfig(
            fail_severity=SeverityLevel.LOW,
            fail_age_days=1,
            fail_match=True,
            fail_disabled=True,
        )
        disposition = compute_disposition(acc, config, now)
        assert disposition.code == 0
        assert acc.oldest_created_at == now


class TestValidateThresholds:
    """Tests for the pre-run conflict check."""

    def test_defaults_are_valid(self):
        validate_thresholds(AuditConfig())

    def test_scenario_c_fail_severity_below_floor(self):
        config = AuditConfig(
            criteria=FilterCriteria(min_severity=SeverityLevel.HIGH),
            fail_severity=SeverityLevel.MEDIUM,
        )
        with pytest.raises(ConflictingThresholds) as excinfo:
            validate_thresholds(config)
        message = str(excinfo.value)
        assert "--fail-severity" in message
        assert "--severity" in message

    def test_fail_severity_equal_to_floor_is_valid(self):
        validate_thresholds(
            AuditConfig(
                criteria=FilterCriteria(min_severity=SeverityLevel.HIGH),
                fail_severity=SeverityLevel.HIGH,
            )
        )

    def test_floor_without_fail_severity_is_valid(self):
        validate_thresholds(AuditConfig(criteria=FilterCriteria(min_severity=SeverityLevel.CRITICAL)))

    def test_scenario_e_min_age_above_fail_age(self):
        config = AuditConfig(criteria=FilterCriteria(min_age_days=30), fail_age_days=10)
        with pytest.raises(ConflictingThresholds) as excinfo:
            validate_thresholds(config)
        message = str(excinfo.value)
        assert "--min-age" in message
        assert "--fail-age" in message

    def test_min_age_below_fail_age_is_valid(self):
        validate_thresholds(AuditConfig(criteria=FilterCriteria(min_age_days=10), fail_age_days=30))

    def test_min_age_alone_is_valid(self):
        validate_thresholds(AuditConfig(criteria=FilterCriteria(min_age_days=30)))

    def test_conflict_is_value_error(self):
        with pytest.raises(ValueError):
            validate_thresholds(AuditConfig(criteria=FilterCriteria(min_age_days=5), fail_age_days=1))
