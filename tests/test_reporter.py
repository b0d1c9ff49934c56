"""
Nagios 报告生成器测试
"""
import pytest

from smime_certificate_monitor.services.reporter import NagiosReporter
from smime_certificate_monitor.models import IdentitySummary, Severity


def make_summary(identity, day_diff, severity):
    return IdentitySummary(
        identity=identity,
        latest_expires_at=0,
        day_diff=day_diff,
        severity=severity
    )


class TestNagiosReporter:
    """报告生成器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.reporter = NagiosReporter()

    @pytest.mark.parametrize("day_diff,expected", [
        (0, "bob@co.com expires today"),
        (1, "bob@co.com expires within 24 hours"),
        (7, "bob@co.com expires in 7 days"),
        (-1, "bob@co.com expired within last 24 hours"),
        (-5, "bob@co.com expired 5 days ago"),
    ])
    def test_format_clause(self, day_diff, expected):
        """测试过期描述"""
        summary = make_summary("bob@co.com", day_diff, Severity.CRIT)
        assert self.reporter.format_clause(summary) == expected

    def test_format_clause_ok_is_excluded(self):
        """测试正常状态不生成描述"""
        summary = make_summary("bob@co.com", 40, Severity.OK)
        assert self.reporter.format_clause(summary) is None

    def test_obfuscate_identity(self):
        """测试隐藏邮箱用户名"""
        assert self.reporter.obfuscate_identity("alice@example.com") == "xxx@example.com"

    def test_obfuscate_identity_without_at(self):
        """测试没有 @ 的身份整体隐藏"""
        assert self.reporter.obfuscate_identity("alice") == "xxx"

    def test_obfuscate_identity_multiple_at(self):
        """测试以最后一个 @ 为分隔"""
        assert self.reporter.obfuscate_identity('"a@b"@example.com') == "xxx@example.com"

    def test_obfuscated_clause_hides_local_part(self):
        """测试隐藏后的描述不包含用户名"""
        reporter = NagiosReporter(obfuscate=True)
        summary = make_summary("alice@example.com", 3, Severity.WARN)

        clause = reporter.format_clause(summary)

        assert clause == "xxx@example.com expires in 3 days"
        assert "alice" not in clause

    def test_build_report_ok(self):
        """测试全部正常"""
        report = self.reporter.build_report([make_summary("a@x.com", 40, Severity.OK)])

        assert report.severity == Severity.OK
        assert report.expiring_count == 0
        assert report.status_line == "OK - no certificates to expire soon | expiring_certificates=0"
        assert report.exit_code == 0

    def test_build_report_empty(self):
        """测试没有证书"""
        report = self.reporter.build_report([])

        assert report.severity == Severity.OK
        assert report.summary == ""
        assert report.exit_code == 0

    def test_build_report_warn(self):
        """测试警告状态"""
        report = self.reporter.build_report([
            make_summary("bob@co.com", 1, Severity.WARN),
            make_summary("ok@co.com", 50, Severity.OK),
        ])

        assert report.status_line == "WARN - bob@co.com expires within 24 hours | expiring_certificates=1"
        assert report.exit_code == 1

    def test_build_report_mixed_is_critical(self):
        """测试混合状态取最严重"""
        report = self.reporter.build_report([
            make_summary("a@x.com", 5, Severity.WARN),
            make_summary("b@x.com", 1, Severity.CRIT),
        ])

        assert report.severity == Severity.CRIT
        assert report.status_line == (
            "CRIT - a@x.com expires in 5 days, b@x.com expires within 24 hours "
            "| expiring_certificates=2"
        )
        assert report.exit_code == 2

    def test_identity_with_comma_counts_once(self):
        """测试身份中包含逗号时计数不变"""
        report = self.reporter.build_report([
            make_summary("odd,name@x.com", 5, Severity.WARN),
        ])

        assert report.expiring_count == 1
        assert report.summary == "odd,name@x.com expires in 5 days"

    def test_unknown_report(self):
        """测试检查失败的结果"""
        report = self.reporter.unknown_report(RuntimeError("boom"))

        assert report.exit_code == 3
        assert report.status_line == "UNKNOWN - RuntimeError: boom | expiring_certificates=0"
