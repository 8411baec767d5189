"""Tests for source address validation."""
import pytest
import structlog
from structlog.testing import capture_logs
from unittest.mock import MagicMock
from listener.core import validator as validator_module
from listener.config import ListenerConfig
from listener.core.validator import SourceValidator


def make_validator(valid_ips="", metrics=None):
    return SourceValidator(ListenerConfig.build(valid_ips=valid_ips), metrics)


@pytest.mark.parametrize("address", ["10.1.2.3", "192.168.1.1", "::1", "not-an-ip", None])
def test_empty_allow_list_accepts_any_address(address):
    assert make_validator().valid_ip(address) is True


def test_address_inside_range_is_valid():
    validator = make_validator("10.0.0.0/8")
    assert validator.valid_ip("10.1.2.3") is True
    assert validator.valid_ip("192.168.1.1") is False


def test_any_range_may_match():
    validator = make_validator("10.0.0.0/8, 192.30.252.0/22")
    assert validator.valid_ip("192.30.253.7") is True
    assert validator.valid_ip("172.16.0.1") is False


def test_ipv6_range():
    validator = make_validator("2001:db8::/32")
    assert validator.valid_ip("2001:db8::1") is True
    assert validator.valid_ip("10.0.0.1") is False


def test_unparsable_address_is_invalid_when_enabled():
    validator = make_validator("10.0.0.0/8")
    assert validator.valid_ip("garbage") is False
    assert validator.valid_ip(None) is False


def test_check_records_result():
    metrics = MagicMock()
    validator = make_validator("10.0.0.0/8", metrics)

    assert validator.check("10.0.0.1") is True
    assert validator.check("8.8.8.8") is False

    metrics.record_ip_check.assert_any_call(True)
    metrics.record_ip_check.assert_any_call(False)


def test_ipv4_mapped_address_matches_ipv4_range():
    validator = make_validator("10.0.0.0/8")
    assert validator.valid_ip("::ffff:10.1.2.3") is True
    assert validator.valid_ip("::ffff:192.168.1.1") is False


def test_invalid_address_is_logged(monkeypatch):
    validator = make_validator("10.0.0.0/8")

    with capture_logs() as logs:
        monkeypatch.setattr(validator_module, "log", structlog.get_logger())
        validator.check("10.0.0.1")
        validator.check("192.168.1.1")

    assert logs == [{"event": "ip.invalid", "address": "192.168.1.1", "log_level": "info"}]
