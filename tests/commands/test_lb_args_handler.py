# tests/commands/test_lb_args_handler.py
# -*- coding: utf-8 -*-

import pytest

from commands.errors import CommandError
from commands.lb_args_handler import LBArgsHandler
from commands.plan_config import PlanConfig
from storage.state import LB


@pytest.fixture
def handler():
    return LBArgsHandler()


@pytest.fixture
def cert_and_key(tmp_path):
    cert = tmp_path / "cert.pem"
    key = tmp_path / "key.pem"
    cert.write_text("some-cert")
    key.write_text("some-key")
    return str(cert), str(key)


class TestGetLBState:
    def test_no_flags_means_no_lb(self, handler):
        assert handler.get_lb_state("gcp", PlanConfig()) == LB()

    def test_reads_cert_and_key_contents(self, handler, cert_and_key):
        cert, key = cert_and_key

        lb = handler.get_lb_state(
            "aws",
            PlanConfig(lb_type="cf", lb_cert=cert, lb_key=key, lb_domain="example.com"),
        )

        assert lb == LB(type="cf", cert="some-cert", key="some-key", domain="example.com")

    def test_concourse_without_cert_on_gcp(self, handler):
        assert handler.get_lb_state("gcp", PlanConfig(lb_type="concourse")) == LB(
            type="concourse"
        )

    def test_other_flags_require_a_type(self, handler):
        with pytest.raises(CommandError, match="--lb-type is required"):
            handler.get_lb_state("gcp", PlanConfig(lb_domain="example.com"))

    def test_rejects_unknown_types(self, handler):
        with pytest.raises(CommandError) as excinfo:
            handler.get_lb_state("gcp", PlanConfig(lb_type="nlb"))

        assert str(excinfo.value) == (
            '"nlb" is not a valid lb type, valid lb types are: cf, concourse'
        )

    def test_rejects_domain_for_concourse(self, handler):
        with pytest.raises(CommandError, match="--lb-domain is not implemented"):
            handler.get_lb_state(
                "gcp", PlanConfig(lb_type="concourse", lb_domain="example.com")
            )

    @pytest.mark.parametrize("iaas", ["aws", "azure"])
    def test_cf_requires_cert_and_key(self, handler, iaas):
        with pytest.raises(CommandError, match="--lb-cert and --lb-key are required"):
            handler.get_lb_state(iaas, PlanConfig(lb_type="cf"))

    def test_unreadable_cert_is_reported(self, handler, tmp_path):
        missing = str(tmp_path / "missing.pem")

        with pytest.raises(CommandError, match="^--lb-cert: "):
            handler.get_lb_state(
                "aws", PlanConfig(lb_type="cf", lb_cert=missing, lb_key=missing)
            )


class TestMerge:
    def test_new_lb_wins_when_given(self, handler):
        new_lb = LB(type="cf", domain="new.example.com")

        assert handler.merge(new_lb, LB(type="concourse")) == new_lb

    def test_old_lb_kept_when_no_new_type(self, handler):
        old_lb = LB(type="concourse")

        assert handler.merge(LB(), old_lb) == old_lb
