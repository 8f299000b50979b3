import pytest

from propsheet.pool.auth import CapabilityIssuer, PermissionDenied


class Clock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_issue_and_verify():
    issuer = CapabilityIssuer(secret="k", ttl_seconds=60, clock=Clock())
    token = issuer.issue(password="pw", expected_password="pw")
    assert issuer.verify(token) is True
    issuer.require_organizer(token)


def test_wrong_password():
    issuer = CapabilityIssuer(secret="k")
    with pytest.raises(PermissionDenied):
        issuer.issue(password="nope", expected_password="pw")


def test_empty_expected_password_never_issues():
    issuer = CapabilityIssuer(secret="k")
    with pytest.raises(PermissionDenied):
        issuer.issue(password="", expected_password="")


def test_expired_token():
    clock = Clock()
    issuer = CapabilityIssuer(secret="k", ttl_seconds=60, clock=clock)
    token = issuer.issue(password="pw", expected_password="pw")
    clock.now += 61
    assert issuer.verify(token) is False


def test_token_from_other_secret_rejected():
    token = CapabilityIssuer(secret="a").issue(password="pw", expected_password="pw")
    assert CapabilityIssuer(secret="b").verify(token) is False


@pytest.mark.parametrize("token", [None, "", "abc", "x.y", "99999999999.deadbeef"])
def test_malformed_tokens(token):
    issuer = CapabilityIssuer(secret="k")
    assert issuer.verify(token) is False
    with pytest.raises(PermissionDenied):
        issuer.require_organizer(token)


def test_secret_from_env(monkeypatch):
    monkeypatch.setenv("PROPSHEET_ADMIN_SECRET", "shared")
    token = CapabilityIssuer().issue(password="pw", expected_password="pw")
    assert CapabilityIssuer().verify(token) is True
