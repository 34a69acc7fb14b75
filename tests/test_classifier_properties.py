"""
Property-based tests for target classification and credential qualification.
"""

import string

from hypothesis import given
from hypothesis import strategies as st

from core.classifier import classify_target
from core.input_parser import parse_credential, parse_target, qualify_username
from core.models import TargetKind


def host_names() -> st.SearchStrategy[str]:
    """Generate DNS-style host names (labels start with a letter, so never IP literals)."""
    label = st.builds(
        lambda first, rest: first + rest,
        st.sampled_from(string.ascii_lowercase),
        st.text(alphabet=string.ascii_lowercase + string.digits + "-", max_size=12),
    )
    return st.lists(label, min_size=1, max_size=4).map(".".join)


@given(st.ip_addresses())
def test_ip_literals_classify_as_address(addr):
    assert classify_target(str(addr)) is TargetKind.ADDRESS


@given(host_names())
def test_host_names_classify_as_name(host):
    assert classify_target(host) is TargetKind.NAME


def test_examples():
    assert classify_target("10.0.0.5") is TargetKind.ADDRESS
    assert classify_target("dc01.domain.local") is TargetKind.NAME
    assert classify_target("fe80::1") is TargetKind.ADDRESS
    assert classify_target("10.0.0.256") is TargetKind.NAME
    assert classify_target("DC01") is TargetKind.NAME


def test_parse_target_strips_brackets():
    target = parse_target("[::1]")
    assert target.host == "::1"
    assert target.is_address
    assert parse_target("[2001:db8::10]").is_address

    padded = parse_target(" 192.168.1.10 ")
    assert padded.host == "192.168.1.10"
    assert padded.is_address


def test_classifier_does_not_normalize():
    assert classify_target("[::1]") is TargetKind.NAME
    assert classify_target(" 10.0.0.5") is TargetKind.NAME


@given(st.text(alphabet=string.ascii_letters + string.digits + "._-$", min_size=1, max_size=30))
def test_unqualified_usernames_get_workgroup(username):
    assert qualify_username(username) == "WORKGROUP\\" + username


@given(
    st.text(alphabet=string.ascii_letters + string.digits, min_size=1, max_size=15),
    st.text(alphabet=string.ascii_letters + string.digits + "._-", min_size=1, max_size=20),
    st.sampled_from(["{d}\\{u}", "{u}@{d}"]),
)
def test_qualified_usernames_pass_through(domain, user, template):
    username = template.format(d=domain, u=user)
    assert qualify_username(username) == username


def test_credential_splits_realm():
    cred = parse_credential("CORP\\monitor", "pw")
    assert cred.domain == "CORP"
    assert cred.account == "monitor"

    upn = parse_credential("monitor@corp.local", "pw")
    assert upn.domain == "corp.local"
    assert upn.account == "monitor"

    local = parse_credential("admin", "pw")
    assert local.username == "WORKGROUP\\admin"
    assert local.domain == "WORKGROUP"


def test_credential_never_shows_password():
    cred = parse_credential("admin", "Sup3rSecret!")
    assert "Sup3rSecret!" not in repr(cred)
    assert "Sup3rSecret!" not in str(cred)
