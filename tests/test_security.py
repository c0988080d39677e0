from church_portal_api.app.core.security import (
    Principal,
    create_access_token,
    decode_access_token,
    hash_password,
    revoke_token,
    verify_password,
)

from .conftest import API, register


def test_password_hash_round_trip():
    hashed = hash_password("correct horse")
    assert "$" in hashed
    assert "correct horse" not in hashed
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_password_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_verify_password_rejects_malformed_hash():
    assert verify_password("anything", "not-a-hash") is False
    assert verify_password("anything", "zz$zz") is False


def test_token_round_trip_carries_claims_and_jti():
    token = create_access_token({"sub": "7"})
    payload = decode_access_token(token)
    assert payload["sub"] == "7"
    assert payload["jti"]
    assert payload["exp"] > 0


def test_tokens_get_distinct_ids():
    first = decode_access_token(create_access_token({"sub": "1"}))
    second = decode_access_token(create_access_token({"sub": "1"}))
    assert first["jti"] != second["jti"]


def test_tampered_token_is_rejected():
    token = create_access_token({"sub": "1"})
    header, payload, signature = token.split(".")
    forged = create_access_token({"sub": "2"}).split(".")[1]
    assert decode_access_token(f"{header}.{forged}.{signature}") is None
    assert decode_access_token("garbage") is None
    assert decode_access_token("a.b.c") is None


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "1"}, expires_delta=-10)
    assert decode_access_token(token) is None


def test_principal_admin_flag():
    assert Principal(id=1, role="admin").is_admin
    assert not Principal(id=2, role="member").is_admin


def test_revoke_token_prunes_expired_entries():
    revoked = {"stale": 100, "live": 500}
    revoke_token(revoked, "fresh", 900, now=200)
    assert revoked == {"live": 500, "fresh": 900}


def test_logout_records_token_expiry(client):
    _, headers = register(client, "alice")
    token = headers["Authorization"].split()[1]
    payload = decode_access_token(token)
    client.post(f"{API}/logout", headers=headers)
    assert client.app.state.revoked_tokens == {payload["jti"]: payload["exp"]}
