import pytest
from datetime import timedelta
from inventory_api.core.security import create_access_token, create_user_token, verify_access_token

def test_create_token():
    token = create_access_token(data={"sub": "testuser"})
    assert token
    assert isinstance(token, str)

def test_verify_token():
    token = create_access_token(data={"sub": "testuser"})
    payload = verify_access_token(token)
    assert payload["sub"] == "testuser"

def test_user_token_carries_identity():
    payload = verify_access_token(create_user_token(7, "alice", "STAFF"))
    assert (payload["sub"], payload["uid"], payload["role"]) == ("alice", 7, "STAFF")

def test_verify_invalid_token():
    with pytest.raises(ValueError):
        verify_access_token("invalid.token.here")

def test_expired_token_rejected():
    token = create_access_token(data={"sub": "testuser"}, expires_delta=timedelta(minutes=-1))
    with pytest.raises(ValueError):
        verify_access_token(token)
