from datetime import timedelta

import pytest

from edututor.identity import create_access_token, decode_access_token
from edututor.schemas import CurrentUser, Preferences


def test_token_round_trip_keeps_role_and_preferences():
    user = CurrentUser(id="u1", role="teacher", preferences=Preferences(difficulty="advanced", language="fr"))
    decoded = decode_access_token(create_access_token(user))
    assert decoded == user


def test_expired_token_is_rejected():
    token = create_access_token(CurrentUser(id="u1"), expires_delta=timedelta(seconds=-10))
    with pytest.raises(ValueError):
        decode_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(ValueError):
        decode_access_token("not-a-jwt")
