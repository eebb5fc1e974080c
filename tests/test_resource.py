"""Tests for the in-memory display resource."""

import pytest

from reportvault.core.errors import ResourceRevoked
from reportvault.viewer.resource import DisplayResource


class TestDisplayResource:
    def test_view_is_read_only(self):
        resource = DisplayResource(b"%PDF report")
        view = resource.view()
        assert bytes(view) == b"%PDF report"
        assert view.readonly
        assert resource.size == 11

    def test_revoke_once(self):
        revoked = []
        resource = DisplayResource(b"secret", on_revoke=revoked.append)
        assert resource.revoke() is True
        assert resource.revoke() is False
        assert revoked == [resource]

    def test_view_after_revoke(self):
        resource = DisplayResource(b"secret")
        resource.revoke()
        with pytest.raises(ResourceRevoked):
            resource.view()

    def test_bytes_wiped(self):
        resource = DisplayResource(b"secret")
        buffer = resource._buffer.data
        resource.revoke()
        assert not any(buffer)

    def test_context_manager(self):
        with DisplayResource(b"secret") as resource:
            assert not resource.revoked
        assert resource.revoked
