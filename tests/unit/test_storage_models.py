from datetime import datetime, timedelta, timezone

import pytest

from app.storage.models import ObjectRef, Permission, SignedUrlRequest

ACCOUNT = "https://acct.blob.core.windows.net"


class TestObjectRef:
    def test_container_ref(self) -> None:
        ref = ObjectRef("redacted-documents")
        assert ref.is_container
        assert ref.url(ACCOUNT + "/") == f"{ACCOUNT}/redacted-documents"

    def test_blob_url_is_percent_encoded(self) -> None:
        ref = ObjectRef("source-documents", "abc/my report #1.pdf")
        assert ref.url(ACCOUNT) == f"{ACCOUNT}/source-documents/abc/my%20report%20%231.pdf"

    def test_from_url_ignores_query(self) -> None:
        ref = ObjectRef.from_url(f"{ACCOUNT}/redacted-documents/out/doc%20one.pdf?sig=x")
        assert ref == ObjectRef("redacted-documents", "out/doc one.pdf")

    def test_from_url_strips_emulator_prefix(self) -> None:
        account = "http://127.0.0.1:10000/devstoreaccount1"
        ref = ObjectRef.from_url(f"{account}/redacted-documents/a/b.pdf", account)
        assert ref == ObjectRef("redacted-documents", "a/b.pdf")

    def test_from_url_round_trips_url(self) -> None:
        ref = ObjectRef("source-documents", "x/y z.docx")
        assert ObjectRef.from_url(ref.url(ACCOUNT)) == ref

    @pytest.mark.parametrize(
        "url",
        [f"{ACCOUNT}/", f"{ACCOUNT}/only-container", f"{ACCOUNT}/container/"],
    )
    def test_from_url_rejects_missing_name(self, url: str) -> None:
        with pytest.raises(ValueError, match="Invalid blob URL"):
            ObjectRef.from_url(url)


class TestPermission:
    def test_flags_compose(self) -> None:
        permissions = Permission.WRITE | Permission.LIST
        assert Permission.WRITE in permissions
        assert Permission.LIST in permissions
        assert Permission.READ not in permissions


class TestSignedUrlRequest:
    def test_window_starts_before_now(self) -> None:
        now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        request = SignedUrlRequest.for_window(
            ObjectRef("c", "b"),
            Permission.READ,
            timedelta(hours=2),
            clock_skew=timedelta(minutes=5),
            now=now,
        )
        assert request.starts_on == now - timedelta(minutes=5)
        assert request.expires_on == now + timedelta(hours=2)
        assert request.validity == timedelta(hours=2, minutes=5)

    def test_rejects_empty_permissions(self) -> None:
        with pytest.raises(ValueError, match="at least one permission"):
            SignedUrlRequest.for_window(ObjectRef("c"), Permission(0), timedelta(hours=1))

    def test_rejects_non_positive_window(self) -> None:
        now = datetime.now(timezone.utc)
        with pytest.raises(ValueError, match="after its start"):
            SignedUrlRequest(
                ref=ObjectRef("c"),
                permissions=Permission.READ,
                starts_on=now,
                expires_on=now,
            )
