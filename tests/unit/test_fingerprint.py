"""Unit tests for content fingerprinting and digest backends."""

import hashlib
import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from protoledger.domain.value_objects import ContentChecksum
from protoledger.infrastructure.fingerprint import (
    HashlibDigestBackend,
    PostgresDigestBackend,
    Sha256Fingerprinter,
    select_digest_backend,
)

HEX64 = re.compile(r"[0-9a-f]{64}")


@pytest.mark.asyncio
async def test_fingerprint_matches_direct_sha256() -> None:
    """Digest covers canonical(text) followed by canonical(payload)."""
    checksum = await Sha256Fingerprinter().fingerprint("hello", {"b": 2, "a": 1})
    expected = hashlib.sha256('"hello"{"a":1,"b":2}'.encode("utf-8")).hexdigest()
    assert checksum.value == expected


@pytest.mark.asyncio
async def test_fingerprint_format() -> None:
    checksum = await Sha256Fingerprinter().fingerprint("", {})
    assert isinstance(checksum, ContentChecksum)
    assert HEX64.fullmatch(checksum.value)


@pytest.mark.asyncio
async def test_fingerprint_is_deterministic() -> None:
    fp = Sha256Fingerprinter()
    payload = {"components": [{"type": "text", "content": "Hi"}], "styles": []}
    first = await fp.fingerprint("<p>Hi</p>", payload)
    second = await fp.fingerprint("<p>Hi</p>", payload)
    assert first == second


@pytest.mark.asyncio
async def test_fingerprint_ignores_key_order() -> None:
    fp = Sha256Fingerprinter()
    a = await fp.fingerprint("t", {"x": 1, "nested": {"p": 1, "q": 2}})
    b = await fp.fingerprint("t", {"nested": {"q": 2, "p": 1}, "x": 1})
    assert a == b


@pytest.mark.asyncio
async def test_fingerprint_distinguishes_distinct_content() -> None:
    """Different (text, payload) pairs give pairwise-distinct checksums."""
    fp = Sha256Fingerprinter()
    inputs = [(f"<p>{i}</p>", {"n": i, "tags": [i, i + 1]}) for i in range(30)]
    inputs += [
        ("", {}),
        ("", {"a": None}),
        ("a", {}),
        ("", {"": ""}),
        ("x", {"list": [1, 2]}),
        ("x", {"list": [2, 1]}),
    ]
    checksums = {(await fp.fingerprint(t, p)).value for t, p in inputs}
    assert len(checksums) == len(inputs)


@pytest.mark.asyncio
async def test_fingerprint_text_payload_boundary() -> None:
    """Moving characters between text and payload changes the digest."""
    fp = Sha256Fingerprinter()
    a = await fp.fingerprint("ab", {"c": 1})
    b = await fp.fingerprint("a", {"bc": 1})
    assert a != b


@pytest.mark.asyncio
async def test_fingerprint_uses_backend() -> None:
    backend = AsyncMock()
    backend.sha256_hex.return_value = "f" * 64
    checksum = await Sha256Fingerprinter(backend).fingerprint("x", {"k": "v"})
    assert checksum.value == "f" * 64
    backend.sha256_hex.assert_awaited_once_with('"x"{"k":"v"}'.encode("utf-8"))


@pytest.mark.asyncio
async def test_hashlib_backend() -> None:
    digest = await HashlibDigestBackend().sha256_hex(b"abc")
    assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


@pytest.mark.asyncio
async def test_postgres_backend_queries_server() -> None:
    cursor = AsyncMock()
    cursor.fetchone.return_value = ("a" * 64,)
    conn = AsyncMock()
    conn.execute.return_value = cursor
    conn_cm = MagicMock()
    conn_cm.__aenter__ = AsyncMock(return_value=conn)
    conn_cm.__aexit__ = AsyncMock(return_value=None)
    pool = MagicMock()
    pool.connection.return_value = conn_cm

    digest = await PostgresDigestBackend(pool).sha256_hex(b"abc")

    assert digest == "a" * 64
    sql, params = conn.execute.await_args.args
    assert "sha256(%s)" in sql
    assert params == (b"abc",)


class TestSelectDigestBackend:
    """Backend selection by name and by runtime detection."""

    def test_hashlib_by_name(self) -> None:
        assert isinstance(select_digest_backend("hashlib"), HashlibDigestBackend)

    def test_postgres_by_name(self) -> None:
        pool = MagicMock()
        assert isinstance(select_digest_backend("postgres", pool), PostgresDigestBackend)

    def test_postgres_requires_pool(self) -> None:
        with pytest.raises(ValueError, match="connection pool"):
            select_digest_backend("postgres")

    def test_auto_prefers_hashlib(self) -> None:
        assert isinstance(select_digest_backend("auto", MagicMock()), HashlibDigestBackend)

    def test_auto_falls_back_to_postgres(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(hashlib, "algorithms_available", {"md5"})
        backend = select_digest_backend("auto", MagicMock())
        assert isinstance(backend, PostgresDigestBackend)

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown digest backend"):
            select_digest_backend("blake3")
