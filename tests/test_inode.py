"""Tests for InodeRegistrar."""

import pytest

from common.exceptions import AmbiguousExistenceCheckError, ChainCallFailureError
from fakes import ONCHFS, PNG_HEADER
from ledger.client import ConfirmationTimeoutError, LedgerTransportError
from pipeline.chunk_store import ChunkStore
from pipeline.chunker import split_bytes
from pipeline.cid import compose_cid
from pipeline.inode import InodeRegistrar
from pipeline.progress import PipelineProgress


@pytest.fixture
def chunks():
    return split_bytes(b"inode-test" * 5_000, 32_000)


@pytest.fixture
def cid(chunks):
    return compose_cid([c.data for c in chunks], PNG_HEADER)


async def _store_chunks(ledger, chunks):
    await ChunkStore(ledger, ONCHFS, submission_interval=0).store_chunks(
        chunks, PipelineProgress().start(len(chunks))
    )
    ledger.batches.clear()


@pytest.mark.asyncio
async def test_creates_inode_with_ordered_pointers(fake_ledger, chunks, cid):
    await _store_chunks(fake_ledger, chunks)
    registrar = InodeRegistrar(fake_ledger, ONCHFS)

    outcome = await registrar.register(cid, [c.digest for c in chunks], PNG_HEADER)

    assert outcome.created
    assert outcome.op_hash is not None
    call = fake_ledger.batches[0].calls[0]
    assert call.entrypoint == 'create_file'
    assert [p.hex() for p in call.parameters['chunk_pointers']] == [c.digest for c in chunks]
    assert call.parameters['metadata'] == PNG_HEADER
    assert cid in fake_ledger.files


@pytest.mark.asyncio
async def test_second_registration_is_skipped(fake_ledger, chunks, cid):
    await _store_chunks(fake_ledger, chunks)
    registrar = InodeRegistrar(fake_ledger, ONCHFS)

    await registrar.register(cid, [c.digest for c in chunks], PNG_HEADER)
    outcome = await registrar.register(cid, [c.digest for c in chunks], PNG_HEADER)

    assert not outcome.created
    assert len(fake_ledger.batches) == 1


@pytest.mark.asyncio
async def test_existence_checked_by_cid(fake_ledger, chunks, cid):
    await _store_chunks(fake_ledger, chunks)
    fake_ledger.view_calls.clear()

    await InodeRegistrar(fake_ledger, ONCHFS).register(cid, [c.digest for c in chunks], PNG_HEADER)

    assert fake_ledger.view_calls[0][1] == 'read_file'
    assert fake_ledger.view_calls[0][2].hex() == cid


@pytest.mark.asyncio
async def test_ambiguous_existence_check(fake_ledger, chunks, cid):
    fake_ledger.view_error = LedgerTransportError("connection reset")

    with pytest.raises(AmbiguousExistenceCheckError):
        await InodeRegistrar(fake_ledger, ONCHFS).register(cid, [c.digest for c in chunks], PNG_HEADER)
    assert fake_ledger.batches == []


@pytest.mark.asyncio
async def test_unconfirmed_creation_fails(fake_ledger, chunks, cid):
    await _store_chunks(fake_ledger, chunks)
    fake_ledger.confirm_error = ConfirmationTimeoutError("not included", op_hash="op4")

    with pytest.raises(ChainCallFailureError):
        await InodeRegistrar(fake_ledger, ONCHFS).register(cid, [c.digest for c in chunks], PNG_HEADER)
