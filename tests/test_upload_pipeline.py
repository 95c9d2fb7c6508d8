"""End-to-end tests for UploadPipeline against the in-memory ledger."""

import httpx
import pytest

from common.exceptions import (
    AmbiguousExistenceCheckError,
    ChainCallFailureError,
    FileReadError,
    MintConfigValidationError,
    MissingHeaderMappingError,
    UninitializedError,
)
from common.hashing import digest
from fakes import COLLECTION, CREATOR, ONCHFS, PNG_HEADER, FakeLedger
from ledger.client import OperationFailedError
from ledger.gateway_client import GatewayLedgerClient
from pipeline.progress import Phase
from pipeline.upload_pipeline import UploadPipeline, estimate_storage_cost

MINT_FIELDS = {'name': 'Artwork', 'description': 'A generative piece', 'editions': 3}


@pytest.fixture
def pipeline(fake_ledger, header_map):
    return UploadPipeline(fake_ledger, ONCHFS, header_map, submission_interval=0)


def expected_cid(data: bytes, header: bytes) -> str:
    return digest(b"\x01" + digest(data) + digest(header)).hex()


class TestRun:

    @pytest.mark.asyncio
    async def test_uploads_registers_and_mints(self, pipeline, fake_ledger, sample_file):
        result = await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        assert fake_ledger.entrypoints() == [
            'write_chunk', 'write_chunk', 'write_chunk',
            'create_file',
            'create_token', 'mint', 'lock',
        ]
        assert result.stored.cid == expected_cid(sample_file.read_bytes(), PNG_HEADER)
        assert result.stored.artifact_uri == f"onchfs://{result.stored.cid}"
        assert result.token.contract == COLLECTION
        assert result.token.token_id == 42
        assert result.progress.phase == Phase.DONE

    @pytest.mark.asyncio
    async def test_mint_batch_references_stored_artifact(self, pipeline, fake_ledger, sample_file):
        result = await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        create_token = fake_ledger.batches[-1].calls[0]
        assert create_token.parameters['artifactUri'] == result.stored.artifact_uri.encode()
        mint_call = fake_ledger.batches[-1].calls[1]
        assert mint_call.parameters['mint_items'] == [{'amount': 3, 'to_': CREATOR}]

    @pytest.mark.asyncio
    async def test_progress_reaches_each_step(self, pipeline, sample_file):
        await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        step_percentages = [
            round(p.percentage)
            for p in pipeline.tracker.history
            if p.message.startswith(("Chunk", "File inode", "File already", "NFT minted"))
        ]
        assert step_percentages == [20, 40, 60, 80, 100]
        assert pipeline.tracker.current.message.startswith("NFT minted successfully!")

    @pytest.mark.asyncio
    async def test_invalid_config_fails_before_any_ledger_call(self, pipeline, fake_ledger, sample_file):
        with pytest.raises(MintConfigValidationError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, {'name': '', 'description': 'd'})

        assert fake_ledger.view_calls == []
        assert fake_ledger.batches == []
        assert pipeline.tracker.current.phase == Phase.FAILED

    @pytest.mark.asyncio
    async def test_unmapped_media_type_fails_before_any_ledger_call(self, pipeline, fake_ledger, sample_file):
        with pytest.raises(MissingHeaderMappingError):
            await pipeline.run(sample_file, 'audio/x-unknown', COLLECTION, MINT_FIELDS)

        assert fake_ledger.view_calls == []

    @pytest.mark.asyncio
    async def test_missing_ledger(self, header_map, sample_file):
        pipeline = UploadPipeline(None, ONCHFS, header_map)

        with pytest.raises(UninitializedError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

    @pytest.mark.asyncio
    async def test_missing_active_account(self, header_map, sample_file):
        ledger = FakeLedger(address=None)
        pipeline = UploadPipeline(ledger, ONCHFS, header_map, submission_interval=0)

        with pytest.raises(UninitializedError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)
        assert ledger.view_calls == []

    @pytest.mark.asyncio
    async def test_missing_collection(self, pipeline, fake_ledger, sample_file):
        with pytest.raises(UninitializedError):
            await pipeline.run(sample_file, 'image/png', '', MINT_FIELDS)
        assert fake_ledger.view_calls == []

    @pytest.mark.asyncio
    async def test_missing_file(self, pipeline, tmp_path):
        with pytest.raises(FileReadError):
            await pipeline.run(tmp_path / 'gone.png', 'image/png', COLLECTION, MINT_FIELDS)

    @pytest.mark.asyncio
    async def test_chunk_failure_marks_progress_failed(self, pipeline, fake_ledger, sample_file):
        fake_ledger.confirm_error = OperationFailedError("backtracked", op_hash="op1")

        with pytest.raises(ChainCallFailureError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        assert pipeline.tracker.current.phase == Phase.FAILED
        assert pipeline.tracker.current.message.startswith("Chunk upload failed:")
        assert 'create_token' not in fake_ledger.entrypoints()

    @pytest.mark.asyncio
    async def test_mint_failure_after_storage(self, pipeline, fake_ledger, sample_file):
        fake_ledger.storage[COLLECTION] = {}

        with pytest.raises(ChainCallFailureError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        assert pipeline.tracker.current.message.startswith("Minting failed:")
        assert fake_ledger.entrypoints().count('create_file') == 1

    @pytest.mark.asyncio
    async def test_retry_after_mint_failure_skips_storage(self, pipeline, fake_ledger, sample_file):
        fake_ledger.storage[COLLECTION] = {}
        with pytest.raises(ChainCallFailureError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        fake_ledger.storage[COLLECTION] = {'last_token_id': 7}
        result = await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        assert fake_ledger.entrypoints().count('write_chunk') == 3
        assert fake_ledger.entrypoints().count('create_file') == 1
        assert result.stored.uploaded_chunks == 0
        assert not result.stored.inode.created
        assert result.token.token_id == 8

    @pytest.mark.asyncio
    async def test_open_edition_mints_without_lock(self, pipeline, fake_ledger, small_file):
        fields = {'name': 'Loop', 'description': 'Open', 'open_edition': True}
        await pipeline.run(small_file, 'image/png', COLLECTION, fields)

        assert fake_ledger.batches[-1].entrypoints == ['create_token']


class TestStore:

    @pytest.mark.asyncio
    async def test_store_only(self, pipeline, fake_ledger, sample_file):
        stored = await pipeline.store(sample_file, 'image/png')

        assert fake_ledger.entrypoints() == ['write_chunk'] * 3 + ['create_file']
        assert stored.uploaded_chunks == 3
        assert stored.inode.created
        assert pipeline.tracker.current.phase == Phase.DONE

    @pytest.mark.asyncio
    async def test_second_store_submits_nothing(self, pipeline, fake_ledger, sample_file):
        first = await pipeline.store(sample_file, 'image/png')
        batches = len(fake_ledger.batches)

        second = await pipeline.store(sample_file, 'image/png')

        assert len(fake_ledger.batches) == batches
        assert second.cid == first.cid
        assert second.uploaded_chunks == 0

    @pytest.mark.asyncio
    async def test_same_bytes_different_type_is_different_file(self, pipeline, fake_ledger, small_file):
        png = await pipeline.store(small_file, 'image/png')
        html = await pipeline.store(small_file, 'text/html')

        assert png.cid != html.cid
        assert fake_ledger.entrypoints().count('write_chunk') == 1
        assert fake_ledger.entrypoints().count('create_file') == 2

    @pytest.mark.asyncio
    async def test_empty_file(self, pipeline, fake_ledger, tmp_path):
        empty = tmp_path / 'empty.png'
        empty.write_bytes(b'')

        stored = await pipeline.store(empty, 'image/png')

        assert stored.chunk_outcomes == []
        assert fake_ledger.entrypoints() == ['create_file']
        assert stored.cid == expected_cid(b'', PNG_HEADER)


class TestOffline:

    def test_compute_cid_without_ledger(self, header_map, sample_file):
        pipeline = UploadPipeline(None, ONCHFS, header_map)
        assert pipeline.compute_cid(sample_file, 'image/png') == expected_cid(sample_file.read_bytes(), PNG_HEADER)

    def test_compute_cid_unknown_type(self, header_map, sample_file):
        with pytest.raises(MissingHeaderMappingError):
            UploadPipeline(None, ONCHFS, header_map).compute_cid(sample_file, 'video/mp4')

    @pytest.mark.parametrize("size, expected", [
        (0, 0.0),
        (32_000, 8.06),
        (16_000, 4.03),
    ])
    def test_estimate_storage_cost(self, size, expected):
        assert estimate_storage_cost(size) == pytest.approx(expected)


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_unexpected_ledger_error_marks_progress_failed(self, pipeline, fake_ledger, sample_file):
        fake_ledger.view_error = RuntimeError("decoder crashed")

        with pytest.raises(RuntimeError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        assert pipeline.tracker.current.phase == Phase.FAILED
        assert pipeline.tracker.current.message == "Chunk upload failed: decoder crashed"

    @pytest.mark.asyncio
    async def test_unexpected_error_during_store_marks_progress_failed(self, pipeline, fake_ledger, sample_file):
        fake_ledger.view_error = RuntimeError("decoder crashed")

        with pytest.raises(RuntimeError):
            await pipeline.store(sample_file, 'image/png')

        assert pipeline.tracker.current.phase == Phase.FAILED

    @pytest.mark.asyncio
    async def test_invalid_chunk_size_marks_progress_failed(self, fake_ledger, header_map, sample_file):
        pipeline = UploadPipeline(fake_ledger, ONCHFS, header_map, chunk_size=0, submission_interval=0)

        with pytest.raises(ValueError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        assert pipeline.tracker.current.phase == Phase.FAILED
        assert pipeline.tracker.current.message.startswith("Preparation failed:")
        assert fake_ledger.view_calls == []

    @pytest.mark.asyncio
    async def test_gateway_html_reply_fails_run_cleanly(self, header_map, sample_file):
        def handler(request):
            if request.url.path == '/accounts/active':
                return httpx.Response(200, json={'address': CREATOR})
            return httpx.Response(200, text='<html>upstream error</html>')

        ledger = GatewayLedgerClient('http://gateway.test', transport=httpx.MockTransport(handler), poll_interval=0)
        pipeline = UploadPipeline(ledger, ONCHFS, header_map, submission_interval=0)

        with pytest.raises(AmbiguousExistenceCheckError):
            await pipeline.run(sample_file, 'image/png', COLLECTION, MINT_FIELDS)

        assert pipeline.tracker.current.phase == Phase.FAILED
        assert pipeline.tracker.current.message.startswith("Chunk upload failed:")
        await ledger.close()
