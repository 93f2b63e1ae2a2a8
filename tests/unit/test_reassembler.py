import asyncio

import httpx
import pytest

from logpipe.streaming.exceptions import StreamInterruptedError
from logpipe.streaming.reassembler import reassemble

CHUNKS = [b"ip,", b"ts,method\n", b"1.2.3.4,..."]


class TestReassemble:
    def test_concatenates_chunks(self, streamed) -> None:
        result = asyncio.run(reassemble(streamed(CHUNKS)))
        assert result == b"ip,ts,method\n1.2.3.4,..."

    @pytest.mark.parametrize("size", [1, 4, 7, 1024])
    def test_result_ignores_chunk_boundaries(self, streamed, size: int) -> None:
        payload = b"".join(CHUNKS)
        chunks = [payload[i : i + size] for i in range(0, len(payload), size)]

        assert asyncio.run(reassemble(streamed(chunks))) == payload

    def test_reports_running_byte_count(self, streamed) -> None:
        progress: list[int] = []

        asyncio.run(reassemble(streamed(CHUNKS), on_progress=progress.append))

        assert progress == [3, 13, 24]

    def test_skips_empty_chunks(self, streamed) -> None:
        progress: list[int] = []

        result = asyncio.run(reassemble(streamed([b"a", b"", b"b"]), on_progress=progress.append))

        assert result == b"ab"
        assert progress == [1, 2]

    def test_empty_body(self, streamed) -> None:
        assert asyncio.run(reassemble(streamed([]))) == b""

    def test_reads_httpx_response_stream(self, streamed) -> None:
        response = httpx.Response(200, content=streamed(CHUNKS))

        result = asyncio.run(reassemble(response.aiter_bytes()))

        assert result == b"ip,ts,method\n1.2.3.4,..."


class TestInterruption:
    def test_mid_stream_failure_raises(self, streamed) -> None:
        progress: list[int] = []
        body = streamed(CHUNKS[:2], httpx.RemoteProtocolError("peer closed connection"))

        with pytest.raises(StreamInterruptedError) as exc_info:
            asyncio.run(reassemble(body, on_progress=progress.append))

        assert progress == [3, 13]
        assert isinstance(exc_info.value.__cause__, httpx.RemoteProtocolError)
