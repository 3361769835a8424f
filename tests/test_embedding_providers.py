"""Tests for the Pinecone Inference embedding provider."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sql2pinecone.search.protocols import EmbeddingProvider
from sql2pinecone.search.providers.pinecone import DEFAULT_MODEL, PineconeEmbedding


def _response(vectors: list[list[float]]):
    """Build a mock EmbeddingsList."""
    return SimpleNamespace(data=[SimpleNamespace(values=v) for v in vectors])


def _client(side_effect=None, return_value=None):
    client = MagicMock()
    client.inference = MagicMock()
    client.inference.embed = AsyncMock(side_effect=side_effect, return_value=return_value)
    client.close = AsyncMock()
    return client


class TestPineconeEmbedding:
    async def test_embed_single_text(self):
        client = _client(return_value=_response([[0.1, 0.2, 0.3]]))
        provider = PineconeEmbedding(client=client)

        result = await provider.embed("hello")

        assert result == [0.1, 0.2, 0.3]
        client.inference.embed.assert_called_once_with(
            model=DEFAULT_MODEL,
            inputs=["hello"],
            parameters={"input_type": "passage", "truncate": "END"},
        )

    async def test_embed_batch_preserves_order(self):
        client = _client(return_value=_response([[1.0], [2.0]]))
        provider = PineconeEmbedding(client=client)
        assert await provider.embed_batch(["a", "b"]) == [[1.0], [2.0]]

    async def test_embed_batch_empty(self):
        client = _client()
        provider = PineconeEmbedding(client=client)
        assert await provider.embed_batch([]) == []
        client.inference.embed.assert_not_called()

    async def test_batch_chunking(self):
        async def fake_embed(*, model, inputs, parameters):
            return _response([[float(t)] for t in inputs])

        client = _client(side_effect=fake_embed)
        provider = PineconeEmbedding(client=client, batch_size=96)

        texts = [str(i) for i in range(100)]
        result = await provider.embed_batch(texts)

        assert client.inference.embed.call_count == 2
        sizes = [len(c.kwargs["inputs"]) for c in client.inference.embed.call_args_list]
        assert sizes == [96, 4]
        assert result == [[float(i)] for i in range(100)]

    async def test_custom_model_and_parameters(self):
        client = _client(return_value=_response([[0.5]]))
        provider = PineconeEmbedding(
            client=client, model="multilingual-e5-large", input_type="query", truncate="NONE"
        )
        await provider.embed("q")
        kwargs = client.inference.embed.call_args.kwargs
        assert kwargs["model"] == "multilingual-e5-large"
        assert kwargs["parameters"] == {"input_type": "query", "truncate": "NONE"}
        assert provider.model_name == "multilingual-e5-large"

    async def test_shared_client_is_not_closed(self):
        client = _client()
        provider = PineconeEmbedding(client=client)
        await provider.close()
        client.close.assert_not_called()

    async def test_owned_client_is_closed(self):
        client = _client()
        with patch(
            "sql2pinecone.search.providers.pinecone.PineconeAsyncio", return_value=client
        ) as ctor:
            provider = PineconeEmbedding(api_key="pc-key")
            ctor.assert_called_once_with(api_key="pc-key")
            await provider.close()
        client.close.assert_called_once()
        with pytest.raises(RuntimeError, match="closed"):
            await provider.embed("x")

    def test_requires_key_or_client(self):
        with pytest.raises(ValueError, match="API key"):
            PineconeEmbedding()

    def test_satisfies_protocol(self):
        assert isinstance(PineconeEmbedding(client=_client()), EmbeddingProvider)

    async def test_api_error_propagates(self):
        client = _client(side_effect=RuntimeError("quota exceeded"))
        provider = PineconeEmbedding(client=client)
        with pytest.raises(RuntimeError, match="quota exceeded"):
            await provider.embed_batch(["a"])
