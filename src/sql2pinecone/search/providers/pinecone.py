"""PineconeEmbedding — dense passage embeddings from Pinecone Inference."""

from __future__ import annotations

from typing import Any

from pinecone import PineconeAsyncio

DEFAULT_MODEL = "llama-text-embed-v2"

# Hosted models cap the number of inputs per embed request.
_MODEL_BATCH_LIMITS: dict[str, int] = {
    "llama-text-embed-v2": 96,
    "multilingual-e5-large": 96,
    "pinecone-sparse-english-v0": 96,
}


class PineconeEmbedding:
    """Embeds row text with ``PineconeAsyncio.inference.embed``.

    Texts are sent as passages, truncated at the end.  ``embed_batch``
    splits its input into requests of at most *batch_size* texts (the
    model's limit by default) and concatenates the results, so callers get
    one vector per text whatever the batch length.

    Pass *client* to reuse an open ``PineconeAsyncio`` client, typically
    :attr:`PineconeVectorStore.client`.  Only a client created here from
    *api_key* is closed by :meth:`close`.
    """

    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        client: Any = None,
        input_type: str = "passage",
        truncate: str = "END",
        batch_size: int | None = None,
    ) -> None:
        if client is None and not api_key:
            msg = "No Pinecone API key provided. Pass api_key= or client=."
            raise ValueError(msg)

        self._model = model
        self._parameters = {"input_type": input_type, "truncate": truncate}
        self._batch_size = batch_size or _MODEL_BATCH_LIMITS.get(model, 96)
        self._owns_client = client is None
        self._client: Any = PineconeAsyncio(api_key=api_key) if client is None else client

    @property
    def model_name(self) -> str:
        return self._model

    async def embed(self, text: str) -> list[float]:
        (vector,) = await self._request([text])
        return vector

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        step = self._batch_size
        for offset in range(0, len(texts), step):
            vectors += await self._request(texts[offset : offset + step])
        return vectors

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            client, self._client = self._client, None
            await client.close()

    async def _request(self, inputs: list[str]) -> list[list[float]]:
        if self._client is None:
            msg = "Embedding provider is closed."
            raise RuntimeError(msg)
        embeddings = await self._client.inference.embed(
            model=self._model,
            inputs=inputs,
            parameters=self._parameters,
        )
        return [list(e.values) for e in embeddings.data]
