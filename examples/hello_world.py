"""
exchange_io — Hello World

Stages run in registration order over one request/response exchange.
The request is validated on the way in, the handler's result is
serialized on the way out, and failures become JSON error envelopes.
"""

import asyncio
import json

from exchange_io import (
    IO,
    Exchange,
    NotFoundError,
    Pipeline,
    Request,
    async_middleware,
    error_middleware,
)

# ─── Your data (anything — completely decoupled from the pipeline) ───

DOCUMENTS = {
    "doc_arch": "System architecture overview",
    "doc_api": "Public API reference",
}


async def fetch_document(exchange: Exchange) -> None:
    doc_id = IO.get(exchange.request, "doc_id")
    if doc_id not in DOCUMENTS:
        raise NotFoundError(f"Document {doc_id!r} does not exist")
    IO.set(exchange.response, {"id": doc_id, "title": DOCUMENTS[doc_id]})


def show(label: str, exchange: Exchange) -> None:
    body = json.loads(exchange.response.body) if exchange.response.body else None
    print(f"  {label}: {exchange.response.status_code} {body}")


async def main():
    # ──────────────────────────────────────
    #  1. Describe the endpoint
    # ──────────────────────────────────────
    io = IO(
        req_body_schema={
            "type": "object",
            "properties": {"doc_id": {"type": "string"}},
            "required": ["doc_id"],
        },
        res_body_schema={
            "type": "object",
            "properties": {"id": {"type": "string"}, "title": {"type": "string"}},
            "required": ["id", "title"],
        },
    )

    # ──────────────────────────────────────
    #  2. Register stages (order = chain order)
    # ──────────────────────────────────────
    pipeline = (
        Pipeline()
        .use(io.process_request(), async_middleware(fetch_document), io.send_response())
        .use_error(error_middleware(show_trace=False))
    )

    headers = {"Content-Type": "application/json", "Accept": "application/json"}

    # ──────────────────────────────────────
    #  3. Requests
    # ──────────────────────────────────────
    print("=== Requests ===\n")

    ok = await pipeline.run(Exchange(request=Request(headers=headers, body={"doc_id": "doc_api"})))
    show("found", ok)

    missing = await pipeline.run(Exchange(request=Request(headers=headers, body={"doc_id": "x"})))
    show("missing", missing)

    invalid = await pipeline.run(Exchange(request=Request(headers=headers, body={})))
    show("invalid", invalid)

    html = await pipeline.run(
        Exchange(request=Request(headers={**headers, "Accept": "text/html"}, body={}))
    )
    show("html only", html)


if __name__ == "__main__":
    asyncio.run(main())
