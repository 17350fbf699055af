"""
Pytest configuration and fixtures for fontcatalog tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import json
from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest

from fontcatalog.providers import MistralClient


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container():
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    from testcontainers.postgres import PostgresContainer

    with PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_fontcatalog",
        password="test_password",
        dbname="test_fontcatalog",
    ) as postgres:
        # Wait for container to be ready
        postgres.get_connection_url()
        yield postgres


@pytest.fixture(scope="function")
def db_pool(postgres_container):
    """
    Provide an open pool with an empty fonts table

    Args:
        postgres_container: PostgreSQL container fixture

    Yields:
        DatabaseConnectionPool
    """
    from fontcatalog.warehouse import DatabaseConnectionPool, FontSchemaManager

    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_fontcatalog",
        user="test_fontcatalog",
        password="test_password",
    )
    pool.open()

    FontSchemaManager(pool).create_tables()
    pool.execute_command("TRUNCATE TABLE fonts RESTART IDENTITY")

    yield pool

    pool.close()


# =======================
# FILE FIXTURES
# =======================

ACLONICA_METADATA = """\
name: "Aclonica"
designer: "Astigmatic"
license: "APACHE2"
category: "DISPLAY"
date_added: "2011-05-04"
fonts {
  name: "Aclonica Regular Duplicate"
  style: "normal"
  weight: 400
  filename: "Aclonica-Regular.ttf"
  post_script_name: "Aclonica-Regular"
  full_name: "Aclonica Regular"
  copyright: "Copyright (c) 2010, Brian J. Bonislawsky DBA Astigmatic (AOETI)"
}
subsets: "latin"
subsets: "menu"
stroke: "SANS_SERIF"
"""

ACLONICA_DESCRIPTION = """\
<p>
  Aclonica is a <a href="https://example.com">playful</a> display font.
</p>
<p>Second paragraph that is never used.</p>
"""


def write_record(root: Path, record_id: str, files: dict) -> Path:
    """
    Create a record folder.

    Args:
        root: Catalog root
        record_id: ``<folder>/<slug>``
        files: Relative path -> text or bytes content

    Returns:
        The record folder
    """
    record_dir = root / record_id
    record_dir.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = record_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return record_dir


@pytest.fixture(scope="function")
def catalog_root(tmp_path) -> Path:
    """
    Small catalog checkout covering the usual record shapes

    Returns:
        Path to the catalog root
    """
    root = tmp_path / "fonts"

    write_record(root, "apache/aclonica", {
        "METADATA.pb": ACLONICA_METADATA,
        "DESCRIPTION.en_us.html": ACLONICA_DESCRIPTION,
        "Aclonica-Regular.ttf": b"not-a-real-font",
    })
    write_record(root, "ofl/articleonly", {
        "METADATA.pb": 'name: "Article Only"\ndesigner: "Someone"\ndate_added: "2019-01-01"\n',
        "article/ARTICLE.en_us.html": "<h1>Title</h1><p>From the article.</p>",
        "ArticleOnly-Bold.ttf": b"x",
        "ArticleOnly-Italic.ttf": b"x",
    })
    write_record(root, "ofl/jsmathcmbx10", {
        "METADATA.pb": 'name: "jsMath cmbx10"\n',
        "DESCRIPTION.en_us.html": "<p>Math font.</p>",
        "jsMath-cmbx10.ttf": b"x",
    })
    write_record(root, "ofl/nodescription", {
        "METADATA.pb": 'name: "No Description"\n',
        "NoDescription-Regular.ttf": b"x",
    })
    write_record(root, "ofl/nofonts", {
        "METADATA.pb": 'name: "No Fonts"\n',
        "DESCRIPTION.en_us.html": "<p>Missing files.</p>",
        "preview.png": b"x",
    })
    (root / "ufl").mkdir(parents=True)

    return root


# =======================
# PROVIDER FIXTURES (httpx.MockTransport)
# =======================

def chat_response(content: str | None) -> dict:
    """Chat completion payload with a single assistant message."""
    return {
        "id": "cmpl-test",
        "model": "test-model",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def embedding_response(inputs: list, dimensions: int = 4) -> dict:
    """Embedding payload with one well-formed vector per input."""
    return {
        "id": "embd-test",
        "model": "mistral-embed",
        "data": [
            {"object": "embedding", "index": i, "embedding": [float(i)] * dimensions}
            for i in range(len(inputs))
        ],
    }


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> MistralClient:
    """MistralClient whose HTTP calls are answered by ``handler``."""
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return MistralClient(api_key="test-key", base_url="https://mistral.test/v1", http_client=http_client)


class FakeMistralApi:
    """
    Scripted provider: classify, rewrite and embed answers plus a call log.

    Set ``descriptors``, ``rewrite`` or ``embed_status`` to change answers.
    """

    def __init__(self):
        self.descriptors = ["bold", "display", "playful"]
        self.rewrite = "bold playful display font, rounded, friendly"
        self.embed_status = 200
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        path = request.url.path

        if path.endswith("/embeddings"):
            self.calls.append("embed")
            if self.embed_status != 200:
                return httpx.Response(self.embed_status, json={"message": "unavailable"})
            return httpx.Response(200, json=embedding_response(payload["input"]))

        if payload["messages"][0]["role"] == "system":
            self.calls.append("rewrite")
            return httpx.Response(200, json=chat_response(self.rewrite))

        self.calls.append("classify")
        return httpx.Response(200, json=chat_response(json.dumps({"descriptors": self.descriptors})))


@pytest.fixture(scope="function")
def fake_api() -> FakeMistralApi:
    return FakeMistralApi()


@pytest.fixture(scope="function")
def mistral_client(fake_api) -> Generator[MistralClient, None, None]:
    """MistralClient backed by FakeMistralApi"""
    client = make_client(fake_api)
    yield client
    client.close()


class FakeRenderer:
    """Renderer stub that records requested font paths."""

    def __init__(self):
        self.rendered = []

    def render(self, font_source: str) -> bytes:
        self.rendered.append(font_source)
        return b"\x89PNG fake"


@pytest.fixture(scope="function")
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


# =======================
# FACTORY FIXTURES
# =======================

@pytest.fixture(scope="session")
def client_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], MistralClient]:
    """Build a MistralClient around any MockTransport handler"""
    return make_client


@pytest.fixture(scope="session")
def chat_payload() -> Callable[[str | None], dict]:
    return chat_response


@pytest.fixture(scope="session")
def embedding_payload() -> Callable[..., dict]:
    return embedding_response


@pytest.fixture(scope="session")
def record_writer() -> Callable[[Path, str, dict], Path]:
    return write_record
