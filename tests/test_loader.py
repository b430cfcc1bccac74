"""Tests for the loader module."""

import json

import httpx
import pytest

from tagger.context_builder import build_context
from tagger.errors import SpecLoadError
from tagger.loader import get_paths, get_schemas, infer_service, load_spec

_DOC = {
    "openapi": "3.0.0",
    "info": {"title": "Pets", "version": "1"},
    "paths": {"/pets": {"get": {"operationId": "Pets.pets.list"}}},
    "components": {"schemas": {"Pet": {"type": "object"}}},
}


class TestLoadSpecFromFile:
    def test_json(self, tmp_path):
        path = tmp_path / "pets.json"
        path.write_text(json.dumps(_DOC))
        assert load_spec(path) == _DOC

    def test_yaml(self, tmp_path):
        path = tmp_path / "pets.yaml"
        path.write_text(
            "openapi: 3.0.0\n"
            "paths:\n"
            "  /pets:\n"
            "    get:\n"
            "      operationId: pets.pets.list\n"
        )
        spec = load_spec(str(path))
        assert spec["paths"]["/pets"]["get"]["operationId"] == "pets.pets.list"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecLoadError, match="cannot read"):
            load_spec(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(SpecLoadError, match="cannot decode"):
            load_spec(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(SpecLoadError, match="does not contain"):
            load_spec(path)


class TestLoadSpecFromUrl:
    def test_fetch_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/specs/pets.json"
            return httpx.Response(200, json=_DOC)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        assert load_spec("https://example.com/specs/pets.json", client=client) == _DOC

    def test_fetch_yaml(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="openapi: 3.0.0\npaths: {}\n")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        assert load_spec("https://example.com/pets.yaml", client=client) == {
            "openapi": "3.0.0", "paths": {},
        }

    def test_http_error(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        with pytest.raises(SpecLoadError, match="cannot fetch"):
            load_spec("https://example.com/missing.json", client=client)


class TestSpecHelpers:
    def test_paths_and_schemas(self):
        assert list(get_paths(_DOC)) == ["/pets"]
        assert list(get_schemas(_DOC)) == ["Pet"]
        assert get_paths({}) == {}
        assert get_schemas({}) == {}

    def test_infer_service(self, compute_spec):
        assert infer_service(compute_spec) == "compute"
        assert infer_service(_DOC) == "pets"
        assert infer_service({"paths": {"/x": {"get": {}}}}) is None


class TestYamlStatusCodes:
    def test_unquoted_200_is_tagged(self, tmp_path):
        path = tmp_path / "things.yaml"
        path.write_text(
            "openapi: 3.0.0\n"
            "paths:\n"
            "  /things:\n"
            "    get:\n"
            "      operationId: svc.things.list\n"
            "      responses:\n"
            "        200:\n"
            "          content:\n"
            "            application/json:\n"
            "              schema:\n"
            "                $ref: '#/components/schemas/ThingList'\n"
            "components:\n"
            "  schemas:\n"
            "    ThingList:\n"
            "      type: object\n"
            "      properties:\n"
            "        items: {type: array}\n"
        )
        spec = load_spec(path)
        ctx = build_context(spec, "svc")
        assert [r["sql_verb"] for r in ctx["operations"]] == ["select"]
