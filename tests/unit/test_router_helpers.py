#!/usr/bin/env python3
"""
Unit tests for router helper functions.
"""

import json

import pytest
from fastapi import HTTPException

from conftest import make_png
from nametag.exceptions import NoTemplatesError
from nametag.utils.router_helpers import (
    create_image_response,
    error_response,
    handle_exceptions,
)


@pytest.mark.unit
class TestHandleExceptions:
    @pytest.mark.asyncio
    async def test_passes_result_through(self):
        @handle_exceptions("test operation")
        async def endpoint(value):
            return value * 2

        assert await endpoint(4) == 8

    @pytest.mark.asyncio
    async def test_core_error_becomes_500(self):
        @handle_exceptions("test operation")
        async def endpoint():
            raise NoTemplatesError("No templates are loaded")

        response = await endpoint()

        assert response.status_code == 500
        assert json.loads(response.body) == {"error": "No templates are loaded"}

    @pytest.mark.asyncio
    async def test_http_exception_keeps_status(self):
        @handle_exceptions("test operation")
        async def endpoint():
            raise HTTPException(status_code=404, detail="Missing")

        response = await endpoint()

        assert response.status_code == 404
        assert json.loads(response.body) == {"error": "Missing"}


@pytest.mark.unit
class TestResponses:
    def test_error_response_without_message(self):
        response = error_response(RuntimeError())

        assert json.loads(response.body) == {"error": "Unknown error occured"}

    def test_image_response_headers(self):
        response = create_image_response(make_png(4, 4, (0, 0, 0, 255)))

        assert response.media_type == "image/png"
        assert response.headers["cache-control"] == "public"

    def test_unknown_content_rejected(self):
        with pytest.raises(ValueError, match="Unable to infer file type"):
            create_image_response(b"not an image")
