"""
Unit tests for OpenAIImageGenerator.
"""
import json
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx

# Add src/main to path
project_root = Path(__file__).parent.parent.parent.parent
src_main = project_root / 'src' / 'main'
sys.path.insert(0, str(src_main))

from imagegen.GenerationRequest import GenerationRequest
from imagegen.ImageResponse import InlineImage, RemoteImage
from imagegen.OpenAIImageGenerator import OpenAIImageGenerator
from imagegen.ProviderError import (ConfigurationError, ErrorKind, NetworkError, NoImageDataError,
                                    ProviderError)


def mock_client(handler, calls=None):
    def record(request):
        if calls is not None:
            calls.append(request)
        return handler(request)
    return httpx.Client(transport=httpx.MockTransport(record))


class OpenAIImageGeneratorTest(unittest.TestCase):
    """Test cases for OpenAIImageGenerator."""

    def test_get_supported_models(self):
        """Test OpenAIImageGenerator.get_supported_models returns all models and aliases."""
        models = OpenAIImageGenerator.get_supported_models()
        for name in ("dall-e-3", "dall-e-2", "dalle-3", "dalle3", "dalle-2", "dalle2"):
            self.assertIn(name, models)

    def test_provider_names(self):
        """Test the provider answers to its name and aliases."""
        self.assertEqual(OpenAIImageGenerator.get_provider_names(), ["openai", "dall-e", "dalle"])

    def test_init_missing_api_key(self):
        """Test a missing API key raises ConfigurationError."""
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigurationError) as context:
                OpenAIImageGenerator()
            self.assertIn("API key", str(context.exception))

    def test_init_with_environment_key(self):
        """Test the API key is read from OPENAI_API_KEY."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "env-key"}):
            generator = OpenAIImageGenerator()
        self.assertEqual(generator.api_key, "env-key")
        generator.close()

    def test_model_resolution(self):
        """Test blank, alias and unknown model names."""
        generator = OpenAIImageGenerator("test-key", client=mock_client(lambda r: httpx.Response(200)))
        self.assertEqual(generator.get_model_name(""), "dall-e-3")
        self.assertEqual(generator.get_model_name("dalle2"), "dall-e-2")
        self.assertEqual(generator.get_model_name("gpt-image-1"), "gpt-image-1")

    def test_generate_success(self):
        """Test the request payload and the RemoteImage result."""
        calls = []

        def handler(request):
            return httpx.Response(200, json={
                "created": 1700000000,
                "data": [{"url": "https://example.com/image.png", "revised_prompt": "A revised prompt"}],
            })

        generator = OpenAIImageGenerator("test-key", client=mock_client(handler, calls))
        response = generator.generate(GenerationRequest(prompt="a cat", size="1792x1024"))

        self.assertIsInstance(response, RemoteImage)
        self.assertEqual(response.kind, "url")
        self.assertEqual(response.url, "https://example.com/image.png")
        self.assertEqual(response.revised_prompt, "A revised prompt")

        self.assertEqual(len(calls), 1)
        request = calls[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(str(request.url), "https://api.openai.com/v1/images/generations")
        self.assertEqual(request.headers["Authorization"], "Bearer test-key")
        self.assertEqual(json.loads(request.content),
                         {"model": "dall-e-3", "prompt": "a cat", "n": 1, "size": "1792x1024"})

    def test_generate_unknown_size_falls_back(self):
        """Test an unknown size is sent as the default size."""
        calls = []
        handler = lambda r: httpx.Response(200, json={"created": 1, "data": [{"url": "https://x/y.png"}]})
        generator = OpenAIImageGenerator("test-key", client=mock_client(handler, calls))
        generator.generate(GenerationRequest(prompt="a cat", size="2x2"))
        self.assertEqual(json.loads(calls[0].content)["size"], "1024x1024")

    def test_generate_applies_provider_options(self):
        """Test provider options are merged into the payload."""
        calls = []
        handler = lambda r: httpx.Response(200, json={"created": 1, "data": [{"url": "https://x/y.png"}]})
        generator = OpenAIImageGenerator("test-key", client=mock_client(handler, calls))
        generator.generate(GenerationRequest(prompt="a cat", model="dall-e-3",
                                             provider_options={"quality": "hd", "style": "natural"}))
        payload = json.loads(calls[0].content)
        self.assertEqual(payload["quality"], "hd")
        self.assertEqual(payload["style"], "natural")

    def test_generate_no_data(self):
        """Test an empty data list raises NoImageDataError."""
        handler = lambda r: httpx.Response(200, json={"created": 1, "data": []})
        generator = OpenAIImageGenerator("test-key", client=mock_client(handler))
        with self.assertRaises(NoImageDataError) as context:
            generator.generate(GenerationRequest(prompt="a cat"))
        self.assertIn("No image data", context.exception.guidance()[0])

    def test_generate_non_text_url(self):
        """Test a non-string URL raises NoImageDataError."""
        handler = lambda r: httpx.Response(200, json={"created": 1, "data": [{"url": 123}]})
        generator = OpenAIImageGenerator("test-key", client=mock_client(handler))
        with self.assertRaises(NoImageDataError):
            generator.generate(GenerationRequest(prompt="a cat"))

    def test_generate_rejects_wrong_result_kind(self):
        """Test a parsed result must match the provider's response shape."""
        class InlineOpenAI(OpenAIImageGenerator):
            def _parse_response(self, result):
                return InlineImage(data="aGVsbG8=")

        handler = lambda r: httpx.Response(200, json={"created": 1, "data": [{"url": "https://x/y.png"}]})
        generator = InlineOpenAI("test-key", client=mock_client(handler))
        with self.assertRaises(NoImageDataError) as context:
            generator.generate(GenerationRequest(prompt="a cat"))
        self.assertIn("expected a url result", str(context.exception))

    def test_generate_malformed_body(self):
        """Test a non-JSON success body raises NoImageDataError."""
        handler = lambda r: httpx.Response(200, text="<html>oops</html>")
        generator = OpenAIImageGenerator("test-key", client=mock_client(handler))
        with self.assertRaises(NoImageDataError):
            generator.generate(GenerationRequest(prompt="a cat"))

    def test_generate_billing_limit(self):
        """Test a billing limit response is classified as insufficient credits."""
        body = {"error": {"code": "billing_hard_limit_reached", "message": "Billing hard limit has been reached"}}
        handler = lambda r: httpx.Response(400, json=body)
        generator = OpenAIImageGenerator("test-key", client=mock_client(handler))
        with self.assertRaises(ProviderError) as context:
            generator.generate(GenerationRequest(prompt="a cat"))
        self.assertEqual(context.exception.status_code, 400)
        self.assertEqual(context.exception.classification, ErrorKind.INSUFFICIENT_CREDITS)

    def test_generate_network_error(self):
        """Test transport failures raise NetworkError."""
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        generator = OpenAIImageGenerator("test-key", client=mock_client(handler))
        with self.assertRaises(NetworkError):
            generator.generate(GenerationRequest(prompt="a cat"))

    def test_validate_key_success(self):
        """Test the key probe lists models with bearer auth."""
        calls = []
        handler = lambda r: httpx.Response(200, json={"data": [{"id": "dall-e-3"}]})
        generator = OpenAIImageGenerator("test-key", client=mock_client(handler, calls))
        self.assertTrue(generator.validate_key())
        self.assertEqual(calls[0].method, "GET")
        self.assertEqual(str(calls[0].url), "https://api.openai.com/v1/models")
        self.assertEqual(calls[0].headers["Authorization"], "Bearer test-key")

    def test_validate_key_rejected(self):
        """Test a rejected key returns False and logs guidance."""
        handler = lambda r: httpx.Response(401, json={"error": {"code": "invalid_api_key"}})
        generator = OpenAIImageGenerator("bad-key", client=mock_client(handler))
        with self.assertLogs(generator.logger, level="ERROR") as logs:
            self.assertFalse(generator.validate_key())
        self.assertTrue(any("AUTHENTICATION ERROR" in line for line in logs.output))

    def test_validate_key_network_error(self):
        """Test an unreachable provider fails validation."""
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        generator = OpenAIImageGenerator("test-key", client=mock_client(handler))
        self.assertFalse(generator.validate_key())


if __name__ == '__main__':
    unittest.main()
