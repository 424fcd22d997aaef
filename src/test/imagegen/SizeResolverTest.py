"""
Unit tests for SizeResolver.
"""
import logging
import sys
import unittest
from pathlib import Path

# Add src/main to path
project_root = Path(__file__).parent.parent.parent.parent
src_main = project_root / 'src' / 'main'
sys.path.insert(0, str(src_main))

from imagegen import SizeResolver
from imagegen.AimlApiImageGenerator import AimlApiImageGenerator
from imagegen.OpenAIImageGenerator import OpenAIImageGenerator
from imagegen.StabilityImageGenerator import StabilityImageGenerator


class SizeResolverTest(unittest.TestCase):
    """Test cases for size token resolution."""

    def test_recognized_tokens(self):
        """Test every common token resolves to its exact pair."""
        expected = {
            "256x256": (256, 256),
            "512x512": (512, 512),
            "1024x1024": (1024, 1024),
            "1024x768": (1024, 768),
            "768x1024": (768, 1024),
        }
        for generator in (OpenAIImageGenerator, StabilityImageGenerator, AimlApiImageGenerator):
            for token, size in expected.items():
                self.assertEqual(SizeResolver.resolve(token, generator.PROFILE), size)

    def test_provider_specific_tokens(self):
        """Test OpenAI extends the common set with the dall-e-3 formats."""
        profile = OpenAIImageGenerator.PROFILE
        self.assertEqual(SizeResolver.resolve("1024x1792", profile), (1024, 1792))
        self.assertEqual(SizeResolver.resolve("1792x1024", profile), (1792, 1024))

    def test_provider_specific_token_not_shared(self):
        """Test a token of one provider falls back for another."""
        self.assertEqual(SizeResolver.resolve("1792x1024", StabilityImageGenerator.PROFILE), (1024, 1024))

    def test_unknown_token_falls_back_per_provider(self):
        """Test unknown tokens use each provider's default instead of raising."""
        self.assertEqual(SizeResolver.resolve("huge", OpenAIImageGenerator.PROFILE), (1024, 1024))
        self.assertEqual(SizeResolver.resolve("huge", StabilityImageGenerator.PROFILE), (1024, 1024))
        self.assertEqual(SizeResolver.resolve("huge", AimlApiImageGenerator.PROFILE), (256, 256))
        self.assertEqual(SizeResolver.resolve("123x45"), (1024, 1024))

    def test_unknown_token_logs_warning(self):
        """Test the fallback is reported to the injected logger."""
        logger = logging.getLogger("test.size")
        with self.assertLogs(logger, level="WARNING") as logs:
            SizeResolver.resolve("10x10", AimlApiImageGenerator.PROFILE, logger)
        self.assertIn("Unknown size format: 10x10, using default 256x256", logs.output[0])

    def test_blank_and_none_use_default(self):
        """Test an empty token selects the default size."""
        self.assertEqual(SizeResolver.resolve("", AimlApiImageGenerator.PROFILE), (256, 256))
        self.assertEqual(SizeResolver.resolve(None, StabilityImageGenerator.PROFILE), (1024, 1024))

    def test_token_normalization(self):
        """Test matching ignores case and surrounding whitespace."""
        self.assertEqual(SizeResolver.resolve(" 512X512 "), (512, 512))

    def test_resolve_token(self):
        """Test resolve_token returns the WxH form."""
        self.assertEqual(SizeResolver.resolve_token("768x1024"), "768x1024")
        self.assertEqual(SizeResolver.resolve_token("bogus", AimlApiImageGenerator.PROFILE), "256x256")


if __name__ == '__main__':
    unittest.main()
