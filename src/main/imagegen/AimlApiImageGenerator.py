"""
AIML API image generation implementation.

The AIML aggregator publishes no key validation endpoint, and its request and
response shapes below follow its OpenAI-style images API on a best-effort
basis. Treat the wire contract as provisional.
"""
from imagegen.GenerationRequest import GenerationRequest
from imagegen.ImageGenerator import ImageGenerator
from imagegen.ImageResponse import ImageResponse, RemoteImage
from imagegen.ProviderProfile import ProviderProfile
from imagegen.SizeResolver import resolve_token


class AimlApiImageGenerator(ImageGenerator):
    """
    Concrete implementation for the AIML API aggregator. Always returns a RemoteImage.
    """

    PROFILE = ProviderProfile(
        name="aimlapi",
        aliases=["aiml", "aiml-api"],
        base_url="https://api.aimlapi.com/v1",
        default_model="openai/gpt-image-1",
        models={
            "openai/gpt-image-1": ["gpt-image-1"],
            "openai/gpt-image-2": ["gpt-image-2"],
            "stability-ai/stable-diffusion-xl-1024-v1-0": ["sdxl"],
            "stability-ai/stable-diffusion-v1-6": ["sd-1.6"],
            "midjourney/midjourney-v6": ["midjourney"],
        },
        default_size=(256, 256),
        response_shape="url",
        read_timeout=120.0,
        key_probe_path=None,
        api_key_env="AIMLAPI_API_KEY",
        keys_url="https://aimlapi.com/app/keys",
        billing_url="https://aimlapi.com/app/keys",
    )

    def _generation_url(self, request: GenerationRequest) -> str:
        return f"{self.PROFILE.base_url}/images/generations"

    def _build_payload(self, request: GenerationRequest) -> dict:
        return {
            "model": request.model,
            "prompt": request.prompt,
            "background": "auto",
            "moderation": "auto",
            "n": 1,
            "output_compression": 100,
            "output_format": "png",
            "quality": "medium",
            "size": resolve_token(request.size, self.PROFILE, self.logger),
            "response_format": "url",
        }

    def _parse_response(self, result: dict) -> ImageResponse:
        image_data = self._first(result["data"], "data")
        url = image_data["url"]
        self.logger.info(f"Image URL received: {url}")
        return RemoteImage(url=url, revised_prompt=image_data.get("revised_prompt"), raw=result)
