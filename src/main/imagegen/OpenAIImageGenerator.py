"""
OpenAI DALL-E image generation implementation.
"""
from imagegen.GenerationRequest import GenerationRequest
from imagegen.ImageGenerator import ImageGenerator
from imagegen.ImageResponse import ImageResponse, RemoteImage
from imagegen.ProviderProfile import ProviderProfile
from imagegen.SizeResolver import resolve_token


class OpenAIImageGenerator(ImageGenerator):
    """
    Concrete implementation for OpenAI's images API. Always returns a RemoteImage.
    """

    PROFILE = ProviderProfile(
        name="openai",
        aliases=["dall-e", "dalle"],
        base_url="https://api.openai.com/v1",
        default_model="dall-e-3",
        models={
            "dall-e-3": ["dalle-3", "dalle3"],
            "dall-e-2": ["dalle-2", "dalle2"],
        },
        # dall-e-3 portrait and landscape formats
        size_tokens=["1024x1792", "1792x1024"],
        default_size=(1024, 1024),
        response_shape="url",
        read_timeout=60.0,
        key_probe_path="/models",
        api_key_env="OPENAI_API_KEY",
        keys_url="https://platform.openai.com/api-keys",
        billing_url="https://platform.openai.com/account/billing",
        account_url="https://platform.openai.com/account",
    )

    def _generation_url(self, request: GenerationRequest) -> str:
        return f"{self.PROFILE.base_url}/images/generations"

    def _build_payload(self, request: GenerationRequest) -> dict:
        return {
            "model": request.model,
            "prompt": request.prompt,
            "n": 1,
            "size": resolve_token(request.size, self.PROFILE, self.logger),
        }

    def _parse_response(self, result: dict) -> ImageResponse:
        image_data = self._first(result["data"], "data")
        url = image_data["url"]
        self.logger.info(f"Image URL received: {url}")
        return RemoteImage(url=url, revised_prompt=image_data.get("revised_prompt"), raw=result)
