"""
Stability AI image generation implementation.
"""
import httpx

from imagegen.GenerationRequest import GenerationRequest
from imagegen.ImageGenerator import ImageGenerator
from imagegen.ImageResponse import ImageResponse, InlineImage
from imagegen.ProviderProfile import ProviderProfile
from imagegen.SizeResolver import resolve

LOW_CREDIT_THRESHOLD = 1


class StabilityImageGenerator(ImageGenerator):
    """
    Concrete implementation for Stability AI's v1 text-to-image API.

    The model is part of the endpoint path and the image comes back inline as
    base64, so this generator always returns an InlineImage.
    """

    PROFILE = ProviderProfile(
        name="stable-diffusion",
        aliases=["stability", "sd"],
        base_url="https://api.stability.ai/v1",
        default_model="stable-diffusion-xl-1024-v1-0",
        models={
            "stable-diffusion-xl-1024-v1-0": ["sdxl", "sdxl-1.0"],
            "stable-diffusion-v1-6": ["sd-1.6"],
            "stable-diffusion-xl-beta-v2-2-2": ["sdxl-beta"],
            "deepfloyd-if-v1-0": ["deepfloyd"],
            "stable-diffusion-2-1": ["sd-2.1"],
            "stable-diffusion-2-1-base": ["sd-2.1-base"],
        },
        default_size=(1024, 1024),
        response_shape="base64",
        read_timeout=120.0,
        key_probe_path="/user/balance",
        api_key_env="STABILITY_API_KEY",
        keys_url="https://platform.stability.ai/account/keys",
        billing_url="https://platform.stability.ai/account/credits",
        account_url="https://platform.stability.ai/account",
    )

    def _generation_url(self, request: GenerationRequest) -> str:
        return f"{self.PROFILE.base_url}/generation/{request.model}/text-to-image"

    def _build_payload(self, request: GenerationRequest) -> dict:
        width, height = resolve(request.size, self.PROFILE, self.logger)
        return {
            "text_prompts": [{"text": request.prompt, "weight": 1.0}],
            "cfg_scale": 7.0,
            "height": height,
            "width": width,
            "samples": 1,
            "steps": 30,
            "style_preset": "photographic",
        }

    def _parse_response(self, result: dict) -> ImageResponse:
        artifact = self._first(result["artifacts"], "artifacts")
        finish_reason = artifact.get("finishReason")
        if finish_reason and finish_reason != "SUCCESS":
            self.logger.warning(f"Stability AI finished with reason {finish_reason} (seed {artifact.get('seed')})")
        self.logger.info("Image data received")
        return InlineImage(data=artifact["base64"], raw=result)

    def _on_key_valid(self, response: httpx.Response):
        try:
            credits = float(response.json()["credits"])
        except (ValueError, LookupError, TypeError):
            self.logger.info("Account info retrieved (balance format not recognized)")
            return
        self.logger.info(f"Account balance: {credits} credits")
        if credits < LOW_CREDIT_THRESHOLD:
            self.logger.warning("Low credit balance. Consider purchasing more credits.")
