import base64
import json
import os
import re
from typing import Any, Dict, List, Optional
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage
from langsmith import traceable
from pydantic import ValidationError


from app import schemas
from app.ai.prompts import get_car_extraction_prompt, get_image_search_prompt
from app.core.config import settings
from app.services.storage_services import StorageService
from app.utils.exception_utils import AIExtractionException, BadRequestException
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)

MAX_IMAGE_SIZE = 5 * 1024 * 1024

CAR_EXTRACTION_FIELDS = [
    "make",
    "model",
    "year",
    "color",
    "body_type",
    "mileage",
    "fuel_type",
    "transmission",
    "price",
    "description",
    "confidence",
]


class VisionService:
    """
    Reads car details from photos with an OpenAI vision model.
    """
    def __init__(self):
        self._llm: Optional[ChatOpenAI] = None
        if settings.LANGSMITH_API_KEY and settings.LANGSMITH_TRACING.lower() == "true":
            self._setup_langsmith()


    def _setup_langsmith(self):
        """
        Setup LangSmith tracing.
        """
        os.environ["LANGSMITH_TRACING"] = "true"
        os.environ["LANGSMITH_API_KEY"] = settings.LANGSMITH_API_KEY
        os.environ["LANGSMITH_PROJECT"] = settings.LANGSMITH_PROJECT
        os.environ["LANGSMITH_ENDPOINT"] = settings.LANGSMITH_ENDPOINT
        logger.info("LangSmith tracing enabled")


    @property
    def llm(self) -> ChatOpenAI:
        if self._llm is None:
            self._llm = ChatOpenAI(
                model=settings.OPENAI_VISION_MODEL,
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_API_BASE_URL,
                streaming=False,
                temperature=settings.OPENAI_TEMPERATURE,
                max_tokens=settings.OPENAI_MAX_TOKENS,
            )
        return self._llm


    def _validate_image(self, data: bytes, content_type: Optional[str]) -> str:
        if not StorageService.image_extension(content_type):
            raise BadRequestException("Only image files are accepted")
        if not data:
            raise BadRequestException("Image file is empty")
        if len(data) > MAX_IMAGE_SIZE:
            raise BadRequestException("Image file size must be less than 5 MB")
        return content_type.lower()


    @staticmethod
    def strip_code_fences(text: str) -> str:
        """
        Remove Markdown code fences around a model reply.

        Args:
            text: Raw model reply

        Returns:
            The reply without ``` or ```json markers
        """
        return re.sub(r"```(?:json)?\n?", "", text).strip()


    @staticmethod
    def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
        # Models sometimes answer bodyType/fuelType despite the prompt
        return {re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower(): value for key, value in data.items()}


    def parse_reply(self, text: str, required_fields: List[str]) -> Dict[str, Any]:
        """
        Parse a model reply into a JSON object and check required keys.

        Args:
            text: Raw model reply
            required_fields: Keys that must be present

        Returns:
            Parsed JSON object with snake_case keys
        """
        try:
            data = json.loads(self.strip_code_fences(text))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse AI response as JSON: {e}")
            raise AIExtractionException("Failed to parse AI response as JSON")

        if not isinstance(data, dict):
            raise AIExtractionException("AI response is not a JSON object")

        data = self._normalize_keys(data)
        missing = [field for field in required_fields if field not in data]
        if missing:
            raise AIExtractionException(
                f"Missing fields in AI response: {', '.join(missing)}"
            )
        return data


    async def _ask(self, prompt: str, data: bytes, content_type: str) -> str:
        encoded = base64.b64encode(data).decode("ascii")
        message = HumanMessage(
            content=[
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{content_type};base64,{encoded}"},
                },
            ]
        )
        try:
            response = await self.llm.ainvoke([message])
        except Exception as e:
            logger.error(f"Vision model call failed: {e}")
            raise AIExtractionException("Failed to process image with AI")
        return response.content if isinstance(response.content, str) else str(response.content)


    @traceable(name="extract_car_details", run_type="chain")
    async def extract_car_details(
        self, data: bytes, content_type: Optional[str]
    ) -> schemas.CarImageExtraction:
        """
        Read every listing field from a car photo.

        Args:
            data: Raw image bytes
            content_type: MIME type of the image

        Returns:
            CarImageExtraction with the suggested listing values
        """
        content_type = self._validate_image(data, content_type)
        reply = await self._ask(get_car_extraction_prompt(), data, content_type)
        parsed = self.parse_reply(reply, CAR_EXTRACTION_FIELDS)

        try:
            extraction = schemas.CarImageExtraction(**parsed)
        except ValidationError as e:
            logger.error(f"AI car extraction failed validation: {e}")
            raise AIExtractionException("AI response contained invalid values")

        logger.info(
            f"AI extracted {extraction.make} {extraction.model} (confidence: {extraction.confidence})"
        )
        return extraction


    @traceable(name="extract_search_hints", run_type="chain")
    async def extract_search_hints(
        self, data: bytes, content_type: Optional[str]
    ) -> schemas.ImageSearchExtraction:
        """
        Read make, body type and color from a car photo for a search.

        Args:
            data: Raw image bytes
            content_type: MIME type of the image

        Returns:
            ImageSearchExtraction with the search hints
        """
        content_type = self._validate_image(data, content_type)
        reply = await self._ask(get_image_search_prompt(), data, content_type)
        parsed = self.parse_reply(reply, [])

        try:
            return schemas.ImageSearchExtraction(**parsed)
        except ValidationError as e:
            logger.error(f"AI search extraction failed validation: {e}")
            raise AIExtractionException("AI response contained invalid values")


vision_service = VisionService()
