"""
Gemini Gateway - Google's GenAI SDK (google-genai).

Normalizes generate_content responses (text, inline images, function
calls) and Veo video operations into the gateway types from base.py.
All calls go through the async client (`client.aio`), so a slow model
call only suspends the awaiting task.
"""

import time
import logging
import uuid
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from app.core.config import settings
from app.core.credentials import CredentialProvider, credential_provider
from app.ai.errors import GenerationFailure
from app.ai.monitoring.logger import ai_logger
from app.ai.monitoring.metrics import ai_metrics
from app.ai.providers.base import (
    BinaryPart,
    ContentPart,
    FunctionCall,
    FunctionDeclaration,
    GenerationRequest,
    ModelGateway,
    NormalizedResponse,
    ProviderType,
    TokenUsage,
)
from app.schemas.media import GenerationJob, JobState, VideoJobRequest

logger = logging.getLogger("omni.ai.gemini")


def _request_id() -> str:
    return uuid.uuid4().hex[:8]


class GeminiGateway(ModelGateway):
    provider_type = ProviderType.GEMINI

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        timeout_seconds: Optional[int] = None,
    ):
        self.credentials = credentials or credential_provider
        self.timeout_seconds = timeout_seconds or settings.AI_REQUEST_TIMEOUT
        # One SDK client per API key; a key selected later gets a fresh client
        self._clients: Dict[str, genai.Client] = {}

    # ------------------------------------------------------------------
    # CONTENT GENERATION
    # ------------------------------------------------------------------

    async def send(self, request: GenerationRequest) -> NormalizedResponse:
        request_id = _request_id()
        start_time = time.time()
        ai_logger.log_request(
            request_id=request_id,
            prompt=request.prompt_preview(),
            model=request.model,
            metadata={
                "history_turns": len(request.history),
                "parts": len(request.parts),
                "functions": [f.name for f in request.functions],
            },
        )

        try:
            client = self._get_client()
            response = await client.aio.models.generate_content(
                model=request.model,
                contents=self._build_contents(request),
                config=self._build_config(request),
            )
        except GenerationFailure as e:
            self._record_failure(request_id, request.model, start_time, str(e), "send")
            raise
        except Exception as e:
            logger.error(f"Gemini generation failed: {e}")
            self._record_failure(request_id, request.model, start_time, str(e), "send")
            raise GenerationFailure(f"Gemini generation failed: {e}", cause=e) from e

        normalized = self._normalize(response, request.model, self._measure_latency(start_time))
        ai_logger.log_response(request_id, normalized)
        ai_metrics.record_request(
            request_id=request_id,
            model=request.model,
            tokens=normalized.usage,
            latency_ms=normalized.latency_ms,
            success=True,
        )
        return normalized

    # ------------------------------------------------------------------
    # VIDEO JOBS (Veo long-running operations)
    # ------------------------------------------------------------------

    async def submit_video_job(self, request: VideoJobRequest) -> GenerationJob:
        request_id = _request_id()
        start_time = time.time()
        ai_logger.log_request(
            request_id=request_id,
            prompt=request.prompt,
            model=request.model,
            metadata={"resolution": request.resolution, "aspect_ratio": request.aspect_ratio},
        )

        try:
            client = self._get_client()
            operation = await client.aio.models.generate_videos(
                model=request.model,
                prompt=request.prompt,
                config=types.GenerateVideosConfig(
                    number_of_videos=request.number_of_videos,
                    resolution=request.resolution,
                    aspect_ratio=request.aspect_ratio,
                ),
            )
        except GenerationFailure as e:
            self._record_failure(request_id, request.model, start_time, str(e), "video_submit")
            raise
        except Exception as e:
            logger.error(f"Veo job submission failed: {e}")
            self._record_failure(request_id, request.model, start_time, str(e), "video_submit")
            raise GenerationFailure(f"Video job submission failed: {e}", cause=e) from e

        ai_metrics.record_request(
            request_id=request_id,
            model=request.model,
            tokens=TokenUsage(),
            latency_ms=self._measure_latency(start_time),
            success=True,
        )
        return self._job_from_operation(operation, in_progress=JobState.PENDING)

    async def poll_video_job(self, job: GenerationJob) -> GenerationJob:
        try:
            client = self._get_client()
            operation = await client.aio.operations.get(job.handle)
        except GenerationFailure:
            raise
        except Exception as e:
            logger.error(f"Veo job status check failed: {e}")
            ai_logger.log_error(_request_id(), str(e), stage="video_poll")
            raise GenerationFailure(f"Video job status check failed: {e}", cause=e) from e

        return self._job_from_operation(operation, in_progress=JobState.RUNNING)

    # ------------------------------------------------------------------
    # HELPERS
    # ------------------------------------------------------------------

    def _get_client(self) -> genai.Client:
        api_key = self.credentials.get_api_key()
        if not api_key:
            raise GenerationFailure("API key missing")

        client = self._clients.get(api_key)
        if client is None:
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=self.timeout_seconds * 1000),
            )
            self._clients[api_key] = client
            logger.info("Gemini client initialized")
        return client

    def _build_contents(self, request: GenerationRequest) -> List[types.Content]:
        contents = [
            types.Content(role=turn.role, parts=[types.Part(text=turn.text)])
            for turn in request.history
        ]
        contents.append(
            types.Content(role="user", parts=[self._to_part(p) for p in request.parts])
        )
        return contents

    def _to_part(self, part: ContentPart) -> types.Part:
        if part.is_binary:
            return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
        return types.Part(text=part.text or "")

    def _build_config(self, request: GenerationRequest) -> types.GenerateContentConfig:
        kwargs: Dict[str, Any] = {}
        if request.system_instruction:
            kwargs["system_instruction"] = request.system_instruction
        if request.functions:
            kwargs["tools"] = [
                types.Tool(
                    function_declarations=[self._to_declaration(f) for f in request.functions]
                )
            ]
        if request.thinking_budget is not None:
            kwargs["thinking_config"] = types.ThinkingConfig(
                thinking_budget=request.thinking_budget
            )
        if request.aspect_ratio or request.image_size:
            kwargs["image_config"] = types.ImageConfig(
                aspect_ratio=request.aspect_ratio,
                image_size=request.image_size,
            )
        return types.GenerateContentConfig(**kwargs)

    def _to_declaration(self, declaration: FunctionDeclaration) -> types.FunctionDeclaration:
        properties = {
            p.name: types.Schema(
                type=types.Type(p.type.upper()),
                description=p.description or None,
                enum=p.enum,
            )
            for p in declaration.parameters
        }
        return types.FunctionDeclaration(
            name=declaration.name,
            description=declaration.description,
            parameters=types.Schema(
                type=types.Type.OBJECT,
                properties=properties,
                required=[p.name for p in declaration.parameters if p.required],
            ),
        )

    def _normalize(self, response: Any, model: str, latency_ms: float) -> NormalizedResponse:
        parts = []
        if response.candidates:
            content = response.candidates[0].content
            if content and content.parts:
                parts = content.parts

        texts = [p.text for p in parts if p.text and not p.thought]
        binary_parts = [
            BinaryPart(
                mime_type=p.inline_data.mime_type or "application/octet-stream",
                data=p.inline_data.data,
            )
            for p in parts
            if p.inline_data and p.inline_data.data
        ]
        function_calls = [
            FunctionCall(name=p.function_call.name, arguments=dict(p.function_call.args or {}))
            for p in parts
            if p.function_call
        ]

        return NormalizedResponse(
            text="".join(texts) or None,
            binary_parts=binary_parts,
            function_calls=function_calls,
            model=model,
            provider=self.provider_type,
            usage=self._extract_usage(response),
            latency_ms=latency_ms,
            raw_response=response,
        )

    def _job_from_operation(self, operation: Any, in_progress: JobState) -> GenerationJob:
        if not operation.done:
            return GenerationJob(handle=operation, state=in_progress)

        if operation.error:
            message = operation.error.get("message") if isinstance(operation.error, dict) else None
            return GenerationJob(
                handle=operation,
                state=JobState.FAILED,
                error=message or str(operation.error),
            )

        uri = None
        result = operation.response or getattr(operation, "result", None)
        if result and result.generated_videos:
            video = result.generated_videos[0].video
            uri = video.uri if video else None
        return GenerationJob(handle=operation, state=JobState.DONE, result_uri=uri)

    def _extract_usage(self, response: Any) -> TokenUsage:
        usage = response.usage_metadata
        if not usage:
            return TokenUsage()
        return TokenUsage(
            prompt_tokens=usage.prompt_token_count or 0,
            completion_tokens=usage.candidates_token_count or 0,
        )

    def _record_failure(
        self,
        request_id: str,
        model: str,
        start_time: float,
        error: str,
        stage: str,
    ) -> None:
        ai_logger.log_error(request_id, error, stage=stage, metadata={"model": model})
        ai_metrics.record_request(
            request_id=request_id,
            model=model,
            tokens=TokenUsage(),
            latency_ms=self._measure_latency(start_time),
            success=False,
        )


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
gemini_gateway = GeminiGateway()
