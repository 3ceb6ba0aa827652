"""Plan -> Decompose -> Elaborate co-writing pipeline.

Stages run strictly in order and beats are elaborated one at a time: each
beat's prompt carries the trailing window of the prose written so far, so
the loop must never be fanned out. Any stage failure propagates unchanged
and no partial prose is returned.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..config import CREATIVE, AISettings
from ..models.narrative import (
    Beat,
    BeatContext,
    BeatProseRequest,
    CoWriteRequest,
    CoWriteResult,
    GenerateSceneRequest,
    NamedEntity,
    SceneCard,
    SuggestBeatsRequest,
)
from ..parsing import parse, parse_object
from ..parsing.schemas import BEAT, SCENE_CARD
from .. import prompts
from .fallback_manager import FailoverOrchestrator

logger = logging.getLogger(__name__)

STEP_SEPARATOR = "\n\n"


@dataclass
class PipelineContext:
    """Per-invocation state. Step outputs are append-only."""

    plan_output: Dict[str, Any] = field(default_factory=dict)
    window_chars: int = 2000
    _outputs: List[str] = field(default_factory=list, repr=False)

    @property
    def step_outputs(self) -> Tuple[str, ...]:
        return tuple(self._outputs)

    def append(self, text: str) -> None:
        self._outputs.append(text)

    @property
    def prose(self) -> str:
        return STEP_SEPARATOR.join(self._outputs)

    @property
    def rolling_window(self) -> str:
        if self.window_chars <= 0:
            return ""
        return self.prose[-self.window_chars:]


class CoWritePipeline:
    def __init__(self, failover: FailoverOrchestrator, rolling_context_chars: int = 2000):
        self.failover = failover
        self.rolling_context_chars = rolling_context_chars

    async def run(self, request: CoWriteRequest, ai_settings: AISettings) -> CoWriteResult:
        context = PipelineContext(window_chars=self.rolling_context_chars)

        # Plan
        scene_request = GenerateSceneRequest(
            event_name=request.event_name,
            event_description=request.event_description,
            connected_characters=[NamedEntity(name=c.name, description=c.description) for c in request.characters],
            connected_locations=request.locations,
            connected_themes=request.themes,
            project_context=request.project_context,
        )
        plan = await self.failover.complete(
            prompts.build_scene_prompt(scene_request),
            CREATIVE,
            ai_settings,
            parse=lambda raw: parse_object(raw, SCENE_CARD),
        )
        context.plan_output = plan.parsed
        scene_card = SceneCard.model_validate(plan.parsed)

        # Decompose
        beats_request = SuggestBeatsRequest(
            entity_name=request.event_name,
            entity_description=(
                f"{request.event_description}\n\nScene Plan:\n"
                f"POV: {scene_card.pov}\nGoal: {scene_card.goal}\nConflict: {scene_card.conflict}"
            ),
            project_context=request.project_context,
        )
        decomposed = await self.failover.complete(
            prompts.build_suggest_beats_prompt(beats_request),
            CREATIVE,
            ai_settings,
            parse=lambda raw: parse(raw, BEAT),
        )
        beats = [Beat.model_validate(item) for item in decomposed.parsed]
        logger.debug(f"Co-write plan for {request.event_name!r} produced {len(beats)} beats")

        # Elaborate
        plan_description = prompts.build_plan_description(
            context.plan_output, prompts.build_style_guide(request.options)
        )
        for index, beat in enumerate(beats):
            prose_request = BeatProseRequest(
                beat=beat,
                context=BeatContext(
                    entity_name=request.event_name,
                    entity_description=plan_description,
                    previous_prose=context.rolling_window,
                    project_context=request.project_context,
                ),
            )
            result = await self.failover.complete(
                prompts.build_beat_prose_prompt(prose_request), CREATIVE, ai_settings
            )
            context.append(result.raw_text.strip())
            logger.debug(f"Beat {index + 1}/{len(beats)} written by {result.provider_used}")

        return CoWriteResult(
            prose=context.prose,
            scene_card=scene_card,
            beats=beats,
            model=plan.model_used,
            provider=plan.provider_used,
        )
