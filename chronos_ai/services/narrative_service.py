import logging
import math
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from ..cache import ResponseCache, make_cache_key, name_signature
from ..config import ANALYTICAL, CREATIVE, AISettings, Settings, settings as default_settings
from ..exceptions import ChronosAIError
from ..models.narrative import (
    AnalyzeRippleRequest,
    Beat,
    BeatConsistencyRequest,
    BeatProseRequest,
    BuildSequenceRequest,
    ChapterAssemblyRequest,
    ChapterAssemblyResult,
    ChapterBlueprint,
    CheckConsistencyRequest,
    CoWriteRequest,
    CoWriteResult,
    ConflictRequest,
    ConflictResult,
    ConsistencyIssue,
    ConsistencyReport,
    DetectGapsRequest,
    GenerateIdeasRequest,
    GenerateSceneRequest,
    GenerateVoiceRequest,
    GeneratedIdea,
    IdeasResult,
    MissingScene,
    MissingSceneResult,
    NarrativeSequenceResult,
    NarrativeStep,
    PacingRequest,
    PacingResult,
    POVAnalysisRequest,
    POVAnalysisResult,
    POVIssue,
    RippleEffect,
    RippleReport,
    SceneCard,
    SceneCardResult,
    SuggestBeatsRequest,
    TemporalEvent,
    TemporalGap,
    ThematicRequest,
    ThematicResult,
    VoiceSample,
    VoiceSampleResult,
)
from ..orchestration import CoWritePipeline, FailoverOrchestrator
from ..parsing import coerce_item, coerce_list, parse, parse_json, parse_object
from ..parsing.schemas import (
    BEAT,
    CHAPTER_BLUEPRINT,
    CHAPTER_STRUCTURE_ENTRY,
    CHARACTER_ARC,
    CONFLICT_POINT,
    CONFLICT_REPORT,
    IDEA,
    ISSUE,
    MISSING_SCENE,
    NARRATIVE_STEP,
    PACING_ACT,
    PACING_REPORT,
    POV_SUGGESTION,
    RIPPLE_EFFECT,
    SCENE_CARD,
    THEME_COVERAGE,
    VOICE_SAMPLE,
)
from ..providers import AiohttpTransport, HTTPTransport
from ..reliability import CircuitBreakerRegistry
from .. import prompts

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

# POV heuristics
POV_IMBALANCE_MIN_SCENES = 3
POV_IMBALANCE_RATIO = 0.7
MAX_HEAD_HOP_ISSUES = 3
POV_AI_MIN_EVENTS = 3

LARGE_TIME_JUMP_DAYS = 365


def _short_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} later"


def _gap_label(days: int) -> str:
    if days == 1:
        return "Next day"
    if days < 7:
        return f"{days} days later"
    if days < 30:
        return _plural(_round_half_up(days / 7), "week")
    if days < 365:
        return _plural(_round_half_up(days / 30), "month")
    return _plural(_round_half_up(days / 365), "year")


def _parse_timestamp(value: str) -> Optional[datetime]:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def analyze_temporal_gaps(events: List[TemporalEvent]) -> List[TemporalGap]:
    """Label the time jumps between timestamped events, in chronological order.

    Events without a parseable timestamp are ignored, as are same-day pairs.
    """
    timed = []
    for event in events:
        if not event.timestamp:
            continue
        moment = _parse_timestamp(event.timestamp)
        if moment is not None:
            timed.append((moment, event))
    timed.sort(key=lambda pair: pair[0])

    gaps: List[TemporalGap] = []
    for i in range(1, len(timed)):
        prev_moment, prev = timed[i - 1]
        moment, curr = timed[i]
        days = _round_half_up((moment - prev_moment) / timedelta(days=1))
        if days == 0:
            continue

        label = _gap_label(days)
        warning = None
        if days > LARGE_TIME_JUMP_DAYS:
            warning = f"Large time jump ({label}); consider explaining what changed"

        gaps.append(TemporalGap(
            id=f"gap-{i}",
            from_event=prev.name,
            to_event=curr.name,
            from_timestamp=prev.timestamp,
            to_timestamp=curr.timestamp,
            gap_label=label,
            gap_days=days,
            warning=warning,
        ))
    return gaps


def _parse_theme_coverage(raw: str) -> Dict[str, Dict[str, Any]]:
    parsed = parse_json(raw)
    coverage = parsed.get("themeCoverage") if isinstance(parsed, dict) else None
    if not isinstance(coverage, dict):
        return {}
    return {
        str(theme): coerce_item(entry, THEME_COVERAGE)
        for theme, entry in coverage.items()
        if isinstance(entry, dict)
    }


class NarrativeAIService:
    """AI-assisted narrative features on top of failover, caching and parsing.

    Every operation accepts an optional ``AISettings``; without one the
    service's own configuration supplies the provider preference and keys.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[HTTPTransport] = None,
        breaker: Optional[CircuitBreakerRegistry] = None,
        cache: Optional[ResponseCache] = None,
    ):
        self.settings = settings if settings is not None else default_settings
        if transport is None:
            transport = AiohttpTransport(timeout=self.settings.request_timeout)
        self.transport = transport
        if breaker is None:
            breaker = CircuitBreakerRegistry(
                failure_threshold=self.settings.circuit_failure_threshold,
                recovery_timeout=self.settings.circuit_recovery_timeout,
            )
        self.breaker = breaker
        # ResponseCache defines __len__, so an empty injected cache is falsy
        self.cache = cache if cache is not None else ResponseCache(ttl=self.settings.cache_ttl)
        self.failover = FailoverOrchestrator(self.breaker, self.transport)
        self.pipeline = CoWritePipeline(self.failover, rolling_context_chars=self.settings.rolling_context_chars)

    def _resolve(self, ai_settings: Optional[AISettings]) -> AISettings:
        return ai_settings if ai_settings is not None else self.settings.to_ai_settings()

    async def _cached(self, key: str, compute: Callable[[], Awaitable[ResultT]]) -> ResultT:
        payload, hit = await self.cache.get_or_compute(key, compute)
        return payload.model_copy(update={"cached": hit}, deep=True)

    async def close(self):
        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()

    # Creative generation

    async def generate_ideas(self, req: GenerateIdeasRequest, ai_settings: Optional[AISettings] = None) -> IdeasResult:
        ai = self._resolve(ai_settings)

        async def compute() -> IdeasResult:
            result = await self.failover.complete(
                prompts.build_idea_prompt(req), CREATIVE, ai, parse=lambda raw: parse(raw, IDEA)
            )
            ideas = [GeneratedIdea(id=_short_id("idea"), **item) for item in result.parsed]
            return IdeasResult(ideas=ideas, model=result.model_used, provider=result.provider_used)

        key = make_cache_key("ideas", req.entity_name, req.entity_type, req.entity_description[:50])
        return await self._cached(key, compute)

    async def generate_beat_prose(self, req: BeatProseRequest, ai_settings: Optional[AISettings] = None) -> str:
        result = await self.failover.complete(
            prompts.build_beat_prose_prompt(req), CREATIVE, self._resolve(ai_settings)
        )
        return result.raw_text.strip()

    async def suggest_beats(self, req: SuggestBeatsRequest, ai_settings: Optional[AISettings] = None) -> List[Beat]:
        result = await self.failover.complete(
            prompts.build_suggest_beats_prompt(req),
            CREATIVE,
            self._resolve(ai_settings),
            parse=lambda raw: parse(raw, BEAT),
        )
        return [Beat.model_validate(item) for item in result.parsed]

    async def check_beat_consistency(
        self, req: BeatConsistencyRequest, ai_settings: Optional[AISettings] = None
    ) -> str:
        prompt = prompts.build_beat_consistency_prompt(req.beats, req.entity_name, req.entity_description)
        result = await self.failover.complete(prompt, CREATIVE, self._resolve(ai_settings))
        return result.raw_text

    async def generate_scene_card(
        self, req: GenerateSceneRequest, ai_settings: Optional[AISettings] = None
    ) -> SceneCardResult:
        ai = self._resolve(ai_settings)

        async def compute() -> SceneCardResult:
            result = await self.failover.complete(
                prompts.build_scene_prompt(req), CREATIVE, ai, parse=lambda raw: parse_object(raw, SCENE_CARD)
            )
            return SceneCardResult(
                scene_card=SceneCard.model_validate(result.parsed),
                model=result.model_used,
                provider=result.provider_used,
            )

        key = make_cache_key("scene", req.event_name, req.event_description[:50])
        return await self._cached(key, compute)

    async def generate_character_voice(
        self, req: GenerateVoiceRequest, ai_settings: Optional[AISettings] = None
    ) -> VoiceSampleResult:
        ai = self._resolve(ai_settings)

        async def compute() -> VoiceSampleResult:
            result = await self.failover.complete(
                prompts.build_voice_prompt(req), CREATIVE, ai, parse=lambda raw: parse(raw, VOICE_SAMPLE)
            )
            samples = [VoiceSample.model_validate(item) for item in result.parsed]
            return VoiceSampleResult(samples=samples, model=result.model_used, provider=result.provider_used)

        key = make_cache_key("voice", req.character_name, req.character_description[:50])
        return await self._cached(key, compute)

    async def assemble_chapter(
        self, req: ChapterAssemblyRequest, ai_settings: Optional[AISettings] = None
    ) -> ChapterAssemblyResult:
        ai = self._resolve(ai_settings)

        async def compute() -> ChapterAssemblyResult:
            result = await self.failover.complete(
                prompts.build_chapter_prompt(req), CREATIVE, ai,
                parse=lambda raw: parse_object(raw, CHAPTER_BLUEPRINT),
            )
            data = result.parsed
            blueprint = ChapterBlueprint(
                synopsis=data["synopsis"],
                structure=coerce_list(data["structure"], CHAPTER_STRUCTURE_ENTRY),
                estimated_word_count=int(data["estimatedWordCount"]),
                opening_hook=data["openingHook"],
                closing_hook=data["closingHook"],
                tensions=data["tensions"],
                character_arcs=coerce_list(data["characterArcs"], CHARACTER_ARC),
            )
            return ChapterAssemblyResult(blueprint=blueprint, model=result.model_used, provider=result.provider_used)

        key = make_cache_key("chapter", req.chapter_name, ",".join(e.name for e in req.events), limit=200)
        return await self._cached(key, compute)

    async def co_write_scene(self, req: CoWriteRequest, ai_settings: Optional[AISettings] = None) -> CoWriteResult:
        return await self.pipeline.run(req, self._resolve(ai_settings))

    # Detection and analysis

    async def check_consistency(
        self, req: CheckConsistencyRequest, ai_settings: Optional[AISettings] = None
    ) -> ConsistencyReport:
        ai = self._resolve(ai_settings)
        if not req.entities:
            return ConsistencyReport(provider=ai.default_provider, scope=req.scope)

        async def compute() -> ConsistencyReport:
            result = await self.failover.complete(
                prompts.build_consistency_prompt(req), ANALYTICAL, ai, parse=lambda raw: parse(raw, ISSUE)
            )
            issues = [ConsistencyIssue(id=_short_id("issue"), **item) for item in result.parsed]
            return ConsistencyReport(
                issues=issues, model=result.model_used, provider=result.provider_used, scope=req.scope
            )

        key = make_cache_key(
            "consistency", req.scope, req.project_name, name_signature(e.name for e in req.entities)
        )
        return await self._cached(key, compute)

    async def analyze_ripple_effects(
        self, req: AnalyzeRippleRequest, ai_settings: Optional[AISettings] = None
    ) -> RippleReport:
        ai = self._resolve(ai_settings)
        if not req.related_entities:
            return RippleReport(provider=ai.default_provider)

        async def compute() -> RippleReport:
            result = await self.failover.complete(
                prompts.build_ripple_prompt(req), ANALYTICAL, ai, parse=lambda raw: parse(raw, RIPPLE_EFFECT)
            )
            effects = [RippleEffect(id=_short_id("ripple"), **item) for item in result.parsed]
            return RippleReport(effects=effects, model=result.model_used, provider=result.provider_used)

        edited = req.edited_entity
        change = f"{edited.name}:{edited.description_before[:50]}→{edited.description_after[:50]}"
        return await self._cached(make_cache_key("ripple", req.project_name, change), compute)

    async def build_narrative_sequence(
        self, req: BuildSequenceRequest, ai_settings: Optional[AISettings] = None
    ) -> NarrativeSequenceResult:
        ai = self._resolve(ai_settings)
        if not req.events:
            return NarrativeSequenceResult(provider=ai.default_provider)

        async def compute() -> NarrativeSequenceResult:
            result = await self.failover.complete(
                prompts.build_sequence_prompt(req), ANALYTICAL, ai, parse=lambda raw: parse(raw, NARRATIVE_STEP)
            )
            steps = [
                NarrativeStep(
                    entity_id=item["entityId"],
                    entity_name=item["entityName"],
                    chapter_number=int(item["chapterNumber"]),
                    reasoning=item["reasoning"],
                )
                for item in result.parsed
            ]
            return NarrativeSequenceResult(steps=steps, model=result.model_used, provider=result.provider_used)

        key = make_cache_key("sequence", req.project_name, name_signature(e.name for e in req.events))
        return await self._cached(key, compute)

    async def detect_missing_scenes(
        self, req: DetectGapsRequest, ai_settings: Optional[AISettings] = None
    ) -> MissingSceneResult:
        ai = self._resolve(ai_settings)
        if not req.events:
            return MissingSceneResult(provider=ai.default_provider)

        async def compute() -> MissingSceneResult:
            result = await self.failover.complete(
                prompts.build_gap_detection_prompt(req), ANALYTICAL, ai,
                parse=lambda raw: parse(raw, MISSING_SCENE),
            )
            scenes = [MissingScene(id=_short_id("gap"), **item) for item in result.parsed]
            return MissingSceneResult(scenes=scenes, model=result.model_used, provider=result.provider_used)

        key = make_cache_key("gaps", req.project_name, name_signature(e.name for e in req.events))
        return await self._cached(key, compute)

    async def analyze_pacing(self, req: PacingRequest, ai_settings: Optional[AISettings] = None) -> PacingResult:
        result = await self.failover.complete(
            prompts.build_pacing_prompt(req), ANALYTICAL, self._resolve(ai_settings),
            parse=lambda raw: parse_object(raw, PACING_REPORT),
        )
        data = result.parsed
        return PacingResult(
            score=data["score"],
            act_structure=coerce_list(data["actStructure"], PACING_ACT),
            suggestions=data["suggestions"],
            model=result.model_used,
            provider=result.provider_used,
        )

    async def analyze_thematic_threading(
        self, req: ThematicRequest, ai_settings: Optional[AISettings] = None
    ) -> ThematicResult:
        ai = self._resolve(ai_settings)
        if not req.themes:
            return ThematicResult(model="local", provider=ai.default_provider)

        result = await self.failover.complete(
            prompts.build_thematic_prompt(req), ANALYTICAL, ai, parse=_parse_theme_coverage
        )
        return ThematicResult(theme_coverage=result.parsed, model=result.model_used, provider=result.provider_used)

    async def analyze_conflict_escalation(
        self, req: ConflictRequest, ai_settings: Optional[AISettings] = None
    ) -> ConflictResult:
        result = await self.failover.complete(
            prompts.build_conflict_prompt(req), ANALYTICAL, self._resolve(ai_settings),
            parse=lambda raw: parse_object(raw, CONFLICT_REPORT),
        )
        data = result.parsed
        return ConflictResult(
            escalation_score=data["escalationScore"],
            curve=coerce_list(data["curve"], CONFLICT_POINT),
            plateau_warnings=data["plateauWarnings"],
            suggestions=data["suggestions"],
            model=result.model_used,
            provider=result.provider_used,
        )

    async def analyze_pov_balance(
        self, req: POVAnalysisRequest, ai_settings: Optional[AISettings] = None
    ) -> POVAnalysisResult:
        """Local POV checks, plus model suggestions when enough data and a provider exist.

        A failed suggestion call is logged and the local findings are returned
        on their own.
        """
        ai = self._resolve(ai_settings)
        distribution: Dict[str, int] = {}
        sequence: List[str] = []
        issues: List[POVIssue] = []

        for event in req.events:
            if not event.pov_character:
                issues.append(POVIssue(
                    id=_short_id("pov-missing"),
                    type="missing_pov",
                    severity="error",
                    title="No POV character assigned",
                    description=f'"{event.name}" has no POV character. Assign one for consistent narration.',
                    event_name=event.name,
                ))
                continue
            distribution[event.pov_character] = distribution.get(event.pov_character, 0) + 1
            sequence.append(event.pov_character)

        total = sum(distribution.values())
        if total > POV_IMBALANCE_MIN_SCENES:
            for character, count in distribution.items():
                if count / total > POV_IMBALANCE_RATIO:
                    issues.append(POVIssue(
                        id=_short_id("pov-imbalance"),
                        type="imbalance",
                        severity="warning",
                        title=f"POV imbalance: {character}",
                        description=(
                            f"{character} has {count}/{total} scenes ({_round_half_up(count / total * 100)}%). "
                            "Consider more variety."
                        ),
                    ))

        hops = [
            (sequence[i - 1], sequence[i])
            for i in range(1, len(sequence) - 1)
            if sequence[i] != sequence[i - 1] and sequence[i + 1] != sequence[i]
        ]
        for origin, target in hops[:MAX_HEAD_HOP_ISSUES]:
            issues.append(POVIssue(
                id=_short_id("pov-hop"),
                type="head_hopping",
                severity="info",
                title="Rapid POV switch",
                description=f"POV jumps {origin} -> {target} for only one scene. Consider grouping POV sections.",
            ))

        if len(req.events) >= POV_AI_MIN_EVENTS and ai.has_configured_provider():
            try:
                result = await self.failover.complete(
                    prompts.build_pov_prompt(req), CREATIVE, ai, parse=lambda raw: parse(raw, POV_SUGGESTION)
                )
            except ChronosAIError as e:
                logger.warning(f"POV suggestions unavailable, returning local analysis: {e.message}")
            else:
                for item in result.parsed:
                    issues.append(POVIssue(id=_short_id("pov-ai"), type="suggestion", severity="info", **item))
                return POVAnalysisResult(
                    issues=issues, distribution=distribution,
                    model=result.model_used, provider=result.provider_used,
                )

        return POVAnalysisResult(issues=issues, distribution=distribution, model="local", provider=ai.default_provider)

    def analyze_temporal_gaps(self, events: List[TemporalEvent]) -> List[TemporalGap]:
        return analyze_temporal_gaps(events)
