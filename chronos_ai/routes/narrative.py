from fastapi import APIRouter, Depends
from typing import List

from ..models.narrative import (
    AnalyzeRippleRequest,
    Beat,
    BeatConsistencyRequest,
    BeatProseRequest,
    BuildSequenceRequest,
    ChapterAssemblyRequest,
    ChapterAssemblyResult,
    CheckConsistencyRequest,
    CoWriteRequest,
    CoWriteResult,
    ConflictRequest,
    ConflictResult,
    ConsistencyReport,
    DetectGapsRequest,
    GenerateIdeasRequest,
    GenerateSceneRequest,
    GenerateVoiceRequest,
    IdeasResult,
    MissingSceneResult,
    NarrativeSequenceResult,
    PacingRequest,
    PacingResult,
    POVAnalysisRequest,
    POVAnalysisResult,
    RippleReport,
    SceneCardResult,
    SuggestBeatsRequest,
    TemporalGapsRequest,
    TemporalGapsResult,
    TextResult,
    ThematicRequest,
    ThematicResult,
    VoiceSampleResult,
)
from ..services import NarrativeAIService
from .dependencies import get_service

router = APIRouter(prefix="/api/v1/ai", tags=["narrative"])


@router.post("/ideas", response_model=IdeasResult)
async def generate_ideas(request: GenerateIdeasRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.generate_ideas(request)


@router.post("/consistency", response_model=ConsistencyReport)
async def check_consistency(request: CheckConsistencyRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.check_consistency(request)


@router.post("/ripple", response_model=RippleReport)
async def analyze_ripple(request: AnalyzeRippleRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.analyze_ripple_effects(request)


@router.post("/scene-card", response_model=SceneCardResult)
async def generate_scene_card(request: GenerateSceneRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.generate_scene_card(request)


@router.post("/beats", response_model=List[Beat])
async def suggest_beats(request: SuggestBeatsRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.suggest_beats(request)


@router.post("/beats/prose", response_model=TextResult)
async def generate_beat_prose(request: BeatProseRequest, service: NarrativeAIService = Depends(get_service)):
    return TextResult(text=await service.generate_beat_prose(request))


@router.post("/beats/consistency", response_model=TextResult)
async def check_beat_consistency(request: BeatConsistencyRequest, service: NarrativeAIService = Depends(get_service)):
    return TextResult(text=await service.check_beat_consistency(request))


@router.post("/voice", response_model=VoiceSampleResult)
async def generate_voice(request: GenerateVoiceRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.generate_character_voice(request)


@router.post("/gaps", response_model=MissingSceneResult)
async def detect_gaps(request: DetectGapsRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.detect_missing_scenes(request)


@router.post("/sequence", response_model=NarrativeSequenceResult)
async def build_sequence(request: BuildSequenceRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.build_narrative_sequence(request)


@router.post("/chapter", response_model=ChapterAssemblyResult)
async def assemble_chapter(request: ChapterAssemblyRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.assemble_chapter(request)


@router.post("/pacing", response_model=PacingResult)
async def analyze_pacing(request: PacingRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.analyze_pacing(request)


@router.post("/thematic", response_model=ThematicResult)
async def analyze_thematic(request: ThematicRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.analyze_thematic_threading(request)


@router.post("/conflict", response_model=ConflictResult)
async def analyze_conflict(request: ConflictRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.analyze_conflict_escalation(request)


@router.post("/pov", response_model=POVAnalysisResult)
async def analyze_pov(request: POVAnalysisRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.analyze_pov_balance(request)


@router.post("/temporal-gaps", response_model=TemporalGapsResult)
async def analyze_temporal_gaps(request: TemporalGapsRequest, service: NarrativeAIService = Depends(get_service)):
    return TemporalGapsResult(gaps=service.analyze_temporal_gaps(request.events))


@router.post("/co-write", response_model=CoWriteResult)
async def co_write(request: CoWriteRequest, service: NarrativeAIService = Depends(get_service)):
    return await service.co_write_scene(request)
