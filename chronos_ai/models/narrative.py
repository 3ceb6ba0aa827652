from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime, timezone


class CamelModel(BaseModel):
    # Accepts both camelCase (as emitted by models and the web client) and snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NamedEntity(CamelModel):
    name: str
    description: str = ""


class LinkedEntity(CamelModel):
    name: str
    type: str
    description: str = ""


class RelationshipRef(CamelModel):
    from_name: str
    to_name: str
    type: str
    label: Optional[str] = None


class AIResult(CamelModel):
    model: str = ""
    provider: str = ""
    cached: bool = False


# Ideas

class GenerateIdeasRequest(CamelModel):
    entity_name: str
    entity_type: str
    entity_description: str = ""
    linked_entities: List[LinkedEntity] = []
    project_context: Optional[str] = None
    properties: Dict[str, Any] = {}


class GeneratedIdea(CamelModel):
    id: str
    title: str
    description: str
    confidence: float


class IdeasResult(AIResult):
    ideas: List[GeneratedIdea] = []


# Beats

class Beat(CamelModel):
    type: str = "action"
    description: str = ""


class BeatContext(CamelModel):
    entity_name: str
    entity_description: str = ""
    previous_prose: Optional[str] = None
    project_context: Optional[str] = None


class BeatProseRequest(CamelModel):
    beat: Beat
    context: BeatContext


class SuggestBeatsRequest(CamelModel):
    entity_name: str
    entity_description: str = ""
    project_context: Optional[str] = None


class BeatConsistencyRequest(CamelModel):
    beats: List[Beat]
    entity_name: str
    entity_description: str = ""


class TextResult(CamelModel):
    text: str


# Consistency

class ConsistencyEntity(CamelModel):
    name: str
    type: str
    description: str = ""
    properties: Dict[str, Any] = {}


class CheckConsistencyRequest(CamelModel):
    entities: List[ConsistencyEntity]
    project_name: str
    scope: Literal["project", "timeline"] = "project"
    scope_timeline_name: Optional[str] = None


class ConsistencyIssue(CamelModel):
    id: str
    severity: Literal["error", "warning", "suggestion"]
    category: Literal["timeline_paradox", "character_conflict", "causality_break", "logic_gap"]
    title: str
    description: str
    entity_names: List[str] = []
    suggested_fix: str = ""


class ConsistencyReport(AIResult):
    issues: List[ConsistencyIssue] = []
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    scope: Literal["project", "timeline"] = "project"


# Ripple effects

class EditedEntity(CamelModel):
    name: str
    type: str
    description_before: str = ""
    description_after: str = ""


class RelatedEntity(CamelModel):
    name: str
    type: str
    description: str = ""
    relationship_type: str


class AnalyzeRippleRequest(CamelModel):
    edited_entity: EditedEntity
    related_entities: List[RelatedEntity] = []
    project_name: str


class RippleEffect(CamelModel):
    id: str
    affected_entity_name: str
    impact_level: Literal["high", "medium", "low"]
    description: str
    suggested_adjustment: str = ""


class RippleReport(AIResult):
    effects: List[RippleEffect] = []
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Scene cards

class SceneCard(CamelModel):
    pov: str = ""
    goal: str = ""
    conflict: str = ""
    resolution: str = ""
    setting_notes: str = ""
    opening_line: str = ""


class GenerateSceneRequest(CamelModel):
    event_name: str
    event_description: str = ""
    connected_characters: List[NamedEntity] = []
    connected_locations: List[NamedEntity] = []
    connected_themes: List[NamedEntity] = []
    project_context: Optional[str] = None


class SceneCardResult(AIResult):
    scene_card: SceneCard


# Narrative sequence

class SequenceEvent(CamelModel):
    id: str
    name: str
    description: str = ""


class BuildSequenceRequest(CamelModel):
    events: List[SequenceEvent]
    relationships: List[RelationshipRef] = []
    project_name: str


class NarrativeStep(CamelModel):
    entity_id: str
    entity_name: str
    chapter_number: int
    reasoning: str = ""


class NarrativeSequenceResult(AIResult):
    steps: List[NarrativeStep] = []


# Missing scenes

class DetectGapsRequest(CamelModel):
    events: List[NamedEntity]
    characters: List[NamedEntity] = []
    locations: List[NamedEntity] = []
    relationships: List[RelationshipRef] = []
    project_name: str


class MissingScene(CamelModel):
    id: str
    title: str
    description: str
    after_event: str = ""
    before_event: str = ""
    reason: str = ""


class MissingSceneResult(AIResult):
    scenes: List[MissingScene] = []


# Character voice

class VoiceSample(CamelModel):
    line: str
    context: str = ""


class GenerateVoiceRequest(CamelModel):
    character_name: str
    character_description: str = ""
    connected_themes: List[NamedEntity] = []
    connected_arcs: List[NamedEntity] = []
    project_context: Optional[str] = None


class VoiceSampleResult(AIResult):
    samples: List[VoiceSample] = []


# POV balance

class POVEvent(CamelModel):
    name: str
    pov_character: Optional[str] = None
    emotion_level: Optional[float] = None


class POVAnalysisRequest(CamelModel):
    events: List[POVEvent]
    characters: List[NamedEntity] = []
    project_context: Optional[str] = None


class POVIssue(CamelModel):
    id: str
    type: Literal["missing_pov", "imbalance", "head_hopping", "suggestion"]
    severity: Literal["warning", "info", "error"]
    title: str
    description: str
    event_name: Optional[str] = None


class POVAnalysisResult(AIResult):
    issues: List[POVIssue] = []
    distribution: Dict[str, int] = {}


# Chapter assembly

class ChapterSceneCard(CamelModel):
    pov: Optional[str] = None
    goal: Optional[str] = None
    conflict: Optional[str] = None
    outcome: Optional[str] = None
    opening_line: Optional[str] = None


class ChapterEvent(CamelModel):
    name: str
    description: str = ""
    scene_card: Optional[ChapterSceneCard] = None
    emotion_level: Optional[float] = None
    pov_character: Optional[str] = None
    draft_word_count: Optional[int] = None


class ChapterCharacter(CamelModel):
    name: str
    description: str = ""
    voice_samples: List[VoiceSample] = []


class ChapterAssemblyRequest(CamelModel):
    chapter_name: str
    chapter_description: str = ""
    events: List[ChapterEvent] = []
    characters: List[ChapterCharacter] = []
    relationships: List[RelationshipRef] = []
    project_context: Optional[str] = None
    previous_chapter_summary: Optional[str] = None
    next_chapter_hint: Optional[str] = None


class ChapterStructureEntry(CamelModel):
    beat: str = ""
    scene: str = ""
    emotional_note: str = ""


class CharacterArc(CamelModel):
    character: str = ""
    arc: str = ""


class ChapterBlueprint(CamelModel):
    synopsis: str = ""
    structure: List[ChapterStructureEntry] = []
    estimated_word_count: int = 0
    opening_hook: str = ""
    closing_hook: str = ""
    tensions: List[str] = []
    character_arcs: List[CharacterArc] = []


class ChapterAssemblyResult(AIResult):
    blueprint: ChapterBlueprint


# Temporal gaps (local)

class TemporalEvent(CamelModel):
    name: str
    timestamp: Optional[str] = None
    description: str = ""


class TemporalGapsRequest(CamelModel):
    events: List[TemporalEvent]


class TemporalGap(CamelModel):
    id: str
    from_event: str
    to_event: str
    from_timestamp: str
    to_timestamp: str
    gap_label: str
    gap_days: int
    warning: Optional[str] = None


class TemporalGapsResult(CamelModel):
    gaps: List[TemporalGap] = []


# Co-writing

class CoWriteOptions(CamelModel):
    tone: Literal["literary", "commercial", "minimalist", "lyrical", "cinematic"] = "literary"
    pov: Literal["first", "second", "third_limited", "third_omniscient"] = "third_limited"
    tense: Literal["past", "present"] = "past"
    target_word_count: int = Field(1500, gt=0)
    style_reference: Optional[str] = None
    include_dialogue: bool = True
    emotional_intensity: int = Field(3, ge=1, le=5)
    previous_chapter_summary: Optional[str] = None
    next_chapter_hint: Optional[str] = None


class CoWriteCharacter(CamelModel):
    name: str
    description: str = ""
    voice_samples: List[VoiceSample] = []


class CoWriteRequest(CamelModel):
    event_name: str
    event_description: str = ""
    characters: List[CoWriteCharacter] = []
    locations: List[NamedEntity] = []
    themes: List[NamedEntity] = []
    options: CoWriteOptions = Field(default_factory=CoWriteOptions)
    project_context: Optional[str] = None


class CoWriteResult(AIResult):
    prose: str = ""
    scene_card: SceneCard
    beats: List[Beat] = []


# Structural analysis

class PacingEvent(CamelModel):
    id: str = ""
    name: str
    emotion_level: float = 0
    word_count: Optional[int] = None


class PacingRequest(CamelModel):
    events: List[PacingEvent]
    project_name: str


class PacingAct(CamelModel):
    name: str = ""
    events: List[str] = []
    pacing_label: Literal["too_fast", "too_slow", "good"] = "good"


class PacingResult(AIResult):
    score: float = 0
    act_structure: List[PacingAct] = []
    suggestions: List[str] = []


class ThematicEvent(CamelModel):
    name: str
    description: str = ""
    chapter: Optional[str] = None


class ThematicRequest(CamelModel):
    events: List[ThematicEvent] = []
    themes: List[NamedEntity] = []
    relationships: List[RelationshipRef] = []
    project_name: str


class ThemeCoverage(CamelModel):
    score: float = 0
    strongest_act: str = ""
    weakest_act: str = ""
    suggestion: str = ""


class ThematicResult(AIResult):
    theme_coverage: Dict[str, ThemeCoverage] = {}


class ConflictEvent(CamelModel):
    name: str
    description: str = ""
    characters_involved: List[str] = []


class ConflictRequest(CamelModel):
    events: List[ConflictEvent]
    project_name: str


class ConflictPoint(CamelModel):
    event_name: str = ""
    intensity: float = 0
    type: Literal["internal", "interpersonal", "environmental"] = "interpersonal"


class ConflictResult(AIResult):
    escalation_score: float = 0
    curve: List[ConflictPoint] = []
    plateau_warnings: List[str] = []
    suggestions: List[str] = []
