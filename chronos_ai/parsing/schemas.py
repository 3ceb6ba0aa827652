"""Per-feature closed vocabularies and item schemas."""

from .structured import FieldSpec, ItemSchema

ISSUE_SEVERITIES = ("error", "warning", "suggestion")
ISSUE_CATEGORIES = ("timeline_paradox", "character_conflict", "causality_break", "logic_gap")
IMPACT_LEVELS = ("high", "medium", "low")
BEAT_TYPES = ("action", "dialogue", "emotion", "description", "internal")
PACING_LABELS = ("too_fast", "too_slow", "good")
CONFLICT_TYPES = ("internal", "interpersonal", "environmental")

IDEA = ItemSchema(
    name="idea",
    root_key="ideas",
    fields={
        "title": FieldSpec.text(),
        "description": FieldSpec.text(),
        "confidence": FieldSpec.number(0.7),
    },
)

ISSUE = ItemSchema(
    name="issue",
    root_key="issues",
    fields={
        "severity": FieldSpec.enum(ISSUE_SEVERITIES, "warning"),
        "category": FieldSpec.enum(ISSUE_CATEGORIES, "logic_gap"),
        "title": FieldSpec.text("Untitled Issue"),
        "description": FieldSpec.text(),
        "entityNames": FieldSpec.string_list(),
        "suggestedFix": FieldSpec.text(),
    },
)

RIPPLE_EFFECT = ItemSchema(
    name="ripple_effect",
    root_key="effects",
    fields={
        "affectedEntityName": FieldSpec.text("Unknown Entity"),
        "impactLevel": FieldSpec.enum(IMPACT_LEVELS, "medium"),
        "description": FieldSpec.text(),
        "suggestedAdjustment": FieldSpec.text(),
    },
)

SCENE_CARD = ItemSchema(
    name="scene_card",
    fields={
        "pov": FieldSpec.text(),
        "goal": FieldSpec.text(),
        "conflict": FieldSpec.text(),
        "resolution": FieldSpec.text(),
        "settingNotes": FieldSpec.text(),
        "openingLine": FieldSpec.text(),
    },
)

BEAT = ItemSchema(
    name="beat",
    fields={
        "type": FieldSpec.enum(BEAT_TYPES, "action"),
        "description": FieldSpec.text(),
    },
)

NARRATIVE_STEP = ItemSchema(
    name="narrative_step",
    root_key="steps",
    fields={
        "entityId": FieldSpec.text(),
        "entityName": FieldSpec.text(),
        "chapterNumber": FieldSpec.number(0),
        "reasoning": FieldSpec.text(),
    },
)

MISSING_SCENE = ItemSchema(
    name="missing_scene",
    root_key="scenes",
    fields={
        "title": FieldSpec.text("Missing Scene"),
        "description": FieldSpec.text(),
        "afterEvent": FieldSpec.text(),
        "beforeEvent": FieldSpec.text(),
        "reason": FieldSpec.text(),
    },
)

VOICE_SAMPLE = ItemSchema(
    name="voice_sample",
    root_key="samples",
    fields={
        "line": FieldSpec.text(),
        "context": FieldSpec.text(),
    },
)

POV_SUGGESTION = ItemSchema(
    name="pov_suggestion",
    root_key="suggestions",
    fields={
        "title": FieldSpec.text(),
        "description": FieldSpec.text(),
    },
)

CHAPTER_BLUEPRINT = ItemSchema(
    name="chapter_blueprint",
    fields={
        "synopsis": FieldSpec.text(),
        "structure": FieldSpec.passthrough([]),
        "estimatedWordCount": FieldSpec.number(0),
        "openingHook": FieldSpec.text(),
        "closingHook": FieldSpec.text(),
        "tensions": FieldSpec.string_list(),
        "characterArcs": FieldSpec.passthrough([]),
    },
)

CHAPTER_STRUCTURE_ENTRY = ItemSchema(
    name="chapter_structure_entry",
    fields={
        "beat": FieldSpec.text(),
        "scene": FieldSpec.text(),
        "emotionalNote": FieldSpec.text(),
    },
)

CHARACTER_ARC = ItemSchema(
    name="character_arc",
    fields={
        "character": FieldSpec.text(),
        "arc": FieldSpec.text(),
    },
)

PACING_REPORT = ItemSchema(
    name="pacing_report",
    fields={
        "score": FieldSpec.number(0),
        "actStructure": FieldSpec.passthrough([]),
        "suggestions": FieldSpec.string_list(),
    },
)

PACING_ACT = ItemSchema(
    name="pacing_act",
    fields={
        "name": FieldSpec.text(),
        "events": FieldSpec.string_list(),
        "pacingLabel": FieldSpec.enum(PACING_LABELS, "good"),
    },
)

THEME_COVERAGE = ItemSchema(
    name="theme_coverage",
    fields={
        "score": FieldSpec.number(0),
        "strongestAct": FieldSpec.text(),
        "weakestAct": FieldSpec.text(),
        "suggestion": FieldSpec.text(),
    },
)

CONFLICT_REPORT = ItemSchema(
    name="conflict_report",
    fields={
        "escalationScore": FieldSpec.number(0),
        "curve": FieldSpec.passthrough([]),
        "plateauWarnings": FieldSpec.string_list(),
        "suggestions": FieldSpec.string_list(),
    },
)

CONFLICT_POINT = ItemSchema(
    name="conflict_point",
    fields={
        "eventName": FieldSpec.text(),
        "intensity": FieldSpec.number(0),
        "type": FieldSpec.enum(CONFLICT_TYPES, "interpersonal"),
    },
)
