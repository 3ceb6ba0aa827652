"""Prompt builders for the narrative features.

Each builder is a pure function of its request model. Item counts stated in
the prompts ("at most 10 issues") are requests to the model only; parsed
arrays are never truncated.
"""

import json
from typing import Iterable, List

from .models.narrative import (
    AnalyzeRippleRequest,
    Beat,
    BeatProseRequest,
    BuildSequenceRequest,
    ChapterAssemblyRequest,
    CheckConsistencyRequest,
    CoWriteOptions,
    ConflictRequest,
    DetectGapsRequest,
    GenerateIdeasRequest,
    GenerateSceneRequest,
    GenerateVoiceRequest,
    NamedEntity,
    PacingRequest,
    POVAnalysisRequest,
    RelationshipRef,
    SuggestBeatsRequest,
    ThematicRequest,
)

TOOL_NAME = "Chronos"


def _entity_lines(entities: Iterable[NamedEntity]) -> str:
    return "".join(f"- **{e.name}**: {e.description or '(no description)'}\n" for e in entities)


def _section(title: str, entities: List[NamedEntity]) -> str:
    if not entities:
        return ""
    return f"\n## {title}\n" + _entity_lines(entities)


def _relationship_lines(relationships: Iterable[RelationshipRef]) -> str:
    lines = []
    for r in relationships:
        kind = f"{r.type}: {r.label}" if r.label else r.type
        lines.append(f"- {r.from_name} -[{kind}]-> {r.to_name}\n")
    return "".join(lines)


def build_idea_prompt(req: GenerateIdeasRequest) -> str:
    prompt = f"""You are a creative writing assistant for a multi-timeline narrative tool called {TOOL_NAME}.

Generate 5 plot ideas, twists or development suggestions for this entity.

## Entity
- **Name:** {req.entity_name}
- **Type:** {req.entity_type}
- **Description:** {req.entity_description}
"""
    beats = req.properties.get("beats")
    if isinstance(beats, list) and beats:
        prompt += "\n## Scene Beats\n"
        for i, beat in enumerate(beats, 1):
            if isinstance(beat, dict):
                prompt += f"{i}. [{beat.get('type', '')}] {beat.get('description', '')}\n"

    if req.linked_entities:
        prompt += "\n## Related Entities\n"
        for e in req.linked_entities:
            prompt += f"- **{e.name}** ({e.type}): {e.description}\n"

    if req.project_context:
        prompt += f"\n## Project Context\n{req.project_context}\n"

    prompt += """
## Instructions
Give each idea a short title (max 8 words), a 2-3 sentence description, and a
confidence from 0.0 to 1.0 for how well it fits the existing narrative.

Respond ONLY with valid JSON:
{"ideas": [{"title": "...", "description": "...", "confidence": 0.85}]}"""
    return prompt


def build_beat_prose_prompt(req: BeatProseRequest) -> str:
    ctx = req.context
    previous = f"Previous Context:\n{ctx.previous_prose}\n" if ctx.previous_prose else ""
    return f"""You are an AI co-author for a novel.

Context:
Project: {ctx.project_context or 'Unknown Project'}
Scene/Event: {ctx.entity_name} ({ctx.entity_description})

{previous}
Current Beat ({req.beat.type}): {req.beat.description}

Task: Write a single paragraph of narrative prose for this beat. Show, don't tell.
Output: Just the prose, nothing else."""


def build_suggest_beats_prompt(req: SuggestBeatsRequest) -> str:
    return f"""You are an expert story outliner.

Context:
Project: {req.project_context or 'Unknown'}
Event: {req.entity_name}
Description: {req.entity_description}

Task: Break this event down into 5-8 distinct narrative beats.
Format: Return ONLY a JSON array of objects with "type" (action, dialogue, emotion, description, internal) and "description".
Example: [{{"type": "action", "description": "Hero enters the room."}}]"""


def build_beat_consistency_prompt(beats: List[Beat], entity_name: str, entity_description: str) -> str:
    beats_text = "\n".join(f"{i}. [{b.type}] {b.description}" for i, b in enumerate(beats, 1))
    return f"""Analyze this sequence of beats for the event "{entity_name}".

Event Description: {entity_description}

Beats:
{beats_text}

Task: Check logical consistency, pacing, and alignment with the event description.
Output: A concise paragraph highlighting issues or confirming the sequence is solid."""


def build_consistency_prompt(req: CheckConsistencyRequest) -> str:
    scope = f'## Scope: Timeline "{req.scope_timeline_name}"' if req.scope == "timeline" else "## Scope: Entire Project"
    prompt = f"""You are a narrative consistency analyzer for a multi-timeline storytelling tool called {TOOL_NAME}.

## Task
Find genuine logical inconsistencies, contradictions and plot holes. Do not flag stylistic choices.

## Project: {req.project_name}
{scope}

## Narrative Elements
"""
    grouped = {}
    for entity in req.entities:
        grouped.setdefault(entity.type, []).append(entity)

    for entity_type, entities in grouped.items():
        prompt += f"\n### {entity_type[:1].upper() + entity_type[1:]}s\n"
        for e in entities:
            prompt += f"- **{e.name}**: {e.description or '(no description)'}"
            props = ", ".join(f"{k}: {v}" for k, v in e.properties.items() if v not in (None, ""))
            if props:
                prompt += f" [{props}]"
            prompt += "\n"

    prompt += """
## Issue categories
timeline_paradox, character_conflict, causality_break, logic_gap

## Response Format
Respond ONLY with valid JSON:
{"issues": [{"severity": "error|warning|suggestion",
             "category": "timeline_paradox|character_conflict|causality_break|logic_gap",
             "title": "Short title (max 10 words)",
             "description": "2-3 sentence explanation",
             "entityNames": ["Entity1", "Entity2"],
             "suggestedFix": "How to resolve it"}]}

If nothing is wrong return {"issues": []}. Return at most 10 issues, most critical first."""
    return prompt


def build_ripple_prompt(req: AnalyzeRippleRequest) -> str:
    edited = req.edited_entity
    prompt = f"""You are a narrative impact analyzer for a multi-timeline storytelling tool called {TOOL_NAME}.

## Task
An entity's description is about to change. Predict how the change cascades to related entities.

## Project: {req.project_name}

## Entity Being Edited
- **Name:** {edited.name}
- **Type:** {edited.type}
- **Before:** {edited.description_before or '(empty)'}
- **After:** {edited.description_after or '(empty)'}

## Related Entities
"""
    for e in req.related_entities:
        prompt += f"- **{e.name}** ({e.type}, relationship: {e.relationship_type}): {e.description or '(no description)'}\n"

    prompt += """
## Response Format
Respond ONLY with valid JSON:
{"effects": [{"affectedEntityName": "...", "impactLevel": "high|medium|low",
              "description": "2-3 sentence explanation", "suggestedAdjustment": "..."}]}

high = direct contradiction or broken causality, medium = needs attention, low = optional.
If nothing is affected return {"effects": []}. Return at most 8 effects."""
    return prompt


def build_scene_prompt(req: GenerateSceneRequest) -> str:
    prompt = f"""You are a professional novel scene architect for a narrative tool called {TOOL_NAME}.

## Task
Generate a vivid, ready-to-write scene outline for this event.

## Event
- **Name:** {req.event_name}
- **Description:** {req.event_description}
"""
    prompt += _section("Characters in this scene", req.connected_characters)
    prompt += _section("Location", req.connected_locations)
    prompt += _section("Themes", req.connected_themes)
    if req.project_context:
        prompt += f"\n## Project Context\n{req.project_context}\n"

    prompt += """
Respond ONLY with valid JSON:
{"pov": "Character Name", "goal": "...", "conflict": "...", "resolution": "...",
 "settingNotes": "Sensory details...", "openingLine": "The first sentence..."}"""
    return prompt


def build_sequence_prompt(req: BuildSequenceRequest) -> str:
    prompt = f"""You are a narrative structure expert for a storytelling tool called {TOOL_NAME}.

## Task
Determine the best reading order (chapter sequence) for these events, considering causality,
temporal order and dramatic pacing.

## Project: {req.project_name}

## Events
"""
    for e in req.events:
        prompt += f"- **{e.name}** (id: {e.id}): {e.description or '(no description)'}\n"
    if req.relationships:
        prompt += "\n## Relationships Between Events\n" + _relationship_lines(req.relationships)

    prompt += """
Respond ONLY with valid JSON:
{"steps": [{"entityId": "id-here", "entityName": "Event Name", "chapterNumber": 1, "reasoning": "..."}]}

Order ALL events."""
    return prompt


def build_gap_detection_prompt(req: DetectGapsRequest) -> str:
    prompt = f"""You are a narrative gap analyst for a storytelling tool called {TOOL_NAME}.

## Task
Identify missing transition scenes, unexplained jumps and narrative gaps.

## Project: {req.project_name}

## Events
"""
    prompt += _entity_lines(req.events)
    prompt += _section("Characters", req.characters)
    prompt += _section("Locations", req.locations)
    if req.relationships:
        prompt += "\n## Relationships\n" + _relationship_lines(req.relationships)

    prompt += """
Look for transition, emotional, causal, introduction and setup gaps.

Respond ONLY with valid JSON:
{"scenes": [{"title": "...", "description": "...", "afterEvent": "...", "beforeEvent": "...", "reason": "..."}]}

Return at most 6 scenes. If there are no gaps return {"scenes": []}."""
    return prompt


def build_voice_prompt(req: GenerateVoiceRequest) -> str:
    prompt = f"""You are a dialogue expert for a narrative tool called {TOOL_NAME}.

## Task
Write 3 distinctive dialogue lines for this character, each showing a different mood.

## Character
- **Name:** {req.character_name}
- **Description:** {req.character_description}
"""
    prompt += _section("Character Themes", req.connected_themes)
    prompt += _section("Character Arcs", req.connected_arcs)
    if req.project_context:
        prompt += f"\n## Story Context\n{req.project_context}\n"

    prompt += """
Respond ONLY with valid JSON:
{"samples": [{"line": "The exact dialogue line", "context": "when angry at a friend"}]}"""
    return prompt


def build_pov_prompt(req: POVAnalysisRequest) -> str:
    events = []
    for e in req.events:
        line = f'- "{e.name}" POV: {e.pov_character or "UNASSIGNED"}'
        if e.emotion_level:
            line += f", emotion: {e.emotion_level:g}"
        events.append(line)
    characters = ", ".join(c.name for c in req.characters)
    return f"""You are a narrative structure analyst. Analyze this POV distribution for a novel:

EVENTS & POV:
{chr(10).join(events)}

CHARACTERS: {characters}

Return JSON: {{"suggestions":[{{"title":"...","description":"..."}}]}}
Max 3 suggestions about POV rhythm, emotional variety per POV and underused characters."""


def _signed(value: float) -> str:
    return f"+{value:g}" if value > 0 else f"{value:g}"


def build_chapter_prompt(req: ChapterAssemblyRequest) -> str:
    event_lines = []
    for i, e in enumerate(req.events, 1):
        line = f'{i}. "{e.name}"'
        if e.description:
            line += f": {e.description}"
        if e.pov_character:
            line += f" [POV: {e.pov_character}]"
        if e.emotion_level is not None:
            line += f" [Emotion: {_signed(e.emotion_level)}]"
        if e.scene_card:
            sc = e.scene_card
            parts = [f"{label}: {value}" for label, value in
                     (("Goal", sc.goal), ("Conflict", sc.conflict), ("Outcome", sc.outcome)) if value]
            if parts:
                line += f"\n   Scene: {' | '.join(parts)}"
            if sc.opening_line:
                line += f'\n   Opens: "{sc.opening_line}"'
        if e.draft_word_count:
            line += f" [{e.draft_word_count}w drafted]"
        event_lines.append(line)

    char_lines = []
    for c in req.characters:
        line = f"- {c.name}: {c.description or 'No description'}"
        if c.voice_samples:
            line += f'\n  Voice: "{c.voice_samples[0].line}" ({c.voice_samples[0].context})'
        char_lines.append(line)

    relationships = _relationship_lines(req.relationships).rstrip() or "None specified"
    emotion_arc = " -> ".join(
        f"{e.name}: {_signed(e.emotion_level)}" for e in req.events if e.emotion_level is not None
    )

    header = [f'CHAPTER: "{req.chapter_name}"']
    if req.chapter_description:
        header.append(f"INTENT: {req.chapter_description}")
    if req.previous_chapter_summary:
        header.append(f"PREVIOUS CHAPTER: {req.previous_chapter_summary}")
    if req.next_chapter_hint:
        header.append(f"NEXT CHAPTER LEADS TO: {req.next_chapter_hint}")
    if req.project_context:
        header.append(f"PROJECT: {req.project_context}")

    return f"""You are an expert novel architect. Assemble a chapter blueprint from this story data.

{chr(10).join(header)}

SCENES IN ORDER:
{chr(10).join(event_lines)}

EMOTIONAL ARC: {emotion_arc or 'Not set'}

CHARACTERS INVOLVED:
{chr(10).join(char_lines)}

RELATIONSHIPS:
{relationships}

Return ONLY this JSON:
{{"synopsis":"...","structure":[{{"beat":"rising/falling/climax/resolution","scene":"event name","emotionalNote":"..."}}],"estimatedWordCount":N,"openingHook":"...","closingHook":"...","tensions":["..."],"characterArcs":[{{"character":"name","arc":"..."}}]}}

Match structure entries 1:1 with the scenes. Honor the emotional arc."""


def build_style_guide(options: CoWriteOptions) -> str:
    lines = [
        f"Tone: {options.tone}",
        f"POV: {options.pov}",
        f"Tense: {options.tense}",
        f"Target length: about {options.target_word_count} words for the scene",
    ]
    if options.style_reference:
        lines.append(f"Style Reference: {options.style_reference}")
    lines.append(
        "Include natural dialogue where appropriate." if options.include_dialogue
        else "Keep dialogue to a minimum."
    )
    lines.append(f"Emotional Intensity (1-5): {options.emotional_intensity}")
    if options.previous_chapter_summary:
        lines.append(f"Previous chapter: {options.previous_chapter_summary}")
    if options.next_chapter_hint:
        lines.append(f"Leads into: {options.next_chapter_hint}")
    return "\n".join(lines)


def build_plan_description(scene_card: dict, style_guide: str) -> str:
    return f"Scene Plan:\n{json.dumps(scene_card)}\n\nStyle Guide:\n{style_guide}"


def build_pacing_prompt(req: PacingRequest) -> str:
    events = "\n".join(
        f"{i}. {e.name} (Emotion: {e.emotion_level:g}, Words: {e.word_count or 'unknown'})"
        for i, e in enumerate(req.events, 1)
    )
    return f"""You are a structural editor for a novel. Analyze the pacing of these sequential events.

PROJECT: {req.project_name}
EVENTS IN ORDER:
{events}

Look for long low-emotion stretches, continuous high emotion without relief, and missing act breaks.

Return ONLY JSON:
{{"score": 85, "actStructure": [{{"name": "Act 1: Setup", "events": ["event1"], "pacingLabel": "too_fast|too_slow|good"}}],
 "suggestions": ["..."]}}"""


def build_thematic_prompt(req: ThematicRequest) -> str:
    themes = "\n".join(f"- {t.name}: {t.description}" for t in req.themes)
    events = "\n".join(
        f"{i}. [{e.chapter or 'No Chapter'}] {e.name}: {e.description}" for i, e in enumerate(req.events, 1)
    )
    return f"""You are a narrative editor analyzing thematic threading in a novel.

PROJECT: {req.project_name}

THEMES TO TRACK:
{themes}

EVENTS:
{events}

For each theme give a 0-100 score, the strongest and weakest section, and one suggestion
for weaving the theme into the weakest section.

Return ONLY JSON:
{{"themeCoverage": {{"Theme Name": {{"score": 85, "strongestAct": "Act 1", "weakestAct": "Act 3", "suggestion": "..."}}}}}}"""


def build_conflict_prompt(req: ConflictRequest) -> str:
    events = "\n".join(
        f"{i}. {e.name}\n   Desc: {e.description}\n   Chars: {', '.join(e.characters_involved)}"
        for i, e in enumerate(req.events, 1)
    )
    return f"""You are a developmental editor analyzing conflict escalation.

PROJECT: {req.project_name}
EVENTS:
{events}

Look for plateaus, de-escalation, and the mix of internal, interpersonal and environmental conflict.

Return ONLY JSON:
{{"escalationScore": 75, "curve": [{{"eventName": "Event 1", "intensity": 2, "type": "internal|interpersonal|environmental"}}],
 "plateauWarnings": ["..."], "suggestions": ["..."]}}"""

