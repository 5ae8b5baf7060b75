"""Coaching prompts and the deterministic fallback templates.

Fallback templates are plain ``str.format`` strings parameterised by
``culture_value`` and ``dimension``.
"""

COACH_PERSONA = (
    "You are a direct, experienced management coach inside a training simulation. "
    "You coach people managers. Your job is to make the learner BETTER, not to make them feel good. "
    "Be warm but honest. Never use hollow affirmations for weak answers. "
    "2-4 sentences maximum. Respond ONLY with the coaching message: no preamble, no labels, no quotes."
)

EXCHANGE_GUIDANCE = {
    1: (
        "This is the FIRST exchange. Push for specificity and depth. If the answer is harmful, "
        "challenge it immediately. If it is surface-level, ask for the actual words they would use. "
        "End with a question about impact, not just intent."
    ),
    2: (
        "This is a MIDDLE exchange. Track whether they engaged with your challenge or deflected. "
        "Acknowledge specific improvement, then stress-test: what could go wrong with this approach? "
        'Use "{culture_value}" as a lens that sharpens their thinking.'
    ),
    3: (
        "This is the FINAL exchange. Give an honest closing reflection on how they did overall. "
        'Connect their best moment to "{culture_value}" and "{dimension}". '
        "End with a principle, not a platitude. Do NOT end with a question."
    ),
}

REFLECTION_PROMPT = """SCENARIO CONTEXT:
Title: {title}
Situation: {description}
Core Value Being Tested: {culture_value} - {culture_value_description}
Engagement Dimension: {dimension} - {dimension_description}
Key Behaviors to Consider: {behaviors}

REFLECTION PROMPT THEY RESPONDED TO:
{node_prompt}

PRIOR COACHING EXCHANGES:
{transcript}

THEIR {which} RESPONSE:
"{latest}"

YOUR COACHING TASK (Exchange #{exchange_number} of max {max_exchanges}):
{guidance}"""

NO_PRIOR_EXCHANGES = "None - this is the first coaching exchange."

AFFIRMING_PROMPT = """A manager just made the strongest decision available. Make the affirmation SPECIFIC and INSTRUCTIVE, not flattering.

SCENARIO: {title}
CORE VALUE: {culture_value} - {culture_value_description}
ENGAGEMENT DIMENSION: {dimension}

SITUATION: {node_prompt}

WHAT THEY CHOSE (the optimal choice): "{chosen_text}"
WHY IT WORKS: {chosen_explanation}

Name the specific thing that makes this choice strong and give ONE transferable principle. 2-3 sentences."""

CORRECTIVE_PROMPT = """A manager made a sub-optimal decision. Help them understand the gap, honestly and not harshly, framed forward: "consider how...".

SCENARIO: {title}
CORE VALUE: {culture_value} - {culture_value_description}
ENGAGEMENT DIMENSION: {dimension}

SITUATION: {node_prompt}

WHAT THEY CHOSE: "{chosen_text}" (Score: {chosen_score})
WHY IT FALLS SHORT: {chosen_explanation}

THE STRONGER OPTION: "{optimal_text}" (Score: {optimal_score})
WHY IT IS STRONGER: {optimal_explanation}

GAP SEVERITY: {severity}

No verdicts, no hollow praise. 2-3 sentences."""

# three per exchange number; each set has its own register (push, stress-test, close)
REFLECTION_FALLBACKS = {
    1: [
        "Let's make this concrete: you're sitting across from this person right now. "
        "What are your actual first words? Not the strategy, the specific sentence you'd open with.",
        'There\'s an instinct here worth exploring. What does "{culture_value}" actually look like '
        "in the specific words you'd use in this moment? Paint me the scene.",
        "You've read the situation, now zoom in. What's the one action you'd take in the next "
        "48 hours, and what would your team see you doing differently?",
    ],
    2: [
        "Now stress-test this: what's the most likely way this approach goes sideways, and how "
        'would you recover while staying true to "{culture_value}"?',
        "Consider the person on the other side of this conversation. What are they actually "
        "feeling right now, and how does knowing that change your opening move?",
        "Think about the ripple effect: it's not just about this one conversation. How does your "
        "team interpret this move, and what message does it send about \"{dimension}\"?",
    ],
    3: [
        "Here's what I'd take away from this: the best managers use moments exactly like this to "
        'show the team what "{culture_value}" looks like under pressure. Thinking it through '
        "carefully is the foundation.",
        '"{dimension}" isn\'t just a survey score, it\'s a daily practice. Wrestling with the '
        "specifics rather than defaulting to easy answers is where real leadership development happens.",
        "The hard part of management isn't knowing the right answer, it's acting on it in the moment. "
        'Keep getting specific about the words, the actions and the follow-through. That\'s where '
        '"{culture_value}" becomes real.',
    ],
}

AFFIRMING_FALLBACKS = [
    'Strong instinct here. This choice demonstrates "{culture_value}" in action, the kind of '
    "decision that builds trust with your team over time.",
    'This is what "{dimension}" looks like in practice: you chose the move that serves the person '
    "and the team, not the one that is easiest in the moment.",
]

CORRECTIVE_FALLBACKS = [
    'Consider how "{culture_value}" could have guided a stronger approach here. Sometimes the '
    "harder choice is the one that builds the most trust with your team.",
    'Consider what the strongest managers do in "{dimension}" situations: they lead with action, '
    "not just intention. What would have made your team feel the difference?",
    "Consider that the best option here wasn't just about the outcome. It was about demonstrating "
    '"{culture_value}" in a way your team would remember.',
]

DEFAULT_BEHAVIORS = [
    "Care A Lot",
    "Own The Outcome",
    "Say The Real Thing",
    "Listen To Learn",
    "Focus On Solutions",
]
