"""Authored reference taxonomies and starter scenarios loaded by seeding."""

ENGAGEMENT_DIMENSIONS = [
    (1, "Expectations", "I know what is expected of me at work."),
    (2, "Materials & Equipment", "I have the materials and equipment I need to do my work right."),
    (3, "Do Best Daily", "At work, I have the opportunity to do what I do best every day."),
    (4, "Recognition", "In the last seven days, I have received recognition or praise for doing good work."),
    (5, "Cares About Me", "My supervisor, or someone at work, seems to care about me as a person."),
    (6, "Encourages Development", "There is someone at work who encourages my development."),
    (7, "Opinions Count", "At work, my opinions seem to count."),
    (8, "Mission/Purpose", "The mission or purpose of my company makes me feel my job is important."),
    (9, "Committed to Quality", "My associates or fellow employees are committed to doing quality work."),
    (10, "Best Friend", "I have a best friend at work."),
    (11, "Progress", "In the last six months, someone at work has talked to me about my progress."),
    (12, "Learn & Grow", "This last year, I have had opportunities at work to learn and grow."),
]

CULTURE_VALUES = [
    ("no-ego", "No Ego, All In", "Stay humble and work together. No task is too small, no person too big."),
    ("better", "Better Every Day", "Embrace curiosity and growth. Focus on progress over perfection."),
    ("relentless", "Relentless for Results", "Be driven to win and achieve goals. Act with urgency and accountability."),
    ("truth", "Driven by Truth", "Speak up even when it's tough. Value honesty, transparency, and data-driven decisions."),
]

BEHAVIOR_TAGS = [
    (1, "Care A Lot", "Invest in people, build genuine care and trust."),
    (2, "Celebrate Success", "Recognize and appreciate wins often."),
    (3, "Do Right. Every Time", "Act with integrity, own mistakes, and fix them."),
    (4, "Focus On Solutions", "Fix problems, learn from mistakes, avoid blame."),
    (5, "Keep Your Promises", "Follow through on commitments and communicate openly."),
    (6, "Get Clear From The Start", "Define expectations, goals, and align upfront."),
    (7, "Love The Details", "Care about precision and accuracy."),
    (8, "Make Quality A Habit", "Standardize excellence and always deliver best work."),
    (9, "Own The Outcome", "Take responsibility for results, not just activities."),
    (10, "Maintain To Sustain", "Protect work-life balance and prevent burnout."),
    (11, "Assume Good Intent", "Give benefit of the doubt and clarify with facts."),
    (12, "Listen To Learn", "Listen fully and with curiosity."),
    (13, "Say The Real Thing", "Communicate honestly and kindly, avoid gossip."),
    (14, "Challenge, Then Unite", "Debate ideas respectfully, then move forward as one."),
    (15, "Think Team First", "Collaborate, help others, and put team success first."),
    (16, "Put The Client First", "Prioritize client goals and build trust."),
    (17, "See The Whole Board", "Connect work to bigger picture and strategy."),
    (18, "Respond With Precision", "Be quick, clear, and keep people updated."),
    (19, "Test. Learn. Grow", "Take intelligent risks, learn by doing, and iterate."),
    (20, "Get Better Every Day", "Continuously improve skills and work."),
    (21, "Grow Through Change", "Embrace change to become stronger and more resilient."),
    (22, "Share Information", "Share knowledge respectfully to strengthen the team."),
    (23, "Always Be Curious", "Ask why, dig deeper for best solutions."),
    (24, "Win With Stories & Data", "Use data and storytelling to communicate insights."),
    (25, "Automate The Repeatable", "Use tools to save brainpower for creative work."),
    (26, "Bring Fun To What You Do", "Enjoy the work, laugh often, and celebrate wins."),
]

# Each choice: (text, explanation, engagement_impact, points_base, culture_impact, positive ids, negative ids).
# Every choice on a decision points at the node that follows it.
SCENARIOS = [
    {
        "id": "acquisition-storm",
        "title": "The Acquisition Storm",
        "description": (
            "Your company just acquired a small SEO agency. You're managing the integration of 4 new team "
            "members who are anxious about their roles and skeptical about the culture. Expectations are "
            "unclear and morale is fragile."
        ),
        "difficulty": "Medium",
        "estimated_minutes": 12,
        "primary_dimension_id": 1,
        "secondary_dimension_id": 5,
        "culture_value_id": "no-ego",
        "nodes": [
            ("reflection", (
                "You've just been told your team is absorbing 4 people from a recently acquired SEO agency. "
                "They've heard rumors about layoffs. One of them, Marcus, was a team lead at the old agency and "
                "is clearly uncomfortable reporting to you.\n\nBefore your first meeting with the combined team "
                "tomorrow, reflect: **What is the most important thing you need to establish in that first "
                "interaction, and why?**"
            ), []),
            ("decision", (
                "It's the first team meeting. Marcus visibly tenses when you start talking about \"how we do "
                "things here.\" He interrupts: \"We had our own way of doing things that worked just fine. Are "
                "we just supposed to forget all that?\"\n\nThe room goes quiet. Everyone is watching you."
            ), [
                (
                    "\"Marcus, I hear you. Let's start by having your team share what was working. I want to "
                    "understand your strengths before we talk about anything else.\"",
                    "This honors their expertise while demonstrating humility. You're leading with curiosity, "
                    "not authority, and signaling that you value their input.",
                    2, 30, {"no-ego": 2, "better": 1, "relentless": 0, "truth": 1}, [1, 11, 12, 15], [],
                ),
                (
                    "\"I understand the frustration, but we need to align on one way of working. Let me walk "
                    "you through our processes so everyone's on the same page.\"",
                    "Clarity matters, but leading with 'our processes' right after an acquisition signals "
                    "hierarchy, not partnership. It sets expectations at the cost of trust.",
                    0, 10, {"no-ego": -1, "better": 0, "relentless": 1, "truth": 0}, [6], [11, 12, 15],
                ),
                (
                    "\"That kind of attitude isn't going to help anyone. We're one team now, and I need "
                    "everyone bought in.\"",
                    "Shutting down dissent publicly is one of the fastest ways to destroy psychological "
                    "safety. People comply instead of committing.",
                    -2, -10, {"no-ego": -2, "better": -1, "relentless": 0, "truth": -1}, [], [1, 11, 12, 13, 14],
                ),
            ]),
            ("reflection", (
                "After the meeting, one of the acquired team members, Priya, sends you a private message: "
                "\"Thanks for today. I was really nervous. But I still don't really understand what my role "
                "is going to look like here.\"\n\n**Reflect: How would you approach clarifying Priya's role "
                "while respecting that things are still being figured out?**"
            ), []),
            ("decision", (
                "A week later, Marcus and the original team members are still working in separate silos. A "
                "client deliverable nearly slipped through the cracks because no one knew who owned it.\n\n"
                "You need to fix this before it becomes the norm."
            ), [
                (
                    "Pair up one acquired team member with one original team member on each active client. "
                    "Create shared ownership from the start, and hold a quick weekly sync to surface gaps.",
                    "Structural integration with accountability. Collaboration happens naturally, the sync is "
                    "a safety net, and ownership is crystal clear.",
                    2, 30, {"no-ego": 2, "better": 1, "relentless": 2, "truth": 1}, [6, 9, 15, 17], [],
                ),
                (
                    "Send a message to the team reminding everyone to collaborate and flag any ownership "
                    "confusion. Trust them to figure it out.",
                    "A message won't rewire team dynamics. This avoids the hard work of structural change.",
                    -1, 5, {"no-ego": 0, "better": -1, "relentless": -1, "truth": 0}, [18], [6, 9, 17],
                ),
                (
                    "Call a team meeting, lay out the ownership problem publicly, and ask the team to "
                    "self-organize into integrated pods by end of day.",
                    "Surfacing the problem is transparent, but forcing same-day self-organization on a team "
                    "that barely knows each other creates anxiety, not alignment.",
                    0, 15, {"no-ego": 0, "better": 0, "relentless": 1, "truth": 1}, [13, 14], [1, 10],
                ),
            ]),
            ("outcome", (
                "**Three months later:** The team has gelled. Marcus has become one of your most trusted "
                "collaborators, and Priya is thriving in her clarified role.\n\n*This scenario tested your "
                "ability to lead through organizational change with humility and clarity.*"
            ), []),
        ],
    },
    {
        "id": "burnout-blind-spot",
        "title": "The Burnout Blind Spot",
        "description": (
            "Your top performer, Jordan, has been crushing it for months: leading a major client pitch, "
            "mentoring a junior, and volunteering for every fire drill. But you're starting to notice cracks."
        ),
        "difficulty": "Hard",
        "estimated_minutes": 15,
        "primary_dimension_id": 5,
        "secondary_dimension_id": 11,
        "culture_value_id": "better",
        "nodes": [
            ("reflection", (
                "Jordan has been your rock for 6 months. Their work quality is still strong, but they've been "
                "canceling 1:1s, their replies are shorter, and they skipped the last team happy hour, which "
                "they usually organize.\n\n**Reflect: What signals are you seeing, and what might they mean? "
                "What's your responsibility as their manager right now?**"
            ), []),
            ("decision", (
                "You get Jordan into a 1:1. When you ask how they're doing, they say: \"I'm fine. Just busy. "
                "You know how it is.\"\n\nTheir tone is flat and their camera is off, which is unusual for them."
            ), [
                (
                    "\"Jordan, I've noticed some changes and I'm genuinely concerned about you. Not your "
                    "output, you. Can we talk about what's really going on?\"",
                    "Leading with care over performance signals that they matter as a person.",
                    2, 30, {"no-ego": 1, "better": 2, "relentless": 0, "truth": 2}, [1, 10, 12, 13], [],
                ),
                (
                    "\"Okay, just making sure. Let's go through your project updates then. I want to make "
                    "sure nothing's slipping.\"",
                    "Accepting 'I'm fine' when every signal says otherwise is a missed opportunity.",
                    -1, 5, {"no-ego": -1, "better": -1, "relentless": 1, "truth": -1}, [9], [1, 10, 12, 13],
                ),
                (
                    "\"I can tell something's off. I'm going to take the new client prep off your plate this "
                    "week so you can breathe. Sound good?\"",
                    "Lightening the load is a good instinct, but doing it before understanding the issue is "
                    "paternalistic.",
                    0, 15, {"no-ego": 0, "better": 1, "relentless": -1, "truth": 0}, [1, 4], [7, 12],
                ),
            ]),
            ("reflection", (
                "Jordan opens up. They've been stretched thin but felt they couldn't say no because "
                "\"everyone's counting on me.\" They also haven't been learning anything new.\n\n**Reflect: "
                "What's the real issue underneath Jordan's burnout? How does this connect to engagement, not "
                "just workload?**"
            ), []),
            ("decision", (
                "Jordan is burned out, but it's not just about hours. It's about growth, meaning, and the fear "
                "of letting people down.\n\nYou need to take concrete action. What's your move?"
            ), [
                (
                    "Co-create a 30-day plan: redistribute one of their three responsibilities, carve out 4 "
                    "hours a week for a strategic project they care about, and schedule biweekly growth check-ins.",
                    "Addresses workload AND engagement: strategic time, growth, and regular progress talks.",
                    2, 35, {"no-ego": 1, "better": 2, "relentless": 1, "truth": 1}, [1, 6, 10, 19, 20], [],
                ),
                (
                    "Redistribute their mentoring responsibility and tell them to take a mental health day this "
                    "Friday.",
                    "A day off is a band-aid. Jordan comes back Monday to the same structural problem.",
                    0, 15, {"no-ego": 0, "better": 0, "relentless": 0, "truth": 0}, [1, 10], [6, 17, 20],
                ),
                (
                    "Tell Jordan you'll advocate for a lighter workload in the next sprint planning. Ask them to "
                    "hang tight for now.",
                    "Deferring action while someone is burning out is a failure of urgency.",
                    -2, 0, {"no-ego": -1, "better": -1, "relentless": -2, "truth": -1}, [], [5, 9, 10, 18],
                ),
            ]),
            ("outcome", (
                "**Six weeks later:** Jordan is re-energized and has turned the strategic project into a new "
                "service offering.\n\n*This scenario tested your ability to see past performance to the person.*"
            ), []),
        ],
    },
]
