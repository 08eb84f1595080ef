"""Templates for prompts about people: bios, profiles and speaker notes.

All text is filler; only the subject varies.
"""

from __future__ import annotations

from mockstream.catalog import register


@register("person")
def short_biography(subject: str) -> str:
    """Heading, summary paragraph and a milestone list."""
    return (
        f"# {subject}\n\n"
        f"**{subject}** is best known for steady, thoughtful work that bridges "
        f"research and practice. Colleagues describe a habit of asking the second "
        f"question, the one that turns a good idea into a usable one.\n\n"
        f"## Career highlights\n\n"
        f"- Started out writing technical notes that later became a reference text\n"
        f"- Led a small group that shipped three widely adopted tools\n"
        f"- Mentored dozens of early-career practitioners\n"
        f"- Speaks regularly about craft, clarity and long-term thinking\n\n"
        f"## Why it matters\n\n"
        f"The through-line in {subject}'s work is patience: small, well-documented "
        f"steps that compound over years rather than quarters.\n"
    )


@register("person")
def profile_card(subject: str) -> str:
    """Profile table plus a pull quote."""
    return (
        f"## Profile: {subject}\n\n"
        f"| Field | Detail |\n"
        f"| --- | --- |\n"
        f"| Name | {subject} |\n"
        f"| Focus | Systems, writing, teaching |\n"
        f"| Known for | Clear explanations of hard problems |\n"
        f"| Based in | Lorem City, Ipsum Province |\n\n"
        f"> \"Most problems get easier once you write them down properly.\"\n"
        f"> — attributed to {subject}\n\n"
        f"### Selected work\n\n"
        f"1. *Notes on Careful Building*, an essay collection\n"
        f"2. A long-running workshop series on design reviews\n"
        f"3. Open-source contributions spanning more than a decade\n"
    )


@register("person")
def speaker_introduction(subject: str) -> str:
    """Conference-style introduction with talking points."""
    return (
        f"### Introducing {subject}\n\n"
        f"Please join me in welcoming **{subject}**, whose talks have a reputation "
        f"for being both practical and a little bit surprising.\n\n"
        f"#### Today's talking points\n\n"
        f"- **Origins**: how an unglamorous side project became a career\n"
        f"- **Method**: the weekly review habit that keeps work honest\n"
        f"- **Lessons**: what went wrong, and what was worth keeping\n\n"
        f"> Audience tip: bring questions. {subject} saves the last fifteen "
        f"minutes for them.\n\n"
        f"Afterwards, {subject} will be around for informal conversation near "
        f"the registration desk.\n"
    )
