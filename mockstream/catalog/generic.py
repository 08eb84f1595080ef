"""Catch-all templates for prompts that are neither about people nor organizations."""

from __future__ import annotations

from mockstream.catalog import register


@register("generic")
def explainer(subject: str) -> str:
    return (
        f"# {subject}\n\n"
        f"Here is a quick overview of **{subject}**, written to be skimmed.\n\n"
        f"## The short version\n\n"
        f"{subject} is easiest to understand as a set of trade-offs rather than a "
        f"single idea. Most of the interesting questions come from choosing which "
        f"trade-off to accept.\n\n"
        f"## Key points\n\n"
        f"- It has a clear core and a fuzzy edge\n"
        f"- The details change with context\n"
        f"- Good examples are worth more than definitions\n\n"
        f"> Lorem ipsum dolor sit amet, consectetur adipiscing elit.\n"
    )


@register("generic")
def step_by_step(subject: str) -> str:
    return (
        f"## Getting started with {subject}\n\n"
        f"1. **Define the goal.** Decide what a good outcome looks like.\n"
        f"2. **Gather context.** Collect the facts that constrain the problem.\n"
        f"3. **Try the simplest thing.** Build a rough first version.\n"
        f"4. **Review.** Compare the result against the goal.\n"
        f"5. **Iterate.** Keep what worked, drop what did not.\n\n"
        f"```text\n"
        f"goal -> context -> attempt -> review -> repeat\n"
        f"```\n\n"
        f"That loop is most of what there is to know about {subject}.\n"
    )


@register("generic")
def comparison_table(subject: str) -> str:
    return (
        f"### {subject}: pros and cons\n\n"
        f"| Aspect | Upside | Downside |\n"
        f"| --- | --- | --- |\n"
        f"| Cost | Cheap to start | Grows with scale |\n"
        f"| Speed | Fast feedback | Easy to rush |\n"
        f"| Learning curve | Gentle at first | Steep in the details |\n\n"
        f"**Verdict:** {subject} rewards people who take the time to learn its "
        f"rough edges.\n\n"
        f"> Sed ut perspiciatis unde omnis iste natus error sit voluptatem.\n"
    )
